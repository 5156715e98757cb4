from lens_viewer.tui.app import main

main()
