"""Process-wide policy for where newly opened files go."""

from __future__ import annotations

from enum import Enum


class OpenBehavior(str, Enum):
    """Whether opening a file from a non-empty window spawns a new one.

    An empty target window is reused under either policy.
    """

    NEW_WINDOW = "new-window"
    REUSE_WINDOW = "reuse-window"

    @classmethod
    def parse(cls, value: "str | OpenBehavior") -> "OpenBehavior":
        """Convert a string such as ``"reuse-window"`` to an OpenBehavior.

        Underscores and case are tolerated (``"REUSE_WINDOW"`` works too).

        Raises:
            ValueError: If the value names no behavior.
        """
        if isinstance(value, OpenBehavior):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        for behavior in cls:
            if behavior.value == normalized:
                return behavior
        raise ValueError(
            f"Unknown open behavior '{value}'. "
            f"Expected one of: {', '.join(b.value for b in cls)}"
        )


DEFAULT_OPEN_BEHAVIOR = OpenBehavior.NEW_WINDOW
