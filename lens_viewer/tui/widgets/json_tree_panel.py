"""
JSON Tree Panel widget for displaying JSON data in a tree structure.

This module provides a custom Tree widget that renders JSON data with proper
formatting for objects, arrays, and primitive values. Line-delimited files
are shown one child per entry, labelled with the entry's line number, and
paged so very large files stay responsive. The panel also implements the
window's find-in-page over node labels.
"""

from __future__ import annotations

from typing import Any, Callable

from textual.widgets import Tree
from textual.widgets.tree import TreeNode


# Maximum depth for recursive tree operations to prevent stack overflow
MAX_TREE_DEPTH = 100

# Maximum string length to process before truncation (prevents memory issues with huge strings)
MAX_STRING_PROCESS_LENGTH = 10000

# Entries added per page for line-delimited content
ENTRY_PAGE_SIZE = 500


class JsonTreePanel(Tree[str]):
    """
    JSON tree widget with paging for line-delimited content and label search.

    This widget extends Textual's Tree to display JSON data in a hierarchical
    format with proper rendering for different JSON types:
        - Objects: `{} key_name` (expandable)
        - Arrays: `[] key_name (N items)` (expandable)
        - Strings: `"key": "value"` (leaf)
        - Numbers: `"key": 123` (leaf)
        - Booleans: `"key": true` (leaf)
        - Null: `"key": null` (leaf)
    """

    def __init__(
        self,
        label: str = "root",
        *,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """
        Initialize the JSON tree panel.

        Args:
            label: The label for the root node.
            id: The widget ID.
            classes: CSS classes for the widget.
        """
        super().__init__(label, id=id, classes=classes)
        self._entries: list[Any] = []
        self._entry_lines: list[int] = []
        self._entry_label: Callable[[int], str] = lambda line: f"line {line}"
        self._shown_entries = 0
        self._more_node: TreeNode[str] | None = None
        self._matches: list[TreeNode[str]] = []
        self._match_index = -1
        self._last_query: tuple[str, bool] | None = None

    def load_json(self, data: Any, label: str = "root") -> None:
        """
        Load JSON data into the tree.

        Clears the existing tree and populates it with the provided JSON data.

        Args:
            data: The JSON data to display.
            label: The label for the root node.
        """
        self._reset()
        self.root.set_label(label)
        self._add_json_recursive(self.root, data, depth=0)
        if isinstance(data, (dict, list)):
            # Root label shows the container type; keep the file name beside it
            self.root.set_label(f"{self.root.label} {label}")
        self.root.expand()

    def load_entries(
        self,
        entries: list[Any],
        line_numbers: list[int],
        label: str,
        entry_label: Callable[[int], str] | None = None,
    ) -> None:
        """
        Load line-delimited entries, one child node per entry.

        Only the first page of entries is added; call ``show_more_entries``
        to add the next page.

        Args:
            entries: Parsed entries in line order.
            line_numbers: Source line number of each entry.
            label: The label for the root node.
            entry_label: Builds a child label from a line number.
        """
        self._reset()
        self._entries = entries
        self._entry_lines = line_numbers
        if entry_label is not None:
            self._entry_label = entry_label
        self.root.set_label(label)
        self.show_more_entries()
        self.root.expand()

    @property
    def remaining_entries(self) -> int:
        """Entries not yet added to the tree."""
        return len(self._entries) - self._shown_entries

    def show_more_entries(self, count: int = ENTRY_PAGE_SIZE) -> int:
        """Add the next page of entries to the tree.

        Returns:
            The number of entries added.
        """
        if self._more_node is not None:
            self._more_node.remove()
            self._more_node = None

        start = self._shown_entries
        stop = min(start + count, len(self._entries))
        for index in range(start, stop):
            self._add_json_recursive(
                self.root,
                self._entries[index],
                key=self._entry_label(self._entry_lines[index]),
                depth=1,
            )
        self._shown_entries = stop

        if self.remaining_entries > 0:
            self._more_node = self.root.add_leaf(
                f"... {self.remaining_entries:,} more (press m)"
            )
        self._last_query = None
        return stop - start

    def clear_content(self, label: str = "root") -> None:
        self._reset()
        self.root.set_label(label)

    def _reset(self) -> None:
        self.clear()
        self._entries = []
        self._entry_lines = []
        self._shown_entries = 0
        self._more_node = None
        self._matches = []
        self._match_index = -1
        self._last_query = None

    def find(
        self,
        query: str,
        *,
        forward: bool = True,
        match_case: bool = False,
        find_next: bool = False,
    ) -> tuple[int, int]:
        """Search node labels and move the cursor to a match.

        Repeating the same query with ``find_next`` steps through the
        matches in the given direction, wrapping around.

        Args:
            query: Text to look for.
            forward: Step direction for find_next.
            match_case: Case-sensitive comparison.
            find_next: Continue from the current match.

        Returns:
            (number of matches, 1-based ordinal of the selected match or 0).
        """
        if not query:
            self._matches = []
            self._match_index = -1
            self._last_query = None
            return (0, 0)

        key = (query, match_case)
        if not (find_next and key == self._last_query):
            needle = query if match_case else query.lower()
            self._matches = [
                node
                for node in self._iter_nodes(self.root, depth=0)
                if needle in (str(node.label) if match_case else str(node.label).lower())
            ]
            self._last_query = key
            self._match_index = -1

        if not self._matches:
            return (0, 0)

        step = 1 if forward else -1
        if self._match_index < 0:
            self._match_index = 0 if forward else len(self._matches) - 1
        else:
            self._match_index = (self._match_index + step) % len(self._matches)

        self._reveal(self._matches[self._match_index])
        return (len(self._matches), self._match_index + 1)

    def stop_find(self, keep_selection: bool = True) -> TreeNode[str] | None:
        """Forget the current search.

        Returns:
            The node that was the active match, if any.
        """
        active = None
        if 0 <= self._match_index < len(self._matches):
            active = self._matches[self._match_index]
        self._matches = []
        self._match_index = -1
        self._last_query = None
        if not keep_selection:
            self.select_node(self.root)
            self.scroll_home()
        return active

    def _reveal(self, node: TreeNode[str]) -> None:
        """Expand a node's ancestors and put the cursor on it."""
        parent = node.parent
        while parent is not None:
            parent.expand()
            parent = parent.parent
        # Line numbers are only valid after the tree has been rebuilt
        self.call_after_refresh(self.move_cursor, node)

    def _iter_nodes(self, node: TreeNode[str], depth: int):
        if depth >= MAX_TREE_DEPTH:
            return
        yield node
        for child in node.children:
            yield from self._iter_nodes(child, depth + 1)

    def _add_json_recursive(
        self,
        node: TreeNode[str],
        data: Any,
        key: str | None = None,
        depth: int = 0,
    ) -> None:
        """
        Recursively add JSON data to the tree.

        Args:
            node: The parent tree node to add children to.
            data: The JSON data to add.
            key: The key name if this is a value in an object.
            depth: Current recursion depth (used to prevent stack overflow).
        """
        if depth >= MAX_TREE_DEPTH:
            # Add a placeholder node indicating truncation
            node.add_leaf(f"... (depth limit {MAX_TREE_DEPTH} reached)")
            return

        if isinstance(data, dict):
            self._add_object(node, data, key, depth)
        elif isinstance(data, list):
            self._add_array(node, data, key, depth)
        else:
            self._add_primitive(node, data, key)

    def _add_object(
        self,
        node: TreeNode[str],
        data: dict[str, Any],
        key: str | None = None,
        depth: int = 0,
    ) -> None:
        """
        Add a JSON object to the tree.

        Objects are displayed as expandable nodes with format: `{} key_name`
        """
        label = f"{{}} {key}" if key is not None else "{}"

        if node.is_root and key is None:
            # Use root node directly
            child = node
            child.set_label(label)
        else:
            child = node.add(label, allow_expand=True)

        for obj_key, obj_value in data.items():
            self._add_json_recursive(child, obj_value, obj_key, depth + 1)

    def _add_array(
        self,
        node: TreeNode[str],
        data: list[Any],
        key: str | None = None,
        depth: int = 0,
    ) -> None:
        """
        Add a JSON array to the tree.

        Arrays are displayed as expandable nodes with format: `[] key_name (N items)`
        """
        count = len(data)
        items_label = "item" if count == 1 else "items"

        if key is not None:
            label = f"[] {key} ({count} {items_label})"
        else:
            label = f"[] ({count} {items_label})"

        if node.is_root and key is None:
            child = node
            child.set_label(label)
        else:
            child = node.add(label, allow_expand=True)

        for idx, item in enumerate(data):
            self._add_json_recursive(child, item, f"[{idx}]", depth + 1)

    def _add_primitive(
        self,
        node: TreeNode[str],
        data: Any,
        key: str | None = None,
    ) -> None:
        """
        Add a JSON primitive value to the tree.

        Primitives are displayed as leaf nodes with format: `"key": value`
        """
        if data is None:
            value_str = "null"
        elif isinstance(data, bool):
            value_str = "true" if data else "false"
        elif isinstance(data, str):
            # Limit string processing to prevent memory issues with huge strings
            process_str = data[:MAX_STRING_PROCESS_LENGTH]
            display_str = (
                process_str.replace('\\', '\\\\')
                .replace('\n', '\\n')
                .replace('\r', '\\r')
                .replace('\t', '\\t')
                .replace('"', '\\"')
            )
            if len(display_str) > 80:
                display_str = display_str[:77] + "..."
            value_str = f'"{display_str}"'
        elif isinstance(data, (int, float)):
            value_str = str(data)
        else:
            value_str = repr(data)

        label = f'"{key}": {value_str}' if key is not None else value_str
        node.add_leaf(label)
