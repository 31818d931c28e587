"""A prefix tree of strings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class _TrieNode:
    path: str = ""
    is_end: bool = False
    children: Dict[str, "_TrieNode"] = field(default_factory=dict)


class Trie:
    """Stores whole strings and answers whether a string was inserted."""

    def __init__(self) -> None:
        self._head = _TrieNode()

    def insert(self, path: str) -> None:
        """Add ``path`` to the trie."""
        node = self._head
        for index, char in enumerate(path, start=1):
            child = node.children.get(char)
            if child is None:
                child = _TrieNode(path=path[:index])
                node.children[char] = child
            node = child
        node.is_end = True

    def _locate(self, path: str) -> Optional[_TrieNode]:
        node = self._head
        for char in path:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def find(self, path: str) -> bool:
        """Return whether ``path`` was inserted and not erased."""
        node = self._locate(path)
        return node is not None and node.is_end

    def erase(self, path: str) -> None:
        """Remove ``path``; prefixes and longer words are kept."""
        node = self._locate(path)
        if node is not None and node.path == path and node.is_end:
            node.is_end = False

    def clear(self) -> None:
        """Remove every stored path below the root."""
        self._head.children.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.find(path)