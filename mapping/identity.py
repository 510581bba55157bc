"""Join table between source element URIs and emitted node ids."""

from __future__ import annotations

from typing import Iterator, Optional


class IdentityIndex:
    """
    Maps each source element (by URI) to the one node created for it.

    Binding the same URI twice is a programming error and raises; lookups
    of unbound URIs return None so callers can skip missing endpoints.
    """

    def __init__(self):
        self._nodes: dict[str, int] = {}
        self._uris: dict[int, str] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, uri: str) -> bool:
        return uri in self._nodes

    def __iter__(self) -> Iterator[tuple[str, int]]:
        return iter(list(self._nodes.items()))

    def node_for(self, uri: str) -> Optional[int]:
        return self._nodes.get(uri)

    def uri_for(self, node: int) -> Optional[str]:
        return self._uris.get(node)

    def bind(self, uri: str, node: int) -> None:
        if uri in self._nodes:
            raise RuntimeError(f"{uri} is already bound to node {self._nodes[uri]}")
        self._nodes[uri] = node
        self._uris[node] = uri
