"""
Attributed network emitted by the BioPAX mappers.

PathwayNetwork wraps a NetworkX MultiDiGraph and exposes the small set of
capabilities the mappers need: create a node, create an edge between two
existing nodes, and set attributes on node/edge/network rows. Every row
has two attribute namespaces, a visible one (stored directly on the NetworkX
node or edge) and a hidden one (kept aside, for link lists and other data
not meant for tabular display).
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import networkx as nx

logger = logging.getLogger(__name__)

AttributeValue = str | list[str]
EdgeKey = tuple[int, int, int]


class PathwayNetwork:
    """
    Directed attributed multigraph.

    Nodes are integer ids handed out by create_node(); edges are
    (source, target, key) triples handed out by create_edge().

    Attributes:
        graph: NetworkX MultiDiGraph holding nodes, edges and visible attributes.
        attributes: Visible network-level attributes.
    """

    def __init__(self, name: str = ""):
        self.graph = nx.MultiDiGraph()
        self.attributes: dict[str, AttributeValue] = {}
        self.hidden_attributes: dict[str, AttributeValue] = {}
        self._hidden_nodes: dict[int, dict[str, AttributeValue]] = {}
        self._hidden_edges: dict[EdgeKey, dict[str, AttributeValue]] = {}
        self._undirected: set[EdgeKey] = set()
        self._next_id = 0
        if name:
            self.attributes["name"] = name

    @property
    def name(self) -> str:
        return str(self.attributes.get("name", ""))

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def create_node(self) -> int:
        node = self._next_id
        self._next_id += 1
        self.graph.add_node(node)
        self._hidden_nodes[node] = {}
        return node

    def create_edge(self, source: int, target: int, directed: bool = True) -> EdgeKey:
        """
        Add an edge between two existing nodes.

        Raises:
            ValueError: If either endpoint is not a node of this network.
        """
        for endpoint in (source, target):
            if endpoint not in self.graph:
                raise ValueError(f"Node {endpoint} does not exist")
        key = self.graph.add_edge(source, target)
        edge = (source, target, key)
        self._hidden_edges[edge] = {}
        if not directed:
            self._undirected.add(edge)
        return edge

    def has_node(self, node: int) -> bool:
        return node in self.graph

    def is_directed(self, edge: EdgeKey) -> bool:
        return edge not in self._undirected

    def nodes(self) -> list[int]:
        return list(self.graph.nodes)

    def edges(self) -> list[EdgeKey]:
        return list(self.graph.edges(keys=True))

    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    # -------------------------------------------------------------------------
    # Attribute rows
    # -------------------------------------------------------------------------

    def _node_row(self, node: int, hidden: bool) -> dict[str, AttributeValue]:
        return self._hidden_nodes[node] if hidden else self.graph.nodes[node]

    def _edge_row(self, edge: EdgeKey, hidden: bool) -> dict[str, AttributeValue]:
        if hidden:
            return self._hidden_edges[edge]
        source, target, key = edge
        return self.graph.edges[source, target, key]

    def set_node_attribute(self, node: int, name: str, value: AttributeValue, hidden: bool = False) -> None:
        self._node_row(node, hidden)[name] = value

    def get_node_attribute(self, node: int, name: str, hidden: bool = False) -> Optional[AttributeValue]:
        return self._node_row(node, hidden).get(name)

    def node_attributes(self, node: int, hidden: bool = False) -> dict[str, AttributeValue]:
        return dict(self._node_row(node, hidden))

    def set_edge_attribute(self, edge: EdgeKey, name: str, value: AttributeValue, hidden: bool = False) -> None:
        self._edge_row(edge, hidden)[name] = value

    def get_edge_attribute(self, edge: EdgeKey, name: str, hidden: bool = False) -> Optional[AttributeValue]:
        return self._edge_row(edge, hidden).get(name)

    def edge_attributes(self, edge: EdgeKey, hidden: bool = False) -> dict[str, AttributeValue]:
        return dict(self._edge_row(edge, hidden))

    def set_network_attribute(self, name: str, value: AttributeValue, hidden: bool = False) -> None:
        (self.hidden_attributes if hidden else self.attributes)[name] = value

    def get_network_attribute(self, name: str, hidden: bool = False) -> Optional[AttributeValue]:
        return (self.hidden_attributes if hidden else self.attributes).get(name)

    def find_nodes(self, name: str, value: AttributeValue) -> list[int]:
        """Nodes whose visible attribute `name` equals `value`."""
        return [node for node, attrs in self.graph.nodes(data=True) if attrs.get(name) == value]

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_summary(self) -> dict[str, Any]:
        """
        Return network statistics.

        Returns:
            Dictionary with node count, edge count and per-kind counts.
        """
        node_type_counts: dict[str, int] = {}
        for _, attrs in self.graph.nodes(data=True):
            node_type = str(attrs.get("BIOPAX_TYPE", "unknown"))
            node_type_counts[node_type] = node_type_counts.get(node_type, 0) + 1

        edge_kind_counts: dict[str, int] = {}
        for _, _, attrs in self.graph.edges(data=True):
            kind = str(attrs.get("interaction", "unknown"))
            edge_kind_counts[kind] = edge_kind_counts.get(kind, 0) + 1

        return {
            "name": self.name,
            "node_count": self.node_count(),
            "edge_count": self.edge_count(),
            "node_types": node_type_counts,
            "edge_kinds": edge_kind_counts,
        }

    def to_dict(self) -> dict[str, Any]:
        """
        Export the network as a dict for JSON serialization.

        Returns:
            Dictionary with network attributes, nodes and edges (hidden rows included).
        """
        return {
            "attributes": dict(self.attributes),
            "hidden_attributes": dict(self.hidden_attributes),
            "nodes": [
                {
                    "id": node,
                    "attributes": dict(attrs),
                    "hidden": dict(self._hidden_nodes[node]),
                }
                for node, attrs in self.graph.nodes(data=True)
            ],
            "edges": [
                {
                    "source": source,
                    "target": target,
                    "directed": self.is_directed((source, target, key)),
                    "attributes": dict(attrs),
                    "hidden": dict(self._hidden_edges[(source, target, key)]),
                }
                for source, target, key, attrs in self.graph.edges(keys=True, data=True)
            ],
            "summary": self.to_summary(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: str, format: str = "graphml") -> str:
        """
        Save the network to disk.

        Supports:
        - graphml: XML-based format, readable by Cytoscape, Gephi, etc.
        - json: full export including hidden attribute rows

        Args:
            path: Base path for the output file (extension added based on format)
            format: Output format - "graphml" or "json"

        Returns:
            Path to the saved file
        """
        base_path = Path(path)
        base_path.parent.mkdir(parents=True, exist_ok=True)

        if format == "graphml":
            file_path = base_path.with_suffix(".graphml")
            # GraphML only holds scalars; list attributes are stored as JSON arrays
            G_copy = nx.MultiDiGraph(**{k: _graphml_safe(v) for k, v in self.attributes.items()})
            for node, attrs in self.graph.nodes(data=True):
                G_copy.add_node(node, **{k: _graphml_safe(v) for k, v in attrs.items()})
            for u, v, key, attrs in self.graph.edges(keys=True, data=True):
                G_copy.add_edge(u, v, key=str(key), **{k: _graphml_safe(val) for k, val in attrs.items()})
            nx.write_graphml(G_copy, str(file_path))

        elif format == "json":
            file_path = base_path.with_suffix(".json")
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)

        else:
            raise ValueError(f"Unsupported format: {format}. Use 'graphml' or 'json'.")

        logger.info(f"Saved network '{self.name}' to {file_path}")
        return str(file_path)


def _graphml_safe(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, list):
        return json.dumps(value)
    return str(value)


# =============================================================================
# Factory
# =============================================================================


class NetworkFactory(ABC):
    """Creates the empty network a mapper fills in."""

    @abstractmethod
    def create_network(self, name: str = "") -> PathwayNetwork:
        ...


class DefaultNetworkFactory(NetworkFactory):
    """Factory for plain in-memory PathwayNetwork instances."""

    def create_network(self, name: str = "") -> PathwayNetwork:
        return PathwayNetwork(name)
