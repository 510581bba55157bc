"""Builds a network from binary relation (SIF) lines."""

from __future__ import annotations

import logging
from typing import Iterable

from mapping.attributes import AttributeProjector
from mapping.links import DEFAULT_LINK_BASE_URL, DEFAULT_SEARCH_URL
from mapping.xrefs import CrossReferenceConsolidator
from models.biopax import BioPaxModel
from models.errors import BioPaxReaderError
from models.network import PathwayNetwork

logger = logging.getLogger(__name__)

SIF_COLUMNS = 6
EDGE_LIST_COLUMNS = ("datasource", "publication", "pathway")


class SifNetworkParser:
    """
    Adds the relations of a SIF table to a network, one line at a time.

    Nodes are created once per participant URI and named by it; each line
    becomes one directed edge carrying the relation type and the three
    provenance columns as list attributes.
    """

    def __init__(self, network: PathwayNetwork):
        self.network = network
        self._nodes: dict[str, int] = {}

    @property
    def nodes(self) -> dict[str, int]:
        return dict(self._nodes)

    def parse(self, line: str) -> None:
        parts = line.rstrip("\r\n").split("\t")
        if len(parts) < SIF_COLUMNS:
            raise BioPaxReaderError(f"Bad SIF entry: {line.rstrip()}")

        source = self._node(parts[0])
        relation_type = parts[1]
        target = self._node(parts[2])

        edge = self.network.create_edge(source, target, directed=True)
        self.network.set_edge_attribute(edge, "interaction", relation_type)
        self.network.set_edge_attribute(
            edge,
            "name",
            f"{self.network.get_node_attribute(source, 'name')} ({relation_type}) "
            f"{self.network.get_node_attribute(target, 'name')}",
        )
        for column, entry in zip(EDGE_LIST_COLUMNS, parts[3:SIF_COLUMNS]):
            self.network.set_edge_attribute(edge, column, [v for v in entry.split(";") if v])

    def parse_lines(self, lines: Iterable[str]) -> int:
        count = 0
        for line in lines:
            if not line.strip():
                continue
            self.parse(line)
            count += 1
        return count

    def _node(self, uri: str) -> int:
        node = self._nodes.get(uri)
        if node is None:
            node = self.network.create_node()
            self.network.set_node_attribute(node, "name", uri)
            self._nodes[uri] = node
        return node

    def annotate(
        self,
        model: BioPaxModel,
        link_base_url: str = DEFAULT_LINK_BASE_URL,
        search_url: str = DEFAULT_SEARCH_URL,
    ) -> int:
        """
        Project model attributes onto the parsed nodes.

        Returns:
            Number of nodes that were found in the model.
        """
        projector = AttributeProjector(self.network)
        consolidator = CrossReferenceConsolidator(self.network, link_base_url, search_url)
        annotated = 0
        for uri, node in self._nodes.items():
            element = model.get(uri)
            if element is None:
                logger.error(f"The BioPAX model has no element with URI {uri}")
                continue
            if not (element.is_a("Entity") or element.is_a("EntityReference")):
                logger.warning(f"SIF network has an unexpected node: {uri} of type {element.type_name}")
            projector.project(element, node)
            consolidator.consolidate(element, node)
            annotated += 1
        return annotated
