"""
Default BioPAX to network mapping.

EntityGraphBuilder turns a Level 3 model into a PathwayNetwork in three
passes:

1. Nodes: one node per Entity, except top-level pathways (pathways that
   neither participate in an interaction nor are a component of another
   pathway).
2. Edges: interaction participants, conversion sides, control roles,
   complex components and generic-entity members.
3. Attributes: generic property projection first, then cross-reference
   consolidation, which only fills attributes not already set.

Example:
    >>> builder = EntityGraphBuilder(model)
    >>> network = builder.build("Glycolysis")
    >>> print(network.to_summary())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from mapping.attributes import AttributeProjector
from mapping.identity import IdentityIndex
from mapping.links import DEFAULT_LINK_BASE_URL, DEFAULT_SEARCH_URL, element_name
from mapping.xrefs import CrossReferenceConsolidator
from models.biopax import BioPaxElement, BioPaxModel, get_value, get_values
from models.network import DefaultNetworkFactory, NetworkFactory, PathwayNetwork

logger = logging.getLogger(__name__)

EDGE_KIND = "interaction"
EDGE_NAME = "name"

# Kinds whose edge runs from the first linked element to the second
FORWARD_KINDS = ("right", "cofactor", "participant")

DEFAULT_CONTROL_KIND = "controlled"


@dataclass
class BuildStats:
    """Counters collected during one build."""

    nodes_created: int = 0
    pathways_suppressed: int = 0
    edges_created: int = 0
    edges_dropped: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "nodes_created": self.nodes_created,
            "pathways_suppressed": self.pathways_suppressed,
            "edges_created": self.edges_created,
            "edges_dropped": self.edges_dropped,
        }


class EntityGraphBuilder:
    """
    Maps a BioPAX model onto an attributed directed network.

    Each build() starts a fresh network and IdentityIndex, so building the
    same model twice gives two equivalent networks. The passes are also
    callable one by one (start, create_nodes, create_edges,
    create_attributes) for callers that report progress between them.

    Attributes:
        model: Source model (read only).
        factory: Creates the empty network.
        network: Network of the current build.
        index: URI -> node join table of the current build.
        stats: Counters of the current build.
    """

    def __init__(
        self,
        model: BioPaxModel,
        factory: Optional[NetworkFactory] = None,
        link_base_url: str = DEFAULT_LINK_BASE_URL,
        search_url: str = DEFAULT_SEARCH_URL,
    ):
        self.model = model
        self.factory = factory or DefaultNetworkFactory()
        self.link_base_url = link_base_url
        self.search_url = search_url
        self.network: Optional[PathwayNetwork] = None
        self.index = IdentityIndex()
        self.stats = BuildStats()

    def build(self, name: str = "") -> PathwayNetwork:
        network = self.start(name)
        self.create_nodes()
        self.create_edges()
        self.create_attributes()
        return network

    def start(self, name: str = "") -> PathwayNetwork:
        self.network = self.factory.create_network(name)
        self.network.set_network_attribute("name", name)
        self.network.set_network_attribute("quickfind.default_index", "name")
        self.index = IdentityIndex()
        self.stats = BuildStats()
        return self.network

    # -------------------------------------------------------------------------
    # Node pass
    # -------------------------------------------------------------------------

    def is_top_pathway(self, element: BioPaxElement) -> bool:
        return (
            element.is_a("Pathway")
            and not self.model.participant_of(element)
            and not self.model.pathway_component_of(element)
        )

    def create_nodes(self) -> int:
        for entity in self.model.objects("Entity"):
            if self.is_top_pathway(entity):
                self.stats.pathways_suppressed += 1
                continue
            if entity.uri in self.index:
                continue
            self.index.bind(entity.uri, self.network.create_node())
            self.stats.nodes_created += 1
        logger.info(
            f"Created {self.stats.nodes_created} nodes "
            f"({self.stats.pathways_suppressed} top-level pathways skipped)"
        )
        return self.stats.nodes_created

    # -------------------------------------------------------------------------
    # Edge pass
    # -------------------------------------------------------------------------

    def create_edges(self) -> int:
        for interaction in self.model.objects("Interaction"):
            if interaction.is_a("Conversion"):
                self._conversion_edges(interaction)
            elif interaction.is_a("Control"):
                self._control_edges(interaction)
            else:
                for participant in get_values(interaction, "participant"):
                    self.link_nodes(interaction, participant, "participant")

        for complex_ in self.model.objects("Complex"):
            for component in get_values(complex_, "component"):
                self._add_edge(complex_, component, "contains")

        for parent in self.model.objects("PhysicalEntity"):
            for member in get_values(parent, "memberPhysicalEntity"):
                self._add_edge(parent, member, "member")

        logger.info(f"Created {self.stats.edges_created} edges ({self.stats.edges_dropped} dropped)")
        return self.stats.edges_created

    def _conversion_edges(self, conversion: BioPaxElement) -> None:
        for left in get_values(conversion, "left"):
            self.link_nodes(conversion, left, "left")
        for right in get_values(conversion, "right"):
            self.link_nodes(conversion, right, "right")

    def _control_edges(self, control: BioPaxElement) -> None:
        kind = get_value(control, "controlType") or DEFAULT_CONTROL_KIND
        for process in get_values(control, "controlled"):
            self.link_nodes(process, control, kind)
        for controller in get_values(control, "controller"):
            self.link_nodes(control, controller, "controller")
        if control.is_a("Catalysis"):
            for cofactor in get_values(control, "cofactor"):
                self.link_nodes(control, cofactor, "cofactor")

    def link_nodes(self, a: BioPaxElement, b: BioPaxElement, kind: str) -> None:
        """Add a `kind` edge a -> b for forward kinds, b -> a otherwise."""
        if kind in FORWARD_KINDS:
            self._add_edge(a, b, kind)
        else:
            self._add_edge(b, a, kind)

    def _add_edge(self, source: BioPaxElement, target: BioPaxElement, kind: str) -> None:
        source_node = self.index.node_for(source.uri)
        target_node = self.index.node_for(target.uri)
        if source_node is None or target_node is None:
            missing = source if source_node is None else target
            logger.debug(f"No node for {missing.type_name} {missing.uri}; dropping '{kind}' edge")
            self.stats.edges_dropped += 1
            return
        edge = self.network.create_edge(source_node, target_node, directed=True)
        self.network.set_edge_attribute(edge, EDGE_KIND, kind)
        self.network.set_edge_attribute(
            edge, EDGE_NAME, f"{element_name(source)} ({kind}) {element_name(target)}"
        )
        self.stats.edges_created += 1

    # -------------------------------------------------------------------------
    # Attribute pass
    # -------------------------------------------------------------------------

    def create_attributes(self) -> None:
        projector = AttributeProjector(self.network)
        consolidator = CrossReferenceConsolidator(self.network, self.link_base_url, self.search_url)
        for uri, node in self.index:
            element = self.model.get(uri)
            projector.project(element, node)
            consolidator.consolidate(element, node)
        logger.info(f"Projected attributes for {len(self.index)} nodes")
