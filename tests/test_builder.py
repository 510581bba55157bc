"""
Tests for the default BioPAX to network mapping.

Tests cover:
- Node identity across rebuilds
- Edge endpoint validity
- Conversion and control edge directions
- Complex and generic membership edges
- Top-level pathway suppression
- Attribute pass
"""

import logging

import pytest

from conftest import EX, make_protein
from mapping.builder import EDGE_KIND, EDGE_NAME, EntityGraphBuilder
from models.biopax import BioPaxModel
from models.network import DefaultNetworkFactory, PathwayNetwork


def _node(network: PathwayNetwork, uri: str) -> int:
    nodes = network.find_nodes("URI", uri)
    assert len(nodes) == 1, f"expected one node for {uri}, got {nodes}"
    return nodes[0]


def _edge_kinds(network: PathwayNetwork, source: int, target: int) -> list[str]:
    return [
        network.get_edge_attribute(edge, EDGE_KIND)
        for edge in network.edges()
        if edge[0] == source and edge[1] == target
    ]


@pytest.fixture
def glycolysis_network(glycolysis_model):
    return EntityGraphBuilder(glycolysis_model).build("Glycolysis")


# =============================================================================
# Test: Nodes
# =============================================================================


class TestNodes:
    """Tests for the node pass."""

    def test_one_node_per_entity(self, glycolysis_network):
        assert glycolysis_network.node_count() == 6
        uris = [glycolysis_network.get_node_attribute(n, "URI") for n in glycolysis_network.nodes()]
        assert len(set(uris)) == len(uris)

    def test_rebuild_is_idempotent(self, glycolysis_model):
        """Building twice gives the same nodes and a fresh index each time."""
        builder = EntityGraphBuilder(glycolysis_model)
        first = builder.build("first")
        first_index = list(builder.index)
        second = builder.build("second")

        assert first is not second
        assert first.node_count() == second.node_count()
        assert len(builder.index) == second.node_count()
        assert [uri for uri, _ in builder.index] == [uri for uri, _ in first_index]

    def test_top_pathway_suppressed(self, glycolysis_model, glycolysis_network):
        assert glycolysis_network.find_nodes("URI", f"{EX}glycolysis") == []

    def test_sub_pathway_kept(self, glycolysis_model):
        """A pathway that is a component of another pathway gets a node."""
        top = glycolysis_model.create("Pathway", f"{EX}metabolism")
        top.add("pathwayComponent", glycolysis_model.get(f"{EX}glycolysis"))
        builder = EntityGraphBuilder(glycolysis_model)
        network = builder.build()

        assert network.find_nodes("URI", f"{EX}metabolism") == []
        assert len(network.find_nodes("URI", f"{EX}glycolysis")) == 1
        assert builder.stats.pathways_suppressed == 1

    def test_controlled_pathway_kept(self, glycolysis_model):
        control = glycolysis_model.create("Control", f"{EX}regulation")
        control.add("controlled", glycolysis_model.get(f"{EX}glycolysis"))
        network = EntityGraphBuilder(glycolysis_model).build()
        assert len(network.find_nodes("URI", f"{EX}glycolysis")) == 1

    def test_lone_pathway_has_no_nodes_or_edges(self):
        model = BioPaxModel()
        pathway = model.create("Pathway", f"{EX}lonely")
        builder = EntityGraphBuilder(model)
        network = builder.build()

        assert network.node_count() == 0
        assert network.edge_count() == 0
        assert builder.stats.pathways_suppressed == 1

        interaction = model.create("MolecularInteraction", f"{EX}mi")
        interaction.add("participant", pathway)
        network = builder.build()
        assert len(network.find_nodes("URI", pathway.uri)) == 1
        assert builder.stats.pathways_suppressed == 0

    def test_utility_classes_have_no_nodes(self, glycolysis_network):
        assert glycolysis_network.find_nodes("URI", f"{EX}glucose_ref") == []
        assert glycolysis_network.find_nodes("URI", f"{EX}cytosol") == []


# =============================================================================
# Test: Edges
# =============================================================================


class TestEdges:
    """Tests for the edge pass."""

    def test_edge_count(self, glycolysis_network):
        assert glycolysis_network.edge_count() == 5

    def test_endpoints_are_nodes(self, glycolysis_network):
        for source, target, _ in glycolysis_network.edges():
            assert glycolysis_network.has_node(source)
            assert glycolysis_network.has_node(target)

    def test_edges_directed(self, glycolysis_network):
        assert all(glycolysis_network.is_directed(edge) for edge in glycolysis_network.edges())

    def test_conversion_direction(self, glycolysis_network):
        """Inputs point at the conversion, the conversion points at outputs."""
        reaction = _node(glycolysis_network, f"{EX}reaction1")
        glucose = _node(glycolysis_network, f"{EX}glucose")
        g6p = _node(glycolysis_network, f"{EX}g6p")

        assert _edge_kinds(glycolysis_network, glucose, reaction) == ["left"]
        assert _edge_kinds(glycolysis_network, reaction, g6p) == ["right"]
        assert _edge_kinds(glycolysis_network, reaction, glucose) == []

    def test_swapped_sides_swap_directions(self, glycolysis_model):
        """Exchanging left and right flips which edge carries which kind."""
        reaction = glycolysis_model.get(f"{EX}reaction1")
        glucose = glycolysis_model.get(f"{EX}glucose")
        g6p = glycolysis_model.get(f"{EX}g6p")
        reaction.remove("left", glucose)
        reaction.remove("right", g6p)
        reaction.add("left", g6p)
        reaction.add("right", glucose)

        network = EntityGraphBuilder(glycolysis_model).build()
        reaction_node = _node(network, reaction.uri)
        glucose_node = _node(network, glucose.uri)
        g6p_node = _node(network, g6p.uri)

        assert _edge_kinds(network, g6p_node, reaction_node) == ["left"]
        assert _edge_kinds(network, reaction_node, glucose_node) == ["right"]
        assert _edge_kinds(network, glucose_node, reaction_node) == []
        right_edges = [
            e for e in network.edges()
            if network.get_edge_attribute(e, EDGE_KIND) == "right"
        ]
        assert len(right_edges) == 1

    def test_edge_without_endpoint_dropped(self, glycolysis_model, caplog):
        """An endpoint added after the node pass has no node, so its edge is dropped."""
        builder = EntityGraphBuilder(glycolysis_model)
        network = builder.start("Glycolysis")
        builder.create_nodes()
        late = make_protein(glycolysis_model, "late")
        glycolysis_model.get(f"{EX}reaction1").add("right", late)

        with caplog.at_level(logging.DEBUG, logger="mapping.builder"):
            builder.create_edges()

        assert builder.stats.edges_dropped == 1
        assert builder.stats.edges_created == 5
        assert network.edge_count() == 5
        assert network.node_count() == 6
        assert late.uri not in builder.index
        assert "dropping 'right' edge" in caplog.text

    def test_control_direction(self, glycolysis_network):
        reaction = _node(glycolysis_network, f"{EX}reaction1")
        catalysis = _node(glycolysis_network, f"{EX}catalysis1")
        hk1 = _node(glycolysis_network, f"{EX}hk1")
        mg = _node(glycolysis_network, f"{EX}mg")

        assert _edge_kinds(glycolysis_network, catalysis, reaction) == ["ACTIVATION"]
        assert _edge_kinds(glycolysis_network, hk1, catalysis) == ["controller"]
        assert _edge_kinds(glycolysis_network, catalysis, mg) == ["cofactor"]

    def test_control_type_defaults(self, glycolysis_model):
        glycolysis_model.get(f"{EX}catalysis1").set("controlType", None)
        network = EntityGraphBuilder(glycolysis_model).build()
        reaction = _node(network, f"{EX}reaction1")
        catalysis = _node(network, f"{EX}catalysis1")
        assert _edge_kinds(network, catalysis, reaction) == ["controlled"]

    def test_edge_name(self, glycolysis_network):
        glucose = _node(glycolysis_network, f"{EX}glucose")
        reaction = _node(glycolysis_network, f"{EX}reaction1")
        edge = next(e for e in glycolysis_network.edges() if e[:2] == (glucose, reaction))
        assert glycolysis_network.get_edge_attribute(edge, EDGE_NAME) == "glucose (left) hexokinase reaction"

    def test_interaction_participants(self):
        model = BioPaxModel()
        a = make_protein(model, "A")
        b = make_protein(model, "B")
        interaction = model.create("MolecularInteraction", f"{EX}mi")
        interaction.add("participant", a)
        interaction.add("participant", b)

        network = EntityGraphBuilder(model).build()
        mi = _node(network, f"{EX}mi")
        assert _edge_kinds(network, mi, _node(network, a.uri)) == ["participant"]
        assert _edge_kinds(network, mi, _node(network, b.uri)) == ["participant"]

    def test_complex_and_member_edges(self):
        model = BioPaxModel()
        a = make_protein(model, "A")
        b = make_protein(model, "B")
        complex_ = model.create("Complex", f"{EX}ab")
        complex_.add("component", a)
        complex_.add("component", b)
        generic = model.create("Protein", f"{EX}generic")
        generic.add("memberPhysicalEntity", a)

        network = EntityGraphBuilder(model).build()
        ab = _node(network, complex_.uri)
        assert _edge_kinds(network, ab, _node(network, a.uri)) == ["contains"]
        assert _edge_kinds(network, ab, _node(network, b.uri)) == ["contains"]
        assert _edge_kinds(network, _node(network, generic.uri), _node(network, a.uri)) == ["member"]


# =============================================================================
# Test: Attributes and network
# =============================================================================


class TestAttributesPass:
    """Tests for the attribute pass and network attributes."""

    def test_every_node_attributed(self, glycolysis_network):
        for node in glycolysis_network.nodes():
            attrs = glycolysis_network.node_attributes(node)
            assert attrs["URI"].startswith(EX)
            assert "BIOPAX_TYPE" in attrs
            assert "name" in attrs
            assert "UNIFICATION" in attrs

    def test_xrefs_consolidated(self, glycolysis_network):
        hk1 = _node(glycolysis_network, f"{EX}hk1")
        assert glycolysis_network.get_node_attribute(hk1, "NCBI GENE") == "3098"
        glucose = _node(glycolysis_network, f"{EX}glucose")
        assert glycolysis_network.get_node_attribute(glucose, "UNIFICATION") == ["ChEBI:CHEBI:4167"]

    def test_network_attributes(self, glycolysis_network):
        assert glycolysis_network.name == "Glycolysis"
        assert glycolysis_network.get_network_attribute("quickfind.default_index") == "name"

    def test_custom_factory(self, glycolysis_model):
        class NamedFactory(DefaultNetworkFactory):
            created = []

            def create_network(self, name=""):
                network = super().create_network(name)
                self.created.append(network)
                return network

        factory = NamedFactory()
        network = EntityGraphBuilder(glycolysis_model, factory).build("x")
        assert factory.created == [network]

    def test_summary(self, glycolysis_network):
        summary = glycolysis_network.to_summary()
        assert summary["node_types"]["SmallMolecule"] == 3
        assert summary["edge_kinds"]["left"] == 1
