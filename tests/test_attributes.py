"""
Tests for generic attribute projection.

Tests cover:
- Identity, type and label attributes
- Chemical modifications and the phosphorylated type
- Property paths through single-valued object properties
- Skipped properties (entities, names)
"""

from conftest import EX, make_protein, make_vocabulary
from mapping.attributes import (
    BIOPAX_CHEMICAL_MODIFICATIONS,
    BIOPAX_ENTITY_TYPE,
    BIOPAX_NAME,
    BIOPAX_URI,
    PROTEIN_PHOSPHORYLATED,
    AttributeProjector,
    chemical_modifications,
    stringify,
)
from models.biopax import BioPaxModel
from models.network import PathwayNetwork


def _project(element):
    network = PathwayNetwork("test")
    node = network.create_node()
    AttributeProjector(network).project(element, node)
    return network, node


def _phosphorylated_tp53(model: BioPaxModel):
    location = make_vocabulary(model, "CellularLocationVocabulary", "nucleus")
    protein = make_protein(model, "TP53", location=location)
    feature = model.create("ModificationFeature", f"{EX}tp53_s15")
    feature.set("modificationType", make_vocabulary(model, "SequenceModificationVocabulary", "phosphorylation site"))
    protein.add("feature", feature)
    return protein


# =============================================================================
# Test: Identity and label
# =============================================================================


class TestLabel:
    """Tests for the URI, type and name attributes."""

    def test_uri_and_type(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}glucose"))
        assert network.get_node_attribute(node, BIOPAX_URI) == f"{EX}glucose"
        assert network.get_node_attribute(node, BIOPAX_ENTITY_TYPE) == "SmallMolecule"

    def test_name_with_location(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}hk1"))
        assert network.get_node_attribute(node, BIOPAX_NAME) == "HK1; cytosol"

    def test_interaction_name_plain(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}reaction1"))
        assert network.get_node_attribute(node, BIOPAX_NAME) == "hexokinase reaction"

    def test_name_falls_back_to_uri(self):
        model = BioPaxModel()
        protein = model.create("Protein", f"{EX}anonymous")
        network, node = _project(protein)
        assert network.get_node_attribute(node, BIOPAX_NAME) == f"{EX}anonymous"

    def test_markup_unescaped(self):
        model = BioPaxModel()
        protein = model.create("Protein", f"{EX}ifn")
        protein.set("displayName", "IFN-&alpha;")
        network, node = _project(protein)
        assert network.get_node_attribute(node, BIOPAX_NAME) == "IFN-α"


# =============================================================================
# Test: Chemical modifications
# =============================================================================


class TestChemicalModifications:
    """Tests for modification terms in the label and type."""

    def test_modifications_sorted_with_negation(self):
        model = BioPaxModel()
        protein = make_protein(model, "EGFR")
        for i, (prop, term) in enumerate((("feature", "ubiquitination"), ("notFeature", "acetylation"))):
            feature = model.create("ModificationFeature", f"{EX}f{i}")
            feature.set("modificationType", make_vocabulary(model, "SequenceModificationVocabulary", term))
            protein.add(prop, feature)
        assert chemical_modifications(protein) == ["!acetylation", "ubiquitination"]

    def test_phosphorylated_protein(self):
        model = BioPaxModel()
        protein = _phosphorylated_tp53(model)
        network, node = _project(protein)

        assert network.get_node_attribute(node, BIOPAX_NAME) == "TP53 -phosphorylation site; nucleus"
        assert network.get_node_attribute(node, BIOPAX_CHEMICAL_MODIFICATIONS) == ["phosphorylation site"]
        assert network.get_node_attribute(node, BIOPAX_ENTITY_TYPE) == PROTEIN_PHOSPHORYLATED

    def test_unmodified_has_no_modification_attribute(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}hk1"))
        assert network.get_node_attribute(node, BIOPAX_CHEMICAL_MODIFICATIONS) is None


# =============================================================================
# Test: Property traversal
# =============================================================================


class TestTraversal:
    """Tests for schema-driven property projection."""

    def test_single_valued_object_expanded(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}hk1"))
        assert network.get_node_attribute(node, "cellularLocation") == "cytosol"
        assert network.get_node_attribute(node, "cellularLocation/term") == ["cytosol"]
        assert network.get_node_attribute(node, "entityReference") == "HK1"
        assert network.get_node_attribute(node, "entityReference/xref") == ["NCBI Gene:3098"]

    def test_multi_valued_not_expanded(self, glycolysis_model):
        network, node = _project(glycolysis_model.get(f"{EX}reaction1"))
        assert network.get_node_attribute(node, "dataSource") == ["Reactome"]
        assert network.get_node_attribute(node, "dataSource/displayName") is None

    def test_entity_properties_skipped(self, glycolysis_model):
        """Entity-valued properties become edges, not attributes."""
        network, node = _project(glycolysis_model.get(f"{EX}reaction1"))
        assert network.get_node_attribute(node, "left") is None
        assert network.get_node_attribute(node, "right") is None
        assert network.get_node_attribute(node, "conversionDirection") == "LEFT-TO-RIGHT"

    def test_name_property_does_not_override_label(self):
        model = BioPaxModel()
        reference = model.create("SmallMoleculeReference", f"{EX}ref")
        reference.set("displayName", "glucose")
        reference.add("name", "D-glucose")
        network, node = _project(reference)
        assert network.get_node_attribute(node, BIOPAX_NAME) == "glucose"

    def test_boolean_values(self):
        model = BioPaxModel()
        reaction = model.create("BiochemicalReaction", f"{EX}r")
        reaction.set("spontaneous", True)
        network, node = _project(reaction)
        assert network.get_node_attribute(node, "spontaneous") == "true"
        assert stringify(False) == "false"

    def test_cycle_not_reentered(self):
        """Mutually bound features do not recurse forever."""
        model = BioPaxModel()
        first = model.create("BindingFeature", f"{EX}bf1")
        second = model.create("BindingFeature", f"{EX}bf2")
        first.set("bindsTo", second)
        second.set("bindsTo", first)
        network, node = _project(first)
        assert network.get_node_attribute(node, "bindsTo") == f"{EX}bf2"
        assert network.get_node_attribute(node, "bindsTo/bindsTo") == f"{EX}bf1"
        assert network.get_node_attribute(node, "bindsTo/bindsTo/bindsTo") is None
