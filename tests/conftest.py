"""
Shared fixtures: small BioPAX models built in memory and the matching
RDF/XML documents.

The glycolysis fixture models one reaction, glucose -> glucose-6-phosphate,
catalysed by HK1 (with Mg2+ as cofactor) inside a top-level pathway.
"""

import io

import pytest

from models.biopax import BioPaxModel

EX = "http://example.org/"

GLYCOLYSIS_OWL = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:bp="http://www.biopax.org/release/biopax-level3.owl#"
         xml:base="http://example.org/">
  <bp:Pathway rdf:about="http://example.org/glycolysis">
    <bp:displayName>Glycolysis</bp:displayName>
    <bp:pathwayComponent rdf:resource="http://example.org/reaction1"/>
    <bp:pathwayComponent rdf:resource="http://example.org/catalysis1"/>
  </bp:Pathway>
  <bp:BiochemicalReaction rdf:about="http://example.org/reaction1">
    <bp:displayName>hexokinase reaction</bp:displayName>
    <bp:left rdf:resource="http://example.org/glucose"/>
    <bp:right rdf:resource="http://example.org/g6p"/>
    <bp:conversionDirection>LEFT-TO-RIGHT</bp:conversionDirection>
    <bp:dataSource rdf:resource="http://example.org/reactome"/>
    <bp:xref rdf:resource="http://example.org/pmid_12345"/>
  </bp:BiochemicalReaction>
  <bp:Catalysis rdf:about="http://example.org/catalysis1">
    <bp:controller rdf:resource="http://example.org/hk1"/>
    <bp:controlled rdf:resource="http://example.org/reaction1"/>
    <bp:cofactor rdf:resource="http://example.org/mg"/>
    <bp:controlType>ACTIVATION</bp:controlType>
  </bp:Catalysis>
  <bp:SmallMolecule rdf:about="http://example.org/glucose">
    <bp:displayName>glucose</bp:displayName>
    <bp:entityReference rdf:resource="http://example.org/glucose_ref"/>
  </bp:SmallMolecule>
  <bp:SmallMolecule rdf:about="http://example.org/g6p">
    <bp:displayName>glucose-6-phosphate</bp:displayName>
    <bp:entityReference rdf:resource="http://example.org/g6p_ref"/>
  </bp:SmallMolecule>
  <bp:SmallMolecule rdf:about="http://example.org/mg">
    <bp:displayName>Mg2+</bp:displayName>
    <bp:entityReference rdf:resource="http://example.org/mg_ref"/>
  </bp:SmallMolecule>
  <bp:Protein rdf:about="http://example.org/hk1">
    <bp:displayName>HK1</bp:displayName>
    <bp:entityReference rdf:resource="http://example.org/hk1_ref"/>
    <bp:cellularLocation rdf:resource="http://example.org/cytosol"/>
  </bp:Protein>
  <bp:SmallMoleculeReference rdf:about="http://example.org/glucose_ref">
    <bp:name>D-glucose</bp:name>
    <bp:xref rdf:resource="http://example.org/chebi_glucose"/>
  </bp:SmallMoleculeReference>
  <bp:SmallMoleculeReference rdf:about="http://example.org/g6p_ref">
    <bp:name>G6P</bp:name>
  </bp:SmallMoleculeReference>
  <bp:SmallMoleculeReference rdf:about="http://example.org/mg_ref">
    <bp:name>magnesium</bp:name>
  </bp:SmallMoleculeReference>
  <bp:ProteinReference rdf:about="http://example.org/hk1_ref">
    <bp:displayName>HK1</bp:displayName>
    <bp:xref rdf:resource="http://example.org/ncbi_hk1"/>
  </bp:ProteinReference>
  <bp:CellularLocationVocabulary rdf:about="http://example.org/cytosol">
    <bp:term>cytosol</bp:term>
  </bp:CellularLocationVocabulary>
  <bp:Provenance rdf:about="http://example.org/reactome">
    <bp:displayName>Reactome</bp:displayName>
  </bp:Provenance>
  <bp:UnificationXref rdf:about="http://example.org/chebi_glucose">
    <bp:db>ChEBI</bp:db>
    <bp:id>CHEBI:4167</bp:id>
  </bp:UnificationXref>
  <bp:RelationshipXref rdf:about="http://example.org/ncbi_hk1">
    <bp:db>NCBI Gene</bp:db>
    <bp:id>3098</bp:id>
  </bp:RelationshipXref>
  <bp:PublicationXref rdf:about="http://example.org/pmid_12345">
    <bp:db>PubMed</bp:db>
    <bp:id>12345</bp:id>
    <bp:title>Hexokinase kinetics</bp:title>
    <bp:year>1999</bp:year>
  </bp:PublicationXref>
</rdf:RDF>
"""

LEVEL2_OWL = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:bp="http://www.biopax.org/release/biopax-level2.owl#"
         xml:base="http://example.org/l2/">
  <bp:pathway rdf:about="http://example.org/l2/pw">
    <bp:NAME>MAPK signaling</bp:NAME>
    <bp:PATHWAY-COMPONENTS rdf:resource="http://example.org/l2/step1"/>
  </bp:pathway>
  <bp:pathwayStep rdf:about="http://example.org/l2/step1">
    <bp:STEP-INTERACTIONS rdf:resource="http://example.org/l2/rxn"/>
  </bp:pathwayStep>
  <bp:biochemicalReaction rdf:about="http://example.org/l2/rxn">
    <bp:NAME>MAPK1 translocation</bp:NAME>
    <bp:LEFT rdf:resource="http://example.org/l2/pep1"/>
    <bp:RIGHT rdf:resource="http://example.org/l2/pep2"/>
  </bp:biochemicalReaction>
  <bp:physicalEntityParticipant rdf:about="http://example.org/l2/pep1">
    <bp:PHYSICAL-ENTITY rdf:resource="http://example.org/l2/prot"/>
    <bp:CELLULAR-LOCATION rdf:resource="http://example.org/l2/cyto"/>
  </bp:physicalEntityParticipant>
  <bp:physicalEntityParticipant rdf:about="http://example.org/l2/pep2">
    <bp:PHYSICAL-ENTITY rdf:resource="http://example.org/l2/prot"/>
  </bp:physicalEntityParticipant>
  <bp:protein rdf:about="http://example.org/l2/prot">
    <bp:NAME>Mitogen-activated protein kinase 1</bp:NAME>
    <bp:SHORT-NAME>MAPK1</bp:SHORT-NAME>
    <bp:XREF rdf:resource="http://example.org/l2/x1"/>
  </bp:protein>
  <bp:unificationXref rdf:about="http://example.org/l2/x1">
    <bp:DB>UniProt</bp:DB>
    <bp:ID>P28482</bp:ID>
  </bp:unificationXref>
  <bp:openControlledVocabulary rdf:about="http://example.org/l2/cyto">
    <bp:TERM>cytoplasm</bp:TERM>
  </bp:openControlledVocabulary>
</rdf:RDF>
"""

EMPTY_PATHWAY_OWL = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:bp="http://www.biopax.org/release/biopax-level3.owl#"
         xml:base="http://example.org/">
  <bp:Pathway rdf:about="http://example.org/lonely">
    <bp:displayName>Lonely pathway</bp:displayName>
  </bp:Pathway>
</rdf:RDF>
"""

NO_BIOPAX_OWL = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:ex="http://example.org/vocab#">
  <ex:Thing rdf:about="http://example.org/thing">
    <ex:label>not a pathway</ex:label>
  </ex:Thing>
</rdf:RDF>
"""


def owl_stream(data: bytes) -> io.BytesIO:
    return io.BytesIO(data)


def make_xref(model: BioPaxModel, type_name: str, uri: str, db: str, xref_id: str):
    xref = model.create(type_name, uri)
    xref.set("db", db)
    xref.set("id", xref_id)
    return xref


def make_protein(model: BioPaxModel, name: str, reference=None, location=None):
    """A Protein named `name` with its own (or the given) ProteinReference."""
    if reference is None:
        reference = model.get(f"{EX}{name}_ref") or model.create("ProteinReference", f"{EX}{name}_ref")
        reference.set("displayName", name)
    uri = f"{EX}{name}"
    suffix = 1
    while uri in model:
        suffix += 1
        uri = f"{EX}{name}_{suffix}"
    protein = model.create("Protein", uri)
    protein.set("displayName", name)
    protein.set("entityReference", reference)
    if location is not None:
        protein.set("cellularLocation", location)
    return protein


def make_vocabulary(model: BioPaxModel, type_name: str, term: str):
    uri = f"{EX}{type_name}_{term.replace(' ', '_')}"
    vocabulary = model.get(uri)
    if vocabulary is None:
        vocabulary = model.create(type_name, uri)
        vocabulary.add("term", term)
    return vocabulary


@pytest.fixture
def glycolysis_model() -> BioPaxModel:
    """In-memory twin of GLYCOLYSIS_OWL."""
    model = BioPaxModel(xml_base=EX)

    pathway = model.create("Pathway", f"{EX}glycolysis")
    pathway.set("displayName", "Glycolysis")
    reaction = model.create("BiochemicalReaction", f"{EX}reaction1")
    reaction.set("displayName", "hexokinase reaction")
    reaction.set("conversionDirection", "LEFT-TO-RIGHT")
    catalysis = model.create("Catalysis", f"{EX}catalysis1")
    catalysis.set("controlType", "ACTIVATION")
    pathway.add("pathwayComponent", reaction)
    pathway.add("pathwayComponent", catalysis)

    chemicals = {}
    for key, name, synonym in (
        ("glucose", "glucose", "D-glucose"),
        ("g6p", "glucose-6-phosphate", "G6P"),
        ("mg", "Mg2+", "magnesium"),
    ):
        reference = model.create("SmallMoleculeReference", f"{EX}{key}_ref")
        reference.add("name", synonym)
        molecule = model.create("SmallMolecule", f"{EX}{key}")
        molecule.set("displayName", name)
        molecule.set("entityReference", reference)
        chemicals[key] = molecule
    chebi = make_xref(model, "UnificationXref", f"{EX}chebi_glucose", "ChEBI", "CHEBI:4167")
    chemicals["glucose"].get("entityReference").add("xref", chebi)

    cytosol = model.create("CellularLocationVocabulary", f"{EX}cytosol")
    cytosol.add("term", "cytosol")
    hk1_ref = model.create("ProteinReference", f"{EX}hk1_ref")
    hk1_ref.set("displayName", "HK1")
    hk1_ref.add("xref", make_xref(model, "RelationshipXref", f"{EX}ncbi_hk1", "NCBI Gene", "3098"))
    hk1 = model.create("Protein", f"{EX}hk1")
    hk1.set("displayName", "HK1")
    hk1.set("entityReference", hk1_ref)
    hk1.set("cellularLocation", cytosol)

    reaction.add("left", chemicals["glucose"])
    reaction.add("right", chemicals["g6p"])
    catalysis.add("controller", hk1)
    catalysis.add("controlled", reaction)
    catalysis.add("cofactor", chemicals["mg"])

    reactome = model.create("Provenance", f"{EX}reactome")
    reactome.set("displayName", "Reactome")
    reaction.add("dataSource", reactome)
    publication = make_xref(model, "PublicationXref", f"{EX}pmid_12345", "PubMed", "12345")
    publication.set("title", "Hexokinase kinetics")
    publication.set("year", 1999)
    reaction.add("xref", publication)
    return model
