"""
BioPAX Level 2 to Level 3 upgrade.

Level 2 models describe physical entities as reference-like objects
(protein, smallMolecule, ...) wrapped by physicalEntityParticipant nodes
that carry state such as cellular location and sequence features. Level 3
splits this into EntityReference (the molecule) and SimplePhysicalEntity
(the molecule in a given state). The upgrader works on the raw resources
collected from the document:

- protein/dna/rna/smallMolecule become the matching EntityReference
- each participant wrapping one of those becomes a Protein/Dna/Rna/
  SmallMolecule pointing at that reference, keeping the participant's
  location and features and the wrapped entity's names
- participants wrapping a complex or a generic physicalEntity resolve to
  that complex/entity itself
- openControlledVocabulary is typed after the property that refers to it
- pathway steps are flattened into pathwayComponent
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from models.biopax import BioPaxElement, BioPaxModel, property_spec
from reader.resources import RawResource, ResourceRef

logger = logging.getLogger(__name__)

CLASS_MAP: dict[str, str] = {
    "pathway": "Pathway",
    "interaction": "Interaction",
    "physicalInteraction": "MolecularInteraction",
    "conversion": "Conversion",
    "biochemicalReaction": "BiochemicalReaction",
    "complexAssembly": "ComplexAssembly",
    "transport": "Transport",
    "transportWithBiochemicalReaction": "TransportWithBiochemicalReaction",
    "control": "Control",
    "catalysis": "Catalysis",
    "modulation": "Modulation",
    "complex": "Complex",
    "physicalEntity": "PhysicalEntity",
    "protein": "ProteinReference",
    "dna": "DnaReference",
    "rna": "RnaReference",
    "smallMolecule": "SmallMoleculeReference",
    "bioSource": "BioSource",
    "dataSource": "Provenance",
    "unificationXref": "UnificationXref",
    "relationshipXref": "RelationshipXref",
    "publicationXref": "PublicationXref",
    "sequenceFeature": "ModificationFeature",
    "sequenceSite": "SequenceSite",
    "sequenceInterval": "SequenceInterval",
    "chemicalStructure": "ChemicalStructure",
}

PARTICIPANT_CLASSES = ("physicalEntityParticipant", "sequenceParticipant")

ENTITY_FOR_REFERENCE: dict[str, str] = {
    "ProteinReference": "Protein",
    "DnaReference": "Dna",
    "RnaReference": "Rna",
    "SmallMoleculeReference": "SmallMolecule",
}

VOCABULARY_FOR_PROPERTY: dict[str, str] = {
    "CELLULAR-LOCATION": "CellularLocationVocabulary",
    "FEATURE-TYPE": "SequenceModificationVocabulary",
    "CELLTYPE": "CellVocabulary",
    "TISSUE": "TissueVocabulary",
    "INTERACTION-TYPE": "InteractionVocabulary",
    "EVIDENCE-CODE": "EvidenceCodeVocabulary",
    "EXPERIMENTAL-FORM-TYPE": "ExperimentalFormVocabulary",
}

# Level 2 property -> candidate Level 3 properties; every candidate the
# target class defines receives the value
PROPERTY_MAP: dict[str, tuple[str, ...]] = {
    "NAME": ("standardName", "name"),
    "SHORT-NAME": ("displayName",),
    "SYNONYMS": ("name",),
    "COMMENT": ("comment",),
    "AVAILABILITY": ("availability",),
    "XREF": ("xref",),
    "TAXON-XREF": ("xref",),
    "DATA-SOURCE": ("dataSource",),
    "DB": ("db",),
    "ID": ("id",),
    "DB-VERSION": ("dbVersion",),
    "ID-VERSION": ("idVersion",),
    "AUTHORS": ("author",),
    "TITLE": ("title",),
    "YEAR": ("year",),
    "SOURCE": ("source",),
    "URL": ("url",),
    "TERM": ("term",),
    "ORGANISM": ("organism",),
    "SEQUENCE": ("sequence",),
    "CHEMICAL-FORMULA": ("chemicalFormula",),
    "MOLECULAR-WEIGHT": ("molecularWeight",),
    "STRUCTURE": ("structure",),
    "STRUCTURE-FORMAT": ("structureFormat",),
    "STRUCTURE-DATA": ("structureData",),
    "EC-NUMBER": ("eCNumber",),
    "CONTROL-TYPE": ("controlType",),
    "CONTROLLED": ("controlled",),
    "CONTROLLER": ("controller",),
    "COFACTOR": ("cofactor",),
    "LEFT": ("left",),
    "RIGHT": ("right",),
    "PARTICIPANTS": ("participant",),
    "COMPONENTS": ("component",),
    "PATHWAY-COMPONENTS": ("pathwayComponent",),
    "CELLULAR-LOCATION": ("cellularLocation",),
    "SEQUENCE-FEATURE-LIST": ("feature", "entityFeature"),
    "FEATURE-TYPE": ("modificationType",),
    "FEATURE-LOCATION": ("featureLocation",),
    "SEQUENCE-POSITION": ("sequencePosition",),
    "POSITION-STATUS": ("positionStatus",),
    "SEQUENCE-INTERVAL-BEGIN": ("sequenceIntervalBegin",),
    "SEQUENCE-INTERVAL-END": ("sequenceIntervalEnd",),
    "CELLTYPE": ("cellType",),
    "TISSUE": ("tissue",),
    "INTERACTION-TYPE": ("interactionType",),
}

# Participant wrappers lend their entity's naming to the new physical entity
_NAMING_PROPERTIES = ("NAME", "SHORT-NAME", "SYNONYMS", "DATA-SOURCE", "AVAILABILITY")
_PARTICIPANT_STATE_PROPERTIES = ("CELLULAR-LOCATION", "SEQUENCE-FEATURE-LIST", "COMMENT")


def _direction(raw: str) -> Optional[str]:
    if "RIGHT-TO-LEFT" in raw:
        return "RIGHT-TO-LEFT"
    if "LEFT-TO-RIGHT" in raw:
        return "LEFT-TO-RIGHT"
    return None


class LevelUpgrader:
    """
    Builds a Level 3 BioPaxModel from Level 2 raw resources.

    Attributes:
        resources: Raw Level 2 resources keyed by URI.
        xml_base: Base URI of the source document.
    """

    def __init__(self, resources: dict[str, RawResource], xml_base: str = ""):
        self.resources = resources
        self.xml_base = xml_base
        self.model = BioPaxModel(xml_base=xml_base, level=3)
        self._aliases: dict[str, str] = {}
        self._vocabulary_types: dict[str, str] = {}

    def upgrade(self) -> BioPaxModel:
        self._type_vocabularies()
        self._create_elements()
        for uri, resource in self.resources.items():
            element = self.model.get(uri)
            if element is None:
                continue
            if resource.type_name in PARTICIPANT_CLASSES:
                self._fill_participant(element, resource)
            else:
                self._fill(element, resource, resource.properties.keys())
        logger.info(
            f"Upgraded {len(self.resources)} Level 2 resources into {len(self.model)} Level 3 elements"
        )
        return self.model

    # -------------------------------------------------------------------------
    # Class resolution
    # -------------------------------------------------------------------------

    def _type_vocabularies(self) -> None:
        for resource in self.resources.values():
            for prop, vocabulary_type in VOCABULARY_FOR_PROPERTY.items():
                for ref in resource.refs(prop):
                    target = self.resources.get(ref)
                    if target is not None and target.type_name == "openControlledVocabulary":
                        self._vocabulary_types.setdefault(ref, vocabulary_type)

    def _level3_class(self, resource: RawResource) -> Optional[str]:
        if resource.type_name == "openControlledVocabulary":
            return self._vocabulary_types.get(resource.uri)
        return CLASS_MAP.get(resource.type_name)

    def _create_elements(self) -> None:
        for uri, resource in self.resources.items():
            if resource.type_name in PARTICIPANT_CLASSES:
                wrapped = self._wrapped(resource)
                if wrapped is None:
                    logger.debug(f"Participant {uri} wraps no known entity, dropped")
                    continue
                wrapped_class = self._level3_class(wrapped)
                if wrapped_class in ENTITY_FOR_REFERENCE:
                    self.model.create(ENTITY_FOR_REFERENCE[wrapped_class], uri)
                else:
                    self._aliases[uri] = wrapped.uri
                continue

            type_name = self._level3_class(resource)
            if type_name is None:
                logger.debug(f"No Level 3 counterpart for {resource.type_name} {uri}")
                continue
            self.model.create(type_name, uri)

    def _wrapped(self, participant: RawResource) -> Optional[RawResource]:
        refs = participant.refs("PHYSICAL-ENTITY")
        return self.resources.get(refs[0]) if refs else None

    def _resolve(self, uri: str) -> list[BioPaxElement]:
        """Elements a Level 2 reference stands for once upgraded."""
        resource = self.resources.get(uri)
        if resource is not None and resource.type_name in ("pathwayStep", "biochemicalPathwayStep"):
            resolved = []
            for step_uri in resource.refs("STEP-INTERACTIONS"):
                for element in self._resolve(step_uri):
                    if element not in resolved:
                        resolved.append(element)
            return resolved
        element = self.model.get(self._aliases.get(uri, uri))
        return [element] if element is not None else []

    # -------------------------------------------------------------------------
    # Property transfer
    # -------------------------------------------------------------------------

    def _fill_participant(self, element: BioPaxElement, participant: RawResource) -> None:
        wrapped = self._wrapped(participant)
        reference = self.model.get(wrapped.uri)
        self._assign(element, "entityReference", reference)
        self._fill(element, wrapped, _NAMING_PROPERTIES)
        self._fill(element, participant, _PARTICIPANT_STATE_PROPERTIES)

    def _fill(self, element: BioPaxElement, resource: RawResource, props) -> None:
        for prop in props:
            values = resource.properties.get(prop, [])
            if prop == "DIRECTION" and element.has_property("catalysisDirection"):
                for raw in resource.literals(prop):
                    self._assign(element, "catalysisDirection", _direction(raw))
                continue
            targets = [t for t in PROPERTY_MAP.get(prop, ()) if element.has_property(t)]
            if not targets:
                if values:
                    logger.debug(f"Level 2 property {prop} of {resource.uri} not upgraded")
                continue
            for target in targets:
                for raw in values:
                    if isinstance(raw, ResourceRef):
                        for value in self._resolve(raw.uri):
                            self._assign(element, target, value)
                    else:
                        self._assign(element, target, raw)

    def _assign(self, element: BioPaxElement, prop: str, value: Any) -> None:
        if value is None:
            return
        spec = property_spec(element.type_name, prop)
        try:
            if not spec.is_object and isinstance(value, str):
                value = spec.coerce(value)
            if spec.multiple:
                element.add(prop, value)
            elif element.get(prop) is None:
                element.set(prop, value)
        except (TypeError, ValueError) as e:
            logger.debug(f"Skipping {prop} value of {element.uri}: {e}")
