"""
In-memory BioPAX Level 3 model.

The BioPAX class hierarchy is kept as data rather than as Python classes:
CLASS_PARENTS is the closed type lattice and SCHEMA maps every
(class, property) pair to a PropertySpec. Every element is a plain
BioPaxElement tagged with its class name, and property access goes through
the schema so that probing a property a class does not define raises
PropertyAccessMiss instead of silently returning nothing.

Example:
    >>> model = BioPaxModel(xml_base="http://example.org/")
    >>> protein = model.create("Protein", "http://example.org/TP53")
    >>> protein.set("displayName", "TP53")
    >>> protein.is_a("PhysicalEntity")
    True
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator, Optional

from models.errors import PropertyAccessMiss

logger = logging.getLogger(__name__)

BIOPAX_L3_NS = "http://www.biopax.org/release/biopax-level3.owl#"
BIOPAX_L2_NS = "http://www.biopax.org/release/biopax-level2.owl#"

DATA_TYPES = ("string", "int", "float", "boolean")


# =============================================================================
# Type Lattice
# =============================================================================

CLASS_PARENTS: dict[str, Optional[str]] = {
    "BioPAXElement": None,
    # Entities
    "Entity": "BioPAXElement",
    "Pathway": "Entity",
    "Gene": "Entity",
    "Interaction": "Entity",
    "Conversion": "Interaction",
    "BiochemicalReaction": "Conversion",
    "ComplexAssembly": "Conversion",
    "Transport": "Conversion",
    "TransportWithBiochemicalReaction": "BiochemicalReaction",
    "Degradation": "Conversion",
    "Control": "Interaction",
    "Catalysis": "Control",
    "Modulation": "Control",
    "TemplateReactionRegulation": "Control",
    "TemplateReaction": "Interaction",
    "MolecularInteraction": "Interaction",
    "GeneticInteraction": "Interaction",
    "PhysicalEntity": "Entity",
    "Complex": "PhysicalEntity",
    "SimplePhysicalEntity": "PhysicalEntity",
    "Protein": "SimplePhysicalEntity",
    "SmallMolecule": "SimplePhysicalEntity",
    "Dna": "SimplePhysicalEntity",
    "Rna": "SimplePhysicalEntity",
    "DnaRegion": "SimplePhysicalEntity",
    "RnaRegion": "SimplePhysicalEntity",
    # Utility classes
    "UtilityClass": "BioPAXElement",
    "Xref": "UtilityClass",
    "UnificationXref": "Xref",
    "RelationshipXref": "Xref",
    "PublicationXref": "Xref",
    "EntityReference": "UtilityClass",
    "ProteinReference": "EntityReference",
    "SmallMoleculeReference": "EntityReference",
    "DnaReference": "EntityReference",
    "RnaReference": "EntityReference",
    "DnaRegionReference": "EntityReference",
    "RnaRegionReference": "EntityReference",
    "ControlledVocabulary": "UtilityClass",
    "CellularLocationVocabulary": "ControlledVocabulary",
    "CellVocabulary": "ControlledVocabulary",
    "TissueVocabulary": "ControlledVocabulary",
    "EvidenceCodeVocabulary": "ControlledVocabulary",
    "ExperimentalFormVocabulary": "ControlledVocabulary",
    "InteractionVocabulary": "ControlledVocabulary",
    "PhenotypeVocabulary": "ControlledVocabulary",
    "RelationshipTypeVocabulary": "ControlledVocabulary",
    "SequenceModificationVocabulary": "ControlledVocabulary",
    "SequenceRegionVocabulary": "ControlledVocabulary",
    "EntityReferenceTypeVocabulary": "ControlledVocabulary",
    "EntityFeature": "UtilityClass",
    "ModificationFeature": "EntityFeature",
    "FragmentFeature": "EntityFeature",
    "BindingFeature": "EntityFeature",
    "CovalentBindingFeature": "BindingFeature",
    "SequenceLocation": "UtilityClass",
    "SequenceSite": "SequenceLocation",
    "SequenceInterval": "SequenceLocation",
    "BioSource": "UtilityClass",
    "Provenance": "UtilityClass",
    "Stoichiometry": "UtilityClass",
    "PathwayStep": "UtilityClass",
    "BiochemicalPathwayStep": "PathwayStep",
    "Evidence": "UtilityClass",
    "Score": "UtilityClass",
    "ExperimentalForm": "UtilityClass",
    "ChemicalStructure": "UtilityClass",
    "DeltaG": "UtilityClass",
    "KPrime": "UtilityClass",
}

# Classes that may carry xrefs / names, regardless of where they sit in the lattice
XREFERRABLE = ("Entity", "EntityReference", "BioSource", "ControlledVocabulary", "Evidence", "Provenance")
NAMED = ("Entity", "EntityReference", "BioSource", "Provenance")


@lru_cache(maxsize=None)
def ancestors(type_name: str) -> tuple[str, ...]:
    """Return the class itself followed by all of its superclasses, nearest first."""
    if type_name not in CLASS_PARENTS:
        raise ValueError(f"Unknown BioPAX class: {type_name}")
    chain = []
    current: Optional[str] = type_name
    while current is not None:
        chain.append(current)
        current = CLASS_PARENTS[current]
    return tuple(chain)


def is_subclass(type_name: str, parent: str) -> bool:
    return parent in ancestors(type_name)


# =============================================================================
# Property Schema
# =============================================================================


@dataclass(frozen=True)
class PropertySpec:
    """
    Schema entry for one BioPAX property.

    Attributes:
        name: Property name as it appears in the OWL document.
        domain: Class that declares the property.
        range: Either a data type ("string", "int", ...) or a BioPAX class name.
        multiple: True for multi-cardinality properties.
    """

    name: str
    domain: str
    range: str
    multiple: bool

    @property
    def is_object(self) -> bool:
        return self.range in CLASS_PARENTS

    def coerce(self, raw: str) -> Any:
        """Convert a literal from the document to this property's data type."""
        if self.range == "int":
            return int(float(raw))
        if self.range == "float":
            return float(raw)
        if self.range == "boolean":
            return raw.strip().lower() in ("true", "1")
        return raw


SCHEMA: dict[str, dict[str, PropertySpec]] = defaultdict(dict)


def _define(domains: str | tuple[str, ...], name: str, range_: str, multiple: bool = False) -> None:
    if isinstance(domains, str):
        domains = (domains,)
    for domain in domains:
        SCHEMA[domain][name] = PropertySpec(name, domain, range_, multiple)


_SEQUENCE_REFERENCES = ("ProteinReference", "DnaReference", "RnaReference",
                        "DnaRegionReference", "RnaRegionReference")

_define("BioPAXElement", "comment", "string", multiple=True)

# Named / XReferrable capabilities
_define(NAMED, "standardName", "string")
_define(NAMED, "displayName", "string")
_define(NAMED, "name", "string", multiple=True)
_define(XREFERRABLE, "xref", "Xref", multiple=True)

# Entity
_define("Entity", "availability", "string", multiple=True)
_define("Entity", "dataSource", "Provenance", multiple=True)
_define("Entity", "evidence", "Evidence", multiple=True)

_define("Pathway", "pathwayComponent", "Entity", multiple=True)
_define("Pathway", "pathwayOrder", "PathwayStep", multiple=True)
_define("Pathway", "organism", "BioSource")
_define("Gene", "organism", "BioSource")

_define("Interaction", "participant", "Entity", multiple=True)
_define("Interaction", "interactionType", "InteractionVocabulary", multiple=True)

_define("Conversion", "left", "PhysicalEntity", multiple=True)
_define("Conversion", "right", "PhysicalEntity", multiple=True)
_define("Conversion", "participantStoichiometry", "Stoichiometry", multiple=True)
_define("Conversion", "spontaneous", "boolean")
_define("Conversion", "conversionDirection", "string")
_define("BiochemicalReaction", "eCNumber", "string", multiple=True)
_define("BiochemicalReaction", "deltaG", "DeltaG", multiple=True)
_define("BiochemicalReaction", "kEQ", "KPrime", multiple=True)
_define("BiochemicalReaction", "deltaH", "float", multiple=True)
_define("BiochemicalReaction", "deltaS", "float", multiple=True)

_define("Control", "controller", "Entity", multiple=True)
_define("Control", "controlled", "Entity", multiple=True)
_define("Control", "controlType", "string")
_define("Catalysis", "cofactor", "PhysicalEntity", multiple=True)
_define("Catalysis", "catalysisDirection", "string")

_define("TemplateReaction", "template", "PhysicalEntity")
_define("TemplateReaction", "product", "PhysicalEntity", multiple=True)
_define("TemplateReaction", "templateDirection", "string")

_define("GeneticInteraction", "phenotype", "PhenotypeVocabulary")
_define("GeneticInteraction", "interactionScore", "Score", multiple=True)

_define("PhysicalEntity", "cellularLocation", "CellularLocationVocabulary")
_define("PhysicalEntity", "feature", "EntityFeature", multiple=True)
_define("PhysicalEntity", "notFeature", "EntityFeature", multiple=True)
_define("PhysicalEntity", "memberPhysicalEntity", "PhysicalEntity", multiple=True)
_define("Complex", "component", "PhysicalEntity", multiple=True)
_define("Complex", "componentStoichiometry", "Stoichiometry", multiple=True)
_define("SimplePhysicalEntity", "entityReference", "EntityReference")

# Utility classes
_define("EntityReference", "entityFeature", "EntityFeature", multiple=True)
_define("EntityReference", "memberEntityReference", "EntityReference", multiple=True)
_define("EntityReference", "entityReferenceType", "EntityReferenceTypeVocabulary", multiple=True)
_define("EntityReference", "evidence", "Evidence", multiple=True)
_define(_SEQUENCE_REFERENCES, "organism", "BioSource")
_define(_SEQUENCE_REFERENCES, "sequence", "string")
_define("SmallMoleculeReference", "chemicalFormula", "string")
_define("SmallMoleculeReference", "molecularWeight", "float")
_define("SmallMoleculeReference", "structure", "ChemicalStructure")

_define("Xref", "db", "string")
_define("Xref", "id", "string")
_define("Xref", "dbVersion", "string")
_define("Xref", "idVersion", "string")
_define("PublicationXref", "title", "string")
_define("PublicationXref", "year", "int")
_define("PublicationXref", "author", "string", multiple=True)
_define("PublicationXref", "source", "string", multiple=True)
_define("PublicationXref", "url", "string", multiple=True)
_define("RelationshipXref", "relationshipType", "RelationshipTypeVocabulary")

_define("ControlledVocabulary", "term", "string", multiple=True)

_define("EntityFeature", "featureLocation", "SequenceLocation")
_define("EntityFeature", "featureLocationType", "SequenceRegionVocabulary")
_define("EntityFeature", "memberFeature", "EntityFeature", multiple=True)
_define("EntityFeature", "evidence", "Evidence", multiple=True)
_define("ModificationFeature", "modificationType", "SequenceModificationVocabulary")
_define("BindingFeature", "bindsTo", "BindingFeature")
_define("BindingFeature", "intraMolecular", "boolean")

_define("SequenceSite", "sequencePosition", "int")
_define("SequenceSite", "positionStatus", "string")
_define("SequenceInterval", "sequenceIntervalBegin", "SequenceSite")
_define("SequenceInterval", "sequenceIntervalEnd", "SequenceSite")

_define("BioSource", "cellType", "CellVocabulary")
_define("BioSource", "tissue", "TissueVocabulary")

_define("Stoichiometry", "physicalEntity", "PhysicalEntity")
_define("Stoichiometry", "stoichiometricCoefficient", "float")

_define("PathwayStep", "stepProcess", "Entity", multiple=True)
_define("PathwayStep", "nextStep", "PathwayStep", multiple=True)
_define("PathwayStep", "evidence", "Evidence", multiple=True)
_define("BiochemicalPathwayStep", "stepConversion", "Conversion")
_define("BiochemicalPathwayStep", "stepDirection", "string")

_define("Evidence", "evidenceCode", "EvidenceCodeVocabulary", multiple=True)
_define("Evidence", "confidence", "Score", multiple=True)
_define("Evidence", "experimentalForm", "ExperimentalForm", multiple=True)
_define("Score", "value", "string")
_define("Score", "scoreSource", "Provenance")
_define("ExperimentalForm", "experimentalFormDescription", "ExperimentalFormVocabulary", multiple=True)
_define("ExperimentalForm", "experimentalFormEntity", "Entity", multiple=True)

_define("ChemicalStructure", "structureFormat", "string")
_define("ChemicalStructure", "structureData", "string")
_define("DeltaG", "deltaGPrime0", "float")
_define("DeltaG", "temperature", "float")
_define("KPrime", "kPrime", "float")
_define("KPrime", "temperature", "float")

# Reading "participant" on an interaction yields the union of these
SUB_PROPERTIES: dict[str, tuple[str, ...]] = {
    "participant": ("left", "right", "controller", "controlled", "cofactor", "template", "product"),
}


def property_spec(type_name: str, prop: str) -> Optional[PropertySpec]:
    """Find the schema entry for a property, walking up the lattice."""
    for cls in ancestors(type_name):
        spec = SCHEMA.get(cls, {}).get(prop)
        if spec is not None:
            return spec
    return None


@lru_cache(maxsize=None)
def properties_of(type_name: str) -> tuple[PropertySpec, ...]:
    """All properties a class carries, most general class first."""
    seen: dict[str, PropertySpec] = {}
    for cls in reversed(ancestors(type_name)):
        for name, spec in SCHEMA.get(cls, {}).items():
            seen.setdefault(name, spec)
    return tuple(seen.values())


# =============================================================================
# Elements
# =============================================================================


class BioPaxElement:
    """
    One URI-identified object of a BioPAX model.

    Property values are stored as lists regardless of cardinality; single
    valued properties simply hold at most one value. Object properties hold
    other BioPaxElement instances.
    """

    def __init__(self, uri: str, type_name: str):
        ancestors(type_name)  # validates the class name
        self.uri = uri
        self.type_name = type_name
        self._values: dict[str, list[Any]] = {}
        self._model: Optional[BioPaxModel] = None

    def __repr__(self) -> str:
        return f"<{self.type_name} {self.uri}>"

    def __str__(self) -> str:
        if self.is_a("Xref"):
            db = self.get("db")
            xref_id = self.get("id")
            if db or xref_id:
                return f"{db or ''}:{xref_id or ''}"
        elif self.is_a("ControlledVocabulary"):
            terms = self.values("term")
            if terms:
                return ",".join(sorted(terms))
        elif self.is_a("SequenceSite"):
            position = self.get("sequencePosition")
            if position is not None:
                return str(position)
        elif self.is_named():
            for prop in ("displayName", "standardName"):
                value = self.get(prop)
                if value:
                    return value
            names = self.values("name")
            if names:
                return names[0]
        return self.uri

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def is_a(self, type_name: str) -> bool:
        return is_subclass(self.type_name, type_name)

    def is_xreferrable(self) -> bool:
        return any(self.is_a(cls) for cls in XREFERRABLE)

    def is_named(self) -> bool:
        return any(self.is_a(cls) for cls in NAMED)

    def has_property(self, prop: str) -> bool:
        return property_spec(self.type_name, prop) is not None

    def spec(self, prop: str) -> PropertySpec:
        spec = property_spec(self.type_name, prop)
        if spec is None:
            raise PropertyAccessMiss(self.uri, self.type_name, prop)
        return spec

    def properties(self) -> tuple[PropertySpec, ...]:
        return properties_of(self.type_name)

    # -------------------------------------------------------------------------
    # Strict accessors (raise PropertyAccessMiss)
    # -------------------------------------------------------------------------

    def get(self, prop: str) -> Any:
        """Value of a property, or None when unset. Multi-valued properties return their first value."""
        values = self.values(prop)
        return values[0] if values else None

    def values(self, prop: str) -> list[Any]:
        self.spec(prop)
        result = list(self._values.get(prop, []))
        for sub in SUB_PROPERTIES.get(prop, ()):
            if self.has_property(sub):
                for value in self._values.get(sub, []):
                    if value not in result:
                        result.append(value)
        return result

    def set(self, prop: str, value: Any) -> None:
        spec = self.spec(prop)
        if value is None:
            self._values.pop(prop, None)
        else:
            self._check(spec, value)
            self._values[prop] = [value]
        self._touch()

    def add(self, prop: str, value: Any) -> None:
        spec = self.spec(prop)
        if not spec.multiple:
            self.set(prop, value)
            return
        self._check(spec, value)
        bucket = self._values.setdefault(prop, [])
        if value not in bucket:
            bucket.append(value)
            self._touch()

    def remove(self, prop: str, value: Any) -> None:
        self.spec(prop)
        bucket = self._values.get(prop, [])
        if value in bucket:
            bucket.remove(value)
            if not bucket:
                del self._values[prop]
            self._touch()

    def assigned(self) -> Iterator[tuple[PropertySpec, list[Any]]]:
        """Iterate over (spec, values) for every property that holds a value."""
        for spec in self.properties():
            values = self._values.get(spec.name)
            if values:
                yield spec, list(values)

    def _check(self, spec: PropertySpec, value: Any) -> None:
        if spec.is_object:
            if not isinstance(value, BioPaxElement):
                raise TypeError(f"{spec.name} of {self.uri} expects a {spec.range}, got {value!r}")
            if not value.is_a(spec.range):
                raise ValueError(f"{spec.name} of {self.uri} expects a {spec.range}, got {value!r}")
        elif isinstance(value, BioPaxElement):
            raise TypeError(f"{spec.name} of {self.uri} is a data property")

    def _touch(self) -> None:
        if self._model is not None:
            self._model.invalidate()


def get_value(element: BioPaxElement, *props: str) -> Any:
    """
    Read the first set value among several candidate properties.

    Properties the element's class does not define are skipped and logged
    at DEBUG, so callers can probe optional or level-dependent properties.
    """
    for prop in props:
        try:
            value = element.get(prop)
        except PropertyAccessMiss as e:
            logger.debug(f"Skipping property: {e}")
            continue
        if value is not None:
            return value
    return None


def get_values(element: BioPaxElement, *props: str) -> list[Any]:
    """Values of the first candidate property that is defined and non-empty."""
    for prop in props:
        try:
            values = element.values(prop)
        except PropertyAccessMiss as e:
            logger.debug(f"Skipping property: {e}")
            continue
        if values:
            return values
    return []


# =============================================================================
# Model
# =============================================================================


class BioPaxModel:
    """
    A set of BioPAX elements indexed by URI.

    Inverse relations (participantOf, componentOf, ...) are answered from a
    reverse index that is rebuilt lazily after any mutation.

    Attributes:
        xml_base: Base URI of the source document.
        level: BioPAX level of the model (always 3 once upgraded).
    """

    def __init__(self, xml_base: str = "", level: int = 3):
        self.xml_base = xml_base
        self.level = level
        self._elements: dict[str, BioPaxElement] = {}
        self._inverse: Optional[dict[tuple[int, str], list[BioPaxElement]]] = None
        self._targets: Optional[dict[int, list[tuple[BioPaxElement, str]]]] = None

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[BioPaxElement]:
        return iter(list(self._elements.values()))

    def __contains__(self, uri: str) -> bool:
        return uri in self._elements

    def get(self, uri: str) -> Optional[BioPaxElement]:
        return self._elements.get(uri)

    def objects(self, type_name: str = "BioPAXElement") -> list[BioPaxElement]:
        """All elements that are instances of the given class, in insertion order."""
        return [el for el in self._elements.values() if el.is_a(type_name)]

    def create(self, type_name: str, uri: str) -> BioPaxElement:
        element = BioPaxElement(uri, type_name)
        self.add(element)
        return element

    def add(self, element: BioPaxElement) -> None:
        if element.uri in self._elements:
            raise ValueError(f"Duplicate URI in model: {element.uri}")
        self._elements[element.uri] = element
        element._model = self
        self.invalidate()

    def remove(self, element: BioPaxElement) -> None:
        """Remove an element and every reference other elements hold to it."""
        for referrer, prop in self.references_to(element):
            referrer.remove(prop, element)
        self._elements.pop(element.uri, None)
        element._model = None
        self.invalidate()

    def replace(self, old: BioPaxElement, new: BioPaxElement) -> None:
        """Point every reference to `old` at `new`, then drop `old`."""
        for referrer, prop in self.references_to(old):
            if referrer is new:
                referrer.remove(prop, old)
                continue
            spec = referrer.spec(prop)
            if spec.multiple:
                referrer.remove(prop, old)
                referrer.add(prop, new)
            else:
                referrer.set(prop, new)
        self.remove(old)

    def invalidate(self) -> None:
        self._inverse = None
        self._targets = None

    # -------------------------------------------------------------------------
    # Inverse relations
    # -------------------------------------------------------------------------

    def _index(self) -> dict[tuple[int, str], list[BioPaxElement]]:
        if self._inverse is None:
            index: dict[tuple[int, str], list[BioPaxElement]] = defaultdict(list)
            targets: dict[int, list[tuple[BioPaxElement, str]]] = defaultdict(list)
            for element in self._elements.values():
                for spec, values in element.assigned():
                    if not spec.is_object:
                        continue
                    for value in {id(v): v for v in values}:
                        index[(value, spec.name)].append(element)
                        targets[value].append((element, spec.name))
            self._inverse = index
            self._targets = targets
        return self._inverse

    def references_to(self, element: BioPaxElement) -> list[tuple[BioPaxElement, str]]:
        """(referrer, property) pairs for every object property pointing at element."""
        self._index()
        return list(self._targets.get(id(element), []))

    def referrers(self, element: BioPaxElement, prop: str) -> list[BioPaxElement]:
        """Elements holding `element` in `prop` (sub-properties included)."""
        index = self._index()
        result = list(index.get((id(element), prop), []))
        for sub in SUB_PROPERTIES.get(prop, ()):
            for referrer in index.get((id(element), sub), []):
                if referrer not in result:
                    result.append(referrer)
        return result

    def participant_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "participant")

    def pathway_component_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "pathwayComponent")

    def controlled_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "controlled")

    def component_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "component")

    def member_physical_entity_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "memberPhysicalEntity")

    def entity_reference_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "entityReference")

    def member_entity_reference_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "memberEntityReference")

    def xref_of(self, element: BioPaxElement) -> list[BioPaxElement]:
        return self.referrers(element, "xref")

    def to_summary(self) -> dict[str, Any]:
        type_counts: dict[str, int] = {}
        for element in self._elements.values():
            type_counts[element.type_name] = type_counts.get(element.type_name, 0) + 1
        return {
            "xml_base": self.xml_base,
            "level": self.level,
            "element_count": len(self._elements),
            "types": dict(sorted(type_counts.items())),
        }
