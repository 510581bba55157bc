"""
In-place model normalization run before binary relation inference.

All three steps are idempotent: running them on an already normalized
model changes nothing.

- merge_equivalent_interactions: interactions of the same class with the
  same participants and the same data values collapse into one
- normalize_generics: a simple entity with members but no reference gets
  a generic reference grouping its members' references
- add_missing_entity_references: any other simple entity without a
  reference gets one derived from its names and xrefs
"""

from __future__ import annotations

import logging
from typing import Hashable

from models.biopax import BioPaxElement, BioPaxModel, ancestors

logger = logging.getLogger(__name__)

# Annotation-only properties; equal interactions may differ in these
_ANNOTATION_PROPERTIES = frozenset(
    ["xref", "dataSource", "evidence", "name", "displayName", "standardName", "comment", "availability"]
)

REFERENCE_FOR_ENTITY: dict[str, str] = {
    "Protein": "ProteinReference",
    "SmallMolecule": "SmallMoleculeReference",
    "Dna": "DnaReference",
    "Rna": "RnaReference",
    "DnaRegion": "DnaRegionReference",
    "RnaRegion": "RnaRegionReference",
}


def _signature(interaction: BioPaxElement) -> Hashable:
    parts = [interaction.type_name]
    for spec, values in interaction.assigned():
        if spec.name in _ANNOTATION_PROPERTIES:
            continue
        if spec.is_object:
            keys = frozenset(v.uri for v in values)
        else:
            keys = frozenset(str(v) for v in values)
        parts.append((spec.name, keys))
    return tuple(parts)


def _absorb(keeper: BioPaxElement, duplicate: BioPaxElement) -> None:
    for spec, values in duplicate.assigned():
        if spec.name not in _ANNOTATION_PROPERTIES:
            continue
        for value in values:
            if spec.multiple:
                keeper.add(spec.name, value)
            elif keeper.get(spec.name) is None:
                keeper.set(spec.name, value)


def merge_equivalent_interactions(model: BioPaxModel) -> int:
    """
    Collapse structurally identical interactions.

    The interaction with the smallest URI is kept; the others' annotations
    are copied onto it and every reference to them is redirected. Controls
    are compared after the processes they control have been merged, so the
    merge repeats until nothing changes.

    Returns:
        Number of interactions removed.
    """
    removed = 0
    while True:
        groups: dict[Hashable, list[BioPaxElement]] = {}
        interactions = sorted(
            model.objects("Interaction"),
            key=lambda i: (len(ancestors(i.type_name)), i.uri),
        )
        for interaction in interactions:
            groups.setdefault(_signature(interaction), []).append(interaction)

        merged = 0
        for members in groups.values():
            if len(members) < 2:
                continue
            keeper, *duplicates = sorted(members, key=lambda i: i.uri)
            for duplicate in duplicates:
                logger.debug(f"Merging {duplicate.uri} into equivalent {keeper.uri}")
                _absorb(keeper, duplicate)
                model.replace(duplicate, keeper)
                merged += 1
        removed += merged
        if not merged:
            break

    if removed:
        logger.info(f"Merged {removed} equivalent interactions")
    return removed


def _reference_uri(model: BioPaxModel, entity: BioPaxElement) -> str:
    uri = f"{entity.uri}_reference"
    suffix = 1
    while uri in model:
        existing = model.get(uri)
        if existing.is_a("EntityReference") and entity in model.entity_reference_of(existing):
            return uri
        suffix += 1
        uri = f"{entity.uri}_reference_{suffix}"
    return uri


def _copy_names(source: BioPaxElement, target: BioPaxElement) -> None:
    for prop in ("displayName", "standardName"):
        value = source.get(prop)
        if value and target.get(prop) is None:
            target.set(prop, value)
    for name in source.values("name"):
        target.add("name", name)


def normalize_generics(model: BioPaxModel) -> int:
    """
    Give reference-less generic entities a generic reference.

    Applies to simple entities that have member entities but no reference,
    when all members carry references of one class. Returns the number of
    references created.
    """
    created = 0
    for entity in model.objects("SimplePhysicalEntity"):
        if entity.get("entityReference") is not None:
            continue
        members = entity.values("memberPhysicalEntity")
        member_refs = []
        for member in members:
            if member.is_a("SimplePhysicalEntity") and member.get("entityReference") is not None:
                reference = member.get("entityReference")
                if reference not in member_refs:
                    member_refs.append(reference)
        if not member_refs:
            continue
        classes = {r.type_name for r in member_refs}
        if len(classes) != 1:
            logger.debug(f"Members of {entity.uri} have mixed reference types {sorted(classes)}")
            continue

        generic = model.create(classes.pop(), _reference_uri(model, entity))
        _copy_names(entity, generic)
        for reference in member_refs:
            generic.add("memberEntityReference", reference)
        entity.set("entityReference", generic)
        created += 1

    if created:
        logger.info(f"Created {created} generic entity references")
    return created


def add_missing_entity_references(model: BioPaxModel) -> int:
    """
    Create a reference for every simple entity that still has none.

    The new reference takes the entity's names and its unification and
    relationship xrefs. Returns the number of references created.
    """
    created = 0
    for entity in model.objects("SimplePhysicalEntity"):
        if entity.get("entityReference") is not None:
            continue
        reference_type = REFERENCE_FOR_ENTITY.get(entity.type_name)
        if reference_type is None:
            continue
        reference = model.create(reference_type, _reference_uri(model, entity))
        _copy_names(entity, reference)
        for xref in entity.values("xref"):
            if xref.is_a("UnificationXref") or xref.is_a("RelationshipXref"):
                reference.add("xref", xref)
        entity.set("entityReference", reference)
        created += 1

    if created:
        logger.info(f"Added {created} missing entity references")
    return created


def normalize(model: BioPaxModel) -> None:
    """Run all normalization steps in order."""
    merge_equivalent_interactions(model)
    normalize_generics(model)
    add_missing_entity_references(model)
