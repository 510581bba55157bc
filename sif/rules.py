"""
Binary relation inference rules.

Each rule scans a normalized Level 3 model for one structural motif and
yields (source, target, mediators) triples, where source and target are
entity reference URIs and mediators are the interactions/complexes that
support the relation. Physical entities are resolved to references by
flattening complexes into their components and generic entities into
their members.

Example:
    >>> for source, target, mediators in RULES[SifType.IN_COMPLEX_WITH](model):
    ...     print(source, target)
"""

from __future__ import annotations

import logging
from enum import Enum
from itertools import combinations
from typing import Callable, Iterator

from models.biopax import BioPaxElement, BioPaxModel, get_value, get_values

logger = logging.getLogger(__name__)

Match = tuple[str, str, list[BioPaxElement]]


class SifType(Enum):
    """Binary relation types: (tag, directed)."""

    CONTROLS_STATE_CHANGE_OF = ("controls-state-change-of", True)
    CONTROLS_TRANSPORT_OF = ("controls-transport-of", True)
    CONTROLS_PHOSPHORYLATION_OF = ("controls-phosphorylation-of", True)
    CONTROLS_EXPRESSION_OF = ("controls-expression-of", True)
    CONTROLS_TRANSPORT_OF_CHEMICAL = ("controls-transport-of-chemical", True)
    CONTROLS_PRODUCTION_OF = ("controls-production-of", True)
    CONSUMPTION_CONTROLLED_BY = ("consumption-controlled-by", True)
    CHEMICAL_AFFECTS = ("chemical-affects", True)
    CATALYSIS_PRECEDES = ("catalysis-precedes", True)
    USED_TO_PRODUCE = ("used-to-produce", True)
    REACTS_WITH = ("reacts-with", False)
    IN_COMPLEX_WITH = ("in-complex-with", False)
    INTERACTS_WITH = ("interacts-with", False)
    NEIGHBOR_OF = ("neighbor-of", False)

    def __init__(self, tag: str, directed: bool):
        self.tag = tag
        self.directed = directed

    def __str__(self) -> str:
        return self.tag

    @classmethod
    def from_tag(cls, tag: str) -> SifType:
        for sif_type in cls:
            if sif_type.tag == tag.strip().lower():
                return sif_type
        raise ValueError(f"Unknown binary relation type: {tag}")


# =============================================================================
# Participant resolution
# =============================================================================


def is_chemical(reference: BioPaxElement) -> bool:
    return reference.is_a("SmallMoleculeReference")


def references(entity: BioPaxElement, _seen: tuple[BioPaxElement, ...] = ()) -> list[BioPaxElement]:
    """
    Entity references a physical entity stands for.

    Complexes contribute the references of their components, generic
    entities those of their members, and a generic reference is replaced
    by its member references.
    """
    if entity in _seen or not entity.is_a("PhysicalEntity"):
        return []
    seen = _seen + (entity,)
    found: list[BioPaxElement] = []

    def extend(items: list[BioPaxElement]) -> None:
        for item in items:
            if item not in found:
                found.append(item)

    members = get_values(entity, "memberPhysicalEntity")
    if members:
        for member in members:
            extend(references(member, seen))
    elif entity.is_a("Complex"):
        for component in get_values(entity, "component"):
            extend(references(component, seen))
    else:
        reference = get_value(entity, "entityReference")
        if reference is not None:
            member_refs = get_values(reference, "memberEntityReference")
            extend(member_refs or [reference])
    return found


def _reference_states(entities: list[BioPaxElement]) -> dict[BioPaxElement, list[BioPaxElement]]:
    """Map each simple entity's reference to the simple entities (states) carrying it."""
    states: dict[BioPaxElement, list[BioPaxElement]] = {}
    for entity in entities:
        if not entity.is_a("SimplePhysicalEntity"):
            continue
        reference = get_value(entity, "entityReference")
        if reference is not None:
            states.setdefault(reference, []).append(entity)
    return states


def _sides(conversion: BioPaxElement) -> tuple[list[BioPaxElement], list[BioPaxElement]]:
    """Input and output entities of a conversion, honoring its direction."""
    left = get_values(conversion, "left")
    right = get_values(conversion, "right")
    if get_value(conversion, "conversionDirection") == "RIGHT-TO-LEFT":
        return right, left
    return left, right


def _modification_terms(entity: BioPaxElement) -> set[str]:
    terms: set[str] = set()
    for feature in get_values(entity, "feature"):
        modification_type = get_value(feature, "modificationType")
        if modification_type is not None:
            terms.update(t.lower() for t in get_values(modification_type, "term"))
    return terms


def _location(entity: BioPaxElement) -> frozenset[str]:
    location = get_value(entity, "cellularLocation")
    if location is None:
        return frozenset()
    return frozenset(get_values(location, "term")) or frozenset([location.uri])


def _controls(model: BioPaxModel, process: BioPaxElement) -> list[BioPaxElement]:
    return [c for c in model.controlled_of(process) if c.is_a("Control")]


def _controller_references(control: BioPaxElement) -> list[BioPaxElement]:
    found: list[BioPaxElement] = []
    for controller in get_values(control, "controller"):
        for reference in references(controller):
            if reference not in found:
                found.append(reference)
    return found


def _state_changes(conversion: BioPaxElement) -> Iterator[tuple[BioPaxElement, list[BioPaxElement], list[BioPaxElement]]]:
    """(reference, input states, output states) for references present on both sides in different states."""
    inputs, outputs = _sides(conversion)
    input_states = _reference_states(inputs)
    output_states = _reference_states(outputs)
    for reference, before in input_states.items():
        after = output_states.get(reference)
        if after and set(before) != set(after):
            yield reference, before, after


# =============================================================================
# Rules
# =============================================================================


def _state_change_rule(model: BioPaxModel, chemical_controllers: bool, test) -> Iterator[Match]:
    for conversion in model.objects("Conversion"):
        changes = [
            reference
            for reference, before, after in _state_changes(conversion)
            if test(reference, before, after)
        ]
        if not changes:
            continue
        for control in _controls(model, conversion):
            for controller in _controller_references(control):
                if is_chemical(controller) != chemical_controllers:
                    continue
                for reference in changes:
                    yield controller.uri, reference.uri, [control, conversion]


def controls_state_change_of(model: BioPaxModel) -> Iterator[Match]:
    yield from _state_change_rule(
        model, False, lambda reference, before, after: not is_chemical(reference)
    )


def controls_phosphorylation_of(model: BioPaxModel) -> Iterator[Match]:
    def gains_phospho(reference, before, after) -> bool:
        if is_chemical(reference):
            return False
        had = any("phospho" in t for state in before for t in _modification_terms(state))
        has = any("phospho" in t for state in after for t in _modification_terms(state))
        return has and not had

    yield from _state_change_rule(model, False, gains_phospho)


def controls_transport_of(model: BioPaxModel) -> Iterator[Match]:
    def moves(reference, before, after) -> bool:
        if is_chemical(reference):
            return False
        return {_location(s) for s in before} != {_location(s) for s in after}

    yield from _state_change_rule(model, False, moves)


def controls_transport_of_chemical(model: BioPaxModel) -> Iterator[Match]:
    def moves(reference, before, after) -> bool:
        if not is_chemical(reference):
            return False
        return {_location(s) for s in before} != {_location(s) for s in after}

    yield from _state_change_rule(model, False, moves)


def chemical_affects(model: BioPaxModel) -> Iterator[Match]:
    yield from _state_change_rule(
        model, True, lambda reference, before, after: not is_chemical(reference)
    )


def controls_expression_of(model: BioPaxModel) -> Iterator[Match]:
    for reaction in model.objects("TemplateReaction"):
        products: list[BioPaxElement] = []
        for product in get_values(reaction, "product"):
            products.extend(r for r in references(product) if r not in products)
        for control in _controls(model, reaction):
            for controller in _controller_references(control):
                for product in products:
                    yield controller.uri, product.uri, [control, reaction]


def _side_chemicals(conversion: BioPaxElement) -> tuple[list[BioPaxElement], list[BioPaxElement]]:
    """Small molecule references consumed and produced (not present on both sides)."""
    inputs, outputs = _sides(conversion)
    consumed = [r for e in inputs for r in references(e) if is_chemical(r)]
    produced = [r for e in outputs for r in references(e) if is_chemical(r)]
    both = set(consumed) & set(produced)
    consumed = list(dict.fromkeys(r for r in consumed if r not in both))
    produced = list(dict.fromkeys(r for r in produced if r not in both))
    return consumed, produced


def controls_production_of(model: BioPaxModel) -> Iterator[Match]:
    for conversion in model.objects("Conversion"):
        _, produced = _side_chemicals(conversion)
        if not produced:
            continue
        for control in _controls(model, conversion):
            for controller in _controller_references(control):
                if is_chemical(controller):
                    continue
                for chemical in produced:
                    yield controller.uri, chemical.uri, [control, conversion]


def consumption_controlled_by(model: BioPaxModel) -> Iterator[Match]:
    for conversion in model.objects("Conversion"):
        consumed, _ = _side_chemicals(conversion)
        if not consumed:
            continue
        for control in _controls(model, conversion):
            for controller in _controller_references(control):
                if is_chemical(controller):
                    continue
                for chemical in consumed:
                    yield chemical.uri, controller.uri, [control, conversion]


def used_to_produce(model: BioPaxModel) -> Iterator[Match]:
    for conversion in model.objects("Conversion"):
        consumed, produced = _side_chemicals(conversion)
        for source in consumed:
            for target in produced:
                yield source.uri, target.uri, [conversion]


def catalysis_precedes(model: BioPaxModel) -> Iterator[Match]:
    conversions = model.objects("Conversion")
    outputs: dict[BioPaxElement, set[BioPaxElement]] = {}
    inputs: dict[BioPaxElement, set[BioPaxElement]] = {}
    for conversion in conversions:
        before, after = _sides(conversion)
        inputs[conversion] = {r for e in before for r in references(e)}
        outputs[conversion] = {r for e in after for r in references(e)}

    for first in conversions:
        first_controls = _controls(model, first)
        if not first_controls or not outputs[first]:
            continue
        for second in conversions:
            if second is first or not (outputs[first] & inputs[second]):
                continue
            for second_control in _controls(model, second):
                targets = _controller_references(second_control)
                for first_control in first_controls:
                    for source in _controller_references(first_control):
                        if is_chemical(source):
                            continue
                        for target in targets:
                            if is_chemical(target):
                                continue
                            yield source.uri, target.uri, [first_control, first, second, second_control]


def _pairs(items: list[BioPaxElement]) -> Iterator[tuple[BioPaxElement, BioPaxElement]]:
    unique = sorted(set(items), key=lambda e: e.uri)
    return combinations(unique, 2)


def reacts_with(model: BioPaxModel) -> Iterator[Match]:
    for reaction in model.objects("BiochemicalReaction"):
        for side in _sides(reaction):
            chemicals = [r for e in side for r in references(e) if is_chemical(r)]
            for a, b in _pairs(chemicals):
                yield a.uri, b.uri, [reaction]


def in_complex_with(model: BioPaxModel) -> Iterator[Match]:
    for complex_ in model.objects("Complex"):
        members = [r for r in references(complex_) if not is_chemical(r)]
        for a, b in _pairs(members):
            yield a.uri, b.uri, [complex_]


def interacts_with(model: BioPaxModel) -> Iterator[Match]:
    for interaction in model.objects("MolecularInteraction"):
        participants = [
            r for p in get_values(interaction, "participant") for r in references(p) if not is_chemical(r)
        ]
        for a, b in _pairs(participants):
            yield a.uri, b.uri, [interaction]


def neighbor_of(model: BioPaxModel) -> Iterator[Match]:
    for interaction in model.objects("Interaction"):
        participants = [
            r for p in get_values(interaction, "participant") for r in references(p) if not is_chemical(r)
        ]
        for a, b in _pairs(participants):
            yield a.uri, b.uri, [interaction]


RULES: dict[SifType, Callable[[BioPaxModel], Iterator[Match]]] = {
    SifType.CONTROLS_STATE_CHANGE_OF: controls_state_change_of,
    SifType.CONTROLS_TRANSPORT_OF: controls_transport_of,
    SifType.CONTROLS_PHOSPHORYLATION_OF: controls_phosphorylation_of,
    SifType.CONTROLS_EXPRESSION_OF: controls_expression_of,
    SifType.CONTROLS_TRANSPORT_OF_CHEMICAL: controls_transport_of_chemical,
    SifType.CONTROLS_PRODUCTION_OF: controls_production_of,
    SifType.CONSUMPTION_CONTROLLED_BY: consumption_controlled_by,
    SifType.CHEMICAL_AFFECTS: chemical_affects,
    SifType.CATALYSIS_PRECEDES: catalysis_precedes,
    SifType.USED_TO_PRODUCE: used_to_produce,
    SifType.REACTS_WITH: reacts_with,
    SifType.IN_COMPLEX_WITH: in_complex_with,
    SifType.INTERACTS_WITH: interacts_with,
    SifType.NEIGHBOR_OF: neighbor_of,
}
