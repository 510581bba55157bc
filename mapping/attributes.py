"""
Generic attribute projection for BioPAX elements.

AttributeProjector walks an element's properties through the schema and
writes every reachable value as a node attribute. Single-valued object
properties are expanded recursively, with the property path joined by "/"
forming the attribute name (e.g. "cellularLocation/term"); multi-valued
properties become list attributes and are never expanded further.
Properties whose range is an Entity or Stoichiometry are skipped because
the builder turns them into edges instead.
"""

from __future__ import annotations

import logging
from typing import Any

from mapping.links import element_name
from models.biopax import BioPaxElement, PropertySpec, get_value, get_values, is_subclass
from models.network import PathwayNetwork

logger = logging.getLogger(__name__)

BIOPAX_URI = "URI"
BIOPAX_ENTITY_TYPE = "BIOPAX_TYPE"
BIOPAX_NAME = "name"
BIOPAX_CHEMICAL_MODIFICATIONS = "CHEMICAL_MODIFICATIONS"
PHOSPHORYLATION_SITE = "phosphorylation site"
PROTEIN_PHOSPHORYLATED = "Protein-phosphorylated"

PATH_SEPARATOR = "/"


def accepts(spec: PropertySpec) -> bool:
    """Whether a property is projected as an attribute."""
    if spec.is_object:
        return not (
            is_subclass(spec.range, "Entity")
            or is_subclass(spec.range, "Stoichiometry")
            or spec.name == "nextStep"
        )
    return spec.name != "name"


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _vocabulary_terms(vocabulary: BioPaxElement) -> str:
    return ", ".join(sorted(get_values(vocabulary, "term")))


def chemical_modifications(element: BioPaxElement) -> list[str]:
    """
    Sorted modification terms of a physical entity.

    Terms from `notFeature` are prefixed with "!".
    """
    modifications: set[str] = set()
    for prop, prefix in (("feature", ""), ("notFeature", "!")):
        for feature in get_values(element, prop):
            modification_type = get_value(feature, "modificationType")
            if modification_type is None:
                continue
            terms = _vocabulary_terms(modification_type)
            if terms:
                modifications.add(prefix + terms)
    return sorted(modifications)


class AttributeProjector:
    """
    Writes one element's properties onto a network node.

    Attributes:
        network: Network whose node rows receive the attributes.
    """

    def __init__(self, network: PathwayNetwork):
        self.network = network

    def project(self, element: BioPaxElement, node: int) -> None:
        """Write identity, label and all projected properties of `element` to `node`."""
        self.network.set_node_attribute(node, BIOPAX_URI, element.uri)
        self.network.set_node_attribute(node, BIOPAX_ENTITY_TYPE, element.type_name)

        name = element_name(element)
        if not element.is_a("Interaction"):
            modifications = chemical_modifications(element)
            if modifications:
                name += " -" + ",".join(modifications)
                self.network.set_node_attribute(node, BIOPAX_CHEMICAL_MODIFICATIONS, modifications)
                if PHOSPHORYLATION_SITE in modifications:
                    self.network.set_node_attribute(node, BIOPAX_ENTITY_TYPE, PROTEIN_PHOSPHORYLATED)

            location = get_value(element, "cellularLocation")
            if location is not None:
                terms = _vocabulary_terms(location)
                if terms:
                    name += "; " + terms
        self.network.set_node_attribute(node, BIOPAX_NAME, name)

        self._traverse(element, node, (), (element,))

    def _traverse(
        self,
        element: BioPaxElement,
        node: int,
        path: tuple[str, ...],
        visiting: tuple[BioPaxElement, ...],
    ) -> None:
        for spec, values in element.assigned():
            if not accepts(spec):
                continue
            prop_path = path + (spec.name,)
            attr_name = PATH_SEPARATOR.join(prop_path)
            for value in values:
                text = stringify(value)
                if not text.strip():
                    continue
                if spec.multiple:
                    self._append(node, attr_name, text)
                else:
                    self.network.set_node_attribute(node, attr_name, text)

                if spec.is_object and not spec.multiple:
                    if value in visiting:
                        logger.debug(f"Not re-entering {value.uri} at {attr_name}")
                        continue
                    self._traverse(value, node, prop_path, visiting + (value,))

    def _append(self, node: int, attr_name: str, text: str) -> None:
        existing = self.network.get_node_attribute(node, attr_name)
        if isinstance(existing, list):
            if text not in existing:
                existing.append(text)
        else:
            self.network.set_node_attribute(node, attr_name, [text])
