"""
Raw RDF resources and Level 3 model assembly.

Level 3 documents are loaded with pybiopax and Level 2 documents with
rdflib. Either way the result is first grouped into RawResource records
(one per BioPAX-typed resource) and only then turned into model elements,
so the Level 2 upgrader and the Level 3 builder share one intermediate form.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import RDF

from models.biopax import CLASS_PARENTS, BioPaxModel, properties_of, property_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceRef:
    """Link from one raw resource to another."""

    uri: str


@dataclass
class RawResource:
    """
    One BioPAX-typed RDF resource, before it becomes a model element.

    Attributes:
        uri: Resource URI (blank nodes are written as "_:id").
        type_name: Local class name in the BioPAX namespace.
        properties: Local property name -> values. Values are either str
            (a literal) or ResourceRef (a link to another resource).
    """

    uri: str
    type_name: str
    properties: dict[str, list] = field(default_factory=dict)

    def refs(self, prop: str) -> list[str]:
        return [v.uri for v in self.properties.get(prop, []) if isinstance(v, ResourceRef)]

    def literals(self, prop: str) -> list[str]:
        return [v for v in self.properties.get(prop, []) if isinstance(v, str)]

    def literal(self, prop: str) -> str | None:
        values = self.literals(prop)
        return values[0] if values else None


def _node_id(node) -> str:
    if isinstance(node, BNode):
        return f"_:{node}"
    return str(node)


def _sort_key(value) -> tuple[bool, str]:
    if isinstance(value, ResourceRef):
        return (True, value.uri)
    return (False, value)


def collect_resources(graph: Graph, namespace: str) -> dict[str, RawResource]:
    """
    Group the triples of a parsed document by BioPAX-typed subject.

    Property values are sorted, so the same document always yields the same
    model whatever order rdflib returns triples in.
    """
    resources: dict[str, RawResource] = {}
    for subject, type_uri in graph.subject_objects(RDF.type):
        type_uri = str(type_uri)
        if not type_uri.startswith(namespace):
            continue
        uri = _node_id(subject)
        if uri in resources:
            logger.debug(f"{uri} has several BioPAX types, keeping {resources[uri].type_name}")
            continue
        resources[uri] = RawResource(uri=uri, type_name=type_uri[len(namespace):])

    for uri, resource in resources.items():
        subject = BNode(uri[2:]) if uri.startswith("_:") else URIRef(uri)
        for predicate, obj in graph.predicate_objects(subject):
            predicate = str(predicate)
            if not predicate.startswith(namespace):
                continue
            prop = predicate[len(namespace):]
            value = str(obj) if isinstance(obj, Literal) else ResourceRef(_node_id(obj))
            resource.properties.setdefault(prop, []).append(value)
        for values in resource.properties.values():
            values.sort(key=_sort_key)

    return dict(sorted(resources.items()))


# =============================================================================
# pybiopax objects
# =============================================================================

# pybiopax attribute names where snake-casing the BioPAX name is not enough
PYBIOPAX_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "id": ("id", "xref_id"),
    "eCNumber": ("ec_number", "e_c_number"),
    "kEQ": ("k_eq", "k_e_q"),
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def attribute_names(prop: str) -> tuple[str, ...]:
    """Candidate pybiopax attribute names for a BioPAX property."""
    return PYBIOPAX_ATTRIBUTES.get(prop, (_CAMEL_BOUNDARY.sub("_", prop).lower(),))


def absolute_uri(uid: str, xml_base: str) -> str:
    """Resolve an rdf:ID style identifier against the document base."""
    if not xml_base or ":" in uid:
        return uid
    if xml_base.endswith(("#", "/")):
        return f"{xml_base}{uid}"
    return f"{xml_base}#{uid}"


def _object_value(value: Any, xml_base: str) -> Any:
    if isinstance(value, str):
        return value
    # Resolved pybiopax objects carry uid, unresolved references obj_id
    uid = getattr(value, "uid", None) or getattr(value, "obj_id", None)
    if uid:
        return ResourceRef(absolute_uri(str(uid), xml_base))
    return str(value)


def collect_objects(objects, xml_base: str = "") -> dict[str, RawResource]:
    """
    Group pybiopax objects into raw resources.

    Args:
        objects: pybiopax objects, e.g. the values of a pybiopax model's
            ``objects`` mapping.
        xml_base: Base URI for identifiers that are not absolute.

    Returns:
        URI -> RawResource, sorted by URI, with sorted property values.
    """
    resources: dict[str, RawResource] = {}
    for obj in objects:
        type_name = type(obj).__name__
        uid = getattr(obj, "uid", None)
        if not uid:
            continue
        uri = absolute_uri(str(uid), xml_base)
        resource = RawResource(uri=uri, type_name=type_name)
        for spec in properties_of(type_name):
            raw = None
            for attr in attribute_names(spec.name):
                raw = getattr(obj, attr, None)
                if raw is not None:
                    break
            if raw is None:
                continue
            raw_values = raw if isinstance(raw, (list, tuple, set)) else [raw]
            values = [_object_value(v, xml_base) for v in raw_values if v is not None and v != ""]
            if values:
                resource.properties[spec.name] = sorted(values, key=_sort_key)
        resources[uri] = resource
    return dict(sorted(resources.items()))


def build_model(resources: dict[str, RawResource], xml_base: str = "") -> BioPaxModel:
    """Create Level 3 elements from raw resources and link them together."""
    model = BioPaxModel(xml_base=xml_base, level=3)
    for uri, resource in resources.items():
        if resource.type_name not in CLASS_PARENTS:
            logger.warning(f"Skipping {uri}: unknown BioPAX class {resource.type_name}")
            continue
        model.create(resource.type_name, uri)

    for uri, resource in resources.items():
        element = model.get(uri)
        if element is None:
            continue
        for prop, values in resource.properties.items():
            spec = property_spec(element.type_name, prop)
            if spec is None:
                logger.debug(f"Ignoring property {prop} on {element.type_name} {uri}")
                continue
            if not spec.multiple and len(values) > 1:
                logger.debug(f"{uri}: {prop} is single-valued, keeping the first of {len(values)} values")
                values = values[:1]
            for raw in values:
                try:
                    if spec.is_object:
                        if not isinstance(raw, ResourceRef):
                            raise ValueError(f"literal '{raw}' for object property")
                        value = model.get(raw.uri)
                        if value is None:
                            raise ValueError(f"unresolved reference {raw.uri}")
                    else:
                        if isinstance(raw, ResourceRef):
                            raise ValueError(f"reference {raw.uri} for data property")
                        value = spec.coerce(raw)
                    element.add(prop, value)
                except (TypeError, ValueError) as e:
                    logger.debug(f"Skipping {prop} value of {uri}: {e}")
    return model
