"""
BioPAX RDF/XML reader.

Loads a Level 3 OWL document with pybiopax (Level 2 documents with
rdflib), collects every BioPAX resource and builds a BioPaxModel from it.
Level 2 documents are upgraded to Level 3 before the model is returned,
so downstream mapping only ever sees Level 3 classes and properties.

Example:
    >>> with open("pathway.owl", "rb") as f:
    ...     model = read_model(f)
    >>> print(model_name(model))
"""

from __future__ import annotations

import logging
import re
from typing import BinaryIO, Optional

import pybiopax
from rdflib import Graph

from mapping.links import element_name
from models.biopax import BIOPAX_L2_NS, BIOPAX_L3_NS, BioPaxElement, BioPaxModel
from models.errors import BioPaxParseError
from reader.level_upgrade import LevelUpgrader
from reader.resources import build_model, collect_objects, collect_resources

logger = logging.getLogger(__name__)

_XML_BASE = re.compile(rb'xml:base\s*=\s*["\']([^"\']+)["\']')


def read_model(stream: BinaryIO, base: Optional[str] = None) -> BioPaxModel:
    """
    Read a BioPAX model from an RDF/XML byte stream.

    Level 3 documents are loaded with pybiopax. Level 2 documents, and
    Level 3 documents pybiopax cannot load, are parsed with rdflib. Missing
    display names are filled in before the model is returned.

    Args:
        stream: Binary stream with the OWL document.
        base: Optional base URI used to resolve relative URIs.

    Returns:
        The model, upgraded to Level 3 if the document was Level 2.

    Raises:
        BioPaxParseError: If the stream is not RDF/XML or holds no BioPAX data.
    """
    content = stream.read()
    match = _XML_BASE.search(content)
    xml_base = match.group(1).decode("utf-8", "replace") if match else (base or "")

    model = None
    if BIOPAX_L3_NS.encode("ascii") in content:
        model = _read_level3(content, xml_base)
    if model is None:
        model = _read_rdf(content, xml_base, base)

    fix_display_names(model)
    logger.info(f"Read BioPAX model with {len(model)} elements")
    return model


def _read_level3(content: bytes, xml_base: str) -> Optional[BioPaxModel]:
    try:
        bp_model = pybiopax.model_from_owl_str(content.decode("utf-8"))
    except Exception as e:
        logger.warning(f"pybiopax could not load the document, parsing it as RDF: {e}")
        return None

    xml_base = xml_base or getattr(bp_model, "xml_base", None) or ""
    resources = collect_objects(bp_model.objects.values(), xml_base)
    if not resources:
        return None
    logger.debug(f"Loaded {len(resources)} Level 3 objects with pybiopax")
    return build_model(resources, xml_base)


def _read_rdf(content: bytes, xml_base: str, base: Optional[str]) -> BioPaxModel:
    graph = Graph()
    try:
        graph.parse(data=content, format="xml", publicID=base or xml_base or None)
    except Exception as e:
        raise BioPaxParseError(f"Cannot parse BioPAX data: {e}") from e

    resources = collect_resources(graph, BIOPAX_L3_NS)
    if resources:
        return build_model(resources, xml_base)

    resources = collect_resources(graph, BIOPAX_L2_NS)
    if not resources:
        raise BioPaxParseError("Cannot parse BioPAX data: did not find any BioPAX data")
    logger.info(f"Upgrading BioPAX Level 2 model ({len(resources)} resources) to Level 3")
    return LevelUpgrader(resources, xml_base).upgrade()


# =============================================================================
# Post-processing
# =============================================================================


def fix_display_names(model: BioPaxModel) -> None:
    """
    Fill in missing display names.

    A named element without displayName gets its standardName, else its
    shortest name. A simple physical entity still lacking one then inherits
    the display name of its entity reference. Existing values are kept.
    """
    fixed = 0
    for element in model.objects():
        if not element.is_named() or element.get("displayName"):
            continue
        display_name = element.get("standardName")
        if not display_name:
            names = element.values("name")
            if names:
                display_name = min(names, key=lambda n: (len(n), n))
        if display_name:
            element.set("displayName", display_name)
            fixed += 1

    for entity in model.objects("SimplePhysicalEntity"):
        if entity.get("displayName"):
            continue
        reference = entity.get("entityReference")
        if reference is not None and reference.get("displayName"):
            entity.set("displayName", reference.get("displayName"))
            fixed += 1

    logger.debug(f"Fixed {fixed} display names")


def root_elements(model: BioPaxModel, type_name: str) -> list[BioPaxElement]:
    """Elements of the given class that no other element refers to."""
    return [el for el in model.objects(type_name) if not model.references_to(el)]


def model_name(model: BioPaxModel) -> str:
    """
    Name a model after its root pathways.

    Falls back to root interactions, then to the document's base URI.
    """
    names = [element_name(pw) for pw in root_elements(model, "Pathway")]
    if not names:
        names = [element_name(it) for it in root_elements(model, "Interaction")]
    if not names:
        names = [model.xml_base]
    return " ".join(names).strip()
