"""
Cross-reference consolidation.

Collapses an element's xrefs (plus those of its entity reference and,
for generic references, of the member references one level down) into:

- promoted single-value attributes: GENE SYMBOL, NCBI GENE, UNIPROT
- visible list attributes per xref subtype: UNIFICATION, RELATIONSHIP,
  PUBLICATION
- hidden hyperlink lists per subtype and a hidden external search link

Promotion is first-writer-wins over a fixed order: the element's own
xrefs, then its entity reference's, each group sorted by (db, id).
"""

from __future__ import annotations

import logging
from typing import Optional

from mapping.links import (
    DEFAULT_LINK_BASE_URL,
    DEFAULT_SEARCH_URL,
    ExternalLink,
    create_link,
    create_search_link,
)
from models.biopax import BioPaxElement, get_value, get_values
from models.errors import MalformedCrossReference
from models.network import PathwayNetwork

logger = logging.getLogger(__name__)

GENE_SYMBOL = "GENE SYMBOL"
NCBI_GENE = "NCBI GENE"
UNIPROT = "UNIPROT"

BIOPAX_UNIFICATION = "UNIFICATION"
BIOPAX_RELATIONSHIP = "RELATIONSHIP"
BIOPAX_PUBLICATION = "PUBLICATION"
BIOPAX_UNIFICATION_REFERENCES = "UNIFICATION_REFERENCES"
BIOPAX_RELATIONSHIP_REFERENCES = "RELATIONSHIP_REFERENCES"
BIOPAX_PUBLICATION_REFERENCES = "PUBLICATION_REFERENCES"
BIOPAX_IHOP_LINKS = "IHOP_LINKS"

UNIPROT_URI_PREFIXES = ("http://identifiers.org/uniprot", "https://identifiers.org/uniprot")

UNKNOWN_TAXONOMY = -1


def _xref_sort_key(xref: BioPaxElement) -> tuple[str, str, str]:
    return (
        str(xref.get("db") or "").lower(),
        str(xref.get("id") or ""),
        xref.uri,
    )


def _sorted_xrefs(element: BioPaxElement) -> list[BioPaxElement]:
    return sorted(get_values(element, "xref"), key=_xref_sort_key)


def get_xrefs(element: BioPaxElement, xref_type: str = "Xref", with_members: bool = False) -> list[BioPaxElement]:
    """
    Xrefs of an element and of its entity reference.

    With `with_members`, xrefs of the reference's member references are
    included too (one level only). Each source contributes its xrefs sorted
    by (db, id); duplicates are dropped.
    """
    if not element.is_xreferrable():
        return []

    groups = [_sorted_xrefs(element)]
    reference: Optional[BioPaxElement] = None
    if element.is_a("SimplePhysicalEntity"):
        reference = element.get("entityReference")
    elif element.is_a("EntityReference"):
        reference = element
    if reference is not None:
        if reference is not element:
            groups.append(_sorted_xrefs(reference))
        if with_members:
            for member in reference.values("memberEntityReference"):
                groups.append(_sorted_xrefs(member))

    xrefs: list[BioPaxElement] = []
    for group in groups:
        for xref in group:
            if xref.is_a(xref_type) and xref not in xrefs:
                xrefs.append(xref)
    return xrefs


def checked_db_id(xref: BioPaxElement) -> tuple[str, str]:
    """
    Database name and id of an xref.

    Raises:
        MalformedCrossReference: If either is missing or blank.
    """
    db = xref.get("db")
    xref_id = xref.get("id")
    if not db or not db.strip() or not xref_id or not xref_id.strip():
        raise MalformedCrossReference(xref.uri, db, xref_id)
    return db, xref_id


def xref_to_external_links(element: BioPaxElement, xref_type: str = "Xref") -> list[ExternalLink]:
    links = []
    for xref in get_xrefs(element, xref_type):
        try:
            db, xref_id = checked_db_id(xref)
        except MalformedCrossReference as e:
            logger.debug(f"Skipping xref: {e}")
            continue
        link = ExternalLink(db=db, id=xref_id)
        if xref.is_a("RelationshipXref"):
            vocabulary = xref.get("relationshipType")
            if vocabulary is not None:
                link.rel_type = ", ".join(sorted(vocabulary.values("term")))
        if xref.is_a("PublicationXref"):
            link.title = xref.get("title")
            link.year = xref.get("year")
            link.authors = xref.values("author")
            link.sources = xref.values("source")
            link.urls = xref.values("url")
        links.append(link)
    return links


def organism_taxonomy_id(element: BioPaxElement) -> int:
    """NCBI taxonomy id of the element's organism, or -1."""
    organism = get_value(element, "organism")
    if organism is None and element.is_a("SimplePhysicalEntity"):
        reference = element.get("entityReference")
        if reference is not None:
            organism = get_value(reference, "organism")
    if organism is None or not organism.is_a("BioSource"):
        return UNKNOWN_TAXONOMY
    xrefs = _sorted_xrefs(organism)
    if not xrefs:
        return UNKNOWN_TAXONOMY
    try:
        return int(str(xrefs[0].get("id")).strip())
    except ValueError:
        return UNKNOWN_TAXONOMY


def publication_text(xref: BioPaxElement) -> str:
    """Human-readable citation: "db:id authors et al., title (source, year)"."""
    text = str(xref)
    authors = xref.values("author")
    title = xref.get("title")
    sources = xref.values("source")
    year = xref.get("year")
    details = ""
    if authors:
        details += ", ".join(authors) + " et al., "
    if title:
        details += title
    if sources:
        details += " (" + ", ".join(sources)
        if year and year > 0:
            details += f", {year}"
        details += ")"
    return f"{text} {details}".rstrip() if details else text


class CrossReferenceConsolidator:
    """
    Writes xref-derived attributes onto a network node.

    Attributes:
        network: Network whose node rows receive the attributes.
        link_base_url: Resolver used for the hidden hyperlink lists.
        search_url: Endpoint of the external search link.
    """

    def __init__(
        self,
        network: PathwayNetwork,
        link_base_url: str = DEFAULT_LINK_BASE_URL,
        search_url: str = DEFAULT_SEARCH_URL,
    ):
        self.network = network
        self.link_base_url = link_base_url
        self.search_url = search_url

    def consolidate(self, element: BioPaxElement, node: int) -> None:
        if element.is_a("PhysicalEntity") or element.is_a("EntityReference"):
            self._uniprot_from_uri(element, node)

        for xref in get_xrefs(element):
            try:
                db, xref_id = checked_db_id(xref)
            except MalformedCrossReference as e:
                logger.debug(f"Skipping xref of {element.uri}: {e}")
                continue
            self._promote(node, db, xref_id)

        search_link = create_search_link(
            element.type_name,
            get_values(element, "name"),
            xref_to_external_links(element),
            organism_taxonomy_id(element),
            self.search_url,
        )
        if search_link is not None:
            self.network.set_node_attribute(node, BIOPAX_IHOP_LINKS, search_link, hidden=True)

        lists: dict[str, tuple[list[str], list[str]]] = {
            "UnificationXref": ([], []),
            "RelationshipXref": ([], []),
            "PublicationXref": ([], []),
        }
        for xref in get_xrefs(element, with_members=True):
            try:
                db, xref_id = checked_db_id(xref)
            except MalformedCrossReference as e:
                logger.debug(f"Skipping xref of {element.uri}: {e}")
                continue
            for type_name, (entries, links) in lists.items():
                if not xref.is_a(type_name):
                    continue
                entry = publication_text(xref) if type_name == "PublicationXref" else str(xref)
                if entry not in entries:
                    entries.append(entry)
                link = create_link(db, xref_id, self.link_base_url)
                if link not in links:
                    links.append(link)

        for type_name, visible, hidden in (
            ("UnificationXref", BIOPAX_UNIFICATION, BIOPAX_UNIFICATION_REFERENCES),
            ("RelationshipXref", BIOPAX_RELATIONSHIP, BIOPAX_RELATIONSHIP_REFERENCES),
            ("PublicationXref", BIOPAX_PUBLICATION, BIOPAX_PUBLICATION_REFERENCES),
        ):
            entries, links = lists[type_name]
            self.network.set_node_attribute(node, visible, entries)
            self.network.set_node_attribute(node, hidden, links, hidden=True)

    def _uniprot_from_uri(self, element: BioPaxElement, node: int) -> None:
        uri = element.uri
        if element.is_a("SimplePhysicalEntity"):
            reference = element.get("entityReference")
            if reference is not None:
                uri = reference.uri
        if uri.startswith(UNIPROT_URI_PREFIXES):
            self._set_once(node, UNIPROT, uri[uri.rfind("/") + 1:])

    def _promote(self, node: int, db: str, xref_id: str) -> None:
        db = db.strip().upper()
        xref_id = xref_id.strip()
        if db == "HGNC SYMBOL" or db.startswith(("HGNC", "HUGO GENE", "GENE SYMBOL", "GENE NAME")):
            # bare HGNC accessions are not symbols
            if not xref_id.startswith("HGNC:") and not xref_id.isdigit():
                self._set_once(node, GENE_SYMBOL, xref_id)
        elif db in ("NCBI GENE", "ENTREZ GENE", "GENE ID"):
            self._set_once(node, NCBI_GENE, xref_id)
        elif db.startswith(("UNIPROT", "SWISSPROT", "SWISS-PROT")):
            self._set_once(node, UNIPROT, xref_id)

    def _set_once(self, node: int, attr_name: str, value: str) -> None:
        if self.network.get_node_attribute(node, attr_name) is None:
            self.network.set_node_attribute(node, attr_name, value)
