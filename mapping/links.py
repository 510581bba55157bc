"""
Naming and hyperlink helpers shared by the mappers.

create_link() turns a (db, id) pair into a compact resolver hyperlink and
create_search_link() builds the "search this molecule" link from names and
cross-references. Both are plain string builders; the base URLs come from
MapperConfig so deployments can point them elsewhere.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

DEFAULT_LINK_BASE_URL = "https://identifiers.org/"
DEFAULT_SEARCH_URL = "http://www.ihop-net.org/UniPub/iHOP/in"

# Upper-cased BioPAX db names -> resolver prefixes
DB_PREFIXES: dict[str, str] = {
    "UNIPROT": "uniprot",
    "UNIPROT KNOWLEDGEBASE": "uniprot",
    "UNIPROTKB": "uniprot",
    "SWISSPROT": "uniprot",
    "SWISS-PROT": "uniprot",
    "UNIPROT ISOFORM": "uniprot.isoform",
    "NCBI GENE": "ncbigene",
    "ENTREZ GENE": "ncbigene",
    "GENE ID": "ncbigene",
    "HGNC": "hgnc",
    "HGNC SYMBOL": "hgnc.symbol",
    "CHEBI": "chebi",
    "PUBMED": "pubmed",
    "REACTOME": "reactome",
    "KEGG COMPOUND": "kegg.compound",
    "ENSEMBL": "ensembl",
    "REFSEQ": "refseq",
    "GENE ONTOLOGY": "go",
    "GO": "go",
    "PUBCHEM-COMPOUND": "pubchem.compound",
    "PUBCHEM COMPOUND": "pubchem.compound",
    "TAXONOMY": "taxonomy",
    "NCBI TAXONOMY": "taxonomy",
    "INTACT": "intact",
    "PANTHER": "panther.family",
}

# Databases whose ids are understood by the external search service
SEARCHABLE_DBS = ("UNIPROT", "SWISSPROT", "SWISS-PROT", "REFSEQ", "NCBI GENE", "ENTREZ GENE", "GENE ID", "HGNC SYMBOL")


@dataclass
class ExternalLink:
    """A cross-reference flattened to plain values."""

    db: str
    id: str
    rel_type: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None
    authors: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)


def unescape_markup(text: str) -> str:
    """Convert HTML entities (e.g. "&alpha;") to plain characters."""
    return html.unescape(text)


def element_name(element) -> str:
    """Display name of an element, unescaped, or its URI when it has none."""
    name = None
    if element.is_named():
        name = element.get("displayName")
    return unescape_markup(name) if name else element.uri


def db_prefix(db: str) -> str:
    key = db.strip().upper()
    return DB_PREFIXES.get(key, key.lower().replace(" ", ""))


def create_link(db: str, xref_id: str, base_url: str = DEFAULT_LINK_BASE_URL) -> str:
    """
    Build a compact hyperlink to an external record.

    Examples:
        >>> create_link("NCBI Gene", "7157")
        '<a href="https://identifiers.org/ncbigene/7157">NCBI Gene:7157</a>'
    """
    href = f"{base_url.rstrip('/')}/{db_prefix(db)}/{xref_id.strip()}"
    return f'<a href="{html.escape(href)}">{html.escape(db)}:{html.escape(xref_id)}</a>'


def create_search_link(
    type_name: str,
    synonyms: list[str],
    links: list[ExternalLink],
    taxonomy_id: int,
    search_url: str = DEFAULT_SEARCH_URL,
) -> Optional[str]:
    """
    Build the external literature search link for a molecule.

    Args:
        type_name: BioPAX class of the element (used as the search hint).
        synonyms: Names of the element.
        links: Cross-references of the element.
        taxonomy_id: NCBI taxonomy id, or -1 when unknown.
        search_url: Search endpoint.

    Returns:
        An HTML anchor, or None when there is nothing to search for.
    """
    db_refs = []
    for link in links:
        db = link.db.strip().upper()
        if db in SEARCHABLE_DBS:
            ref = f"{db.replace(' ', '_')}__{link.id.strip()}"
            if ref not in db_refs:
                db_refs.append(ref)
    names = sorted(set(s.strip() for s in synonyms if s and s.strip()))
    if not db_refs and not names:
        return None

    params = {"type": type_name}
    if db_refs:
        params["dbrefs_1"] = "|".join(db_refs)
    if names:
        params["syns_1"] = "|".join(names)
    if taxonomy_id > 0:
        params["spec_1"] = str(taxonomy_id)
    href = f"{search_url}?{urlencode(params)}"
    return f'<a href="{html.escape(href)}">Search iHOP</a>'
