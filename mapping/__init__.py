"""
Default BioPAX to network mapping.

Modules:
    builder: Node, edge and attribute passes (EntityGraphBuilder)
    identity: URI <-> node join table
    attributes: Generic property projection onto node attributes
    xrefs: Cross-reference consolidation and hyperlinks
    links: Hyperlink markup and display names
"""

from mapping.attributes import AttributeProjector, chemical_modifications
from mapping.builder import BuildStats, EntityGraphBuilder
from mapping.identity import IdentityIndex
from mapping.links import (
    DEFAULT_LINK_BASE_URL,
    DEFAULT_SEARCH_URL,
    ExternalLink,
    create_link,
    create_search_link,
    element_name,
)
from mapping.xrefs import (
    CrossReferenceConsolidator,
    get_xrefs,
    organism_taxonomy_id,
    xref_to_external_links,
)

__all__ = [
    # Builder
    "EntityGraphBuilder",
    "BuildStats",
    "IdentityIndex",
    # Attributes
    "AttributeProjector",
    "chemical_modifications",
    # Cross-references
    "CrossReferenceConsolidator",
    "get_xrefs",
    "organism_taxonomy_id",
    "xref_to_external_links",
    # Links
    "DEFAULT_LINK_BASE_URL",
    "DEFAULT_SEARCH_URL",
    "ExternalLink",
    "create_link",
    "create_search_link",
    "element_name",
]
