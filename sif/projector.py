"""
Binary relation (SIF) projection.

BinaryRelationProjector normalizes a model in place, runs the selected
inference rules, deduplicates the resulting relations (merging their
provenance) and returns them in a total order. write() serializes them as
tab-separated lines:

    A <tab> type <tab> B <tab> data sources <tab> PubMed ids <tab> pathways

with multi-valued columns joined by ";". An empty relation set writes
nothing.

Example:
    >>> projector = BinaryRelationProjector()
    >>> relations = projector.project(model, [SifType.IN_COMPLEX_WITH])
    >>> with open("out.sif", "wb") as f:
    ...     projector.write(relations, f)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, Optional

from mapping.links import element_name
from models.biopax import BioPaxElement, BioPaxModel, get_values
from models.errors import SerializationError
from sif.normalizer import normalize
from sif.rules import RULES, SifType

logger = logging.getLogger(__name__)

PUBMED_DB = "pubmed"


@dataclass
class BinaryRelation:
    """
    One inferred pairwise relation with its provenance.

    Attributes:
        source: Entity reference URI of participant A.
        sif_type: Relation type.
        target: Entity reference URI of participant B.
        mediators: URIs of the supporting interactions/complexes.
        data_sources: Names of the data sources of the mediators.
        publications: PubMed ids cited by the mediators.
        pathways: Names of pathways containing a mediator.
    """

    source: str
    sif_type: SifType
    target: str
    mediators: set[str] = field(default_factory=set)
    data_sources: set[str] = field(default_factory=set)
    publications: set[str] = field(default_factory=set)
    pathways: set[str] = field(default_factory=set)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.sif_type.tag, self.target)

    def merge(self, other: BinaryRelation) -> None:
        self.mediators |= other.mediators
        self.data_sources |= other.data_sources
        self.publications |= other.publications
        self.pathways |= other.pathways

    def to_line(self) -> str:
        return "\t".join([
            self.source,
            self.sif_type.tag,
            self.target,
            ";".join(sorted(self.data_sources)),
            ";".join(sorted(self.publications)),
            ";".join(sorted(self.pathways)),
        ])


class BinaryRelationProjector:
    """Derives and serializes binary relations from a BioPAX model."""

    def project(self, model: BioPaxModel, types: Optional[Iterable[SifType]] = None) -> list[BinaryRelation]:
        """
        Normalize `model` in place and infer relations of the given types.

        Args:
            model: Model to project; it is modified by normalization.
            types: Relation types to infer (all types when None).

        Returns:
            Deduplicated relations sorted by (A, type, B).
        """
        normalize(model)

        selected = list(SifType) if types is None else list(dict.fromkeys(types))
        relations: dict[tuple[str, str, str], BinaryRelation] = {}
        for sif_type in selected:
            found = 0
            for source, target, mediators in RULES[sif_type](model):
                relation = self._relation(model, sif_type, source, target, mediators)
                if relation is None:
                    continue
                found += 1
                existing = relations.get(relation.key)
                if existing is None:
                    relations[relation.key] = relation
                else:
                    existing.merge(relation)
            logger.debug(f"{sif_type.tag}: {found} matches")

        result = sorted(relations.values(), key=lambda r: r.key)
        logger.info(f"Inferred {len(result)} binary relations of {len(selected)} types")
        return result

    def _relation(
        self,
        model: BioPaxModel,
        sif_type: SifType,
        source: str,
        target: str,
        mediators: list[BioPaxElement],
    ) -> Optional[BinaryRelation]:
        if source == target:
            return None
        if not sif_type.directed and target < source:
            source, target = target, source

        relation = BinaryRelation(source=source, sif_type=sif_type, target=target)
        for mediator in mediators:
            relation.mediators.add(mediator.uri)
            for provenance in get_values(mediator, "dataSource"):
                relation.data_sources.add(element_name(provenance))
            for xref in get_values(mediator, "xref"):
                if xref.is_a("PublicationXref") and str(xref.get("db") or "").strip().lower() == PUBMED_DB:
                    if xref.get("id"):
                        relation.publications.add(str(xref.get("id")).strip())
            for pathway in model.pathway_component_of(mediator):
                relation.pathways.add(element_name(pathway))
        return relation

    def write(self, relations: list[BinaryRelation], stream: BinaryIO) -> int:
        """
        Write relations as UTF-8 tab-separated lines.

        Returns:
            Number of lines written.

        Raises:
            SerializationError: If the stream cannot be written.
        """
        if not relations:
            return 0
        try:
            for relation in relations:
                stream.write((relation.to_line() + "\n").encode("utf-8"))
            stream.flush()
        except (OSError, ValueError) as e:
            raise SerializationError(f"Cannot write binary relations: {e}") from e
        return len(relations)

    def convert(self, model: BioPaxModel, types: Optional[Iterable[SifType]], stream: BinaryIO) -> int:
        """project() followed by write()."""
        return self.write(self.project(model, types), stream)
