"""
Binary relation (SIF) projection of BioPAX models.

Modules:
    rules: Relation types and their inference rules
    normalizer: Model clean-up run before inference
    projector: Relation inference, deduplication and serialization
    network: Network construction from SIF lines
"""

from sif.network import SifNetworkParser
from sif.normalizer import normalize
from sif.projector import BinaryRelation, BinaryRelationProjector
from sif.rules import RULES, SifType

__all__ = [
    "SifType",
    "RULES",
    "normalize",
    "BinaryRelation",
    "BinaryRelationProjector",
    "SifNetworkParser",
]
