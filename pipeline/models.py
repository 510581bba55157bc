"""
Pipeline data models for the BioPAX reader.

This module defines the result handed back by BioPaxReaderTask.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from models.biopax import BioPaxModel
from models.network import PathwayNetwork
from pipeline.metrics import ReaderReport
from sif.projector import BinaryRelation


@dataclass
class ReaderResult:
    """
    Output of one reader run.

    Attributes:
        network: The mapped network (None when the run was cancelled before mapping).
        model: The Level 3 model that was read.
        network_name: Name given to the network.
        relations: Binary relations behind the network (SIF mode only).
        report: Timing and counts of the run.
    """

    network: Optional[PathwayNetwork]
    model: Optional[BioPaxModel]
    network_name: str = ""
    relations: list[BinaryRelation] = field(default_factory=list)
    report: Optional[ReaderReport] = None

    @property
    def cancelled(self) -> bool:
        return self.report is not None and self.report.cancelled

    def to_summary(self) -> dict[str, Any]:
        """
        Generate a summary dictionary of the run.

        Returns:
            Dictionary with key metrics.
        """
        return {
            "network_name": self.network_name,
            "elements": len(self.model) if self.model is not None else 0,
            "network": self.network.to_summary() if self.network is not None else None,
            "relations": len(self.relations),
            "cancelled": self.cancelled,
            "duration_s": self.report.total_duration_s if self.report else 0.0,
        }
