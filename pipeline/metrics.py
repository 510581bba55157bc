"""
Metrics tracking and reporting for the BioPAX reader pipeline.

This module provides:
- Phase-level timing and item counters (read, nodes, edges, attributes, sif)
- A run-wide report with result counts and a printable summary
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


# =============================================================================
# Phase Metrics
# =============================================================================


@dataclass
class PhaseMetrics:
    """
    Timing and counts for one reader phase.

    Phases are "read" (elements loaded), "nodes" and "edges" (network items
    created), "attributes" (nodes annotated) and "sif" (relations inferred).

    Attributes:
        phase_name: One of the phase names above.
        start_time: Unix timestamp of the phase start.
        end_time: Unix timestamp of the phase end, None while it runs.
        items_processed: Elements, nodes, edges or relations handled.
        errors: Problems recorded without aborting the phase.
    """

    phase_name: str
    start_time: float
    end_time: float | None = None
    items_processed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def duration_s(self) -> float:
        """Seconds between start and end; 0 while the phase runs."""
        if self.end_time is None:
            return 0.0
        return self.end_time - self.start_time

    def add_error(self, error: str) -> None:
        """Record a recoverable problem, e.g. a skipped element."""
        self.errors.append(error)

    def increment_items_processed(self, count: int = 1) -> None:
        self.items_processed += count

    def complete(self) -> None:
        self.end_time = time.time()

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase_name": self.phase_name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration_s": self.duration_s,
            "items_processed": self.items_processed,
            "errors": self.errors,
        }


# =============================================================================
# Reader Report
# =============================================================================


@dataclass
class ReaderReport:
    """
    Report for one BioPAX reader run.

    A Default run records the read, nodes, edges and attributes phases; a SIF
    run records read, sif and attributes. A cancelled run keeps the phases
    finished before the cancel.

    Attributes:
        started_at: Start of the run.
        completed_at: End of the run, None until finalize() is called.
        total_duration_s: Seconds from start to finalize().
        phase_metrics: Phase name -> PhaseMetrics, in the order run.
        mode: Mapping mode of the run ("Default" or "SIF").
        elements_read: Number of BioPAX elements in the model.
        nodes_created: Number of network nodes.
        edges_created: Number of network edges.
        relations_inferred: Number of binary relations (SIF mode).
        cancelled: Whether the run stopped early on request.
    """

    started_at: datetime
    completed_at: datetime | None = None
    total_duration_s: float = 0.0
    phase_metrics: dict[str, PhaseMetrics] = field(default_factory=dict)

    mode: str = ""
    elements_read: int = 0
    nodes_created: int = 0
    edges_created: int = 0
    relations_inferred: int = 0
    cancelled: bool = False

    @classmethod
    def create(cls, mode: str = "") -> ReaderReport:
        """Start a report for a run in the given mapping mode."""
        return cls(started_at=datetime.now(), mode=mode)

    def start_phase(self, phase_name: str) -> PhaseMetrics:
        """Open timing for a phase; a rerun of the same phase replaces it."""
        metrics = PhaseMetrics(
            phase_name=phase_name,
            start_time=time.time(),
        )
        self.phase_metrics[phase_name] = metrics
        return metrics

    def end_phase(self, phase_name: str) -> None:
        if phase_name in self.phase_metrics:
            self.phase_metrics[phase_name].complete()

    def get_phase(self, phase_name: str) -> PhaseMetrics | None:
        return self.phase_metrics.get(phase_name)

    @property
    def total_errors(self) -> list[str]:
        """Errors of every phase, prefixed with the phase name."""
        errors = []
        for phase in self.phase_metrics.values():
            for error in phase.errors:
                errors.append(f"[{phase.phase_name}] {error}")
        return errors

    def finalize(self) -> None:
        """Stamp the end of the run, including cancelled runs."""
        self.completed_at = datetime.now()
        self.total_duration_s = (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Timing, per-phase metrics, mapping counts and errors as plain data."""
        return {
            "timing": {
                "started_at": self.started_at.isoformat(),
                "completed_at": (
                    self.completed_at.isoformat() if self.completed_at else None
                ),
                "total_duration_s": self.total_duration_s,
            },
            "phases": {
                name: metrics.to_dict()
                for name, metrics in self.phase_metrics.items()
            },
            "results": {
                "mode": self.mode,
                "elements_read": self.elements_read,
                "nodes_created": self.nodes_created,
                "edges_created": self.edges_created,
                "relations_inferred": self.relations_inferred,
                "cancelled": self.cancelled,
            },
            "errors": self.total_errors,
        }

    def summary_text(self) -> str:
        """
        Printable run summary: timing, mode and network counts, then one
        line per phase (read, nodes, edges, attributes or sif).
        """
        lines = [
            "=" * 60,
            "BIOPAX READER REPORT",
            "=" * 60,
            "",
            "TIMING",
            "-" * 40,
            f"  Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
        ]

        if self.completed_at:
            lines.append(
                f"  Completed: {self.completed_at.strftime('%Y-%m-%d %H:%M:%S')}"
            )
            lines.append(f"  Duration: {self.total_duration_s:.2f}s")
        else:
            lines.append("  Status: In Progress")

        lines.extend(
            [
                "",
                "RESULTS",
                "-" * 40,
                f"  Mode: {self.mode}",
                f"  Elements Read: {self.elements_read}",
                f"  Nodes Created: {self.nodes_created}",
                f"  Edges Created: {self.edges_created}",
            ]
        )
        if self.relations_inferred:
            lines.append(f"  Relations Inferred: {self.relations_inferred}")
        if self.cancelled:
            lines.append("  Status: Cancelled")

        if self.phase_metrics:
            lines.extend(["", "PHASES", "-" * 40])
            for name, metrics in self.phase_metrics.items():
                lines.append(
                    f"  {name}: {metrics.duration_s:.2f}s, {metrics.items_processed} items"
                )

        errors = self.total_errors
        if errors:
            lines.extend(["", f"ERRORS ({len(errors)})", "-" * 40])
            for error in errors[:10]:
                lines.append(f"  {error}")

        lines.append("=" * 60)
        return "\n".join(lines)
