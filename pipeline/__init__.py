"""
Reader pipeline for BioPAX documents.

This package provides configuration management, metrics tracking and the
reader task that turns a BioPAX document into a network.

Modules:
    config: Reader configuration with MapperConfig dataclass
    metrics: Phase metrics and the run report
    models: ReaderResult returned by a run
    reader_task: BioPaxReaderTask (Default and SIF modes)

Example:
    >>> from pipeline import BioPaxReaderTask, MapperConfig
    >>>
    >>> config = MapperConfig(reader_mode="SIF")
    >>> with open("pathway.owl", "rb") as f:
    ...     result = BioPaxReaderTask(f, input_name="pathway", config=config).run()
    >>> print(result.network.to_summary())
"""

from pipeline.config import MapperConfig
from pipeline.metrics import PhaseMetrics, ReaderReport
from pipeline.models import ReaderResult
from pipeline.reader_task import BioPaxReaderTask, ReaderMode

__all__ = [
    # Configuration
    "MapperConfig",
    # Metrics
    "PhaseMetrics",
    "ReaderReport",
    # Reader
    "ReaderResult",
    "ReaderMode",
    "BioPaxReaderTask",
]
