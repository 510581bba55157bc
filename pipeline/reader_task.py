"""
BioPAX reader task.

Runs the whole import for one input stream: read (and upgrade) the model,
name the network, then either map it onto the full entity graph (Default
mode) or project it to binary relations and build the network from those
(SIF mode). A cooperative cancel flag is checked between phases.

Example:
    >>> with open("pathway.owl", "rb") as f:
    ...     result = BioPaxReaderTask(f, input_name="pathway.owl").run()
    >>> print(result.report.summary_text())
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from typing import BinaryIO, Optional

from mapping.builder import EntityGraphBuilder
from mapping.links import unescape_markup
from models.biopax import BioPaxModel
from models.errors import EmptyResultError
from models.network import DefaultNetworkFactory, NetworkFactory
from pipeline.config import MapperConfig
from pipeline.metrics import ReaderReport
from pipeline.models import ReaderResult
from reader.owl_reader import model_name, read_model
from sif.network import SifNetworkParser
from sif.projector import BinaryRelationProjector

logger = logging.getLogger(__name__)

BIOPAX_NETWORK = "BIOPAX_NETWORK"
DEFAULT_NETWORK_NAME = "BioPAX_Network"
EMPTY_PATHWAY_MESSAGE = "Pathway is empty. Please check the BioPAX source file."


class ReaderMode(Enum):
    """How a model is turned into a network."""

    DEFAULT = "Default"
    SIF = "SIF"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> ReaderMode:
        for mode in cls:
            if mode.value.lower() == label.strip().lower():
                return mode
        raise ValueError(f"Unsupported reader mode: {label}")


class BioPaxReaderTask:
    """
    Imports one BioPAX document as a network.

    Attributes:
        stream: Binary stream with the RDF/XML document.
        input_name: Name of the input (e.g. a file name), preferred as network name.
        config: Reader configuration.
        factory: Creates the output network.
        mode: Mapping mode taken from the configuration.
    """

    def __init__(
        self,
        stream: BinaryIO,
        input_name: Optional[str] = None,
        config: Optional[MapperConfig] = None,
        factory: Optional[NetworkFactory] = None,
    ):
        self.stream = stream
        self.input_name = input_name
        self.config = config or MapperConfig()
        self.factory = factory or DefaultNetworkFactory()
        self.mode = ReaderMode.from_label(self.config.reader_mode)
        self._cancelled = False

    def cancel(self) -> None:
        """Ask the task to stop at the next phase boundary."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def network_name(self, model: BioPaxModel) -> str:
        """
        Name for the new network.

        The input name wins when given; otherwise the model's name (cut to
        max_name_length) is used, then a fixed default. The mode label is
        appended in parentheses.
        """
        name = model_name(model)
        has_input_name = bool(self.input_name and self.input_name.strip())
        if not name.strip():
            name = self.input_name if has_input_name else DEFAULT_NETWORK_NAME
        else:
            name = self.input_name if has_input_name else name[: self.config.max_name_length]
        return f"{unescape_markup(name)} ({self.mode.value})"

    def _stop(self, report: ReaderReport) -> bool:
        if self._cancelled:
            report.cancelled = True
            logger.info("BioPAX reader cancelled")
        return self._cancelled

    def run(self) -> ReaderResult:
        """
        Run the import.

        Returns:
            ReaderResult with the network (None if cancelled before mapping).

        Raises:
            BioPaxParseError: If the input cannot be parsed.
            EmptyResultError: If Default mode produces no nodes.
        """
        report = ReaderReport.create(mode=self.mode.value)
        if self._stop(report):
            report.finalize()
            return ReaderResult(network=None, model=None, report=report)

        phase = report.start_phase("read")
        model = read_model(self.stream)
        report.elements_read = len(model)
        phase.increment_items_processed(len(model))
        report.end_phase("read")

        name = self.network_name(model)
        logger.info(f"Model {name} contains {len(model)} BioPAX elements")

        if self._stop(report):
            report.finalize()
            return ReaderResult(network=None, model=model, network_name=name, report=report)

        if self.mode is ReaderMode.DEFAULT:
            result = self._run_default(model, name, report)
        else:
            result = self._run_sif(model, name, report)

        if result.network is not None:
            report.nodes_created = result.network.node_count()
            report.edges_created = result.network.edge_count()
        report.finalize()
        return result

    def _run_default(self, model: BioPaxModel, name: str, report: ReaderReport) -> ReaderResult:
        builder = EntityGraphBuilder(
            model,
            self.factory,
            link_base_url=self.config.link_base_url,
            search_url=self.config.search_url,
        )
        network = builder.start(name)
        result = ReaderResult(network=network, model=model, network_name=name, report=report)

        phase = report.start_phase("nodes")
        phase.increment_items_processed(builder.create_nodes())
        report.end_phase("nodes")
        if network.node_count() == 0:
            raise EmptyResultError(EMPTY_PATHWAY_MESSAGE)
        if self._stop(report):
            return result

        phase = report.start_phase("edges")
        phase.increment_items_processed(builder.create_edges())
        report.end_phase("edges")
        if self._stop(report):
            return result

        phase = report.start_phase("attributes")
        builder.create_attributes()
        phase.increment_items_processed(network.node_count())
        report.end_phase("attributes")

        network.set_network_attribute(BIOPAX_NETWORK, "DEFAULT")
        return result

    def _run_sif(self, model: BioPaxModel, name: str, report: ReaderReport) -> ReaderResult:
        phase = report.start_phase("sif")
        projector = BinaryRelationProjector()
        relations = projector.project(model, self.config.selected_sif_types())
        buffer = io.BytesIO()
        projector.write(relations, buffer)
        report.relations_inferred = len(relations)

        network = self.factory.create_network(name)
        parser = SifNetworkParser(network)
        phase.increment_items_processed(parser.parse_lines(buffer.getvalue().decode("utf-8").splitlines()))
        report.end_phase("sif")
        if not relations:
            logger.warning(f"No binary relations inferred from {name}")

        result = ReaderResult(
            network=network, model=model, network_name=name, relations=relations, report=report
        )
        if self._stop(report):
            return result

        phase = report.start_phase("attributes")
        network.set_network_attribute("quickfind.default_index", "name")
        phase.increment_items_processed(
            parser.annotate(model, self.config.link_base_url, self.config.search_url)
        )
        report.end_phase("attributes")

        network.set_network_attribute(BIOPAX_NETWORK, "SIF")
        network.set_network_attribute("name", name)
        return result
