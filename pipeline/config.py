"""
Reader configuration for the BioPAX mapping pipeline.

This module provides configuration management for the reader task:
mapping mode, binary relation types, hyperlink endpoints and the output
format used by the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from mapping.links import DEFAULT_LINK_BASE_URL, DEFAULT_SEARCH_URL
from sif.rules import SifType

READER_MODES = ("Default", "SIF")
NETWORK_FORMATS = ("graphml", "json")


def _all_sif_tags() -> tuple[str, ...]:
    return tuple(sif_type.tag for sif_type in SifType)


@dataclass
class MapperConfig:
    """
    Configuration settings for the BioPAX reader task.

    Attributes:
        reader_mode: "Default" (full entity graph) or "SIF" (binary relations).
        sif_types: Tags of the binary relation types to infer in SIF mode.
        link_base_url: Resolver used to build cross-reference hyperlinks.
        search_url: Endpoint of the external molecule search link.
        network_format: Output format written by the CLI ("graphml" or "json").
        max_name_length: Longest network name taken from the model.
    """

    reader_mode: str = "Default"
    sif_types: tuple[str, ...] = field(default_factory=_all_sif_tags)
    link_base_url: str = DEFAULT_LINK_BASE_URL
    search_url: str = DEFAULT_SEARCH_URL
    network_format: str = "graphml"
    max_name_length: int = 100

    def __post_init__(self) -> None:
        mode = {m.lower(): m for m in READER_MODES}.get(self.reader_mode.strip().lower())
        if mode is None:
            raise ValueError(f"Unsupported reader mode: {self.reader_mode}. Use one of {READER_MODES}.")
        self.reader_mode = mode
        if self.network_format not in NETWORK_FORMATS:
            raise ValueError(f"Unsupported format: {self.network_format}. Use 'graphml' or 'json'.")
        # Validates every tag
        self.sif_types = tuple(SifType.from_tag(tag).tag for tag in self.sif_types)

    def selected_sif_types(self) -> list[SifType]:
        return [SifType.from_tag(tag) for tag in self.sif_types]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert configuration to dictionary for serialization.

        Returns:
            Dictionary representation of the configuration.
        """
        return {
            "reader_mode": self.reader_mode,
            "sif_types": list(self.sif_types),
            "link_base_url": self.link_base_url,
            "search_url": self.search_url,
            "network_format": self.network_format,
            "max_name_length": self.max_name_length,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapperConfig:
        """
        Create a MapperConfig from a dictionary.

        Unknown keys are ignored.

        Args:
            data: Dictionary containing configuration values.

        Returns:
            New MapperConfig instance with values from the dictionary.
        """
        if isinstance(data.get("sif_types"), list):
            data = {**data, "sif_types": tuple(data["sif_types"])}

        known_fields = {
            "reader_mode",
            "sif_types",
            "link_base_url",
            "search_url",
            "network_format",
            "max_name_length",
        }
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        return cls(**filtered_data)

    @classmethod
    def from_env(cls) -> MapperConfig:
        """
        Create a MapperConfig from environment variables.

        Environment variables (all optional with defaults):
            BIOPAX_READER_MODE: "Default" or "SIF"
            BIOPAX_SIF_TYPES: Comma-separated relation type tags
            BIOPAX_LINK_BASE_URL: Cross-reference resolver base URL
            BIOPAX_SEARCH_URL: External search endpoint
            BIOPAX_NETWORK_FORMAT: "graphml" or "json"
            BIOPAX_MAX_NAME_LENGTH: Longest network name taken from the model

        Returns:
            New MapperConfig instance with values from environment.
        """

        def get_int(key: str, default: int) -> int:
            value = os.environ.get(key)
            if value is None:
                return default
            try:
                return int(value)
            except ValueError:
                return default

        sif_types = os.environ.get("BIOPAX_SIF_TYPES")
        return cls(
            reader_mode=os.environ.get("BIOPAX_READER_MODE", "Default"),
            sif_types=(
                tuple(t.strip() for t in sif_types.split(",") if t.strip())
                if sif_types
                else _all_sif_tags()
            ),
            link_base_url=os.environ.get("BIOPAX_LINK_BASE_URL", DEFAULT_LINK_BASE_URL),
            search_url=os.environ.get("BIOPAX_SEARCH_URL", DEFAULT_SEARCH_URL),
            network_format=os.environ.get("BIOPAX_NETWORK_FORMAT", "graphml"),
            max_name_length=get_int("BIOPAX_MAX_NAME_LENGTH", 100),
        )
