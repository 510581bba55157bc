"""
BioPAX RDF/XML reading.

Modules:
    owl_reader: Loads a document (pybiopax or rdflib) into a Level 3 BioPaxModel
    resources: Raw resources from pybiopax objects or RDF triples, and model construction
    level_upgrade: Level 2 to Level 3 conversion
"""

from reader.owl_reader import (
    fix_display_names,
    model_name,
    read_model,
    root_elements,
)
from reader.level_upgrade import LevelUpgrader

__all__ = [
    "read_model",
    "fix_display_names",
    "model_name",
    "root_elements",
    "LevelUpgrader",
]
