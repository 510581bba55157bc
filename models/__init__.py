"""Models package for the BioPAX network mapper: the BioPAX object model, the output network and errors."""

from models.biopax import (
    BIOPAX_L2_NS,
    BIOPAX_L3_NS,
    BioPaxElement,
    BioPaxModel,
    PropertySpec,
    get_value,
    get_values,
    is_subclass,
    property_spec,
)
from models.errors import (
    BioPaxParseError,
    BioPaxReaderError,
    EmptyResultError,
    MalformedCrossReference,
    PropertyAccessMiss,
    SerializationError,
)
from models.network import (
    DefaultNetworkFactory,
    NetworkFactory,
    PathwayNetwork,
)

__all__ = [
    # BioPAX object model
    "BIOPAX_L2_NS",
    "BIOPAX_L3_NS",
    "BioPaxElement",
    "BioPaxModel",
    "PropertySpec",
    "get_value",
    "get_values",
    "is_subclass",
    "property_spec",
    # Errors
    "BioPaxReaderError",
    "BioPaxParseError",
    "EmptyResultError",
    "SerializationError",
    "PropertyAccessMiss",
    "MalformedCrossReference",
    # Network
    "PathwayNetwork",
    "NetworkFactory",
    "DefaultNetworkFactory",
]
