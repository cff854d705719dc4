"""Observable client-side data records for Qt applications."""
from appmodel.errors import ModelConfigurationError, ModelError
from appmodel.logging_config import setup_logging
from appmodel.model import (
    AttributeChange,
    AttributeSchema,
    AttributeSpec,
    ErrorEvent,
    ErrorType,
    Model,
    ModelChangeEvent,
    SyncAction,
)

__all__ = [
    "AttributeChange",
    "AttributeSchema",
    "AttributeSpec",
    "ErrorEvent",
    "ErrorType",
    "Model",
    "ModelChangeEvent",
    "ModelConfigurationError",
    "ModelError",
    "SyncAction",
    "setup_logging",
]
