"""
The MODEL layer: observable records and the attribute storage beneath them.
It has NO knowledge of widgets; views subscribe to the signals.
"""
from appmodel.model.attributes import AttributeContainer, AttributeSchema, AttributeSpec
from appmodel.model.events import (
    AttributeChange,
    ChangeEvent,
    ErrorEvent,
    ErrorType,
    ModelChangeEvent,
    SyncAction,
)
from appmodel.model.ids import DEFAULT_ID_GENERATOR, CounterIdGenerator, IdGenerator
from appmodel.model.model import Model

__all__ = [
    "AttributeChange",
    "AttributeContainer",
    "AttributeSchema",
    "AttributeSpec",
    "ChangeEvent",
    "CounterIdGenerator",
    "DEFAULT_ID_GENERATOR",
    "ErrorEvent",
    "ErrorType",
    "IdGenerator",
    "Model",
    "ModelChangeEvent",
    "SyncAction",
]
