"""
Exceptions raised by the model layer.

Recoverable problems (a response that cannot be parsed, a rejected validation)
are reported through the model's `error` signal instead. Only faults that
point at a broken setup are raised.
"""
from __future__ import annotations


class ModelError(Exception):
    """Base class for all errors raised by appmodel."""


class ModelConfigurationError(ModelError):
    """The model was set up without a capability it needs (e.g. a decoder)."""
