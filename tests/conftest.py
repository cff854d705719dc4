"""
Shared fixtures for the model tests.

Signals are delivered synchronously (direct connections), so a recorder
connected before an operation has seen every emission once it returns.
"""
from __future__ import annotations

from typing import Any, List

import pytest

from appmodel.model import AttributeSpec, CounterIdGenerator, Model


class SignalRecorder:
    """Collects the payloads a signal emitted."""

    def __init__(self) -> None:
        self.payloads: List[Any] = []

    def record(self, payload: Any) -> None:
        self.payloads.append(payload)

    def __len__(self) -> int:
        return len(self.payloads)

    @property
    def last(self) -> Any:
        return self.payloads[-1]


class Note(Model):
    schema = Model.schema.extend(
        title=AttributeSpec(default=""),
        body=AttributeSpec(default=""),
        tags=AttributeSpec(default_factory=list),
    )


class StrictNote(Note):
    """Rejects empty titles."""

    def validate(self, attributes):
        if "title" in attributes and not attributes["title"]:
            return "Title must not be empty."
        return None


@pytest.fixture
def id_generator() -> CounterIdGenerator:
    return CounterIdGenerator(prefix="t")


@pytest.fixture
def model(id_generator) -> Model:
    return Model(id_generator=id_generator)


@pytest.fixture
def note(id_generator) -> Note:
    return Note(id_generator=id_generator)


@pytest.fixture
def strict_note(id_generator) -> StrictNote:
    return StrictNote({"title": "Draft"}, id_generator=id_generator)


@pytest.fixture
def changes(model) -> SignalRecorder:
    recorder = SignalRecorder()
    model.change.connect(recorder.record)
    return recorder


@pytest.fixture
def errors(model) -> SignalRecorder:
    recorder = SignalRecorder()
    model.error.connect(recorder.record)
    return recorder
