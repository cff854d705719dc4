"""
Attribute Storage
=================
Typed attribute storage with per-attribute change notification.

Why is this file needed?
------------------------
1. Schema: Attributes are declared up front in an `AttributeSchema` (name ->
   default or generator) instead of being discovered at runtime.
2. Notification: Every single write is announced to the subscribers of that
   attribute, who may cancel it, and to the `attribute_changed` signal once it
   has been stored.
3. Extension: `_after_attr_change` is the hook subclasses wrap to observe every
   write, applied or not. `Model` uses it to coalesce writes into batches.

Classes:
    AttributeSpec: How the initial value of one attribute is produced.
    AttributeSchema: Immutable mapping of attribute name -> AttributeSpec.
    AttributeContainer: QObject holding the values.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from appmodel.model.events import ChangeEvent

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[ChangeEvent], None]


@dataclass(frozen=True)
class AttributeSpec:
    """
    Initial value of an attribute.

    Exactly one source is used, in this order: `value_fn(owner)`,
    `default_factory()`, `default`.
    """
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    value_fn: Optional[Callable[[Any], Any]] = None

    def initial_value(self, owner: Any) -> Any:
        if self.value_fn is not None:
            return self.value_fn(owner)
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


class AttributeSchema(Mapping):
    """Read-only mapping of attribute name -> AttributeSpec."""

    def __init__(self, specs: Optional[Mapping[str, AttributeSpec]] = None, **kwargs: AttributeSpec) -> None:
        self._specs: Dict[str, AttributeSpec] = {**(specs or {}), **kwargs}

    def __getitem__(self, name: str) -> AttributeSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def extend(self, **specs: AttributeSpec) -> AttributeSchema:
        """Return a new schema with `specs` added (or replacing existing names)."""
        return AttributeSchema(self._specs, **specs)

    def __repr__(self) -> str:
        return f"AttributeSchema({list(self._specs)})"


class AttributeContainer(QObject):
    """
    Holds attribute values declared by `schema`.

    Names missing from the schema may still be written; they become ad-hoc
    attributes with no default.
    """
    attribute_changed = Signal(object)

    schema: AttributeSchema = AttributeSchema()

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        *,
        schema: Optional[AttributeSchema] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if schema is not None:
            self.schema = schema
        self._values: Dict[str, Any] = {}
        self._change_handlers: Dict[str, List[ChangeHandler]] = {}
        self._init_attrs(attributes or {})

    def _init_attrs(self, attributes: Mapping[str, Any]) -> None:
        """Store schema defaults and constructor values without notifying anyone."""
        for name, spec in self.schema.items():
            if name in attributes:
                self._values[name] = attributes[name]
            else:
                self._values[name] = spec.initial_value(self)

        for name, value in attributes.items():
            if name not in self.schema:
                self._values[name] = value

    # --- READ ---

    def get(self, name: str) -> Any:
        return self._values.get(name)

    def get_attrs(self, names: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Shallow copy of all attributes, or of the given names only."""
        if names is None:
            return dict(self._values)
        return {name: self._values.get(name) for name in names}

    def has_attr(self, name: str) -> bool:
        return name in self._values

    # --- WRITE ---

    def set_attr(self, name: str, value: Any, options: Optional[Mapping[str, Any]] = None) -> ChangeEvent:
        """
        Write one attribute.

        Returns the ChangeEvent of the write; check `event.cancelled` to know
        whether a subscriber stopped it.
        """
        options = dict(options or {})
        event = ChangeEvent(
            attr_name=name,
            new_val=value,
            prev_val=self._values.get(name),
            src=options.get("src"),
            options=options,
        )

        for handler in list(self._change_handlers.get(name, ())):
            handler(event)
            if event.stopped:
                break

        if event.cancelled:
            logger.debug(f"Write to '{name}' cancelled by a subscriber.")
        else:
            self._values[name] = value

        self._after_attr_change(event)
        return event

    def set_attrs(self, attributes: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> bool:
        for name, value in attributes.items():
            self.set_attr(name, value, options)
        return True

    def _after_attr_change(self, event: ChangeEvent) -> None:
        """Called after every write, including cancelled ones."""
        if not event.cancelled:
            self.attribute_changed.emit(event)

    # --- SUBSCRIPTIONS ---

    def subscribe_to_change(self, name: str, handler: ChangeHandler) -> None:
        """Call `handler(event)` before each write to `name`. The handler may cancel it."""
        self._change_handlers.setdefault(name, []).append(handler)

    def unsubscribe_from_change(self, name: str, handler: ChangeHandler) -> None:
        handlers = self._change_handlers.get(name, [])
        if handler not in handlers:
            raise ValueError(f"Handler is not subscribed to changes of '{name}'.")
        handlers.remove(handler)
