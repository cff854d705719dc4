"""
Observable Record (Model)
=========================
Base class for the client-side data entities of the application.

Why is this file needed?
------------------------
1. Validation: Every multi-attribute write goes through `validate()` first. A
   rejected write changes nothing and is reported on the `error` signal.
2. Coalescing: The attribute writes of one `set()` call produce exactly one
   `change` signal, carrying every attribute that changed.
3. History: `changed` and `last_change` record what the last batch did, which
   is enough for one level of `undo()`.
4. Persistence: `load()`, `save()` and `delete()` delegate to `sync()`, which
   subclasses override. The default `sync()` does nothing.

Classes:
    Model: The observable record.
"""
from __future__ import annotations

import html
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Union
from urllib.parse import quote

from PySide6.QtCore import QObject, Signal

from appmodel.config import DEFAULT_ID, HTML_EXTRA_ESCAPES, PARSE_ERROR_MESSAGE, URL_SAFE_CHARS
from appmodel.errors import ModelConfigurationError
from appmodel.model.attributes import AttributeContainer, AttributeSchema, AttributeSpec
from appmodel.model.events import (
    AttributeChange,
    ChangeEvent,
    ErrorEvent,
    ErrorType,
    ModelChangeEvent,
    SyncAction,
)
from appmodel.model.ids import DEFAULT_ID_GENERATOR, IdGenerator

logger = logging.getLogger(__name__)

SyncCallback = Callable[[Optional[Exception], Any], None]

_MISSING = object()


def _generate_client_id(model: Model) -> str:
    return type(model).id_generator.next()


def _as_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value)


@dataclass
class _ChangeBatch:
    """Writes of one `set()` call, collected until all of them have settled."""
    pending: Set[str]
    changes: Dict[str, AttributeChange] = field(default_factory=dict)

    def settle(self, event: ChangeEvent) -> None:
        # Cancelled writes still complete the batch, they just aren't recorded
        self.pending.discard(event.attr_name)
        if not event.cancelled:
            self.changes[event.attr_name] = AttributeChange(
                new_val=event.new_val,
                prev_val=event.prev_val,
                src=event.src,
            )


class Model(AttributeContainer):
    """
    Mutable, observable record.

    Signals:
        change(ModelChangeEvent): One or more attributes changed.
        error(ErrorEvent): Validation rejected a write, or a response could
            not be parsed.

    Subclasses declare their attributes by extending the schema::

        class Note(Model):
            schema = Model.schema.extend(title=AttributeSpec(default=""))

    and may override `validate`, `parse`, `sync` and `url`.
    """
    change = Signal(object)
    error = Signal(object)

    schema: AttributeSchema = AttributeSchema(
        client_id=AttributeSpec(value_fn=_generate_client_id),
        id=AttributeSpec(default=DEFAULT_ID),
    )

    id_generator: IdGenerator = DEFAULT_ID_GENERATOR

    # Plain function or staticmethod; set to None when the runtime has no
    # decoder, parse() then refuses strings
    decoder: Optional[Callable[[str], Any]] = json.loads

    def __init__(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        *,
        schema: Optional[AttributeSchema] = None,
        id_generator: Optional[IdGenerator] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        attributes = dict(attributes or {})
        if id_generator is not None and "client_id" not in attributes:
            attributes["client_id"] = id_generator.next()

        super().__init__(attributes, schema=schema, parent=parent)

        # Attributes written by the last committed batch -> new value
        self.changed: Dict[str, Any] = {}
        # Attributes written by the last committed batch -> AttributeChange
        self.last_change: Dict[str, AttributeChange] = {}
        # Owning collection, maintained by the collection itself
        self.list: Optional[Any] = None

        self._batches: List[_ChangeBatch] = []

    @classmethod
    def generate_client_id(cls) -> str:
        return cls.id_generator.next()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(client_id={self.get('client_id')!r}, id={self.get('id')!r})"

    # --- IDENTITY ---

    def is_new(self) -> bool:
        """
        True if this model hasn't been saved since it was created.

        An empty `id` means the model is new; a non-empty one means it was
        loaded or saved at some point.
        """
        return not self.get("id")

    def is_modified(self) -> bool:
        """New models count as modified until they are saved."""
        return self.is_new() or bool(self.changed)

    # --- WRITE PATH ---

    def set(
        self,
        attributes: Union[Mapping[str, Any], str],
        value: Any = _MISSING,
        options: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """
        Set one or more attributes and fire a single `change` signal.

        Args:
            attributes: Attribute name -> value, or a single attribute name
                followed by `value`.
            value: Value for the single-name form.
            options: Passed through to every ChangeEvent; `src` tags the source
                of the change.

        Returns:
            True if validation passed, False otherwise (nothing is written).
        """
        if isinstance(attributes, str):
            if value is _MISSING:
                raise TypeError(f"No value given for attribute '{attributes}'.")
            attributes = {attributes: value}
        elif value is not _MISSING:
            raise TypeError("A value is only accepted together with a single attribute name.")

        if not self._validate(attributes):
            return False

        batch = _ChangeBatch(pending=set(attributes))
        self._batches.append(batch)
        try:
            for name, new_value in attributes.items():
                self.set_attr(name, new_value, options)
        finally:
            # Writes applied before a failing subscriber are still recorded
            self._batches.pop()
            self._commit(batch)
        return True

    def set_attrs(self, attributes: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> bool:
        # Bulk writes must be validated and coalesced like any other
        return self.set(attributes, options=options)

    def _after_attr_change(self, event: ChangeEvent) -> None:
        super()._after_attr_change(event)

        if self._batches:
            self._batches[-1].settle(event)
            return

        # A direct set_attr() call is a batch of one
        batch = _ChangeBatch(pending={event.attr_name})
        batch.settle(event)
        self._commit(batch)

    def _commit(self, batch: _ChangeBatch) -> None:
        if batch.pending:
            logger.warning(f"Batch interrupted before writing {sorted(batch.pending)}; committing the rest.")

        if not batch.changes:
            logger.debug("Every write of the batch was cancelled; no change signal.")
            return

        self.changed = {name: change.new_val for name, change in batch.changes.items()}
        self.last_change = dict(batch.changes)

        logger.debug(f"{self!r} changed: {list(batch.changes)}")
        self.change.emit(ModelChangeEvent(changed=dict(self.last_change)))

    # --- VALIDATION ---

    def validate(self, attributes: Mapping[str, Any]) -> Any:
        """
        Override to check a proposed write.

        Return None to accept it. Any other value (an error message, a dict of
        field errors, `False`, ...) rejects it and becomes the `error` of the
        ErrorEvent.
        """
        return None

    def _validate(self, attributes: Mapping[str, Any]) -> bool:
        error = self.validate(attributes)
        if error is not None:
            logger.debug(f"Validation failed for {self!r}: {error}")
            self.error.emit(ErrorEvent(
                type=ErrorType.VALIDATE,
                error=error,
                attributes=dict(attributes),
            ))
            return False
        return True

    # --- UNDO ---

    def undo(self, attr_names: Optional[Iterable[str]] = None, options: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Revert the last change.

        Only the attributes of `attr_names` that were part of the last change
        are reverted (all of them by default). Only one level is kept: after an
        undo there is nothing left to undo until the model changes again.

        Returns:
            True if nothing needed reverting or the revert passed validation.
        """
        last_change = self.last_change
        if attr_names is None:
            attr_names = list(last_change)

        to_undo = {name: last_change[name].prev_val for name in attr_names if name in last_change}
        if not to_undo:
            return True

        if not self.set(to_undo, options=options):
            return False

        for name in to_undo:
            self.last_change.pop(name, None)
        return True

    # --- SERIALIZATION ---

    def get_as_html(self, name: str) -> str:
        """HTML-escaped string value of `name`, or '' if it has no value."""
        return html.escape(_as_text(self.get(name))).translate(HTML_EXTRA_ESCAPES)

    def get_as_url(self, name: str) -> str:
        """URL-encoded string value of `name`, or '' if it has no value."""
        return quote(_as_text(self.get(name)), safe=URL_SAFE_CHARS)

    def to_json(self) -> Dict[str, Any]:
        """Shallow copy of all attributes, ready for `json.dumps`."""
        return self.get_attrs()

    def parse(self, response: Any) -> Any:
        """
        Turn a server response into an attribute dict.

        Strings are decoded with `decoder` (JSON by default). Anything else is
        assumed to be decoded already and is returned unchanged.

        Returns:
            The decoded response, or None if it could not be decoded.

        Raises:
            ModelConfigurationError: No decoder is configured.
        """
        if not isinstance(response, str):
            return response

        decoder = self._get_decoder()
        if decoder is None:
            self.error.emit(ErrorEvent(type=ErrorType.PARSE, error=PARSE_ERROR_MESSAGE))
            raise ModelConfigurationError(
                f"Can't parse the response because {self.__class__.__name__} has no decoder configured."
            )

        try:
            return decoder(response)
        except ValueError as e:
            logger.warning(f"Failed to parse response for {self!r}: {e}")
            self.error.emit(ErrorEvent(type=ErrorType.PARSE, error=e))
            return None

    def _get_decoder(self) -> Optional[Callable[[str], Any]]:
        # Read the raw class attribute so a plain function isn't bound to self
        for klass in type(self).__mro__:
            if "decoder" in vars(klass):
                decoder = vars(klass)["decoder"]
                if isinstance(decoder, staticmethod):
                    return decoder.__func__
                return decoder
        return None

    # --- PERSISTENCE ---

    def url(self) -> str:
        """Resource locator used by `sync` implementations."""
        return ""

    def sync(self, action: SyncAction, options: Optional[Mapping[str, Any]] = None,
             callback: Optional[SyncCallback] = None) -> None:
        """
        Override to provide persistence. The default does nothing and never
        calls `callback`.

        Args:
            action: CREATE stores a new model, UPDATE an existing one, GET loads
                it and DELETE removes it.
            options: Implementation specific.
            callback: `callback(err, response)` once the operation finishes;
                `err` is None on success.
        """

    def load(self, options: Optional[Mapping[str, Any]] = None) -> None:
        self.sync(SyncAction.GET, options, self._sync_callback(SyncAction.GET, options))

    def save(self, attributes: Optional[Mapping[str, Any]] = None,
             options: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Apply `attributes` (if any) and hand the model to `sync`.

        Returns:
            False if `attributes` failed validation, True otherwise.
        """
        if attributes and not self.set(attributes, options=options):
            return False

        action = SyncAction.CREATE if self.is_new() else SyncAction.UPDATE
        self.sync(action, options, self._sync_callback(action, options))
        return True

    def delete(self, options: Optional[Mapping[str, Any]] = None) -> None:
        self.sync(SyncAction.DELETE, options, self._sync_callback(SyncAction.DELETE, options))

    def _sync_callback(self, action: SyncAction, options: Optional[Mapping[str, Any]]) -> SyncCallback:
        def callback(err: Optional[Exception], response: Any = None) -> None:
            if err is not None:
                logger.warning(f"Sync '{action}' failed for {self!r}: {err}")
                return

            if action != SyncAction.DELETE and response is not None:
                parsed = self.parse(response)
                if parsed is None:
                    return
                if parsed and not self.set(parsed, options=options):
                    return

            # The model now matches the stored copy
            self.changed = {}
            logger.info(f"Sync '{action}' finished for {self!r}.")

        return callback
