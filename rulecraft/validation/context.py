"""Validation context: the state shared by one traversal of a rule graph.

Features:
- Shared failure list and ambient root_context_data across nested validators
- Property chain for building dotted/indexed property paths
- Fixed execution mode (sync or async) for the whole call
- Cooperative cancellation through an asyncio.Event
- Scoped propagation of the enclosing collection index
"""
from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Any, Generic, Iterable, Iterator, TypeVar

from .formatter import COLLECTION_INDEX, MessageFormatter
from .selectors import DefaultValidatorSelector, ValidatorSelector

T = TypeVar("T")

COLLECTION_INDEX_KEY = "__rulecraft_collection_index"

_MISSING = object()


class PropertyChain:
    """Ordered path segments, e.g. ["orders[0]", "address"] -> "orders[0].address"."""

    __slots__ = ("_segments",)

    def __init__(self, segments: Iterable[str] | None = None):
        self._segments: list[str] = list(segments or ())

    def add(self, name: str | None) -> None:
        if name: self._segments.append(name)

    def add_indexer(self, index: Any) -> None:
        if self._segments: self._segments[-1] = f"{self._segments[-1]}[{index}]"
        else: self._segments.append(f"[{index}]")

    def build_property_name(self, name: str | None) -> str | None:
        """Full path for a property at this depth (the chain itself is not modified)."""
        if not self._segments: return name
        if not name: return str(self)
        return f"{self}.{name}"

    def copy(self) -> PropertyChain:
        return PropertyChain(self._segments)

    def __len__(self) -> int: return len(self._segments)

    def __str__(self) -> str: return ".".join(self._segments)

    def __repr__(self) -> str: return f"PropertyChain({self._segments!r})"


class ValidationContext(Generic[T]):
    """Holds the instance, selector, path prefix and output failures for a call."""

    def __init__(
        self,
        instance_to_validate: T,
        *,
        selector: ValidatorSelector | None = None,
        property_chain: PropertyChain | None = None,
        failures: list | None = None,
        root_context_data: dict[str, Any] | None = None,
        is_async: bool = False,
        cancellation: asyncio.Event | None = None,
        message_formatter: MessageFormatter | None = None,
    ):
        self.instance_to_validate = instance_to_validate
        self.selector: ValidatorSelector = selector or DefaultValidatorSelector()
        self.property_chain = property_chain if property_chain is not None else PropertyChain()
        self.failures: list = failures if failures is not None else []
        self.root_context_data: dict[str, Any] = root_context_data if root_context_data is not None else {}
        self.is_async = is_async
        self.cancellation = cancellation
        self.message_formatter = message_formatter or MessageFormatter()
        self.is_child_context = False
        self.is_child_collection_context = False
        self.parent_context: ValidationContext | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.is_set()

    def throw_if_cancelled(self) -> None:
        if self.is_cancelled: raise asyncio.CancelledError("validation cancelled")

    def clone_for_child_validator(
        self,
        instance_to_validate: Any,
        *,
        preserve_parent_context: bool = False,
        selector: ValidatorSelector | None = None,
    ) -> ValidationContext:
        """Context for a nested validator: same failures, ambient data and mode; copied path."""
        child = ValidationContext(
            instance_to_validate,
            selector=selector or self.selector,
            property_chain=self.property_chain.copy(),
            failures=self.failures,
            root_context_data=self.root_context_data,
            is_async=self.is_async,
            cancellation=self.cancellation,
            message_formatter=type(self.message_formatter)(),
        )
        child.is_child_context = True
        child.parent_context = self if preserve_parent_context else None
        return child

    def clone_for_child_collection_validator(
        self, instance_to_validate: Any, *, preserve_parent_context: bool = False
    ) -> ValidationContext:
        child = self.clone_for_child_validator(instance_to_validate, preserve_parent_context=preserve_parent_context)
        child.is_child_collection_context = True
        return child

    @contextmanager
    def propagate_collection_index(self, formatter: MessageFormatter) -> Iterator[None]:
        """Expose the formatter's CollectionIndex to nested rules for the duration of the block.

        The previous ambient value is restored (or the key removed) on every exit path.
        """
        if COLLECTION_INDEX not in formatter.placeholder_values:
            yield
            return
        original = self.root_context_data.get(COLLECTION_INDEX_KEY, _MISSING)
        self.root_context_data[COLLECTION_INDEX_KEY] = formatter.placeholder_values[COLLECTION_INDEX]
        try:
            yield
        finally:
            if original is _MISSING: self.root_context_data.pop(COLLECTION_INDEX_KEY, None)
            else: self.root_context_data[COLLECTION_INDEX_KEY] = original
