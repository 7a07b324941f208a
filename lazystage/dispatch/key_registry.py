"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

PENDING = object()


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key combos to a single action callback.

    A combo is one key token or several tokens separated by spaces
    (``"g g"``) for multi-key sequences.
    """

    combos: tuple[str, ...]
    handler: Callable[[], Any]


class KeyComboRegistry:
    """Small key-dispatch table with multi-key sequence support."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        """Initialize empty registry with optional token normalizer."""
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[tuple[str, ...], Callable[[], Any]] = {}
        self._prefixes: set[tuple[str, ...]] = set()
        self._pending: tuple[str, ...] = ()

    @staticmethod
    def _identity(key: str) -> str:
        """Return key unchanged for exact-match dispatch registries."""
        return key

    def _sequence(self, combo: str) -> tuple[str, ...]:
        return tuple(self._normalize(token) for token in combo.split(" ") if token)

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            sequence = self._sequence(combo)
            self._handlers[sequence] = binding.handler
            for end in range(1, len(sequence)):
                self._prefixes.add(sequence[:end])
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    @property
    def pending(self) -> tuple[str, ...]:
        return self._pending

    def reset(self) -> None:
        self._pending = ()

    def dispatch(self, key: str) -> Any:
        """Invoke the handler completed by ``key``.

        Returns ``PENDING`` while a multi-key sequence is incomplete and
        ``None`` when nothing is bound.
        """
        sequence = (*self._pending, self._normalize(key))
        if sequence in self._prefixes:
            self._pending = sequence
            return PENDING
        self._pending = ()
        handler = self._handlers.get(sequence)
        if handler is None and len(sequence) > 1:
            # An abandoned prefix does not swallow the key that broke it.
            handler = self._handlers.get(sequence[-1:])
        if handler is None:
            return None
        return handler()
