"""
Field touch tracker.

A field's error only becomes visible once the field is touched, either by
the user leaving it or by a submit attempt touching every field at once.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from registrar.domain.rules import field_key


@dataclass(frozen=True)
class TouchedFields:
    """Immutable set of touched field names."""

    names: frozenset[str] = frozenset()

    def touch(self, name: str) -> "TouchedFields":
        """Return a tracker with name added."""
        key = field_key(name)
        if key in self.names:
            return self
        return TouchedFields(self.names | {key})

    def touch_all(self, names: Iterable[str]) -> "TouchedFields":
        """Return a tracker with every name added in one step (used on submit)."""
        return TouchedFields(self.names | {field_key(name) for name in names})

    def is_touched(self, name: str) -> bool:
        return field_key(name) in self.names

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_touched(name)

    def __len__(self) -> int:
        return len(self.names)
