"""Immutable, case-insensitive, case-preserving HTTP headers.

Implements ``Mapping[str, list[str]]`` plus ``get_list``.
Lookup ignores case; iteration yields names in the casing they were stored
with. Transformations return a new ``HeaderBag``.
"""

from collections.abc import Iterable, Iterator, Mapping


def _as_values(value: str | Iterable[str]) -> tuple[str, ...]:
    return (value,) if isinstance(value, str) else tuple(value)


class HeaderBag(Mapping[str, list[str]]):
    """Immutable, case-insensitive HTTP headers.

    Holds exactly one entry per case-insensitive name. Every entry has at
    least one value; scalar strings are stored as one-element sequences.

    ``__getitem__`` returns a fresh list of values.
    ``get_list`` returns all values for a header, or ``[]`` when missing.
    """

    __slots__ = ("_items",)

    _items: tuple[tuple[str, tuple[str, ...]], ...]

    def __init__(
        self,
        items: Mapping[str, str | Iterable[str]] | Iterable[tuple[str, str | Iterable[str]]] = (),
    ) -> None:
        pairs = items.items() if isinstance(items, Mapping) else items
        merged: dict[str, tuple[str, tuple[str, ...]]] = {}
        for name, value in pairs:
            values = _as_values(value)
            key = name.lower()
            if key in merged:
                stored, existing = merged[key]
                merged[key] = (stored, existing + values)
            elif values:
                merged[key] = (name, values)
        object.__setattr__(self, "_items", tuple(merged.values()))

    def __setattr__(self, name: str, value: object) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def _find(self, name: str) -> str | None:
        """Return the stored casing of *name*, or None."""
        key = name.lower()
        for stored, _ in self._items:
            if stored.lower() == key:
                return stored
        return None

    def __getitem__(self, key: str) -> list[str]:
        if isinstance(key, str):
            key_lower = key.lower()
            for name, values in self._items:
                if name.lower() == key_lower:
                    return list(values)
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        items = ", ".join(f"{name!r}: {list(values)!r}" for name, values in self._items)
        return f"HeaderBag({{{items}}})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, or an empty list."""
        try:
            return self[key]
        except KeyError:
            return []

    # -- Transformations --

    def with_header(self, name: str, value: str | Iterable[str]) -> "HeaderBag":
        """Return a new bag where *name* (any casing) is replaced by *value*."""
        key = name.lower()
        kept = [(stored, values) for stored, values in self._items if stored.lower() != key]
        return HeaderBag([*kept, (name, _as_values(value))])

    def with_added_header(self, name: str, value: str | Iterable[str]) -> "HeaderBag":
        """Return a new bag with *value* appended under the existing casing of *name*."""
        # The constructor merges case variants under the first casing seen.
        return HeaderBag([*self._items, (name, _as_values(value))])

    def without_header(self, name: str) -> "HeaderBag":
        """Return a new bag without *name*. Missing names are not an error."""
        if name not in self:
            return self
        key = name.lower()
        return HeaderBag([(stored, values) for stored, values in self._items if stored.lower() != key])

    def to_dict(self) -> dict[str, list[str]]:
        """Plain ``{name: [values]}`` dict in storage order."""
        return {name: list(values) for name, values in self._items}

    @property
    def raw(self) -> tuple[tuple[str, tuple[str, ...]], ...]:
        """Stored ``(name, values)`` pairs in insertion order."""
        return self._items
