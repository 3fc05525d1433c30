"""
Ordered header collection for integration_client.

Headers are kept as an ordered sequence of name/value pairs rather than a
mapping: duplicate names are allowed and insertion order is send order.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Header:
    """A single ``name: value`` header entry."""

    name: str
    value: str

    @classmethod
    def parse(cls, line: str) -> "Header":
        """Build a header from a preformatted ``"Name: value"`` string."""
        if ":" not in line:
            raise ValueError(f"Header line has no ':' separator: {line!r}")
        name, value = line.split(":", 1)
        return cls(name.strip(), value.strip())

    def matches(self, name: str, value: Optional[str] = None) -> bool:
        """Case-insensitive name match, optionally with an exact trimmed value."""
        if self.name.strip().lower() != name.strip().lower():
            return False
        return value is None or self.value.strip() == value.strip()

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


HeaderInput = Union[Header, str, Tuple[str, str]]


def _coerce(entry: HeaderInput) -> Header:
    if isinstance(entry, Header):
        return entry
    if isinstance(entry, str):
        return Header.parse(entry)
    name, value = entry
    return Header(str(name).strip(), "" if value is None else str(value).strip())


class HeaderSet:
    """Ordered, duplicate-permitting list of headers."""

    def __init__(self, entries: Optional[Iterable[HeaderInput]] = None):
        self._entries: List[Header] = []
        if entries is not None:
            if isinstance(entries, dict):
                entries = entries.items()
            self._entries = [_coerce(entry) for entry in entries]

    def add(self, name: str, value: Optional[str] = None) -> "HeaderSet":
        """Append a header.

        When ``name`` itself contains ``:`` it is treated as a preformatted
        header line and ``value`` is ignored.
        """
        if ":" in name:
            self._entries.append(Header.parse(name))
        else:
            self._entries.append(
                Header(name.strip(), "" if value is None else str(value).strip())
            )
        return self

    def remove(self, name: str, value: Optional[str] = None) -> "HeaderSet":
        """Remove every entry matching ``name`` (and ``value`` when given)."""
        self._entries = [h for h in self._entries if not h.matches(name, value)]
        return self

    def has(self, name: str) -> bool:
        return any(h.matches(name) for h in self._entries)

    def get_all(self, name: str) -> List[str]:
        return [h.value for h in self._entries if h.matches(name)]

    def get(self, name: str) -> Optional[str]:
        values = self.get_all(name)
        return values[0] if values else None

    def extend(self, entries: Iterable[HeaderInput]) -> "HeaderSet":
        for entry in entries:
            self._entries.append(_coerce(entry))
        return self

    def copy(self) -> "HeaderSet":
        return HeaderSet(self._entries)

    def as_pairs(self) -> Tuple[Tuple[str, str], ...]:
        return tuple((h.name, h.value) for h in self._entries)

    def as_strings(self) -> List[str]:
        return [str(h) for h in self._entries]

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.as_pairs())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderSet):
            return self._entries == other._entries
        return NotImplemented

    def __repr__(self) -> str:
        return f"HeaderSet({self.as_strings()!r})"
