"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]``. Stores raw byte pairs from the ASGI
scope; decodes on access. "Mutation" returns a new instance, so a
rewritten request never shares header state with the inbound one.
"""

from collections.abc import Iterable, Iterator, Mapping

# RFC 9110 §7.6.1 hop-by-hop headers, never forwarded in either direction
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "proxy-connection",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. a multi-hop
    ``X-Forwarded-Host`` chain).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    @classmethod
    def from_raw(cls, pairs: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Build headers from raw byte pairs, lowercasing names.

        Values are kept byte-for-byte; nothing is decoded.
        """
        return cls(tuple((bytes(name).lower(), bytes(value)) for name, value in pairs))

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order received."""
        key_lower = key.lower().encode("latin-1")
        return [value.decode("latin-1") for name, value in self._raw if name.lower() == key_lower]

    def add(self, key: str, value: str) -> "Headers":
        """Return a copy with one more ``key: value`` line appended.

        Existing values for *key* are kept.
        """
        entry = (key.lower().encode("latin-1"), value.encode("latin-1"))
        return Headers((*self._raw, entry))

    def without(self, names: Iterable[str]) -> "Headers":
        """Return a copy with every line named in *names* removed."""
        drop = {name.lower().encode("latin-1") for name in names}
        return Headers(tuple((n, v) for n, v in self._raw if n.lower() not in drop))

    def end_to_end(self) -> "Headers":
        """Return a copy without hop-by-hop headers.

        Also drops any header the ``Connection`` header lists as
        connection-specific.
        """
        listed = {
            token.strip().lower()
            for value in self.get_list("connection")
            for token in value.split(",")
            if token.strip()
        }
        return self.without(HOP_BY_HOP | listed)

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """Access raw header byte pairs for ASGI compatibility."""
        return self._raw

