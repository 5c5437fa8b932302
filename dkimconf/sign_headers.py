"""Parser for the `sign_headers` option value.

The value is a colon-separated header list where each name may carry a
three-character oversigning marker::

    (o)from:(x)date:list-id

- `(o)` marks the header as oversigned (signed even when absent).
- `(x)` marks it as optionally oversigned (oversigned only when present).
"""

from __future__ import annotations

from dataclasses import dataclass

_OVERSIGN_MARKER = "(o)"
_OPTIONAL_OVERSIGN_MARKER = "(x)"


@dataclass(frozen=True, slots=True)
class SignHeader:
    """One entry of the sign-header list.

    Attributes:
        name: Header name exactly as written (no case folding).
        oversigned: Whether the entry carried the `(o)` marker.
        optional_oversigned: Whether the entry carried the `(x)` marker.
    """

    name: str
    oversigned: bool = False
    optional_oversigned: bool = False

    @property
    def marker(self) -> str:
        """Return the marker this entry was written with, or an empty string."""

        if self.oversigned:
            return _OVERSIGN_MARKER
        if self.optional_oversigned:
            return _OPTIONAL_OVERSIGN_MARKER
        return ""


def parse_sign_headers(raw: str) -> tuple[SignHeader, ...]:
    """Split a `sign_headers` value into ordered entries.

    Empty segments, and segments holding only a marker, are dropped. This
    function never raises; header names are not validated.
    """

    entries: list[SignHeader] = []
    for segment in raw.split(":"):
        name = segment.strip()
        if not name:
            continue

        oversigned = False
        optional_oversigned = False
        if name.startswith(_OVERSIGN_MARKER):
            oversigned = True
            name = name[len(_OVERSIGN_MARKER):].strip()
        elif name.startswith(_OPTIONAL_OVERSIGN_MARKER):
            optional_oversigned = True
            name = name[len(_OPTIONAL_OVERSIGN_MARKER):].strip()

        if not name:
            continue
        entries.append(
            SignHeader(
                name=name,
                oversigned=oversigned,
                optional_oversigned=optional_oversigned,
            )
        )
    return tuple(entries)
