"""Stream adapters shared by the configuration and map-file parsers.

Responsibilities:
- Accept text or binary readable streams and expose them as text.
- Split binary input into lines on `\\n` only, like text input.
- Open configuration files by path for callers that do not manage handles.
"""

from __future__ import annotations

import codecs
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO, Union

ReadableStream = Union[TextIO, BinaryIO]

_ENCODING = "utf-8"


def as_text_reader(stream: ReadableStream) -> TextIO:
    """Return a text view of `stream`, decoding bytes as UTF-8 incrementally.

    The returned reader wraps the caller's stream without taking ownership:
    it is never closed here.
    """

    probe = stream.read(0)
    if isinstance(probe, bytes):
        return codecs.getreader(_ENCODING)(stream)  # type: ignore[return-value]
    return stream  # type: ignore[return-value]


def iter_text_lines(stream: ReadableStream) -> Iterator[str]:
    """Yield the lines of `stream` as text, keeping line terminators.

    Byte lines are split on `\\n` and decoded one at a time. A `\\n` byte never
    occurs inside a multi-byte UTF-8 sequence.
    """

    probe = stream.read(0)
    if isinstance(probe, bytes):
        for raw_line in stream:
            yield raw_line.decode(_ENCODING)
        return
    yield from stream


@contextmanager
def open_config_file(path: Path) -> Iterator[TextIO]:
    """Open a configuration or map file for reading as UTF-8 text."""

    with path.open("r", encoding=_ENCODING) as handle:
        yield handle
