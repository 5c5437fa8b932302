"""Domain exceptions for configuration parsing and CLI diagnostics.

Every error is fail-fast: the first one raised aborts the parse call and no
partial result is returned.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token


class DkimConfigError(ValueError):
    """Base class for invalid DKIM configuration input.

    The rendered message is `<source>:<location>: <detail>`, with the source
    and location parts omitted when unknown.
    """

    stage = "parse"

    def __init__(
        self,
        *,
        detail: str,
        location: str | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialize an error with a diagnostic message and optional hint."""

        super().__init__(detail)
        self.detail = detail
        self.location = location
        self.hint = hint
        self.source: Path | None = None

    def with_source(self, source: Path) -> DkimConfigError:
        """Attach the file the failing input was read from and return `self`."""

        self.source = source
        return self

    def __str__(self) -> str:
        prefix = ":".join(
            str(part) for part in (self.source, self.location) if part is not None
        )
        if not prefix:
            return self.detail
        return f"{prefix}: {self.detail}"


class LexicalError(DkimConfigError):
    """Raised for a character that cannot start a token, or an unterminated string."""

    stage = "lex"

    def __init__(self, *, detail: str, line: int, column: int) -> None:
        super().__init__(
            detail=detail,
            location=f"{line}:{column}",
            hint="Quote values containing characters outside `[A-Za-z0-9_$./-]`.",
        )
        self.line = line
        self.column = column


class ConfigSyntaxError(DkimConfigError):
    """Raised when the token sequence violates the configuration grammar."""

    stage = "syntax"

    def __init__(self, *, expected: str, actual: Token) -> None:
        super().__init__(
            detail=f"expected {expected}, got {actual.describe()}",
            location=f"{actual.line}:{actual.column}",
        )
        self.expected = expected
        self.actual = actual


class CoercionError(DkimConfigError):
    """Raised when a boolean option holds a value other than `true` or `false`."""

    stage = "coerce"

    def __init__(self, *, key: str, value: str) -> None:
        super().__init__(
            detail=f"invalid boolean {value!r} for `{key}`",
            hint="Boolean options accept `true` or `false` (case-insensitive).",
        )
        self.key = key
        self.value = value


class MapFormatError(DkimConfigError):
    """Raised when a map-file data line does not hold exactly two fields."""

    stage = "map"

    def __init__(self, *, line_number: int, line: str) -> None:
        super().__init__(
            detail=f"expected `<key> <value>`, got {line!r}",
            location=str(line_number),
            hint="Map lines hold exactly two whitespace-separated fields; comments use `#`.",
        )
        self.line_number = line_number
        self.line = line


class CommandStageError(RuntimeError):
    """Raised by CLI commands for failures outside the configuration text itself."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint
