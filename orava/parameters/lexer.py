"""Single-pass scanner for named placeholders.

The scanner walks the raw query once, left to right. Quoted literals and
comments are skipped as opaque spans, so a ``:`` inside ``'50:00'``, inside a
PostgreSQL ``$$ ... $$`` body or inside ``-- note: ...`` never starts a
placeholder.
"""

from typing import Final

from orava.exceptions import ImproperConfigurationError, LexError
from orava.parameters.types import Literal, Placeholder, Segment

__all__ = ("DEFAULT_DELIMITER", "PlaceholderLexer", "is_identifier_char", "validate_delimiter")

DEFAULT_DELIMITER: Final = ":"
QUOTE_CHARS: Final = frozenset({"'", '"'})
_QUOTE_KINDS: Final = {"'": "string", '"': "quoted identifier"}


def is_identifier_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def validate_delimiter(delimiter: str) -> str:
    """Check that ``delimiter`` can introduce a placeholder.

    Raises:
        ImproperConfigurationError: If the delimiter is not a single character,
            or is a quote, whitespace or identifier character.

    Returns:
        The delimiter, unchanged.
    """
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        msg = f"placeholder delimiter must be a single character, got {delimiter!r}"
        raise ImproperConfigurationError(msg)
    if delimiter in QUOTE_CHARS or delimiter.isspace() or is_identifier_char(delimiter):
        msg = f"placeholder delimiter {delimiter!r} cannot be a quote, whitespace or identifier character"
        raise ImproperConfigurationError(msg)
    return delimiter


class PlaceholderLexer:
    """Splits a raw query into literal spans and placeholder occurrences."""

    __slots__ = ("delimiter",)

    def __init__(self, delimiter: str = DEFAULT_DELIMITER) -> None:
        self.delimiter = validate_delimiter(delimiter)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(delimiter={self.delimiter!r})"

    def scan(self, sql: str) -> "tuple[Segment, ...]":
        """Scan ``sql`` into segments.

        A placeholder is the delimiter followed by one or more identifier
        characters. A delimiter followed by anything else, and a doubled
        delimiter such as the PostgreSQL ``::`` cast, stay literal text.

        Args:
            sql: The raw query.

        Raises:
            LexError: On an unterminated quoted literal, dollar-quoted string or
                block comment.

        Returns:
            Literal and placeholder segments in source order. Concatenating the
            source text of every segment reproduces ``sql``.
        """
        delimiter = self.delimiter
        length = len(sql)
        segments: list[Segment] = []
        literal_start = 0
        ordinal = 0
        pos = 0

        while pos < length:
            char = sql[pos]

            if char in QUOTE_CHARS:
                pos = self._skip_quoted(sql, pos)
                continue

            if char == "-" and sql.startswith("--", pos):
                newline = sql.find("\n", pos + 2)
                pos = length if newline == -1 else newline + 1
                continue

            if char == "/" and sql.startswith("/*", pos):
                close = sql.find("*/", pos + 2)
                if close == -1:
                    msg = "unterminated block comment"
                    raise LexError(msg, sql, pos)
                pos = close + 2
                continue

            if char == "$" and delimiter != "$":
                pos = self._skip_dollar_quoted(sql, pos)
                continue

            if char == delimiter:
                name_start = pos + 1
                if name_start < length and sql[name_start] == delimiter:
                    pos += 2
                    continue
                name_end = name_start
                while name_end < length and is_identifier_char(sql[name_end]):
                    name_end += 1
                if name_end == name_start:
                    pos += 1
                    continue
                if literal_start < pos:
                    segments.append(Literal(sql[literal_start:pos], literal_start))
                ordinal += 1
                segments.append(Placeholder(sql[name_start:name_end], pos, ordinal, sql[pos:name_end]))
                pos = literal_start = name_end
                continue

            pos += 1

        if literal_start < length:
            segments.append(Literal(sql[literal_start:], literal_start))
        return tuple(segments)

    @staticmethod
    def _skip_dollar_quoted(sql: str, start: int) -> int:
        """Return the offset just past the dollar-quoted literal opening at ``start``.

        ``$$`` and ``$tag$`` open a literal closed by the same marker. A ``$``
        that does not open one, such as ``$1`` or the ``$`` inside an identifier,
        is skipped on its own.
        """
        if start > 0 and (is_identifier_char(sql[start - 1]) or sql[start - 1] == "$"):
            return start + 1
        tag_end = start + 1
        while tag_end < len(sql) and is_identifier_char(sql[tag_end]):
            tag_end += 1
        if tag_end >= len(sql) or sql[tag_end] != "$" or sql[start + 1 : tag_end][:1].isdigit():
            return start + 1
        marker = sql[start : tag_end + 1]
        close = sql.find(marker, tag_end + 1)
        if close == -1:
            msg = "unterminated dollar-quoted string"
            raise LexError(msg, sql, start)
        return close + len(marker)

    @staticmethod
    def _skip_quoted(sql: str, start: int) -> int:
        """Return the offset just past the quoted literal opening at ``start``.

        A doubled quote character inside the literal is an escaped quote.
        """
        quote = sql[start]
        length = len(sql)
        pos = start + 1
        while True:
            close = sql.find(quote, pos)
            if close == -1:
                msg = f"unterminated {_QUOTE_KINDS[quote]} literal"
                raise LexError(msg, sql, start)
            if close + 1 < length and sql[close + 1] == quote:
                pos = close + 2
                continue
            return close + 1
