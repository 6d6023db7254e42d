"""Delimited-text decoding into rows of named fields.

Spreadsheet and collection-tool exports disagree on almost everything, so the
decoder is deliberately forgiving: quoted cells may contain delimiters, doubled
quotes and line breaks; any of ``\\n``, ``\\r\\n`` and a bare ``\\r`` ends a record;
and rows made only of empty cells (typically trailing blank lines) are dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

_WHITESPACE_RUN = re.compile(r"\s+")
BYTE_ORDER_MARK = "\ufeff"


@dataclass(frozen=True, slots=True)
class RawRow:
    """One decoded record: ordered ``(header, value)`` pairs with normalized headers."""

    fields: tuple[tuple[str, str], ...]

    def get(self, header: str, default: str = "") -> str:
        for name, value in self.fields:
            if name == header:
                return value
        return default

    def first(self, *headers: str) -> str:
        """Return the first non-empty value among ``headers`` (in the order given)."""

        for header in headers:
            value = self.get(header)
            if value:
                return value
        return ""

    def __contains__(self, header: object) -> bool:
        return any(name == header for name, _ in self.fields)

    @property
    def headers(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


def normalize_header(header: str) -> str:
    """Lowercase, trim and collapse whitespace runs into a single underscore."""

    return _WHITESPACE_RUN.sub("_", header.strip().lower())


def normalize_headers(headers: Sequence[str]) -> list[str]:
    return [normalize_header(header) for header in headers]


def decode_rows(text: str, *, delimiter: str = ",", quote: str = '"') -> list[RawRow]:
    """Decode ``text`` into rows keyed by the (normalized) first record.

    Returns an empty list when there is no header plus at least one data row.
    """

    text = text.removeprefix(BYTE_ORDER_MARK)
    records = list(_iter_records(text, delimiter=delimiter, quote=quote))
    if len(records) < 2:
        return []

    headers = normalize_headers(records[0])
    rows: list[RawRow] = []
    for values in records[1:]:
        padded = [values[idx] if idx < len(values) else "" for idx in range(len(headers))]
        rows.append(RawRow(fields=tuple(zip(headers, padded, strict=True))))
    return rows


def _iter_records(text: str, *, delimiter: str, quote: str) -> Iterator[list[str]]:
    record: list[str] = []
    buffer: list[str] = []
    in_quotes = False
    index = 0
    length = len(text)

    def close_field() -> None:
        record.append("".join(buffer).strip())
        buffer.clear()

    while index < length:
        char = text[index]
        if in_quotes:
            if char == quote:
                if index + 1 < length and text[index + 1] == quote:
                    buffer.append(quote)
                    index += 1
                else:
                    in_quotes = False
            else:
                buffer.append(char)
        elif char == quote:
            in_quotes = True
        elif char == delimiter:
            close_field()
        elif char in "\r\n":
            if char == "\r" and index + 1 < length and text[index + 1] == "\n":
                index += 1
            close_field()
            if any(record):
                yield list(record)
            record.clear()
        else:
            buffer.append(char)
        index += 1

    if buffer or record:
        close_field()
        if any(record):
            yield list(record)
