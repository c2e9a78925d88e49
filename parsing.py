"""Statement loading and amount normalization helpers."""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Iterable, Iterator

from logging_setup import get_logger
from models import Transaction

SUPPORTED_EXTENSIONS = (".csv",)
# Offered by the file pickers; everything except .csv ends in a sample report.
STATEMENT_FILE_EXTENSIONS = (".csv", ".pdf", ".xlsx", ".xls")

HEADER_MARKERS = ("description", "transaction")

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

# Double-quoted field; "" is an escaped quote and an unterminated quote runs to EOF.
_QUOTED_FIELD = re.compile(r'"((?:[^"]+|"")*)"?')
_PLAIN_FIELD = re.compile(r"[^,\r\n]*")

logger = get_logger("statement_analyzer.parsing")


class StatementError(Exception):
    """Base class for statements that cannot be turned into transactions."""


class UnsupportedFormatError(StatementError):
    pass


class UnreadableStatementError(StatementError):
    pass


class MalformedAmountError(StatementError, ValueError):
    pass


def normalize_amount(token: str) -> float:
    """Parse a currency-like token into a signed float.

    ``$`` and ``,`` are dropped and accounting parentheses become a minus sign,
    so ``"(1,234.50)"`` parses as ``-1234.5``.
    """
    cleaned = (
        str(token)
        .replace("$", "")
        .replace(",", "")
        .replace("(", "-")
        .replace(")", "")
        .strip()
    )
    if not _DECIMAL_PATTERN.fullmatch(cleaned):
        raise MalformedAmountError(f"Invalid amount: {token!r}")
    value = float(cleaned)
    if not math.isfinite(value):
        raise MalformedAmountError(f"Amount out of range: {token!r}")
    return value


def _is_header_like(description: str) -> bool:
    lowered = description.lower()
    return any(marker in lowered for marker in HEADER_MARKERS)


def _rows_to_transactions(rows: Iterable[list[str]]) -> list[Transaction]:
    transactions: list[Transaction] = []
    for row in rows:
        if len(row) < 3:
            continue
        date, description, amount_token = row[0], row[1], row[2]
        # A bad amount anywhere aborts the whole statement.
        amount = normalize_amount(amount_token)
        if _is_header_like(description) or amount == 0.0:
            continue
        transactions.append(Transaction(date=date, description=description, amount=abs(amount)))
    return transactions


def iter_records(text: str) -> Iterator[list[str]]:
    """Split comma-delimited text into records of field strings.

    Double-quoted fields may hold commas, line breaks and ``""`` escapes.
    Blank lines are skipped and fields have no length cap.
    """
    pos, end = 0, len(text)
    while pos < end:
        row: list[str] = []
        while True:
            if text.startswith('"', pos):
                quoted = _QUOTED_FIELD.match(text, pos)
                value = quoted.group(1).replace('""', '"')
                # Text after the closing quote is kept verbatim.
                tail = _PLAIN_FIELD.match(text, quoted.end())
                value += tail.group()
            else:
                tail = _PLAIN_FIELD.match(text, pos)
                value = tail.group()
            row.append(value)
            pos = tail.end()
            if not text.startswith(",", pos):
                break
            pos += 1
        if text.startswith("\r\n", pos):
            pos += 2
        elif pos < end:
            pos += 1
        if row != [""]:
            yield row


def parse_statement_text(text: str) -> list[Transaction]:
    """Parse comma-delimited statement text into transactions.

    The first row is always treated as a header and discarded. Rows with fewer
    than three fields, zero amounts or header-like descriptions are skipped.
    """
    records = iter_records(text)
    header = next(records, None)
    logger.debug("CSV headers: %s", header)
    return _rows_to_transactions(records)


def _read_statement_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise UnreadableStatementError(f"Could not read {path.name}: {exc}") from exc


def load_statement(file_path: str | Path) -> list[Transaction]:
    """Load transactions from a statement file, dispatching on its suffix."""
    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        if suffix == ".pdf":
            raise UnsupportedFormatError("PDF parsing not yet implemented")
        raise UnsupportedFormatError(
            f"Unsupported file type: {path.name or '<unknown>'}. Supported: csv."
        )
    transactions = parse_statement_text(_read_statement_text(path))
    logger.info("Parsed %d transactions", len(transactions))
    return transactions
