"""Statement analysis entry points.

``analyze_statement`` is the awaitable boundary used by hosts. Apart from a
missing file, every failure degrades into a clearly labelled sample report so
the caller always gets something to render.
"""

from __future__ import annotations

import enum
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from analytics import category_breakdown, generate_insights, merchant_summary, transactions_frame
from categorization import categorize_transactions
from logging_setup import get_logger
from models import AnalysisResult, CategoryTotal, MerchantTotal, Transaction
from parsing import StatementError, load_statement

logger = get_logger("statement_analyzer.report")

FILE_NOT_FOUND_MESSAGE = "File not found"


class StatementNotFoundError(FileNotFoundError):
    """Raised when the statement path does not exist."""


class FallbackReason(enum.Enum):
    COULD_NOT_PARSE = "Could not parse file - showing sample data"
    NO_TRANSACTIONS = "No transactions found in file"


@dataclass(frozen=True)
class RealReport:
    result: AnalysisResult

    def to_result(self) -> AnalysisResult:
        return self.result


@dataclass(frozen=True)
class FallbackReport:
    reason: FallbackReason
    file_name: str

    def to_result(self) -> AnalysisResult:
        return sample_analysis(self.file_name, self.reason.value)


AnalysisOutcome = Union[RealReport, FallbackReport]


def sample_analysis(file_name: str, note: str | None = None) -> AnalysisResult:
    """Fixed illustrative report shown when a statement cannot be analyzed."""
    insights = [f"File: {file_name}"]
    if note:
        insights.append(note)
    insights.extend(
        [
            "Showing sample data for demonstration",
            "Upload a CSV with Date, Description, Amount columns for real analysis",
        ]
    )
    return AnalysisResult(
        spending_categories=[
            CategoryTotal(category="Food & Dining", total=250.50, percentage=35.2),
            CategoryTotal(category="Gas & Transportation", total=180.25, percentage=25.3),
        ],
        top_merchants=[MerchantTotal(merchant="Sample Data", total=85.50, count=12)],
        monthly_total=712.45,
        insights=insights,
        transaction_count=0,
    )


def analyze_transactions(transactions: list[Transaction], file_path: str) -> AnalysisResult:
    """Categorize, aggregate and summarize parsed transactions."""
    categorize_transactions(transactions)
    df = transactions_frame(transactions)
    total = float(df["Amount"].sum())
    categories = category_breakdown(df, total)
    return AnalysisResult(
        spending_categories=categories,
        top_merchants=merchant_summary(df),
        monthly_total=total,
        insights=generate_insights(df, categories, file_path),
        transaction_count=len(transactions),
    )


def evaluate_statement(file_path: str) -> AnalysisOutcome:
    """Run the pipeline and report whether real data or a fallback came out."""
    logger.info("Analyzing file: %s", file_path)
    # os.path.exists reports unreachable paths (too long, no permission) as missing.
    if not os.path.exists(file_path):
        logger.warning("Statement does not exist: %s", file_path)
        raise StatementNotFoundError(FILE_NOT_FOUND_MESSAGE)

    path = Path(file_path)
    try:
        transactions = load_statement(path)
    except StatementError as exc:
        logger.warning("File parsing error: %s", exc)
        return FallbackReport(reason=FallbackReason.COULD_NOT_PARSE, file_name=path.name)

    if not transactions:
        return FallbackReport(reason=FallbackReason.NO_TRANSACTIONS, file_name=path.name)

    return RealReport(result=analyze_transactions(transactions, file_path))


def analyze_file(file_path: str) -> AnalysisResult:
    """Return the report for ``file_path``; raises only ``StatementNotFoundError``."""
    return evaluate_statement(file_path).to_result()


async def analyze_statement(file_path: str) -> AnalysisResult:
    return analyze_file(file_path)


def analyze_upload(file_name: str, payload: bytes) -> AnalysisResult:
    """Analyze an in-memory statement under its original file name.

    The bytes live in a temporary directory only for the duration of the call.
    """
    with tempfile.TemporaryDirectory(prefix="statement_") as tmp:
        target = Path(tmp) / (Path(str(file_name)).name or "statement")
        target.write_bytes(payload)
        return analyze_file(str(target))
