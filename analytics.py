"""Aggregation and insight helpers for categorized statements."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from models import CategoryTotal, MerchantTotal, Transaction

TOP_MERCHANT_LIMIT = 5
SMALL_TRANSACTION_THRESHOLD = 10.0
SMALL_TRANSACTION_MIN_COUNT = 5

FRAME_COLUMNS = ["Date", "Description", "Amount", "Category"]


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame (one row per transaction, file order preserved)."""
    rows = [
        {
            "Date": tx.date,
            "Description": tx.description,
            "Amount": float(tx.amount),
            "Category": tx.category,
        }
        for tx in transactions
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["Amount"] = df["Amount"].astype(float)
    return df


def category_breakdown(df: pd.DataFrame, total: float) -> list[CategoryTotal]:
    """Category totals and share of ``total``, largest first.

    Equal totals keep the order in which their category first appeared.
    A zero ``total`` yields NaN percentages.
    """
    if df.empty:
        return []
    grouped = (
        df.groupby("Category", sort=False, dropna=True)["Amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    shares = grouped / float(total) * 100.0
    return [
        CategoryTotal(category=str(category), total=float(amount), percentage=float(shares[category]))
        for category, amount in grouped.items()
    ]


def extract_merchant_name(description: str) -> str:
    """Merchant key: first two whitespace-separated words, upper-cased."""
    return " ".join(str(description).split()[:2]).upper()


def merchant_summary(df: pd.DataFrame, top_n: int = TOP_MERCHANT_LIMIT) -> list[MerchantTotal]:
    """Top merchants by total spending with their transaction counts."""
    if df.empty:
        return []
    working = df.assign(Merchant=df["Description"].apply(extract_merchant_name))
    grouped = (
        working.groupby("Merchant", sort=False)
        .agg(Total=("Amount", "sum"), Count=("Amount", "size"))
        .sort_values("Total", ascending=False, kind="stable")
        .head(int(max(top_n, 0)))
    )
    return [
        MerchantTotal(merchant=str(merchant), total=float(row["Total"]), count=int(row["Count"]))
        for merchant, row in grouped.iterrows()
    ]


def small_transaction_summary(
    df: pd.DataFrame, threshold: float = SMALL_TRANSACTION_THRESHOLD
) -> tuple[int, float]:
    """Return count and total of transactions strictly below ``threshold``."""
    if df.empty:
        return 0, 0.0
    small = df.loc[df["Amount"] < threshold, "Amount"]
    return int(len(small)), float(small.sum())


def generate_insights(
    df: pd.DataFrame,
    categories: list[CategoryTotal],
    file_path: str,
    *,
    small_threshold: float = SMALL_TRANSACTION_THRESHOLD,
    small_min_count: int = SMALL_TRANSACTION_MIN_COUNT,
) -> list[str]:
    """Human-readable observations about an analyzed statement."""
    insights = [f"Successfully analyzed {len(df)} transactions from {Path(file_path).name}"]

    if categories:
        top = categories[0]
        insights.append(
            f"Your largest spending category is {top.category} at {top.percentage:.1f}% of total spending"
        )

    small_count, small_total = small_transaction_summary(df, threshold=small_threshold)
    if small_count > small_min_count:
        insights.append(
            f"You have {small_count} small transactions (under ${small_threshold:g}) totaling ${small_total:.2f}"
        )

    insights.append("Consider setting up spending alerts for your top categories")
    return insights
