"""Statement analyzer Streamlit entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import streamlit as st

from local_sources import collect_statement_paths
from logging_setup import configure_logging
from models import AnalysisResult
from parsing import STATEMENT_FILE_EXTENSIONS
from report import StatementNotFoundError, analyze_file, analyze_upload

configure_logging()

st.set_page_config(page_title="Statement Analyzer", page_icon="\U0001f4b3", layout="wide")


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .hero {
            margin-bottom: 0.6rem;
            padding: 1rem 1.2rem;
            border: 1px solid rgba(30, 80, 145, 0.23);
            border-radius: 14px;
            background: rgba(255,255,255,0.82);
        }
        .hero h1 {
            margin: 0;
        }
        .hero p {
            margin: 0.35rem 0 0 0;
            color: #244674;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _render_header() -> None:
    st.markdown(
        """
        <div class="hero">
          <h1>Statement Analyzer</h1>
          <p>Spending categories, top merchants and insights from a Date, Description, Amount CSV export.</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _fmt_money(value: float) -> str:
    return f"${value:,.2f}"


def _select_statement() -> Any:
    """Return an uploaded file, a local ``Path`` or ``None``."""
    source = st.sidebar.radio("Statement source", ["Upload", "Local folder"], horizontal=True)
    extensions = [ext.lstrip(".") for ext in STATEMENT_FILE_EXTENSIONS]

    if source == "Upload":
        return st.sidebar.file_uploader(
            "Statement file",
            type=extensions,
            help="CSV with a header row and Date, Description, Amount columns.",
        )

    folder = st.sidebar.text_input("Folder", value=str(Path.home() / "Downloads"))
    recursive = st.sidebar.checkbox("Include subfolders", value=False)
    try:
        paths = collect_statement_paths(folder, recursive=recursive)
    except (FileNotFoundError, NotADirectoryError) as exc:
        st.sidebar.error(str(exc))
        return None
    if not paths:
        st.sidebar.info("No statement files in this folder.")
        return None
    return st.sidebar.selectbox("Statement", paths, format_func=lambda p: p.name)


def _render_report(result: AnalysisResult) -> None:
    cols = st.columns(2)
    cols[0].metric("Total spending", _fmt_money(result.monthly_total))
    cols[1].metric("Transactions", f"{result.transaction_count:,}")

    st.subheader("Spending Categories")
    categories = pd.DataFrame(
        [
            {"Category": c.category, "Total": c.total, "Share %": round(c.percentage, 1)}
            for c in result.spending_categories
        ]
    )
    if categories.empty:
        st.info("No categories.")
    else:
        st.bar_chart(categories.set_index("Category")["Total"])
        st.dataframe(categories, hide_index=True)

    st.subheader("Top Merchants")
    merchants = pd.DataFrame(
        [{"Merchant": m.merchant, "Total": m.total, "Transactions": m.count} for m in result.top_merchants]
    )
    st.dataframe(merchants, hide_index=True)

    st.subheader("Insights & Recommendations")
    for insight in result.insights:
        # Unescaped dollar signs render as LaTeX.
        st.markdown("- " + insight.replace("$", "\\$"))

    st.download_button(
        "Download report (JSON)",
        data=result.to_json(indent=2),
        file_name="statement_report.json",
        mime="application/json",
    )


def main() -> None:
    _inject_styles()
    _render_header()

    choice = _select_statement()
    if choice is None:
        st.info("Choose a statement from the sidebar to start.")
        return

    with st.spinner("Analyzing statement..."):
        try:
            if isinstance(choice, Path):
                result = analyze_file(str(choice))
            else:
                result = analyze_upload(choice.name, choice.getvalue())
        except StatementNotFoundError as exc:
            st.error(str(exc))
            return

    if result.transaction_count == 0:
        st.warning("Showing sample data. See the insights below for why.")
    _render_report(result)


main()
