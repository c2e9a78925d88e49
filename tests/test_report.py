import asyncio
import json
import math
import tempfile
from pathlib import Path

import pytest

from report import (
    FallbackReason,
    FallbackReport,
    RealReport,
    StatementNotFoundError,
    analyze_file,
    analyze_statement,
    analyze_upload,
    evaluate_statement,
    sample_analysis,
)


def _write(tmp_path: Path, name: str, lines: list[str]) -> str:
    p = tmp_path / name
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(p)


def _statement(tmp_path: Path) -> str:
    return _write(
        tmp_path,
        "statement.csv",
        [
            "Date,Description,Amount",
            "2024-01-01,Starbucks Coffee,$4.50",
            "2024-01-02,AMAZON.COM,($25.00)",
            "2024-01-03,Shell Oil 123,40.00",
            "2024-01-04,Starbucks Coffee,$5.50",
            "2024-01-05,CVS Pharmacy,12.00",
            "2024-01-06,City Parking,3.00",
            "2024-01-07,Netflix Monthly,15.00",
        ],
    )


def test_analyze_file_builds_real_report(tmp_path: Path) -> None:
    result = analyze_file(_statement(tmp_path))

    assert result.transaction_count == 7
    assert math.isclose(result.monthly_total, 105.0)
    assert [c.category for c in result.spending_categories] == [
        "Gas & Transportation",
        "Shopping",
        "Entertainment",
        "Healthcare",
        "Food & Dining",
        "Other",
    ]
    assert math.isclose(sum(c.total for c in result.spending_categories), result.monthly_total)
    assert math.isclose(sum(c.percentage for c in result.spending_categories), 100.0)
    assert len(result.top_merchants) == 5
    totals = [m.total for m in result.top_merchants]
    assert totals == sorted(totals, reverse=True)
    assert result.insights[0] == "Successfully analyzed 7 transactions from statement.csv"
    assert result.insights[1] == (
        "Your largest spending category is Gas & Transportation at 38.1% of total spending"
    )


def test_analyze_file_two_row_example(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "small.csv",
        ["Date,Description,Amount", "2024-01-01,Starbucks Coffee,$4.50", "2024-01-02,AMAZON.COM,($25.00)"],
    )

    outcome = evaluate_statement(path)

    assert isinstance(outcome, RealReport)
    categories = {c.category: c.total for c in outcome.result.spending_categories}
    assert categories == {"Food & Dining": 4.5, "Shopping": 25.0}


def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(StatementNotFoundError) as excinfo:
        analyze_file(str(tmp_path / "missing.csv"))

    assert str(excinfo.value) == "File not found"
    assert isinstance(excinfo.value, FileNotFoundError)


@pytest.mark.parametrize("name", ["statement.pdf", "statement.xlsx"])
def test_unsupported_format_falls_back(tmp_path: Path, name: str) -> None:
    path = _write(tmp_path, name, ["Date,Description,Amount", "2024-01-01,Cafe,4.00"])

    outcome = evaluate_statement(path)
    result = analyze_file(path)

    assert outcome == FallbackReport(reason=FallbackReason.COULD_NOT_PARSE, file_name=name)
    assert result.transaction_count == 0
    assert any("could not parse" in line.lower() for line in result.insights)
    assert result.insights[0] == f"File: {name}"


def test_malformed_amount_falls_back_for_whole_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "bad.csv",
        ["Date,Description,Amount", "2024-01-01,Cafe,4.00", "2024-01-02,Store,twelve"],
    )

    result = analyze_file(path)

    assert result.transaction_count == 0
    assert result.monthly_total == 712.45
    assert "Could not parse file - showing sample data" in result.insights


def test_header_only_csv_reports_no_transactions(tmp_path: Path) -> None:
    path = _write(tmp_path, "empty.csv", ["Date,Description,Amount"])

    result = analyze_file(path)

    assert result.transaction_count == 0
    assert any("no transactions found" in line.lower() for line in result.insights)


def test_sample_analysis_content() -> None:
    result = sample_analysis("x.csv", "No transactions found in file")

    assert result.to_dict() == {
        "spending_categories": [
            {"category": "Food & Dining", "total": 250.50, "percentage": 35.2},
            {"category": "Gas & Transportation", "total": 180.25, "percentage": 25.3},
        ],
        "top_merchants": [{"merchant": "Sample Data", "total": 85.50, "count": 12}],
        "monthly_total": 712.45,
        "insights": [
            "File: x.csv",
            "No transactions found in file",
            "Showing sample data for demonstration",
            "Upload a CSV with Date, Description, Amount columns for real analysis",
        ],
        "transaction_count": 0,
    }


def test_analyze_is_idempotent(tmp_path: Path) -> None:
    path = _statement(tmp_path)

    first = analyze_file(path)
    second = analyze_file(path)

    assert first == second
    assert first.to_json() == second.to_json()


def test_analyze_statement_is_awaitable(tmp_path: Path) -> None:
    path = _statement(tmp_path)

    result = asyncio.run(analyze_statement(path))

    assert result == analyze_file(path)


def test_report_serializes_to_wire_fields(tmp_path: Path) -> None:
    payload = json.loads(analyze_file(_statement(tmp_path)).to_json())

    assert set(payload) == {
        "spending_categories",
        "top_merchants",
        "monthly_total",
        "insights",
        "transaction_count",
    }
    assert set(payload["spending_categories"][0]) == {"category", "total", "percentage"}
    assert set(payload["top_merchants"][0]) == {"merchant", "total", "count"}
    assert isinstance(payload["top_merchants"][0]["count"], int)


def test_unreachable_path_is_reported_as_not_found(tmp_path: Path) -> None:
    too_long = str(tmp_path / ("x" * 300 + ".csv"))

    with pytest.raises(StatementNotFoundError) as excinfo:
        analyze_file(too_long)

    assert str(excinfo.value) == "File not found"


def test_undecodable_csv_falls_back(tmp_path: Path) -> None:
    p = tmp_path / "latin.csv"
    p.write_bytes(b"Date,Description,Amount\n2024-01-01,Caf\xe9,4.00\n")

    outcome = evaluate_statement(str(p))

    assert outcome == FallbackReport(reason=FallbackReason.COULD_NOT_PARSE, file_name="latin.csv")
    assert outcome.to_result().transaction_count == 0


def test_directory_named_like_csv_falls_back(tmp_path: Path) -> None:
    folder = tmp_path / "exports.csv"
    folder.mkdir()

    outcome = evaluate_statement(str(folder))

    assert outcome == FallbackReport(reason=FallbackReason.COULD_NOT_PARSE, file_name="exports.csv")


def test_very_long_description_is_analyzed(tmp_path: Path) -> None:
    path = _write(tmp_path, "long.csv", ["Date,Description,Amount", "1,Starbucks " + "x" * 200_000 + ",4.00"])

    result = analyze_file(path)

    assert result.transaction_count == 1
    assert result.spending_categories[0].category == "Food & Dining"


def test_overflowing_totals_serialize_as_null(tmp_path: Path) -> None:
    path = _write(tmp_path, "huge.csv", ["Date,Description,Amount", "1,Vault A,1e308", "2,Vault B,1e308"])

    result = analyze_file(path)

    def _reject_constant(name: str) -> None:
        raise ValueError(name)

    payload = json.loads(result.to_json(), parse_constant=_reject_constant)
    assert math.isinf(result.monthly_total)
    assert payload["monthly_total"] is None
    assert payload["spending_categories"][0]["total"] is None
    assert payload["spending_categories"][0]["percentage"] is None
    assert payload["top_merchants"][0]["total"] == 1e308


def test_analyze_upload_cites_name_and_cleans_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    payload = b"Date,Description,Amount\n2024-01-01,Lyft ride,12.00\n"

    first = analyze_upload("uploads/march.csv", payload)
    second = analyze_upload("uploads/march.csv", payload)

    assert first == second
    assert first.insights[0] == "Successfully analyzed 1 transactions from march.csv"
    assert list(scratch.iterdir()) == []
