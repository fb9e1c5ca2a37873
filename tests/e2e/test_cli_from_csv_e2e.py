from __future__ import annotations

import csv
import json
import textwrap
from pathlib import Path

import pytest
from typer.testing import CliRunner

from expense_categorizer.cli import app

runner = CliRunner()

CATEGORIES = {
    "Transportation": ["uber", "posto"],
    "Food": ["ifood", "padaria"],
    "Salary": ["salario"],
    "Health": ["farmacia"],
}


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return path


def _write_categories(cats: dict | None = None) -> Path:
    p = Path("categories.json")
    p.write_text(json.dumps(cats if cats is not None else CATEGORIES), encoding="utf-8")
    return p


def _data_rows(path: Path) -> tuple[list[str], list[list[str]], list[list[str]]]:
    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    header, body = rows[0], rows[1:]
    end = next(i for i, r in enumerate(body) if not any(r))
    return header, body[:end], body[end:]


def test_uber_trip_end_to_end():
    _write_categories({"Transportation": ["uber"]})
    _write(
        Path("credit.csv"),
        """
        title,value
        Uber Trip,"25,00"
        """,
    )

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    out = Path("categorized_expenses.csv")
    header, data, summary = _data_rows(out)
    assert header == ["Name", "Value", "Category", "Type", "Source"]
    assert data == [["Uber Trip", "-25.0", "Transportation", "Expense", "credit.csv"]]

    labels = {r[0]: r[1] for r in summary if any(r)}
    assert labels["Transportation"] == "-25.00"
    assert labels["Total Expenses"] == "-25.00"
    assert labels["Total Income"] == "0.00"
    assert labels["Net Balance"] == "-25.00"
    # debit.csv is absent: warned about, not fatal
    assert "debit.csv" in result.output


def test_mixed_sources_with_duplicates_tolls_and_dates():
    _write_categories()
    _write(
        Path("credit.csv"),
        """
        date,title,amount
        2025-01-20,Uber *Trip,"18,90"
        2025-01-05,NuTag Pedagio,"7,50"
        2025-01-06,NuTag Pedagio,"9,10"
        2025-01-02,iFood *Restaurante,"42,00"
        """,
    )
    _write(
        Path("debit.csv"),
        """
        Data,Valor,Identificador,Descrição
        10/01/2025,-1200.00,a1,Pagamento de fatura
        15/01/2025,3500.00,a2,Salario ACME LTDA
        03/01/2025,-35.20,a3,Farmacia Sao Joao
        """,
    )

    result = runner.invoke(app, [])
    assert result.exit_code == 0, result.output

    header, data, summary = _data_rows(Path("categorized_expenses.csv"))
    assert header == ["Date", "Name", "Value", "Category", "Type", "Source"]
    assert [r[0] for r in data] == ["02/01/2025", "03/01/2025", "15/01/2025", "20/01/2025", ""]
    toll = data[-1]
    assert toll[1] == "Pedágios NuTag"
    assert float(toll[2]) == pytest.approx(-16.6, abs=1e-9)
    assert toll[3:] == ["Transportation", "Expense", "Consolidated"]
    assert not any("fatura" in r[1].lower() for r in data)

    labels = {r[1]: r[2] for r in summary if any(r)}
    assert labels["Total Income"] == "3500.00"
    assert labels["Total Expenses"] == f"{-18.9 - 16.6 - 42.0 - 35.2:.2f}"


def test_no_transactions_exits_cleanly_without_output():
    _write_categories()
    Path("categorized_expenses.csv").write_text("previous run", encoding="utf-8")

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert "No transactions found" in result.output
    assert Path("categorized_expenses.csv").read_text(encoding="utf-8") == "previous run"


def test_no_transactions_does_not_create_output():
    _write_categories()
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert not Path("categorized_expenses.csv").exists()


def test_explicit_sources_output_and_formula_mode(tmp_path: Path):
    _write_categories()
    src = _write(
        tmp_path / "conta.csv",
        """
        Descrição,Valor
        Padaria Pao Quente,-12.5
        Posto Shell,-150
        """,
    )
    out = tmp_path / "report.csv"

    result = runner.invoke(
        app,
        ["--source", f"{src}:debit", "--output", str(out), "--summary-mode", "formula"],
    )

    assert result.exit_code == 0, result.output
    _, data, summary = _data_rows(out)
    assert [r[4] for r in data] == ["conta.csv", "conta.csv"]
    labels = {r[0]: r[1] for r in summary if any(r)}
    assert labels["Food"] == '=SUMIF(C2:C3,"Food",B2:B3)'
    assert labels["Net Balance"].startswith("=B")


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    _write_categories()
    _write(
        Path("extrato.csv"),
        """
        Descrição,Valor
        Transferência recebida pelo Pix,80
        """,
    )
    monkeypatch.setenv("EC_SOURCES", "extrato.csv:debit")
    monkeypatch.setenv("EC_OUTPUT_PATH", str(tmp_path / "env.csv"))
    monkeypatch.setenv("EC_TRANSFER_FALLBACK", "yes")

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    _, data, _ = _data_rows(tmp_path / "env.csv")
    assert data[0][2] == "Ride Sharing Income"


def test_cli_option_overrides_environment(monkeypatch: pytest.MonkeyPatch):
    _write_categories()
    _write(Path("extrato.csv"), "Descrição,Valor\nPix enviado,-5\n")
    monkeypatch.setenv("EC_SOURCES", "extrato.csv:debit")
    monkeypatch.setenv("EC_TRANSFER_FALLBACK", "1")

    result = runner.invoke(app, ["--no-transfer-fallback"])

    assert result.exit_code == 0, result.output
    _, data, _ = _data_rows(Path("categorized_expenses.csv"))
    assert data[0][2] == "Uncategorized"


@pytest.mark.parametrize(
    "categories_text",
    ["{not json", '["a", "b"]', '{"Food": [""]}', '{"Food": "ifood"}'],
)
def test_malformed_configuration_is_fatal(categories_text: str):
    Path("categories.json").write_text(categories_text, encoding="utf-8")
    _write(Path("credit.csv"), "title,value\nUber,1\n")

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not Path("categorized_expenses.csv").exists()


def test_missing_configuration_is_fatal():
    _write(Path("credit.csv"), "title,value\nUber,1\n")
    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "category configuration not found" in result.output


def test_unwritable_output_is_fatal(tmp_path: Path):
    _write_categories()
    _write(Path("credit.csv"), "title,value\nUber,1\n")

    result = runner.invoke(app, ["--output", str(tmp_path / "nope" / "out.csv")])

    assert result.exit_code == 1
    assert "cannot write report" in result.output


def test_invalid_source_spec_is_fatal():
    _write_categories()
    result = runner.invoke(app, ["--source", "credit.csv:savings"])
    assert result.exit_code == 1
    assert "invalid source type" in result.output


def test_malformed_values_are_reported():
    _write_categories()
    _write(Path("credit.csv"), "title,value\nUber,abc\nPadaria,5\n")

    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert "unparseable" in result.output
    _, data, _ = _data_rows(Path("categorized_expenses.csv"))
    assert data[0][1] == "0.0"


def test_unquoted_decimal_comma_fails_instead_of_truncating():
    _write_categories()
    _write(Path("credit.csv"), "title,value\nUber Trip,25,90\n")

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "expected 2 columns, got 3" in result.output
    assert not Path("categorized_expenses.csv").exists()
