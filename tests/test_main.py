from typer.testing import CliRunner

from main import app

runner = CliRunner()


def _write(tmp_path, text):
    path = tmp_path / "sales.csv"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_report_prints_summary_series_and_items(tmp_path, sample_csv):
    result = runner.invoke(app, [_write(tmp_path, sample_csv)])

    assert result.exit_code == 0, result.output
    assert "Orders:                  5" in result.output
    assert "Returns / cancellations: 2" in result.output
    assert "Gross profit:            225.00" in result.output
    assert "Gross revenue:           1107.00" in result.output
    assert "Profit & revenue by week:" in result.output
    assert "Widget" in result.output


def test_report_with_range_and_interval(tmp_path, sample_csv):
    result = runner.invoke(
        app,
        [_write(tmp_path, sample_csv), "--start", "02-03-2024", "--end", "2024-03-04", "--interval", "month"],
    )

    assert result.exit_code == 0, result.output
    assert "Orders:                  2" in result.output
    assert "Profit & revenue by month:" in result.output


def test_report_empty_range(tmp_path, sample_csv):
    result = runner.invoke(app, [_write(tmp_path, sample_csv), "--start", "2030-01-01"])

    assert result.exit_code == 0
    assert "No data found for selected date range" in result.output


def test_report_parse_error_exits_nonzero(tmp_path):
    result = runner.invoke(app, [_write(tmp_path, "Date,ITEAMS\n2024/01/01,Widget\n")])

    assert result.exit_code == 1
    assert "dd-mm-yyyy" in result.output


def test_report_rejects_unknown_interval(tmp_path, sample_csv):
    result = runner.invoke(app, [_write(tmp_path, sample_csv), "--interval", "fortnight"])
    assert result.exit_code == 2


def test_report_missing_file(tmp_path):
    result = runner.invoke(app, [str(tmp_path / "nope.csv")])
    assert result.exit_code == 2
