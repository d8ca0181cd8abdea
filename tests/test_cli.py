from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner
from pypdf import PdfReader

from page_splitter.cli import cli


@pytest.fixture()
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    for name in ("OUTPUT_DIR", "STORAGE", "ROLLBACK", "STRICT", "LOG_LEVEL"):
        monkeypatch.delenv(f"PAGE_SPLITTER_{name}", raising=False)
    return CliRunner()


def test_info_command(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 0, result.output
    assert "Number of Pages" in result.output
    assert "Test Author" in result.output
    assert "2024-02-23 14:15:09" in result.output


def test_check_range_reports_pages_and_dropped_tokens(runner: CliRunner, ten_page_pdf: Path) -> None:
    result = runner.invoke(cli, ["check-range", str(ten_page_pdf), "1-3,x,5"])

    assert result.exit_code == 0, result.output
    assert "1,2,3,5" in result.output
    assert "x" in result.output


def test_check_range_strict_fails_on_dropped_token(runner: CliRunner, ten_page_pdf: Path) -> None:
    result = runner.invoke(cli, ["check-range", str(ten_page_pdf), "1-3,x", "--strict"])

    assert result.exit_code == 1


def test_check_range_invalid_expression(runner: CliRunner, ten_page_pdf: Path) -> None:
    result = runner.invoke(cli, ["check-range", str(ten_page_pdf), "15"])

    assert result.exit_code == 1
    assert "does not select" in result.output


def test_split_selected_pages(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    output_root = tmp_path / "out"
    result = runner.invoke(
        cli, ["split", str(sample_pdf), "--pages", "2,4", "--output-dir", str(output_root)]
    )

    assert result.exit_code == 0, result.output
    assert "Successfully split into 2 pages" in result.output

    folder = output_root / "PDF Splitter" / "sample"
    assert sorted(path.name for path in folder.iterdir()) == ["page_2.pdf", "page_4.pdf"]
    assert len(PdfReader(str(folder / "page_4.pdf")).pages) == 1


def test_split_all_pages_with_scoped_storage(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli,
        ["split", str(sample_pdf), "-o", str(tmp_path), "--storage", "scoped"],
    )

    assert result.exit_code == 0, result.output
    assert "Documents/PDF Splitter/sample" in result.output
    folder = tmp_path / "Documents" / "PDF Splitter" / "sample"
    assert len(list(folder.glob("page_*.pdf"))) == 4


def test_split_rejects_range_selecting_nothing(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(cli, ["split", str(sample_pdf), "--pages", "9", "-o", str(tmp_path)])

    assert result.exit_code == 1
    assert not (tmp_path / "PDF Splitter").exists()


def test_split_strict_rejects_dropped_tokens(runner: CliRunner, sample_pdf: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli, ["split", str(sample_pdf), "--pages", "1,9", "--strict", "-o", str(tmp_path)]
    )

    assert result.exit_code == 1
    assert "'9'" in result.output


def test_split_uses_environment_settings(
    runner: CliRunner,
    sample_pdf: Path,
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PAGE_SPLITTER_OUTPUT_DIR", str(tmp_path / "env"))
    monkeypatch.setenv("PAGE_SPLITTER_STORAGE", "scoped")

    result = runner.invoke(cli, ["split", str(sample_pdf), "--pages", "1"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "env" / "Documents" / "PDF Splitter" / "sample" / "page_1.pdf").exists()


def test_invalid_storage_in_environment_is_usage_error(
    runner: CliRunner,
    sample_pdf: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PAGE_SPLITTER_STORAGE", "cloud")

    result = runner.invoke(cli, ["info", str(sample_pdf)])

    assert result.exit_code == 2
