from collections.abc import Callable
from pathlib import Path
import sys

import pytest
from typer.testing import CliRunner

from texbake.core.config import CompilerConfig
from texbake.ui.cli import app


runner = CliRunner()

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="stub compilers are sh scripts")


def test_convert_file_to_stdout(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_text("<h1>Title</h1><p>Fish &amp; chips</p>", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source)])

    assert result.exit_code == 0, result.output
    assert "\\section{Title}Fish & chips \\newline" in result.output


def test_convert_reads_stdin() -> None:
    result = runner.invoke(app, ["convert", "-"], input="<b>bold</b>")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "\\textbf{bold}"


def test_convert_with_rules_file(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_text('<b>x</b> <a href="https://example.org">y</a>', encoding="utf-8")
    rules = tmp_path / "rules.yml"
    rules.write_text(
        "rules:\n"
        "  - tag: b\n"
        "    extract: value\n"
        "    replace: '\\textsf{$1}'\n"
        "  - tag: a\n"
        "    extract: href\n"
        "    replace: '\\url{$1}'\n",
        encoding="utf-8",
    )
    output = tmp_path / "page.tex"

    result = runner.invoke(
        app, ["convert", str(source), "--rules", str(rules), "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == "\\textsf{x} \\url{https://example.org}"


def test_convert_rejects_invalid_rules(tmp_path: Path) -> None:
    source = tmp_path / "page.html"
    source.write_text("<b>x</b>", encoding="utf-8")
    rules = tmp_path / "rules.yml"
    rules.write_text("rules: 3\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source), "--rules", str(rules)])

    assert result.exit_code == 1
    assert "must contain a list" in result.output


@posix_only
def test_build_success(config_for: Callable[..., CompilerConfig], tmp_path: Path) -> None:
    config = config_for("success")
    source = tmp_path / "doc.tex"
    source.write_text("\\relax", encoding="utf-8")
    target = tmp_path / "doc.pdf"

    result = runner.invoke(
        app,
        [
            "build",
            str(source),
            "--compiler",
            str(config.bin_path),
            "--temp-dir",
            str(config.temp_path),
            "-o",
            str(target),
        ],
    )

    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == "\\relax"
    assert list(config.temp_path.iterdir()) == []


@posix_only
def test_build_failure_reports_errors(
    config_for: Callable[..., CompilerConfig], tmp_path: Path
) -> None:
    config = config_for("failure")
    settings = tmp_path / "texbake.yml"
    settings.write_text(
        f"texbake:\n  bin_path: {config.bin_path}\n  temp_path: {config.temp_path}\n",
        encoding="utf-8",
    )
    source = tmp_path / "doc.tex"
    source.write_text("\\foo", encoding="utf-8")

    result = runner.invoke(app, ["build", str(source), "--config", str(settings)])

    assert result.exit_code == 1
    assert "LaTeX compilation failed." in result.output
    assert "Undefined control sequence." in result.output
    assert not (tmp_path / "doc.pdf").exists()


@posix_only
def test_dry_run(config_for: Callable[..., CompilerConfig], tmp_path: Path) -> None:
    config = config_for("success")
    target = tmp_path / "check.pdf"

    result = runner.invoke(
        app,
        [
            "dry-run",
            "--compiler",
            str(config.bin_path),
            "--temp-dir",
            str(config.temp_path),
            "-o",
            str(target),
        ],
    )

    assert result.exit_code == 0, result.output
    assert target.exists()
