from __future__ import annotations

import textwrap
from pathlib import Path

from htmlplusplus.cli import cli


def _write(tmp_path: Path, filename: str, content: str) -> Path:
    path = tmp_path / filename
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_html(cli_runner, tmp_path):
    target = _write(
        tmp_path,
        "post.hpp",
        """
        <heading>Intro</heading>
        <note>Careful</note>
        """,
    )

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert result.output == (
        '<h2 class="hpp_header">Intro</h2>\n<div class="note_box">Careful</div>\n'
    )


def test_cli_writes_output_file(cli_runner, tmp_path):
    target = _write(tmp_path, "post.hpp", "<b>bold</b>")
    destination = tmp_path / "post.html"

    result = cli_runner.invoke(cli, [str(target), "--output", str(destination)])

    assert result.exit_code == 0, result.output
    assert result.output == ""
    assert destination.read_text(encoding="utf-8") == "<b>bold</b>"


def test_cli_overwrites_existing_output(cli_runner, tmp_path):
    target = _write(tmp_path, "post.hpp", "new")
    destination = tmp_path / "post.html"
    destination.write_text("old", encoding="utf-8")

    result = cli_runner.invoke(cli, [str(target), "-o", str(destination)])

    assert result.exit_code == 0, result.output
    assert destination.read_text(encoding="utf-8") == "new"


def test_cli_reports_parse_errors_with_context(cli_runner, tmp_path):
    target = _write(tmp_path, "broken.hpp", "<p>text</q>")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "</q> occurred without a corresponding open tag." in result.output
    assert "The problem occurred somewhere around: '<p>text</q>'" in result.output


def test_cli_language_option(cli_runner, tmp_path):
    target = _write(tmp_path, "code.hpp", "<code>None</code>")

    result = cli_runner.invoke(cli, [str(target), "--language", "python"])

    assert result.exit_code == 0, result.output
    assert '<span class="bhsh_constant">None</span>' in result.output


def test_cli_rejects_unknown_language(cli_runner, tmp_path):
    target = _write(tmp_path, "code.hpp", "<code>x</code>")

    result = cli_runner.invoke(cli, [str(target), "--language", "ruby"])

    assert result.exit_code == 2
    assert "`default_language` must be one of" in result.output


def test_cli_enable_backticks_flag(cli_runner, tmp_path):
    target = _write(tmp_path, "inline.hpp", "use `x`")

    plain = cli_runner.invoke(cli, [str(target)])
    enabled = cli_runner.invoke(cli, [str(target), "--enable-backticks"])

    assert plain.output == "use `x`"
    assert enabled.output == 'use <span class="inline_code">x</span>'


def test_cli_strict_flag(cli_runner, tmp_path):
    target = _write(tmp_path, "open.hpp", "<p>unclosed")

    lenient = cli_runner.invoke(cli, [str(target)])
    strict = cli_runner.invoke(cli, [str(target), "--strict"])

    assert lenient.exit_code == 0
    assert strict.exit_code == 1
    assert "<p> was never closed." in strict.output


def test_cli_reads_config_from_pyproject(cli_runner, tmp_path):
    _write_pyproject(
        tmp_path,
        """
        [tool.htmlplusplus]
        backticks_enabled = true
        """,
    )
    target = _write(tmp_path, "inline.hpp", "`x`")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert result.output == '<span class="inline_code">x</span>'


def test_cli_rejects_invalid_config(cli_runner, tmp_path):
    _write_pyproject(tmp_path, "[tool.htmlplusplus]\ntab_size = -2\n")
    target = _write(tmp_path, "post.hpp", "x")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "`tab_size` must be a positive integer" in result.output


def test_cli_rejects_unsupported_extension(cli_runner, tmp_path):
    target = _write(tmp_path, "notes.md", "x")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "is not an HTML++ file" in result.output


def test_cli_compiles_symlinked_source(cli_runner, tmp_path):
    target = _write(tmp_path, "real.hpp", "<note>x</note>")
    link = tmp_path / "link.hpp"
    link.symlink_to(target)

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code == 0
    assert result.output == '<div class="note_box">x</div>'


def test_cli_enforces_max_file_size(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("HTMLPLUSPLUS_MAX_FILE_SIZE", "4")
    target = _write(tmp_path, "big.hpp", "too large")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "over the limit of 4 bytes" in result.output


def test_cli_rejects_invalid_size_env(cli_runner, tmp_path, monkeypatch):
    monkeypatch.setenv("HTMLPLUSPLUS_MAX_FILE_SIZE", "lots")
    target = _write(tmp_path, "post.hpp", "x")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "HTMLPLUSPLUS_MAX_FILE_SIZE must be a positive integer, got 'lots'" in result.output


def test_cli_reports_invalid_utf8(cli_runner, tmp_path):
    target = tmp_path / "latin1.hpp"
    target.write_bytes(b"caf\xe9")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "Invalid UTF-8 sequence" in result.output
