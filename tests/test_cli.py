"""Tests for the mdlint command line interface."""
import json

import pytest

from mdlint import __version__
from mdlint.cli import EXIT_CLEAN, EXIT_ERROR, EXIT_VIOLATIONS, main

CLEAN = "# Title\n\nText.\n"


@pytest.fixture(autouse=True)
def workspace(monkeypatch, tmp_path):
    for name in ("MDLINT_STYLE", "MDLINT_FORMAT", "MDLINT_WORKERS", "MDLINT_LOG_LEVEL", "MDLINT_FRONT_MATTER"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _main(*argv) -> int:
    with pytest.raises(SystemExit) as exc:
        main(list(argv))
    return exc.value.code


def test_clean_file_exits_zero(tmp_path, capsys):
    (tmp_path / "clean.md").write_text(CLEAN)

    assert _main("lint", str(tmp_path / "clean.md")) == EXIT_CLEAN
    assert capsys.readouterr().out == ""


def test_violations_exit_one(tmp_path, capsys):
    path = tmp_path / "doc.md"
    path.write_text("# Title\n\n# Again")

    assert _main("lint", str(path)) == EXIT_VIOLATIONS

    out = capsys.readouterr().out.splitlines()
    assert out == [
        f"{path}:3: [MD025] Multiple level 1 headers in the same document",
        f"{path}:3: [MD047] File should end with a single newline character",
    ]


def test_style_file_in_working_directory(tmp_path):
    (tmp_path / ".mdl_style.rb").write_text("exclude_rule 'MD025'\nexclude_rule 'MD047'\n")
    (tmp_path / "doc.md").write_text("# Title\n\n# Again")

    assert _main("lint", "doc.md") == EXIT_CLEAN


def test_explicit_config(tmp_path):
    style = tmp_path / "strict.rb"
    style.write_text("all\n")
    (tmp_path / "doc.md").write_text("Text\n")

    assert _main("lint", "doc.md") == EXIT_CLEAN
    # MD041 is only enabled by `all`
    assert _main("lint", "--config", str(style), "doc.md") == EXIT_VIOLATIONS


def test_configuration_error_exits_two(tmp_path, capsys):
    style = tmp_path / "bad.rb"
    style.write_text("rule 'MD999'\n")
    (tmp_path / "doc.md").write_text(CLEAN)

    assert _main("lint", "--config", str(style), "doc.md") == EXIT_ERROR
    captured = capsys.readouterr()
    assert captured.err.startswith("Error: Unknown rule: MD999")
    assert captured.out == ""


def test_missing_style_exits_two(tmp_path, capsys):
    (tmp_path / "doc.md").write_text(CLEAN)

    assert _main("lint", "--config", "absent.rb", "doc.md") == EXIT_ERROR
    assert "Style file not found" in capsys.readouterr().err


def test_document_fault_exits_two(tmp_path, capsys):
    (tmp_path / "doc.md").write_text(CLEAN)

    assert _main("lint", "doc.md", "missing.md") == EXIT_ERROR
    assert "[document-fault]" in capsys.readouterr().out


def test_directory_and_json_output(tmp_path, capsys):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text(CLEAN)
    (docs / "b.md").write_text("Text \n")

    assert _main("lint", "--format", "json", "--workers", "2", str(docs)) == EXIT_VIOLATIONS

    payload = json.loads(capsys.readouterr().out)
    assert [r["path"] for r in payload["results"]] == [str(docs / "a.md"), str(docs / "b.md")]
    assert payload["results"][1]["violations"][0]["rule"] == "MD009"


def test_no_front_matter_flag(tmp_path):
    (tmp_path / "doc.md").write_text("---\ntitle: X\n---\n\nText\n")

    assert _main("lint", "doc.md") == EXIT_CLEAN
    # Without front matter the block is an hr followed by a setext header
    assert _main("lint", "--no-front-matter", "doc.md") == EXIT_VIOLATIONS


def test_rules_command(capsys):
    assert _main("rules") == EXIT_CLEAN
    assert "MD013" in capsys.readouterr().out


def test_rules_command_json(tmp_path, capsys):
    style = tmp_path / "style.rb"
    style.write_text("all\nexclude_rule 'MD033'\n")

    assert _main("rules", "--format", "json", "--config", str(style)) == EXIT_CLEAN

    rules = {r["id"]: r for r in json.loads(capsys.readouterr().out)["rules"]}
    assert len(rules) == 35
    assert rules["MD033"]["enabled"] is False
    assert rules["MD002"]["enabled"] is True


def test_version(capsys):
    assert _main("--version") == 0
    assert __version__ in capsys.readouterr().out


def test_subcommand_required(capsys):
    assert _main() == 2
