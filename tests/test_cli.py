import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from notecraft.cli import app

runner = CliRunner()

NOTE_ARGS = [
    "new",
    "-t",
    "Attention",
    "-f",
    "My New Note!",
    "-d",
    "Transformer paper",
    "-u",
    "https://arxiv.org/abs/1706.03762",
]


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("notecraft.config.load_dotenv", lambda: False)
    for name in ("NOTECRAFT_LOG_LEVEL", "NOTECRAFT_TAGS_FILE", "NOTECRAFT_PDFTOTEXT", "NOTECRAFT_SKIM_LINES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NOTECRAFT_EDITOR", "definitely-not-an-editor")
    return tmp_path


def _notes(path: Path) -> list[Path]:
    return sorted(path.glob("*.md"))


def test_new_writes_note(workdir: Path, tags_file: Path):
    result = runner.invoke(
        app,
        NOTE_ARGS + ["-c", "false", "--tags-file", str(tags_file)],
        input="9\n2\n2\ndone\n",
    )
    assert result.exit_code == 0, result.output
    note = workdir / "My_New_Note.md"
    text = note.read_text(encoding="utf-8")
    assert "Status: read\n" in text
    assert "Tags: [[maths]]\n" in text
    assert "  tags: [maths]\n" in text
    assert "Successfully created My_New_Note.md" in result.stdout
    assert "Skipping editor launch" in result.stdout


def test_new_requires_url(workdir: Path, tags_file: Path):
    args = [a for a in NOTE_ARGS if a not in ("-u", "https://arxiv.org/abs/1706.03762")]
    result = runner.invoke(app, args + ["-c", "false", "--tags-file", str(tags_file)])
    assert result.exit_code == 1
    assert "Required options" in result.output
    assert "Usage:" in result.output
    assert _notes(workdir) == []


def test_new_rejects_bad_open_code(workdir: Path, tags_file: Path):
    result = runner.invoke(app, NOTE_ARGS + ["-c", "maybe", "--tags-file", str(tags_file)])
    assert result.exit_code == 1
    assert "--open-code must be 'true' or 'false'." in result.output


def test_new_rejects_stray_arguments(workdir: Path, tags_file: Path):
    result = runner.invoke(app, NOTE_ARGS + ["stray", "-c", "false", "--tags-file", str(tags_file)])
    assert result.exit_code == 1
    assert "Unrecognized arguments: 'stray'" in result.output


def test_new_fails_without_editor_when_opening(workdir: Path, tags_file: Path):
    result = runner.invoke(app, NOTE_ARGS + ["--tags-file", str(tags_file)], input="1\ndone\n")
    assert result.exit_code == 1
    assert "definitely-not-an-editor" in result.output
    assert _notes(workdir) == []


def test_new_launches_editor(workdir: Path, tags_file: Path, monkeypatch):
    bin_dir = workdir / "bin"
    bin_dir.mkdir()
    editor = bin_dir / "fakeeditor"
    editor.write_text('#!/bin/sh\nprintf "%s" "$1" > opened.txt\n', encoding="utf-8")
    os.chmod(editor, 0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("NOTECRAFT_EDITOR", "fakeeditor")

    result = runner.invoke(app, NOTE_ARGS + ["--tags-file", str(tags_file)], input="5\ndone\n")

    assert result.exit_code == 0, result.output
    assert "Launching fakeeditor with My_New_Note.md..." in result.stdout
    assert (workdir / "opened.txt").read_text(encoding="utf-8") == "My_New_Note.md"


def test_new_aborts_on_closed_input(workdir: Path, tags_file: Path):
    result = runner.invoke(app, NOTE_ARGS + ["-c", "false", "--tags-file", str(tags_file)], input="")
    assert result.exit_code == 1
    assert _notes(workdir) == []


def test_new_missing_tags_file(workdir: Path):
    result = runner.invoke(app, NOTE_ARGS + ["-c", "false", "--tags-file", "nope.json"])
    assert result.exit_code == 1
    assert "Tags file 'nope.json' not found." in result.output


def test_select_tags_test_mode(workdir: Path, tags_file: Path):
    result = runner.invoke(
        app,
        ["select-tags", "-t", str(tags_file), "--test-mode", "--test-responses", "1,3,1 4,4,1 3,done"],
    )
    assert result.exit_code == 0, result.output
    assert result.stdout.strip().splitlines()[-1] == "coding,go,bash,reading,papers"


def test_select_tags_interactive(workdir: Path, tags_file: Path):
    result = runner.invoke(app, ["select-tags", "--tags-file", str(tags_file)], input="2 3\ndone\n")
    assert result.exit_code == 0, result.output
    assert result.stdout.strip().splitlines()[-1] == "maths,physics"


def test_select_tags_requires_responses_in_test_mode(workdir: Path, tags_file: Path):
    result = runner.invoke(app, ["select-tags", "-t", str(tags_file), "--test-mode"])
    assert result.exit_code == 1
    assert "--test-responses is required" in result.output


def test_select_tags_exhausted_responses(workdir: Path, tags_file: Path):
    result = runner.invoke(
        app, ["select-tags", "-t", str(tags_file), "--test-mode", "--test-responses", "2,3"]
    )
    assert result.exit_code == 1
    assert "Test responses exhausted" in result.output


def test_select_tags_missing_store(workdir: Path):
    result = runner.invoke(app, ["select-tags", "--test-mode", "--test-responses", "done"])
    assert result.exit_code == 1
    assert "all_tags.json" in result.output


def test_skim_requires_path(workdir: Path):
    result = runner.invoke(app, ["skim"])
    assert result.exit_code == 1
    assert "PDF filename not provided." in result.output


def test_skim_missing_file(workdir: Path):
    result = runner.invoke(app, ["skim", "missing.pdf"])
    assert result.exit_code == 1
    assert "File 'missing.pdf' not found." in result.output


def test_skim_prints_summary(workdir: Path, fake_pdftotext: Path, monkeypatch):
    monkeypatch.setenv("NOTECRAFT_PDFTOTEXT", str(fake_pdftotext))
    (workdir / "paper.pdf").write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["skim", "-n", "3", "paper.pdf"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip().splitlines()[-1] == "pages 1-2 of paper.pdf"


def test_extract_pages_to_stdout(workdir: Path, fake_pdftotext: Path, monkeypatch):
    monkeypatch.setenv("NOTECRAFT_PDFTOTEXT", str(fake_pdftotext))
    (workdir / "paper.pdf").write_bytes(b"%PDF-1.4")
    result = runner.invoke(app, ["extract-pages", "*.pdf", "1", "2"])
    assert result.exit_code == 0, result.output
    assert "./paper.pdf\npages 1-2 of paper.pdf\n" in result.stdout


def test_unknown_log_level(workdir: Path):
    result = runner.invoke(app, ["--log-level", "chatty", "skim"])
    assert result.exit_code == 1
    assert "Unknown log level 'CHATTY'." in result.output


def test_new_help_exits_one(workdir: Path):
    result = runner.invoke(app, ["new", "--help"])
    assert result.exit_code == 1
    assert "Usage" in result.output
    assert "--title" in result.output


def test_new_option_without_value_exits_one(workdir: Path, tags_file: Path):
    args = NOTE_ARGS[:-1]
    assert args[-1] == "-u"
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "-u" in result.output
    assert _notes(workdir) == []


def test_skim_non_integer_nlines_exits_one(workdir: Path):
    result = runner.invoke(app, ["skim", "-n", "abc", "paper.pdf"])
    assert result.exit_code == 1
    assert "abc" in result.output
