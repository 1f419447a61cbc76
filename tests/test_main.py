"""Tests for the command-line interface."""
import pytest
from click.testing import CliRunner

import main


@pytest.fixture(autouse=True)
def _logger(clean_logger):
    return clean_logger


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main.cli, ["--data-dir", str(tmp_path), *args])

    return _run


def test_generate_then_show(run):
    generated = run("generate")
    assert generated.exit_code == 0
    url = generated.output.strip()
    assert url.startswith("https://vdo.ninja/?push=")

    shown = run("show")
    assert shown.exit_code == 0
    assert shown.output.strip() == url


def test_show_without_saved_link(run):
    result = run("show")
    assert result.exit_code == 1
    assert "No saved link." in result.output


def test_set_without_audience(run):
    assert run("set", "abc123").exit_code == 0
    assert run("show").output.strip() == "https://vdo.ninja/?push=abc123"


def test_set_with_valid_audience(run):
    result = run("set", "abc123", "--audience", "Valid1Pass!")
    assert result.exit_code == 0
    assert result.output.strip() == "https://vdo.ninja/?push=abc123&audience=Valid1Pass!"


def test_set_with_weak_audience_reports_reason(run):
    result = run("set", "abc123", "--audience", "lowercase1!")
    assert result.exit_code == 1
    assert "Password must contain at least one uppercase letter." in result.output


def test_set_with_blank_push_id(run):
    result = run("set", " ")
    assert result.exit_code == 1
    assert "Push ID (Room Name) is required." in result.output


def test_generate_copy_to_clipboard(run, monkeypatch):
    copied = []
    monkeypatch.setattr(main.pyperclip, "copy", copied.append)

    result = run("generate", "--copy")

    assert result.exit_code == 0
    assert copied == [result.output.splitlines()[0]]


def test_generate_copy_failure_is_not_fatal(run, monkeypatch):
    def fail(text):
        raise main.pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(main.pyperclip, "copy", fail)

    result = run("generate", "--copy")

    assert result.exit_code == 0
    assert "Could not copy to clipboard" in result.output


@pytest.mark.parametrize("password, expected", [
    ("Valid1Pass!", "OK"),
    ("NoDigits!!", "Password must contain at least one digit."),
])
def test_check_password(run, password, expected):
    result = run("check-password", password)
    assert result.output.strip() == expected
    assert result.exit_code == (0 if expected == "OK" else 1)


def test_show_with_corrupt_key_file_reports_storage_error(run, tmp_path):
    assert run("set", "abc123").exit_code == 0
    with open(tmp_path / "encryption.key", "wb") as fh:
        fh.write(b"\xff\xfe" * 16)

    result = run("show")

    assert result.exit_code == 1
    assert "Cannot read key file" in result.output
