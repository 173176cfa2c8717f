"""
Tests for terminal rendering and the command-line entry point.
"""

import json

from rich.console import Console

from content_validator import main as main_module
from content_validator.core.models import ProviderId
from content_validator.core.rubrics import PRE_READ_RUBRIC
from content_validator.interaction.cli import CLI

from conftest import FakeProvider, make_response


def _cli():
    return CLI(console=Console(record=True, width=160))


async def test_show_result(make_engine, lecture_context, lecture_rubric, sample_content):
    a = FakeProvider(["garbage"], ProviderId.OPENAI, "gpt")
    b = FakeProvider([make_response(lecture_rubric)], ProviderId.GEMINI, "gemini")
    result = await make_engine(a, b).validate(sample_content, lecture_context)

    cli = _cli()
    cli.show_result(result, lecture_rubric)
    text = cli.console.export_text()

    assert "Content Structure and Organization" in text
    assert "Overall score: 80/100" in text
    assert "Genuine providers: GEMINI" in text
    assert "Single-source score" in text
    assert "Add a short practice section." in text


def test_show_rubric():
    cli = _cli()
    cli.show_rubric(PRE_READ_RUBRIC)
    text = cli.console.export_text()

    assert "sourceQuality" in text
    assert "Practical Application" in text
    assert "100" in text


def test_show_providers():
    cli = _cli()
    cli.show_providers({
        "openai": {"provider_id": "OPENAI", "model": "gpt-4o-mini", "configured": True,
                   "slot_a": True, "slot_b": False},
        "gemini": {"provider_id": "GEMINI", "model": "gemini-2.5-flash", "configured": False,
                   "slot_a": False, "slot_b": True},
    })
    text = cli.console.export_text()

    assert "gpt-4o-mini" in text
    assert "no (stub)" in text


def test_progress_events_render():
    cli = _cli()
    cli.show_progress_event("round_start", {"round": 2})
    cli.show_progress_event("provider_complete", {"provider": "gpt", "genuine": True, "score": 72.5})
    cli.show_progress_event("provider_complete", {"provider": "gemini", "genuine": False,
                                                  "error_kind": "ProviderTimeoutError"})
    text = cli.console.export_text()

    assert "Round 2" in text
    assert "gpt: 72.5/100" in text
    assert "stub (ProviderTimeoutError)" in text


def test_main_rubric_command(capsys):
    assert main_module.main(["rubric", "ASSIGNMENT"]) == 0


def test_parse_prerequisites():
    assert main_module._parse_prerequisites(["Loops, Functions", "Arrays"]) == ["Loops", "Functions", "Arrays"]
    assert main_module._parse_prerequisites(None) == ["General Knowledge"]


def test_main_validate_contract_violation(tmp_path, monkeypatch):
    """Test an ASSIGNMENT without difficulty exits with status 2."""
    monkeypatch.delenv("CONTENT_VALIDATOR_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("CONTENT_VALIDATOR_GEMINI_API_KEY", raising=False)
    path = tmp_path / "hw.md"
    path.write_text("# Sorting\n\nQ1. Sort the list.", encoding="utf-8")

    assert main_module.main(["validate", str(path), "--type", "ASSIGNMENT"]) == 2


def test_main_validate_json_without_credentials(tmp_path, monkeypatch, capsys):
    """Test the CLI still produces a stub-only result with no credentials."""
    monkeypatch.setenv("CONTENT_VALIDATOR_OPENAI_API_KEY", "")
    monkeypatch.setenv("CONTENT_VALIDATOR_GEMINI_API_KEY", "")
    main_module.get_settings.cache_clear()
    path = tmp_path / "notes.md"
    path.write_text("# Loops\n\nA loop repeats a block of code.\n\n- for\n- while\n", encoding="utf-8")

    assert main_module.main(["validate", str(path), "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["providers"] == []
    assert data["degraded"] is True
    main_module.get_settings.cache_clear()


def test_main_missing_file(tmp_path):
    assert main_module.main(["validate", str(tmp_path / "absent.md")]) == 1
