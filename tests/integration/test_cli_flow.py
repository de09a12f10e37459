import json
from pathlib import Path
from unittest.mock import MagicMock

from typer.testing import CliRunner

from crptapi.domain.models.submission import Accepted, Rejected
from crptapi.main import app

# These fixtures are defined in tests/conftest.py:
# runner: CliRunner
# patched_transport: StubTransport (replaces HttpxTransport in main.py)
# mock_console_display: MagicMock (patches ConsoleDisplay)


def test_submit_samples_flow(runner: CliRunner, patched_transport, mock_console_display: MagicMock):
    """Generates documents, pushes them through the gate and reports every outcome."""
    result = runner.invoke(app, ["submit-samples", "--count", "4", "--limit", "2", "--window", "0.2"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    assert len(patched_transport.calls) == 4
    assert all(url.endswith("/lk/documents/create") for url, _, _ in patched_transport.calls)
    assert mock_console_display.display_request_sent.call_count == 4
    assert mock_console_display.display_outcome.call_count == 4
    summary_results = mock_console_display.display_summary.call_args.args[0]
    assert all(isinstance(r, Accepted) for r in summary_results)
    assert patched_transport.closed


def test_submit_samples_reports_rejections(runner: CliRunner, patched_transport, mock_console_display: MagicMock):
    patched_transport.status_code = 500
    result = runner.invoke(app, ["submit-samples", "-n", "2"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    outcomes = [c.args[0] for c in mock_console_display.display_outcome.call_args_list]
    assert all(isinstance(o, Rejected) and o.status_code == 500 for o in outcomes)


def test_submit_files_flow(runner: CliRunner, patched_transport, mock_console_display: MagicMock, tmp_path: Path):
    documents = tmp_path / "documents.json"
    documents.write_text(json.dumps([{"doc_id": "first"}, {"doc_id": "second"}]), encoding="utf-8")

    result = runner.invoke(app, ["submit", str(documents)])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    bodies = sorted(json.loads(body)["doc_id"] for _, body, _ in patched_transport.calls)
    assert bodies == ["first", "second"]
    mock_console_display.display_error.assert_not_called()


def test_invalid_limit_aborts_startup(runner: CliRunner, patched_transport, mock_console_display: MagicMock):
    result = runner.invoke(app, ["submit-samples", "--limit", "0"])

    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()
    assert "Invalid configuration" in mock_console_display.display_error.call_args.args[0]
    assert patched_transport.calls == []
    assert patched_transport.closed


def test_limit_from_environment(runner: CliRunner, patched_transport, mock_console_display: MagicMock, monkeypatch):
    monkeypatch.setenv("CRPTAPI_API_REQUEST_LIMIT", "-5")
    result = runner.invoke(app, ["submit-samples", "-n", "1"])

    assert result.exit_code == 1
    assert patched_transport.calls == []


def test_show_config(runner: CliRunner, mock_console_display: MagicMock, monkeypatch):
    monkeypatch.setenv("CRPTAPI_API_BASE_URL", "https://sandbox.example.test/")
    result = runner.invoke(app, ["show-config"])

    assert result.exit_code == 0, f"CLI command failed: {result.output}"
    shown = mock_console_display.display_settings.call_args.args[0]
    assert shown["api.base_url"] == "https://sandbox.example.test/"
    assert shown["api.request_limit"] == 5
