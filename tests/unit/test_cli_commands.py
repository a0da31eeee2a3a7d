import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from py_search_ctr.cli import app, load_config
from py_search_ctr.service import SearchRequest, ToolResponse

pytestmark = pytest.mark.unit

runner = CliRunner()


@patch("py_search_ctr.cli._search", new_callable=AsyncMock)
def test_search_command_builds_request(mock_search):
    mock_search.return_value = ToolResponse.from_text("Found 1 clinical trials")

    result = runner.invoke(
        app,
        [
            "search",
            "--query", "London",
            "--country", "United Kingdom",
            "--condition", "Leukemia",
            "--recruitment-status", "Recruiting",
            "--max-results", "1000",
        ],
    )

    assert result.exit_code == 0
    assert "Found 1 clinical trials" in result.output
    settings, request = mock_search.call_args.args
    assert request == SearchRequest(
        query="London",
        country="United Kingdom",
        condition="Leukemia",
        recruitment_status="Recruiting",
        max_results=1000,
    )
    assert settings.max_results_cap == 50


@patch("py_search_ctr.cli._details", new_callable=AsyncMock)
def test_details_command_json_output(mock_details):
    mock_details.return_value = ToolResponse.from_text("Trial ID: NCT1\n")

    result = runner.invoke(app, ["details", "NCT1", "--json"])

    assert result.exit_code == 0
    assert mock_details.call_args.args[1] == "NCT1"
    payload = json.loads(result.output[result.output.index("{"):])
    assert payload["content"] == [{"type": "text", "text": "Trial ID: NCT1\n"}]
    assert payload["is_error"] is False


@patch("py_search_ctr.cli._details", new_callable=AsyncMock)
def test_error_response_exits_non_zero(mock_details):
    mock_details.return_value = ToolResponse.from_text(
        "Error retrieving clinical trial details: HTTP error! status: 500", is_error=True,
    )

    result = runner.invoke(app, ["details", "NCT1"])

    assert result.exit_code == 1
    assert "HTTP error! status: 500" in result.output


@patch("py_search_ctr.cli._search", new_callable=AsyncMock)
def test_config_file_overrides_settings(mock_search, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("ictrp_api_url: https://mirror.test/api\nrequest_timeout: 5\n")
    mock_search.return_value = ToolResponse.from_text("ok")

    result = runner.invoke(app, ["search", "--condition", "Asthma", "--config-file", str(config)])

    assert result.exit_code == 0
    settings = mock_search.call_args.args[0]
    assert settings.ictrp_api_url == "https://mirror.test/api"
    assert settings.request_timeout == 5.0


def test_load_config_missing_file_returns_empty(tmp_path, caplog):
    assert load_config(str(tmp_path / "absent.yaml")) == {}
    assert "Config file not found" in caplog.text
    assert load_config(None) == {}
