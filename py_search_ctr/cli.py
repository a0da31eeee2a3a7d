import asyncio
import logging
from typing import Any, Dict

import typer
import yaml

from py_search_ctr.config import Settings
from py_search_ctr.service import ClinicalTrialsService, SearchRequest, ToolResponse

logger = logging.getLogger(__name__)

app = typer.Typer(help="Search the WHO ICTRP and ClinicalTrials.gov registries.")


def load_config(config_file: str | None) -> Dict[str, Any]:
    """Loads configuration overrides from a YAML file."""
    if config_file:
        try:
            with open(config_file, "r") as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Config file not found: %s", config_file)
    return {}


def _build_settings(config_file: str | None) -> Settings:
    settings = Settings(**load_config(config_file))
    # Basic structured logging setup; stdout is reserved for results.
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return settings


def _emit(response: ToolResponse, as_json: bool) -> None:
    if as_json:
        typer.echo(response.model_dump_json(indent=2))
    else:
        typer.echo(response.text)
    if response.is_error:
        raise typer.Exit(code=1)


async def _search(settings: Settings, request: SearchRequest) -> ToolResponse:
    async with ClinicalTrialsService(settings) as service:
        return await service.search_clinical_trials(request)


async def _details(settings: Settings, trial_id: str) -> ToolResponse:
    async with ClinicalTrialsService(settings) as service:
        return await service.get_trial_details(trial_id)


@app.command()
def search(
    query: str = typer.Option(None, help="Search query for finding trials by keyword."),
    condition: str = typer.Option(None, help="Medical condition or disease being studied."),
    country: str = typer.Option(None, help="Country where the trial is conducted."),
    sponsor: str = typer.Option(None, help="Organization sponsoring the trial."),
    phase: str = typer.Option(None, help="Trial phase, e.g. 'Phase 3'."),
    recruitment_status: str = typer.Option(None, help="e.g. 'Recruiting' or 'Completed'."),
    date_from: str = typer.Option(None, help="Start of the date range (YYYY-MM-DD)."),
    date_to: str = typer.Option(None, help="End of the date range (YYYY-MM-DD)."),
    max_results: int = typer.Option(10, help="Maximum number of results (capped at 50)."),
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON."),
    config_file: str = typer.Option(None, help="Path to YAML config file."),
):
    """Search for clinical trials by keyword, condition, country and more."""
    settings = _build_settings(config_file)
    request = SearchRequest(
        query=query,
        condition=condition,
        country=country,
        sponsor=sponsor,
        phase=phase,
        recruitment_status=recruitment_status,
        date_from=date_from,
        date_to=date_to,
        max_results=max_results,
    )
    _emit(asyncio.run(_search(settings, request)), as_json)


@app.command()
def details(
    trial_id: str = typer.Argument(..., help="Registry identifier, e.g. an NCT number."),
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON."),
    config_file: str = typer.Option(None, help="Path to YAML config file."),
):
    """Get detailed information about a specific clinical trial by its ID."""
    settings = _build_settings(config_file)
    _emit(asyncio.run(_details(settings, trial_id)), as_json)


def main():
    app()


if __name__ == "__main__":
    main()
