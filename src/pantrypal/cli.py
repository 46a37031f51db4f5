"""Command-line interface for PantryPal."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, List, Optional

import typer

from pantrypal.alerts import build_alerts
from pantrypal.config import get_settings
from pantrypal.db.users import purge_expired_sessions
from pantrypal.models.pantry import PantryItem
from pantrypal.recipes.suggestions import SuggestionService

app = typer.Typer(help="PantryPal pantry and recipe commands.")


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _pantry_entries(payload: Any) -> List[Any]:
    if isinstance(payload, dict):
        payload = payload.get("items", [])
    if not isinstance(payload, list):
        raise typer.BadParameter("Pantry JSON must be a list of items or names.")
    return payload


def _pantry_names(payload: Any) -> List[str]:
    names: List[str] = []
    for entry in _pantry_entries(payload):
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
            names.append(entry["name"])
    return names


def _pantry_items(payload: Any) -> List[PantryItem]:
    items: List[PantryItem] = []
    for index, entry in enumerate(_pantry_entries(payload), start=1):
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict):
            continue
        record = {"id": index, "quantity": 1.0, "unit": "piece", **entry}
        items.append(PantryItem.model_validate(record))
    return items


def _echo_json(payload: Any, pretty: bool) -> None:
    if pretty:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        typer.echo(json.dumps(payload))


@app.command()
def suggest(
    pantry_path: str,
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
    offline: bool = typer.Option(
        False, "--offline", help="Only use the built-in recipe catalog."
    ),
) -> None:
    """
    Rank recipe suggestions for the pantry described in a JSON file.
    """
    names = _pantry_names(_load_json(pantry_path))
    if offline:
        settings = get_settings()
        service = SuggestionService(
            limit=settings.suggestion_limit,
            empty_pantry_sample=settings.empty_pantry_sample,
        )
    else:
        service = SuggestionService.from_settings()

    response = service.suggest(names)
    _echo_json(response.model_dump(mode="json", by_alias=True), pretty)


@app.command()
def alerts(
    pantry_path: str,
    today: Optional[str] = typer.Option(
        None, "--today", help="Reference date (YYYY-MM-DD); defaults to today."
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Print expiry and low-stock alerts for the pantry described in a JSON file."""

    reference: Optional[date] = None
    if today:
        try:
            reference = datetime.strptime(today, "%Y-%m-%d").date()
        except ValueError as exc:
            raise typer.BadParameter(f"Invalid date '{today}': expected YYYY-MM-DD") from exc

    settings = get_settings()
    items = _pantry_items(_load_json(pantry_path))
    results = build_alerts(
        items,
        today=reference,
        window_days=settings.expiring_window_days,
        low_stock_threshold=settings.low_stock_threshold,
    )
    _echo_json([alert.model_dump(mode="json") for alert in results], pretty)


@app.command("purge-sessions")
def purge_sessions() -> None:
    """Delete expired login sessions from the database."""

    removed = purge_expired_sessions()
    typer.echo(f"Removed {removed} expired session(s).")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `pantrypal` script."""
    app(prog_name="pantrypal", args=argv)


if __name__ == "__main__":
    main()
