import json
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from sqlalchemy import create_engine

from activity_discovery.core.config import get_settings
from activity_discovery.core.logging import configure_logging
from activity_discovery.domain.matching import resolve_selection, toggle_exclusion
from activity_discovery.domain.models import Activity, WhatFilter, WhereFilter
from activity_discovery.domain.taxonomy import match_subcategories
from activity_discovery.errors import ActivitiesFetchError
from activity_discovery.jobs.import_activities import import_activities_from_json
from activity_discovery.providers.activities.http import HttpActivitiesProvider, process_activities
from activity_discovery.providers.activities.snapshot import SnapshotActivitiesProvider
from activity_discovery.services.search_state import SearchController

app = typer.Typer(help="CLI to search listed activities")

_EXAMPLE_DATA = Path(__file__).parent / "sample_activities.json"


def _demo_payload() -> list[dict]:
    return [
        {
            "_id": "act-toulouse",
            "title": "Match de rugby au stade",
            "description": "Rencontre de championnat",
            "category": "Sports",
            "subcategory": "Sports collectifs",
            "when": "10/06/2025",
            "lat": 43.6,
            "lon": 1.44,
            "location": "31000 Toulouse",
        },
        {
            "_id": "act-carcassonne",
            "title": "Visite de la cité",
            "description": "Remparts et monuments",
            "category": "Culture & patrimoine",
            "subcategory": "Monuments & fouilles",
            "when": "10/06/2025 - 30/06/2025",
            "lat": 43.2,
            "lon": 2.35,
            "location": "11000 Carcassonne",
        },
        {
            "_id": "act-albi",
            "title": "Dégustation de vins",
            "description": "Produits du terroir tarnais",
            "category": "Gastronomie",
            "subcategory": "Dégustations",
            "when": "01/01/2025",
            "lat": 43.93,
            "lon": 2.15,
            "location": "81000 Albi",
        },
    ]


def _load_activities(file: Optional[str], database_url: Optional[str], api_url: Optional[str]) -> List[Activity]:
    if file:
        payload = json.loads(Path(file).read_text(encoding="utf-8"))
    elif database_url:
        return SnapshotActivitiesProvider(create_engine(database_url, future=True)).fetch_activities()
    elif api_url:
        return HttpActivitiesProvider(api_url, timeout=get_settings().http_timeout).fetch_activities()
    elif _EXAMPLE_DATA.exists():
        payload = json.loads(_EXAMPLE_DATA.read_text(encoding="utf-8"))
    else:
        payload = _demo_payload()
    items = payload.get("activities", []) if isinstance(payload, dict) else payload
    activities, _ = process_activities(items)
    return activities


@app.callback()
def main(log_level: str = typer.Option("WARNING", help="Log level")):
    configure_logging(log_level)


@app.command("search")
def cli_search(
    keyword: str = typer.Option("", help="Mot-clé"),
    when: str = typer.Option("", help="Date JJ/MM/AAAA ou période JJ/MM/AAAA - JJ/MM/AAAA"),
    lat: Optional[float] = typer.Option(None, help="Latitude du centre"),
    lon: Optional[float] = typer.Option(None, help="Longitude du centre"),
    distance: Optional[float] = typer.Option(None, help="Rayon en km"),
    category: Optional[str] = typer.Option(None, help="Catégorie"),
    subcategory: Optional[str] = typer.Option(None, help="Sous-catégorie"),
    exclude: Optional[List[str]] = typer.Option(None, help="Sous-catégories exclues"),
    include_expired: bool = typer.Option(True, help="Inclure les activités passées"),
    file: Optional[str] = typer.Option(None, help="Fichier JSON d'activités"),
    database_url: Optional[str] = typer.Option(None, help="Base snapshot"),
    api_url: Optional[str] = typer.Option(None, help="URL de l'API activités"),
):
    try:
        activities = _load_activities(file, database_url, api_url)
    except ActivitiesFetchError as exc:
        typer.echo(f"Erreur lors de la récupération des activités: {exc}", err=True)
        raise typer.Exit(code=1)

    controller = SearchController()
    controller.set_baseline(activities)
    controller.set_where(WhereFilter(distance=distance, lat=lat, lon=lon))
    controller.set_when(when)
    controller.set_keyword(keyword)
    controller.set_what(
        WhatFilter(
            keyword=keyword,
            category=category,
            subcategory=subcategory,
            excluded_subcategories=tuple(exclude or ()),
        )
    )
    results = controller.results if include_expired else controller.visible_results(date.today())
    if not results:
        typer.echo("Aucune activité trouvée")
        raise typer.Exit(code=0)
    typer.echo("id\twhen\ttitle")
    for activity in results:
        typer.echo(f"{activity.id}\t{activity.when}\t{activity.title}")


@app.command("match")
def cli_match(
    keyword: str = typer.Argument(..., help="Mot-clé"),
    exclude: Optional[List[str]] = typer.Option(None, help="Sous-catégories à désélectionner"),
):
    matched = match_subcategories(keyword.strip().lower())
    excluded: tuple = ()
    for sub in exclude or []:
        excluded = toggle_exclusion(excluded, matched, sub)
    for sub in matched:
        marker = "-" if sub in excluded else "+"
        typer.echo(f"{marker} {sub}")
    selection = resolve_selection(matched, excluded)
    if selection:
        typer.echo(f"=> {selection[0]} / {selection[1]}")
    else:
        typer.echo("=> Toutes les activités")


@app.command("import")
def cli_import(
    file: str = typer.Option(..., help="Fichier JSON d'activités"),
    database_url: Optional[str] = typer.Option(None, help="Base snapshot (DATABASE_URL par défaut)"),
):
    stats = import_activities_from_json(file, database_url=database_url)
    typer.echo(f"inserted={stats['inserted']} updated={stats['updated']} skipped={stats['skipped']}")


if __name__ == "__main__":
    app()
