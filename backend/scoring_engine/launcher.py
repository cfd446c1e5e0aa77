"""
NestScore Launcher - Score and compare properties from a JSON file

Usage:
    python -m scoring_engine.launcher properties.json
    python -m scoring_engine.launcher properties.json --weights weights.json --log-dir logs

properties.json is a list of {"id": 1, "name": "...", "answers": {...}}.
weights.json is a {category_id: weight} map; missing categories use defaults.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .modules.catalogue import QuestionCatalogue, get_default_catalogue, load_catalogue
from .modules.classification import ScoreTier, classify, score_label
from .modules.comparison import ScoredEntry, best_overall
from .modules.completion import completion_percentage
from .modules.logger import get_logger, setup_logging
from .modules.score_calculator import ScoreCalculator

console = Console()

TIER_STYLES = {
    ScoreTier.EXCELLENT: "bold green",
    ScoreTier.GOOD: "green",
    ScoreTier.FAIR: "yellow",
    ScoreTier.POOR: "red",
}


def load_json(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def styled_score(score: int) -> str:
    style = TIER_STYLES[classify(score).tier]
    return f"[{style}]{score}[/{style}]"


def score_properties(
    properties: List[Dict[str, Any]],
    weights: Optional[Dict[str, float]],
    catalogue: QuestionCatalogue,
) -> List[ScoredEntry]:
    """Score each property record; records without an id are numbered by position."""
    calculator = ScoreCalculator(catalogue)
    logger = get_logger()
    entries = []
    for index, record in enumerate(properties, start=1):
        property_id = record.get('id') or index
        name = record.get('name') or f"Property {property_id}"
        answers = record.get('answers') or {}
        unknown = [qid for qid in answers if catalogue.category_for_question(qid) is None]
        if unknown:
            logger.debug(f"{name}: ignoring unknown questions {', '.join(sorted(unknown))}")
        score = calculator.score_property(property_id, answers, weights)
        logger.debug(f"Scored {name} (id={property_id}): overall={score.overall_score}")
        entries.append(ScoredEntry(property_id=property_id, name=name, score=score))
    return entries


def build_table(
    entries: List[ScoredEntry],
    properties: List[Dict[str, Any]],
    catalogue: QuestionCatalogue,
) -> Table:
    table = Table(box=box.ROUNDED, border_style="dark_orange", header_style="bold white")
    table.add_column("Property", style="white")
    table.add_column("Overall", justify="right")
    table.add_column("Rating")
    table.add_column("Done", justify="right", style="dim")
    for category in catalogue.weighted_categories():
        table.add_column(category.name, justify="right")

    for entry, record in zip(entries, properties):
        row = [
            entry.name,
            styled_score(entry.score.overall_score),
            score_label(entry.score.overall_score),
            f"{completion_percentage(record.get('answers') or {}, catalogue)}%",
        ]
        for category in catalogue.weighted_categories():
            category_score = entry.score.get_category_score(category.id)
            if category_score and category_score.answered_count > 0:
                row.append(styled_score(category_score.score))
            else:
                row.append("[dim]-[/dim]")
        table.add_row(*row)
    return table


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='NestScore - score and compare properties from a JSON file'
    )
    parser.add_argument('properties', type=str, help='JSON file with a list of properties')
    parser.add_argument('--weights', type=str, default=None, help='JSON file with category weights')
    parser.add_argument('--catalogue', type=str, default=None, help='Alternative categories.json')
    parser.add_argument('--log-dir', type=str, default=None, help='Write a debug log to this folder')

    args = parser.parse_args(argv)

    if not os.path.exists(args.properties):
        console.print(f"  [red]X[/red] Properties file not found: {args.properties}")
        return 1

    if args.log_dir:
        logger = setup_logging(args.log_dir, os.path.splitext(os.path.basename(args.properties))[0])
        console.print(f"  [dim]Log:[/dim] {logger.get_log_path()}")

    try:
        catalogue = load_catalogue(args.catalogue) if args.catalogue else get_default_catalogue()
        properties = load_json(args.properties)
        if not isinstance(properties, list):
            console.print("  [red]X[/red] Properties file must contain a JSON list")
            return 1
        if not all(isinstance(record, dict) for record in properties):
            console.print("  [red]X[/red] Each property must be a JSON object")
            return 1
        weights = load_json(args.weights) if args.weights else None

        get_logger().step_start("Scoring")
        entries = score_properties(properties, weights, catalogue)
        get_logger().step_end("Scoring", details=f"{len(entries)} properties")

        console.print()
        console.print(build_table(entries, properties, catalogue))

        best = best_overall(entries)
        if best is not None:
            console.print()
            console.print(Panel(
                f"[bold dark_orange]{best.name}[/bold dark_orange]  "
                f"{styled_score(best.score.overall_score)}/100 ({score_label(best.score.overall_score)})",
                title="[bold white]Best Overall[/bold white]",
                border_style="dark_orange",
                box=box.ROUNDED,
            ))
    finally:
        get_logger().close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
