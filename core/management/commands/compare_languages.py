"""Print the language comparison for a selection of cutscenes."""

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError

from analysis.cutscenes import get_catalog
from analysis.dto import ArithmeticFailure
from analysis.engine import recompute
from analysis.languages import LANGUAGES
from core.presentation import describe_ranking, format_time_label, outcome_as_json


class Command(BaseCommand):
    """Aggregate and rank cutscene timings from the command line."""

    help = "Compare total cutscene time per language for the selected cutscenes."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--select",
            action="append",
            default=[],
            help="Comma-separated cutscene ids (e.g. 0-1,2-3) or names. May be repeated.",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Select every cutscene in the catalog.",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the comparison as JSON instead of a table.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        catalog = get_catalog()
        selection: list[str] = []
        for value in options["select"]:
            selection.extend(part.strip() for part in value.split(",") if part.strip())
        if options["all"]:
            selection.extend(entry.entry_id for entry in catalog.entries)

        outcome = recompute(selection, catalog=catalog)

        if options["json"]:
            self.stdout.write(json.dumps(outcome_as_json(outcome), indent=2))
        else:
            for language in LANGUAGES:
                label = format_time_label(outcome.normalized[language.code])
                self.stdout.write(f"{language.code:<3} {label:>10}  {language.display}")
            self.stdout.write(describe_ranking(outcome))

        if isinstance(outcome, ArithmeticFailure):
            raise CommandError("Comparison failed: " + "; ".join(outcome.errors))
        return None
