"""Views for the language comparison page and its JSON API."""

from __future__ import annotations

from urllib.parse import urlencode

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import render
from django.urls import reverse

from analysis.cutscenes import get_catalog
from analysis.dto import ArithmeticFailure
from analysis.engine import recompute
from analysis.languages import LANGUAGES
from core.forms import ComparisonForm, selection_from_query
from core.presentation import (
    build_category_tables,
    describe_ranking,
    outcome_as_json,
    total_row,
)


def comparison(request: HttpRequest) -> HttpResponse:
    """Render the comparison tables for the selected cutscenes."""

    catalog = get_catalog()
    selected_ids = selection_from_query(request.GET, catalog=catalog)
    outcome = recompute(selected_ids, catalog=catalog)

    form = ComparisonForm(request.GET)
    show_unselected = not (form.is_valid() and form.cleaned_data["hide_unselected"])
    selected_names = {entry.name for entry in catalog.entries if entry.entry_id in selected_ids}

    share_url = reverse("core:comparison")
    if selected_ids:
        share_url = f"{share_url}?{urlencode({'s': ','.join(selected_ids)})}"

    return render(
        request,
        "core/comparison.html",
        {
            "languages": LANGUAGES,
            "tables": build_category_tables(
                catalog,
                selected=selected_names,
                show_unselected=show_unselected,
            ),
            "total_row": total_row(outcome),
            "summary": describe_ranking(outcome),
            "failed": isinstance(outcome, ArithmeticFailure),
            "all_selected": len(selected_ids) == len(catalog.entries),
            "show_unselected": show_unselected,
            "share_url": share_url,
        },
    )


def comparison_api(request: HttpRequest) -> JsonResponse:
    """Return the comparison for the selected cutscenes as JSON."""

    catalog = get_catalog()
    selected_ids = selection_from_query(request.GET, catalog=catalog)
    outcome = recompute(selected_ids, catalog=catalog)
    payload = outcome_as_json(outcome)
    payload["selected_ids"] = list(selected_ids)
    return JsonResponse(payload)
