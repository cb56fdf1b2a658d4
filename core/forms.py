"""Forms for the comparison page.

Selections arrive through the query string in three shapes, all of which may
be combined:
- `s=0-1,2-3`: a compact, shareable list of entry ids;
- `entry=<id>` (repeated): checkbox values from the page form;
- `category=<index>` (repeated) and `all=1`: whole-category and select-all.

Unknown ids are ignored rather than rejected.
"""

from __future__ import annotations

from django import forms
from django.http import QueryDict

from analysis.dto import Catalog


class ComparisonForm(forms.Form):
    """Validate the non-repeated comparison query parameters."""

    s = forms.CharField(required=False, label="Selected cutscene ids")
    all = forms.BooleanField(required=False, label="Select all")
    hide_unselected = forms.BooleanField(required=False, label="Hide unselected")

    def clean_s(self) -> tuple[str, ...]:
        """Split the compact id list into trimmed, non-empty ids."""

        raw = self.cleaned_data.get("s") or ""
        return tuple(part.strip() for part in raw.split(",") if part.strip())


def selection_from_query(query: QueryDict, *, catalog: Catalog) -> tuple[str, ...]:
    """Collect selected entry ids from a query string.

    Args:
        query: Request query parameters.
        catalog: Catalog used to expand `all` and `category` selections.

    Returns:
        Sorted, de-duplicated entry ids known to the catalog.
    """

    form = ComparisonForm(query)
    ids: set[str] = set()
    if form.is_valid():
        ids.update(form.cleaned_data["s"])
        if form.cleaned_data["all"]:
            ids.update(entry.entry_id for entry in catalog.entries)

    ids.update(value.strip() for value in query.getlist("entry"))
    for value in query.getlist("category"):
        try:
            index = int(value)
        except ValueError:
            continue
        if not 0 <= index < len(catalog.categories):
            continue
        category = catalog.categories[index]
        ids.update(entry.entry_id for entry in category.entries)

    known = {entry.entry_id for entry in catalog.entries}
    return tuple(sorted(ids & known))
