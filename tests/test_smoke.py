"""Minimal smoke tests for initial scaffolding."""

from __future__ import annotations

import pytest


@pytest.mark.unit
def test_analysis_engine_imports() -> None:
    """Import the analysis engine and verify the public entry point exists."""

    from analysis import recompute

    assert callable(recompute)


@pytest.mark.integration
def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cutsceneTimes.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
