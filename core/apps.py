"""App configuration for the core Django app."""

from __future__ import annotations

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """Configuration for the `core` app."""

    name = "core"

    def ready(self) -> None:
        """Load the cutscene catalog so a malformed catalog stops startup."""

        from analysis.cutscenes import get_catalog

        catalog = get_catalog()
        logger.debug("Cutscene catalog ready with %d entries", len(catalog.entries))
