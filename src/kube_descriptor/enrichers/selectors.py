"""Complete missing selectors from resource labels."""
from __future__ import annotations

import logging

from ..context import IDENTITY_KEYS
from ..resources.base import ResourceList
from .base import Enricher

_LOG = logging.getLogger(__name__)


class SelectorEnricher(Enricher):
    """Derive empty selectors from the resource's own identity labels."""

    name = "selectors"

    def enrich(self, resources: ResourceList) -> None:
        for resource in resources:
            if not resource.requires_selector or resource.has_selector:
                continue
            derived = {key: value for key, value in resource.labels.items() if key in IDENTITY_KEYS}
            if not derived:
                _LOG.warning("Cannot derive a selector for %s: no project labels present", resource.describe())
                continue
            resource.set_selector(derived)
            _LOG.debug("Added selector %s to %s", derived, resource.describe())
