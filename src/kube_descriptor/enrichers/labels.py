"""Inject project labels into every resource."""
from __future__ import annotations

import logging
from typing import Dict

from ..resources.base import ResourceList
from .base import Enricher

_LOG = logging.getLogger(__name__)


def _add_missing(target: Dict[str, str], labels: Dict[str, str]) -> int:
    added = 0
    for key, value in labels.items():
        if key not in target:
            target[key] = value
            added += 1
    return added


class LabelEnricher(Enricher):
    """Add project labels a resource does not declare itself.

    Workload kinds receive the same labels on their pod template so that a
    selector derived from the resource labels matches its pods.
    """

    name = "labels"

    def enrich(self, resources: ResourceList) -> None:
        labels = self.context.project.project_labels()
        for resource in resources:
            added = _add_missing(resource.labels, labels)
            template_labels = resource.pod_template_labels
            if template_labels is not None:
                added += _add_missing(template_labels, labels)
            if added:
                _LOG.debug("Added %d label(s) to %s", added, resource.describe())
