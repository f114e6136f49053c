"""Ordered execution of the enricher chain."""
from __future__ import annotations

import logging
from typing import List, Sequence

from ..errors import EnrichmentError
from ..resources.base import ResourceList
from .base import Enricher, EnricherContext
from .customizers import CustomizerEnricher
from .labels import LabelEnricher
from .selectors import SelectorEnricher

_LOG = logging.getLogger(__name__)


class EnricherManager:
    """Apply labels, selectors and customizers, strictly in that order."""

    def __init__(self, context: EnricherContext, customizers: Sequence[str] = ()) -> None:
        self.context = context
        self.stages: List[Enricher] = [
            LabelEnricher(context),
            SelectorEnricher(context),
            CustomizerEnricher(context, customizers),
        ]

    def enrich(self, resources: ResourceList) -> ResourceList:
        for stage in self.stages:
            _LOG.debug("Running enricher stage %s", stage.name)
            try:
                stage.enrich(resources)
            except EnrichmentError:
                raise
            except Exception as exc:
                raise EnrichmentError(str(exc), stage=stage.name) from exc
        return resources
