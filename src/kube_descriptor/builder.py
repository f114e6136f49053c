"""Merge fragment and synthesized resources into one resource list."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import ConfigurationError
from .resources.base import ResourceDefinition, ResourceList

_LOG = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("keep", "warn", "reject")


class DescriptorBuilder:
    """Accumulate resources with fragments ahead of synthesized resources."""

    def __init__(self, duplicate_policy: str = "warn") -> None:
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ConfigurationError(
                f"Unknown duplicate policy '{duplicate_policy}'; expected one of {', '.join(DUPLICATE_POLICIES)}."
            )
        self.duplicate_policy = duplicate_policy

    def build(
        self,
        fragments: Optional[Iterable[ResourceDefinition]] = None,
        synthesized: Optional[Iterable[ResourceDefinition]] = None,
    ) -> ResourceList:
        resources = ResourceList(fragments or [])
        resources.extend(synthesized or [])
        self._check_duplicates(resources)
        return resources

    def _check_duplicates(self, resources: ResourceList) -> None:
        if self.duplicate_policy == "keep":
            return
        for kind, name in resources.duplicates():
            if self.duplicate_policy == "reject":
                raise ConfigurationError(f"Duplicate {kind} resource named '{name}'.", source=f"{kind}/{name}")
            _LOG.warning("Descriptor contains more than one %s named '%s'; keeping all of them", kind, name)
