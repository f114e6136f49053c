"""Enricher contract shared by every stage of the chain."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..context import ProjectContext
from ..resources.base import ResourceList


@dataclass(frozen=True)
class EnricherContext:
    """Inputs available to enrichers, fixed for one invocation."""

    project: ProjectContext
    config: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def config_for(self, name: str) -> Dict[str, Any]:
        return dict(self.config.get(name) or {})


class Enricher(ABC):
    """A named transformation mutating a resource list in place."""

    name: str = "enricher"

    def __init__(self, context: EnricherContext) -> None:
        self.context = context

    @abstractmethod
    def enrich(self, resources: ResourceList) -> None:
        """Mutate ``resources``; running twice must not change the result."""
