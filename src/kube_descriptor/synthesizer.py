"""Synthesize resources from the declarative resource configuration."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .context import ProjectContext
from .resources.base import ResourceDefinition
from .resources.controller import ControllerConfig
from .resources.image import ImageConfig
from .resources.service import ServiceConfig

_LOG = logging.getLogger(__name__)


class ConfigSynthesizer:
    """Build services and the controller described by configuration."""

    def __init__(
        self,
        project: ProjectContext,
        api_version: str = "v1",
        extensions_api_version: str = "extensions/v1beta1",
    ) -> None:
        self.project = project
        self.api_version = api_version
        self.extensions_api_version = extensions_api_version

    def services(
        self,
        services: Optional[Sequence[ServiceConfig]],
        annotations: Optional[dict] = None,
    ) -> List[ResourceDefinition]:
        if not services:
            return []
        definitions = [cfg.to_resource(self.project, annotations, self.api_version) for cfg in services]
        for definition in definitions:
            _LOG.debug("Synthesized %s", definition.describe())
        return definitions

    def controller(self, cfg: ControllerConfig, images: Sequence[ImageConfig]) -> Optional[ResourceDefinition]:
        if not images:
            return None
        definition = cfg.to_resource(self.project, images, self.api_version, self.extensions_api_version)
        _LOG.debug("Synthesized %s with %d container(s)", definition.describe(), len(images))
        return definition

    def synthesize(
        self,
        services: Optional[Sequence[ServiceConfig]],
        annotations: Optional[dict],
        controller: ControllerConfig,
        images: Sequence[ImageConfig],
    ) -> List[ResourceDefinition]:
        """Return synthesized services followed by the controller, if any."""

        definitions = self.services(services, annotations)
        rc = self.controller(controller, images)
        if rc is not None:
            definitions.append(rc)
        return definitions
