"""Operation generating the resource descriptor for a project."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..builder import DescriptorBuilder
from ..config import DescriptorConfig
from ..context import ProjectContext
from ..enrichers.base import EnricherContext
from ..enrichers.manager import EnricherManager
from ..fragments import FilteredFragment, PropertyFilter, list_fragments, read_fragments
from ..loader import FragmentLoader
from ..resources.base import ResourceDefinition, ResourceList
from ..resources.controller import ControllerConfig
from ..synthesizer import ConfigSynthesizer
from ..writer import DescriptorWriter

_LOG = logging.getLogger(__name__)


class ResourceGenerator:
    """Assemble, enrich and write the descriptor for one configuration."""

    def __init__(self, config: DescriptorConfig) -> None:
        self.config = config
        self.project: ProjectContext = config.project.to_context()

    def skip_reason(self) -> Optional[str]:
        if self.config.skip:
            return "skip flag is set"
        if self.project.packaging == "pom" and not self.config.resource_dir.is_dir():
            return f"pom project without resource dir {self.config.resource_dir}"
        return None

    def fragment_files(self) -> List[Path]:
        return list_fragments(self.config.resource_dir)

    def read_fragments(self) -> List[FilteredFragment]:
        files = self.fragment_files()
        if not files:
            return []
        _LOG.info("Using resource templates from %s", self.config.resource_dir)
        return read_fragments(files, self.config.work_dir, PropertyFilter(self.project.filter_properties()))

    def synthesize(self) -> List[ResourceDefinition]:
        resources = self.config.resources
        synthesizer = ConfigSynthesizer(
            self.project,
            api_version=self.config.primary_api_version,
            extensions_api_version=self.config.extensions_version,
        )
        if resources is None:
            return synthesizer.synthesize(None, None, ControllerConfig(), self.config.images)
        _LOG.info("Adding resources from configuration")
        return synthesizer.synthesize(
            resources.services,
            resources.annotations.service,
            resources.controller,
            self.config.images,
        )

    def generate(self) -> ResourceList:
        """Build and enrich the descriptor without writing it."""

        manager = EnricherManager(
            EnricherContext(project=self.project, config=self.config.enricher),
            self.config.customizers,
        )
        loader = FragmentLoader(self.config.primary_api_version, self.config.extensions_version)
        fragment_resources = loader.load(self.read_fragments())
        synthesized = self.synthesize()

        builder = DescriptorBuilder(self.config.duplicate_policy)
        resources = builder.build(fragment_resources, synthesized)
        manager.enrich(resources)
        _LOG.info(
            "Generated %d resource(s): %s",
            len(resources),
            ", ".join(f"{len(items)} {kind}" for kind, items in resources.by_kind().items()) or "none",
        )
        return resources

    def run(self) -> Optional[Path]:
        """Generate and write the descriptor; ``None`` when skipped."""

        reason = self.skip_reason()
        if reason:
            _LOG.info("Skipping descriptor generation: %s", reason)
            return None
        resources = self.generate()
        writer = DescriptorWriter(self.config.resource_type)
        target = writer.write(resources, self.config.target_file, self.config.enriched_resources_dir)
        _LOG.info("Wrote descriptor to %s", target)
        return target
