"""Configuration models and helpers for descriptor generation."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .context import ProjectContext
from .errors import ConfigurationError, DescriptorIOError
from .resources.base import ConfigModel
from .resources.controller import ControllerConfig
from .resources.image import ImageConfig
from .resources.service import ServiceConfig


class ResourceMode(str, Enum):
    """Operational mode selecting the API dialect and output file name."""

    kubernetes = "kubernetes"
    openshift = "openshift"

    @property
    def api_version(self) -> str:
        return "v1"

    @property
    def extensions_api_version(self) -> str:
        if self is ResourceMode.openshift:
            return "apps/v1"
        return "extensions/v1beta1"

    @property
    def file_name(self) -> str:
        return self.value


class ResourceFileType(str, Enum):
    """Encoding of the generated descriptor."""

    yaml = "yaml"
    json = "json"

    @property
    def extension(self) -> str:
        return "yml" if self is ResourceFileType.yaml else "json"


class ProjectConfig(BaseModel):
    """Metadata of the project the descriptor is generated for."""

    name: str
    version: str
    group: Optional[str] = None
    provider: Optional[str] = None
    packaging: str = "jar"
    properties: Dict[str, str] = Field(default_factory=dict)

    def to_context(self) -> ProjectContext:
        return ProjectContext(
            name=self.name,
            version=self.version,
            group=self.group,
            provider=self.provider,
            packaging=self.packaging,
            properties=dict(self.properties),
        )


class ResourceAnnotations(ConfigModel):
    """Annotations attached verbatim to synthesized resources."""

    service: Dict[str, str] = Field(default_factory=dict)


class ResourceConfig(ConfigModel):
    """Declarative resources synthesized next to the fragment files."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    services: Optional[List[ServiceConfig]] = None
    annotations: ResourceAnnotations = Field(default_factory=ResourceAnnotations)
    controller: ControllerConfig = Field(default_factory=ControllerConfig)


class DescriptorConfig(BaseModel):
    """Full configuration of one descriptor generation run."""

    model_config = ConfigDict(extra="forbid")

    project: ProjectConfig
    resource_dir: Path = Path("src/main/fabric8")
    target_dir: Path = Path("target/classes")
    work_dir: Path = Path("target/fabric8")
    enriched_resources_dir: Optional[Path] = None
    mode: ResourceMode = ResourceMode.kubernetes
    resource_type: ResourceFileType = ResourceFileType.yaml
    api_version: Optional[str] = None
    extensions_api_version: Optional[str] = None
    skip: bool = False
    duplicate_policy: Literal["keep", "warn", "reject"] = "warn"
    resources: Optional[ResourceConfig] = None
    images: List[ImageConfig] = Field(default_factory=list)
    customizers: List[str] = Field(default_factory=list)
    enricher: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    customizer: Dict[str, str] = Field(default_factory=dict)

    @property
    def primary_api_version(self) -> str:
        return self.api_version or self.mode.api_version

    @property
    def extensions_version(self) -> str:
        return self.extensions_api_version or self.mode.extensions_api_version

    @property
    def target_file(self) -> Path:
        return self.target_dir / f"{self.mode.file_name}.{self.resource_type.extension}"

    def resolve_paths(self, base: Path) -> "DescriptorConfig":
        """Return a copy with relative directories anchored at ``base``."""

        updates: Dict[str, Path] = {}
        for attr in ("resource_dir", "target_dir", "work_dir", "enriched_resources_dir"):
            value = getattr(self, attr)
            if value is not None and not value.is_absolute():
                updates[attr] = base / value
        return self.model_copy(update=updates)

    @classmethod
    def from_file(cls, path: str | Path) -> "DescriptorConfig":
        document_path = Path(path)
        try:
            text = document_path.read_text()
        except OSError as exc:
            raise DescriptorIOError(f"Cannot read configuration: {exc}", source=str(document_path)) from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML: {exc}", source=str(document_path)) from exc
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration file must contain a mapping at the top level.", source=str(document_path))
        try:
            config = cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc), source=str(document_path)) from exc
        return config.resolve_paths(document_path.resolve().parent)
