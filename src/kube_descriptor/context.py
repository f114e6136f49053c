"""Read-only project properties computed once per invocation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

SNAPSHOT_SUFFIX = "-SNAPSHOT"
IMAGE_LABEL_PROPERTY = "fabric8.docker.label"

# Label keys identifying the project. Selectors are built from these only.
IDENTITY_KEYS = ("project", "provider", "group")


def version_label(version: str, override: Optional[str] = None) -> str:
    """Collapse snapshot versions to ``latest``; explicit overrides win."""

    if override:
        return override
    if version.endswith(SNAPSHOT_SUFFIX):
        return "latest"
    return version


@dataclass(frozen=True)
class ProjectContext:
    """Computed project metadata shared by the loader, synthesizer and enrichers."""

    name: str
    version: str
    group: Optional[str] = None
    provider: Optional[str] = None
    packaging: str = "jar"
    properties: Mapping[str, str] = field(default_factory=dict)

    @property
    def version_label(self) -> str:
        return version_label(self.version, self.properties.get(IMAGE_LABEL_PROPERTY))

    def project_labels(self) -> Dict[str, str]:
        labels: Dict[str, str] = {"project": self.name}
        if self.provider:
            labels["provider"] = self.provider
        if self.group:
            labels["group"] = self.group
        labels["version"] = self.version_label
        return labels

    def identity_labels(self) -> Dict[str, str]:
        return {key: value for key, value in self.project_labels().items() if key in IDENTITY_KEYS}

    def filter_properties(self) -> Dict[str, str]:
        """Properties available to fragment substitution."""

        values = dict(self.properties)
        values.setdefault("project.name", self.name)
        values.setdefault("project.artifactId", self.name)
        values.setdefault("project.version", self.version)
        if self.group:
            values.setdefault("project.groupId", self.group)
        values.setdefault(IMAGE_LABEL_PROPERTY, self.version_label)
        return values
