"""Service resource builder."""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import Field

from ..context import ProjectContext
from .base import ConfigModel, ResourceDefinition


class ServicePort(ConfigModel):
    """A single port exposed by a synthesized service."""

    port: int
    target_port: Optional[Union[int, str]] = Field(default=None, alias="targetPort")
    protocol: str = "TCP"
    name: Optional[str] = None
    node_port: Optional[int] = Field(default=None, alias="nodePort")

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {}
        if self.name:
            data["name"] = self.name
        data["port"] = self.port
        data["targetPort"] = self.target_port if self.target_port is not None else self.port
        data["protocol"] = self.protocol.upper()
        if self.node_port is not None:
            data["nodePort"] = self.node_port
        return data


class ServiceConfig(ConfigModel):
    """Configuration describing one Service to synthesize."""

    name: Optional[str] = None
    ports: List[ServicePort] = Field(default_factory=list)
    headless: bool = False
    type: Optional[str] = None
    selector: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)

    def to_resource(
        self,
        project: ProjectContext,
        annotations: Optional[Dict[str, str]] = None,
        api_version: str = "v1",
    ) -> ResourceDefinition:
        metadata: Dict[str, object] = {"name": self.name or project.name}
        if self.labels:
            metadata["labels"] = dict(self.labels)
        if annotations:
            metadata["annotations"] = dict(annotations)

        spec: Dict[str, object] = {
            "selector": dict(self.selector) if self.selector else project.identity_labels(),
        }
        if self.ports:
            spec["ports"] = [port.to_dict() for port in self.ports]
        if self.headless:
            spec["clusterIP"] = "None"
        if self.type:
            spec["type"] = self.type

        return ResourceDefinition(
            api_version=api_version,
            kind="Service",
            metadata=metadata,
            spec=spec,
        )
