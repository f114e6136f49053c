"""Replication controller / replica set builder."""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from pydantic import Field

from ..context import ProjectContext
from .base import ConfigModel, ResourceDefinition
from .image import ImageConfig


class ControllerConfig(ConfigModel):
    """Controller settings derived from the resource configuration."""

    name: Optional[str] = None
    replicas: int = Field(default=1, ge=0)
    restart_policy: str = Field(default="Always", alias="restartPolicy")
    image_pull_policy: str = Field(default="IfNotPresent", alias="imagePullPolicy")
    use_replica_set: bool = Field(default=False, alias="useReplicaSet")

    @property
    def kind(self) -> str:
        return "ReplicaSet" if self.use_replica_set else "ReplicationController"

    def to_resource(
        self,
        project: ProjectContext,
        images: Sequence[ImageConfig],
        api_version: str = "v1",
        extensions_api_version: str = "extensions/v1beta1",
    ) -> ResourceDefinition:
        containers: List[Dict[str, object]] = [
            image.to_container(index, self.image_pull_policy) for index, image in enumerate(images)
        ]
        spec: Dict[str, object] = {
            "replicas": self.replicas,
            "template": {
                "metadata": {},
                "spec": {
                    "containers": containers,
                    "restartPolicy": self.restart_policy,
                },
            },
        }
        # Selector stays empty until selector completion fills it from labels.
        return ResourceDefinition(
            api_version=extensions_api_version if self.use_replica_set else api_version,
            kind=self.kind,
            metadata={"name": self.name or project.name},
            spec=spec,
        )
