"""Image definitions consumed when synthesizing controllers."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Union

from pydantic import Field

from ..errors import ConfigurationError
from .base import ConfigModel

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]+")
_MAX_NAME_LENGTH = 63


def container_name_from_image(image: str) -> str:
    """Derive a DNS label from ``[registry/]user/repo[:tag][@digest]``."""

    reference = image.split("@", 1)[0]
    path, _, last = reference.rpartition("/")
    repository = last.split(":", 1)[0]
    user = path.rpartition("/")[2] if path else ""
    if "." in user or ":" in user or user == "localhost":
        # Registry host, not a user segment.
        user = ""
    raw = f"{user}-{repository}" if user else repository
    name = _INVALID_NAME_CHARS.sub("-", raw.lower()).strip("-")
    return name[:_MAX_NAME_LENGTH].rstrip("-")


class ImageConfig(ConfigModel):
    """A resolved image definition."""

    name: Optional[str] = None
    alias: Optional[str] = None
    ports: List[Union[int, str]] = Field(default_factory=list)
    labels: Dict[str, str] = Field(default_factory=dict)

    def describe(self, index: int) -> str:
        if self.alias:
            return f"images[{index}] (alias '{self.alias}')"
        return f"images[{index}]"

    def to_container(self, index: int, pull_policy: str = "IfNotPresent") -> Dict[str, object]:
        image = (self.name or "").strip()
        if not image:
            raise ConfigurationError("Image definition has no resolvable name.", source=self.describe(index))

        container: Dict[str, object] = {
            "name": self.alias or container_name_from_image(image),
            "image": image,
            "imagePullPolicy": pull_policy,
        }
        ports = [self._container_port(port, index) for port in self.ports]
        if ports:
            container["ports"] = ports
        return container

    def _container_port(self, port: Union[int, str], index: int) -> Dict[str, object]:
        value, _, protocol = str(port).partition("/")
        try:
            number = int(value.strip())
        except ValueError:
            raise ConfigurationError(f"Invalid port '{port}'.", source=self.describe(index)) from None
        return {"containerPort": number, "protocol": (protocol.strip() or "tcp").upper()}
