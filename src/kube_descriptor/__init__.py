"""Kubernetes resource descriptor generation package."""

from .config import DescriptorConfig  # noqa: F401
from .operations.generate import ResourceGenerator  # noqa: F401
from .resources.base import ResourceDefinition, ResourceList  # noqa: F401

__all__ = ["DescriptorConfig", "ResourceGenerator", "ResourceDefinition", "ResourceList"]
