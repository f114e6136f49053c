"""Final customization stage and the built-in customizers."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Sequence, Type

from ..errors import ConfigurationError, EnrichmentError
from ..resources.base import ResourceList
from .base import Enricher, EnricherContext

_LOG = logging.getLogger(__name__)

CLUSTER_SCOPED_KINDS = frozenset(
    {
        "ClusterRole",
        "ClusterRoleBinding",
        "CustomResourceDefinition",
        "Namespace",
        "PersistentVolume",
        "StorageClass",
    }
)


class Customizer:
    """A named, configurable transformation run by the customization stage."""

    name: str = "customizer"

    def __init__(self, context: EnricherContext, params: Dict[str, Any]) -> None:
        self.context = context
        self.params = params

    def customize(self, resources: ResourceList) -> None:
        raise NotImplementedError


CustomizerFactory = Callable[[EnricherContext, Dict[str, Any]], Customizer]

_REGISTRY: Dict[str, CustomizerFactory] = {}


def register_customizer(name: str, factory: CustomizerFactory) -> None:
    """Make ``factory`` selectable under ``name`` in the ``customizers`` list."""

    _REGISTRY[name] = factory


def available_customizers() -> List[str]:
    return sorted(_REGISTRY)


def _registered(cls: Type[Customizer]) -> Type[Customizer]:
    register_customizer(cls.name, cls)
    return cls


@_registered
class NamespaceCustomizer(Customizer):
    """Place namespaced resources without a namespace into ``params['namespace']``."""

    name = "namespace"

    def __init__(self, context: EnricherContext, params: Dict[str, Any]) -> None:
        super().__init__(context, params)
        namespace = params.get("namespace")
        if not namespace:
            raise ConfigurationError("The namespace customizer requires a 'namespace' parameter.", source=self.name)
        self.namespace = str(namespace)

    def customize(self, resources: ResourceList) -> None:
        for resource in resources:
            if resource.kind in CLUSTER_SCOPED_KINDS or resource.namespace:
                continue
            resource.metadata["namespace"] = self.namespace


@_registered
class AnnotationCustomizer(Customizer):
    """Add every parameter as an annotation where the key is not yet set."""

    name = "annotations"

    def customize(self, resources: ResourceList) -> None:
        annotations = {str(key): str(value) for key, value in self.params.items()}
        if not annotations:
            return
        for resource in resources:
            target = resource.annotations
            for key, value in annotations.items():
                target.setdefault(key, value)


@_registered
class ImagePullPolicyCustomizer(Customizer):
    name = "image-pull-policy"

    def customize(self, resources: ResourceList) -> None:
        policy = str(self.params.get("policy") or "IfNotPresent")
        for resource in resources:
            for container in resource.containers():
                container.setdefault("imagePullPolicy", policy)


class CustomizerEnricher(Enricher):
    """Run the configured customizers in registration order."""

    name = "customize"

    def __init__(self, context: EnricherContext, names: Sequence[str] = ()) -> None:
        super().__init__(context)
        self.customizers: List[Customizer] = []
        for name in names:
            factory = _REGISTRY.get(name)
            if factory is None:
                raise ConfigurationError(
                    f"Unknown customizer '{name}'. Available: {', '.join(available_customizers())}.",
                    source="customizers",
                )
            self.customizers.append(factory(context, context.config_for(name)))

    def enrich(self, resources: ResourceList) -> None:
        for customizer in self.customizers:
            _LOG.debug("Running customizer %s", customizer.name)
            try:
                customizer.customize(resources)
            except EnrichmentError:
                raise
            except Exception as exc:
                raise EnrichmentError(f"customizer '{customizer.name}' failed: {exc}", stage=self.name) from exc
