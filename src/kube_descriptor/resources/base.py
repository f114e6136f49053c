"""Shared resource definitions for descriptor generation."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

# Kinds whose selector is a flat label mapping under ``spec.selector``.
FLAT_SELECTOR_KINDS = frozenset({"Service", "ReplicationController"})
# Kinds whose selector lives under ``spec.selector.matchLabels``.
SET_SELECTOR_KINDS = frozenset({"ReplicaSet", "Deployment", "DaemonSet", "StatefulSet"})
# Kinds carrying a pod template under ``spec.template``. Job selectors are set server side.
WORKLOAD_KINDS = SET_SELECTOR_KINDS | {"ReplicationController", "Job"}

_TOP_LEVEL_KEYS = ("apiVersion", "kind", "metadata", "spec")


class ConfigModel(BaseModel):
    """Shared base model for configuration objects."""

    model_config = ConfigDict(populate_by_name=True)


@dataclass
class ResourceDefinition:
    """Represents a Kubernetes resource manifest.

    Resources are mutable: enrichers update ``metadata`` and selector fields
    in place. Kind specific parts of ``spec`` are reached through the
    accessors below, which check the kind before touching the payload.
    """

    api_version: str
    kind: str
    metadata: Dict[str, Any]
    spec: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: Dict[str, Any]) -> "ResourceDefinition":
        metadata = body.get("metadata") or {}
        spec = body.get("spec")
        return cls(
            api_version=body.get("apiVersion", ""),
            kind=body["kind"],
            metadata=copy.deepcopy(dict(metadata)),
            spec=copy.deepcopy(spec) if spec is not None else None,
            extra={key: copy.deepcopy(value) for key, value in body.items() if key not in _TOP_LEVEL_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata,
        }
        if self.spec is not None:
            body["spec"] = self.spec
        if self.extra:
            body.update(self.extra)
        return body

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get("name")

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.get("namespace")

    @property
    def labels(self) -> Dict[str, str]:
        """Live label mapping, created on first access."""

        labels = self.metadata.get("labels")
        if labels is None:
            labels = self.metadata["labels"] = {}
        return labels

    @property
    def annotations(self) -> Dict[str, str]:
        """Live annotation mapping, created on first access."""

        annotations = self.metadata.get("annotations")
        if annotations is None:
            annotations = self.metadata["annotations"] = {}
        return annotations

    @property
    def requires_selector(self) -> bool:
        return self.kind in FLAT_SELECTOR_KINDS or self.kind in SET_SELECTOR_KINDS

    @property
    def selector(self) -> Dict[str, str]:
        """Label selector of the resource; empty when none is declared."""

        self._check_selector_kind()
        selector = (self.spec or {}).get("selector") or {}
        if self.kind in SET_SELECTOR_KINDS:
            return dict(selector.get("matchLabels") or {})
        return dict(selector)

    @property
    def has_selector(self) -> bool:
        """True when ``spec.selector`` declares labels or match expressions."""

        self._check_selector_kind()
        selector = (self.spec or {}).get("selector") or {}
        if self.kind in SET_SELECTOR_KINDS:
            return bool(selector.get("matchLabels") or selector.get("matchExpressions"))
        return bool(selector)

    def set_selector(self, labels: Dict[str, str]) -> None:
        self._check_selector_kind()
        if self.spec is None:
            self.spec = {}
        if self.kind in SET_SELECTOR_KINDS:
            selector = self.spec.get("selector")
            if not isinstance(selector, dict):
                selector = self.spec["selector"] = {}
            selector["matchLabels"] = dict(labels)
        else:
            self.spec["selector"] = dict(labels)

    @property
    def pod_template_labels(self) -> Optional[Dict[str, str]]:
        """Live pod template labels for workload kinds, ``None`` otherwise."""

        if self.kind not in WORKLOAD_KINDS:
            return None
        if self.spec is None:
            self.spec = {}
        template = self.spec.setdefault("template", {})
        metadata = template.setdefault("metadata", {})
        labels = metadata.get("labels")
        if labels is None:
            labels = metadata["labels"] = {}
        return labels

    def containers(self) -> List[Dict[str, Any]]:
        """Containers of the pod template; empty for non-workload kinds."""

        if self.kind not in WORKLOAD_KINDS or not self.spec:
            return []
        pod_spec = (self.spec.get("template") or {}).get("spec") or {}
        return list(pod_spec.get("containers") or [])

    def _check_selector_kind(self) -> None:
        if not self.requires_selector:
            raise TypeError(f"{self.kind} resources do not carry a selector.")

    def describe(self) -> str:
        return f"{self.kind}/{self.name or '(unnamed)'}"


class ResourceList:
    """Ordered collection of resources making up one descriptor."""

    def __init__(self, items: Optional[Iterable[ResourceDefinition]] = None) -> None:
        self._items: List[ResourceDefinition] = list(items or [])

    def append(self, resource: ResourceDefinition) -> None:
        self._items.append(resource)

    def extend(self, resources: Iterable[ResourceDefinition]) -> None:
        self._items.extend(resources)

    def remove(self, resource: ResourceDefinition) -> None:
        self._items.remove(resource)

    def __iter__(self) -> Iterator[ResourceDefinition]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> ResourceDefinition:
        return self._items[index]

    def of_kind(self, kind: str) -> List[ResourceDefinition]:
        return [item for item in self._items if item.kind == kind]

    def by_kind(self) -> Dict[str, List[ResourceDefinition]]:
        """Group resources by kind, kinds ordered by first appearance."""

        grouped: Dict[str, List[ResourceDefinition]] = {}
        for item in self._items:
            grouped.setdefault(item.kind, []).append(item)
        return grouped

    def duplicates(self) -> List[Tuple[str, str]]:
        """Return kind/name pairs that occur more than once."""

        seen: Dict[Tuple[str, str], int] = {}
        for item in self._items:
            if item.name:
                key = (item.kind, item.name)
                seen[key] = seen.get(key, 0) + 1
        return [key for key, count in seen.items() if count > 1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "List",
            "items": [item.to_dict() for item in self._items],
        }
