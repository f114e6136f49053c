"""Parse filtered fragment files into resource definitions."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List

import yaml

from .errors import ParseError
from .fragments import FilteredFragment
from .resources.base import ResourceDefinition, ResourceList

_LOG = logging.getLogger(__name__)

# Kinds belonging to the extensions API group when a fragment omits apiVersion.
EXTENSIONS_KINDS = frozenset(
    {
        "DaemonSet",
        "Deployment",
        "Ingress",
        "NetworkPolicy",
        "PodSecurityPolicy",
        "ReplicaSet",
        "ThirdPartyResource",
    }
)


def default_api_version(kind: str, api_version: str, extensions_api_version: str) -> str:
    return extensions_api_version if kind in EXTENSIONS_KINDS else api_version


class FragmentLoader:
    """Turn fragment files into an initial resource list."""

    def __init__(self, api_version: str = "v1", extensions_api_version: str = "extensions/v1beta1") -> None:
        self.api_version = api_version
        self.extensions_api_version = extensions_api_version

    def load(self, fragments: Iterable[FilteredFragment]) -> ResourceList:
        """Parse ``fragments`` in file name order."""

        ordered = sorted(fragments, key=lambda fragment: (fragment.path.name, str(fragment.path)))
        resources = ResourceList()
        for fragment in ordered:
            parsed = self.parse(fragment)
            _LOG.debug("Loaded %d resource(s) from %s", len(parsed), fragment.path)
            resources.extend(parsed)
        return resources

    def parse(self, fragment: FilteredFragment) -> List[ResourceDefinition]:
        source = str(fragment.path)
        bodies: List[Any] = []
        for document in self._documents(fragment):
            bodies.extend(self._unwrap(document, source))

        resources = [self._to_resource(body, source) for body in bodies]
        if len(resources) == 1 and not resources[0].name:
            resources[0].metadata["name"] = fragment.path.stem
        for resource in resources:
            if not resource.name:
                raise ParseError(f"{resource.kind} resource has no metadata.name.", source=source)
        return resources

    def _documents(self, fragment: FilteredFragment) -> List[Any]:
        source = str(fragment.path)
        try:
            text = fragment.content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Fragment is not valid UTF-8: {exc}", source=source) from exc
        try:
            if fragment.path.suffix.lower() == ".json":
                documents = [json.loads(text)] if text.strip() else []
            else:
                documents = list(yaml.safe_load_all(text))
        except (yaml.YAMLError, ValueError) as exc:
            raise ParseError(f"Malformed fragment: {exc}", source=source) from exc
        return [document for document in documents if document is not None]

    @staticmethod
    def _unwrap(document: Any, source: str) -> List[Any]:
        if isinstance(document, list):
            return document
        if isinstance(document, dict) and document.get("kind") == "List":
            items = document.get("items") or []
            if not isinstance(items, list):
                raise ParseError("List 'items' must be a sequence.", source=source)
            return items
        return [document]

    def _to_resource(self, body: Any, source: str) -> ResourceDefinition:
        if not isinstance(body, dict):
            raise ParseError(f"Expected a resource mapping, got {type(body).__name__}.", source=source)
        kind = body.get("kind")
        if not kind or not isinstance(kind, str):
            raise ParseError("Resource has no 'kind'.", source=source)
        metadata = body.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise ParseError(f"{kind} metadata must be a mapping.", source=source)

        resource = ResourceDefinition.from_dict(body)
        if not resource.api_version:
            resource.api_version = default_api_version(kind, self.api_version, self.extensions_api_version)
        return resource
