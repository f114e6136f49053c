"""Render and write the enriched descriptor."""
from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from ruamel.yaml import YAML

from .config import ResourceFileType
from .errors import DescriptorIOError
from .resources.base import ResourceDefinition, ResourceList

_LOG = logging.getLogger(__name__)

yaml = YAML()
yaml.explicit_start = False
yaml.width = 120
yaml.indent(mapping=2, sequence=4, offset=2)


class DescriptorWriter:
    """Serialize a resource list as YAML or JSON."""

    def __init__(self, resource_type: ResourceFileType = ResourceFileType.yaml) -> None:
        self.resource_type = resource_type

    def render_document(self, document: Dict[str, Any]) -> str:
        if self.resource_type is ResourceFileType.json:
            return json.dumps(document, indent=2, default=str) + "\n"
        stream = io.StringIO()
        yaml.dump(document, stream)
        return stream.getvalue()

    def render(self, resources: ResourceList) -> str:
        return self.render_document(resources.to_dict())

    def write(
        self,
        resources: ResourceList,
        target_file: Path,
        enriched_resources_dir: Optional[Path] = None,
    ) -> Path:
        """Write the descriptor, and optionally one file per resource."""

        descriptor = self.render(resources)
        outputs: List[Tuple[Path, str]] = []
        if enriched_resources_dir is not None:
            for file_name, resource in self.resource_file_names(resources):
                outputs.append((enriched_resources_dir / file_name, self.render_document(resource.to_dict())))

        for path, content in outputs:
            self._write(path, content)
        # The descriptor goes last and is moved into place in one step.
        staging = target_file.with_name(f".{target_file.name}.tmp")
        self._write(staging, descriptor)
        try:
            staging.replace(target_file)
        except OSError as exc:
            raise DescriptorIOError(f"Cannot write descriptor: {exc}", source=str(target_file)) from exc
        return target_file

    def resource_file_names(self, resources: ResourceList) -> List[Tuple[str, ResourceDefinition]]:
        """Unique ``<name>-<kind>.<ext>`` file names, suffixed on collision."""

        extension = self.resource_type.extension
        used: Set[str] = set()
        names: List[Tuple[str, ResourceDefinition]] = []
        for resource in resources:
            stem = f"{resource.name}-{resource.kind.lower()}"
            file_name = f"{stem}.{extension}"
            index = 2
            while file_name in used:
                file_name = f"{stem}-{index}.{extension}"
                index += 1
            used.add(file_name)
            names.append((file_name, resource))
        return names

    @staticmethod
    def _write(path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        except OSError as exc:
            raise DescriptorIOError(f"Cannot write descriptor: {exc}", source=str(path)) from exc
        _LOG.debug("Wrote %s", path)
