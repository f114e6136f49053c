"""Helpers to list, read and filter resource fragment files."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from .errors import DescriptorIOError, ParseError

_LOG = logging.getLogger(__name__)

FRAGMENT_SUFFIXES = (".yml", ".yaml", ".json")
_PLACEHOLDER = re.compile(r"\$\{([^}\s]+)\}")


@dataclass(frozen=True)
class FilteredFragment:
    """Fragment content after property substitution."""

    path: Path
    content: bytes


FragmentFilter = Callable[[str], str]


class PropertyFilter:
    """Replace ``${key}`` placeholders with project properties.

    Unknown placeholders are left untouched so fragments may carry literal
    ``${...}`` sequences meant for the cluster side.
    """

    def __init__(self, properties: Mapping[str, str]) -> None:
        self.properties = dict(properties)

    def __call__(self, text: str) -> str:
        def _replace(match: re.Match) -> str:
            key = match.group(1)
            if key in self.properties:
                return str(self.properties[key])
            return match.group(0)

        return _PLACEHOLDER.sub(_replace, text)


def list_fragments(resource_dir: Path) -> List[Path]:
    """Return fragment files directly inside ``resource_dir`` sorted by name."""

    if not resource_dir.is_dir():
        return []
    return sorted(
        (path for path in resource_dir.iterdir() if path.is_file() and path.suffix.lower() in FRAGMENT_SUFFIXES),
        key=lambda path: path.name,
    )


def read_fragments(
    paths: Sequence[Path],
    work_dir: Optional[Path] = None,
    fragment_filter: Optional[FragmentFilter] = None,
) -> List[FilteredFragment]:
    """Read and filter fragments, keeping a filtered copy in ``work_dir``."""

    if work_dir is not None:
        try:
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DescriptorIOError(f"Cannot create working dir: {exc}", source=str(work_dir)) from exc

    fragments: List[FilteredFragment] = []
    for path in paths:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise DescriptorIOError(f"Cannot read fragment: {exc}", source=str(path)) from exc
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Fragment is not valid UTF-8: {exc}", source=str(path)) from exc
        if fragment_filter is not None:
            text = fragment_filter(text)

        target = path
        if work_dir is not None:
            target = work_dir / path.name
            try:
                target.write_text(text, encoding="utf-8")
            except OSError as exc:
                raise DescriptorIOError(f"Cannot filter {path} to {target}: {exc}", source=str(target)) from exc
        _LOG.debug("Filtered fragment %s", target)
        fragments.append(FilteredFragment(path=target, content=text.encode("utf-8")))
    return fragments
