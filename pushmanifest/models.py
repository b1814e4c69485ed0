"""Core data models shared across pushmanifest components.

A push manifest maps each entry URL (the app shell and every fragment) to the
resources a server should push when that URL is requested::

    {
      "index.html": {
        "css/app.css": {"type": "style", "weight": 1},
        "js/app.js": {"type": "script", "weight": 1}
      }
    }
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Optional


class ResourceType(str, Enum):
    """Closed set of resource kinds a manifest entry can carry."""

    DOCUMENT = "document"
    SCRIPT = "script"
    STYLE = "style"
    IMAGE = "image"
    FONT = "font"


# Browsers only honour a single push weight today.
PUSH_WEIGHT = 1


@dataclass(frozen=True)
class PushManifestEntry:
    """One resource to push; ``type`` is None when it could not be classified."""

    type: Optional[ResourceType] = None
    weight: Optional[int] = PUSH_WEIGHT

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {}
        if self.type is not None:
            payload["type"] = self.type.value
        if self.weight is not None:
            payload["weight"] = self.weight
        return payload


PushManifestEntryCollection = Dict[str, PushManifestEntry]
PushManifest = Dict[str, PushManifestEntryCollection]


@dataclass(frozen=True)
class ImportEdge:
    """A reference from an analyzed document to another resource."""

    url: str
    kinds: FrozenSet[str] = field(default_factory=frozenset)


@dataclass
class SourceFile:
    """A project file travelling through the pipeline."""

    path: Path
    contents: bytes

    def text(self) -> str:
        return self.contents.decode("utf-8", errors="replace")


def manifest_to_dict(manifest: PushManifest) -> Dict[str, Dict[str, Dict[str, object]]]:
    """Return a JSON-ready copy of ``manifest`` preserving key order."""
    return {
        source: {target: entry.to_dict() for target, entry in collection.items()}
        for source, collection in manifest.items()
    }
