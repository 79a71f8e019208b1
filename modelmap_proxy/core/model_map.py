"""Bidirectional lookup between caller-facing and upstream model names."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import yaml

logger = logging.getLogger("modelmap-proxy")


class ModelMap:
    """Read-only model name mapping loaded once at startup.

    ``resolve`` never rejects a name: known caller names are translated,
    names that are already upstream names and unknown names pass through
    verbatim.
    """

    def __init__(self, mapping: Optional[Mapping[str, str]] = None) -> None:
        forward: dict[str, str] = {}
        reverse: dict[str, str] = {}
        for key, value in (mapping or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                logger.warning(
                    "Skipping model mapping entry with non-string key or value: %r -> %r",
                    key,
                    value,
                )
                continue
            forward[key] = value
            # Last caller name wins when several map to the same upstream name
            reverse[value] = key
        self._forward = MappingProxyType(forward)
        self._reverse = MappingProxyType(reverse)

    @classmethod
    def load(cls, path: str | Path) -> "ModelMap":
        """Load a mapping document from disk.

        ``.json`` files are parsed as JSON, anything else as YAML. A missing
        or malformed document is not fatal: a warning is logged and an empty
        map is returned so every resolution becomes the identity.
        """
        map_path = Path(path)
        try:
            text = map_path.read_text(encoding="utf-8")
            if map_path.suffix.lower() == ".json":
                data: Any = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except FileNotFoundError:
            logger.warning(f"Model mapping file not found: {map_path}; using empty mapping")
            return cls()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
            logger.warning(f"Could not load model mapping from {map_path}, using empty mapping: {exc}")
            return cls()

        if not isinstance(data, Mapping):
            logger.warning(
                f"Model mapping in {map_path} must be an object of name pairs; using empty mapping"
            )
            return cls()

        model_map = cls(data)
        logger.info(f"Loaded {len(model_map)} model mappings from {map_path}")
        return model_map

    @property
    def mapping(self) -> Mapping[str, str]:
        return self._forward

    @property
    def reverse_mapping(self) -> Mapping[str, str]:
        return self._reverse

    def resolve(self, name: str) -> str:
        """Return the upstream model name for ``name``."""
        mapped = self._forward.get(name)
        if mapped is not None:
            logger.info(f"Model mapping: {name} -> {mapped}")
            return mapped
        # Already an upstream name, or unknown: pass through
        return name

    def is_upstream_name(self, name: str) -> bool:
        return name in self._reverse

    def names(self) -> list[str]:
        """Caller-facing model names in document order."""
        return list(self._forward.keys())

    def upstream_names(self) -> list[str]:
        return list(self._reverse.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._forward

    def __iter__(self) -> Iterator[str]:
        return iter(self._forward)

    def __len__(self) -> int:
        return len(self._forward)

    def __repr__(self) -> str:
        return f"ModelMap({dict(self._forward)!r})"
