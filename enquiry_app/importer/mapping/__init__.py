"""Loading of site-specific header aliases from YAML.

Example::

    version: 1
    aliases:
      enquiry_number:
        - "Enquiry Ref"
      customer_name:
        replace: true
        aliases: ["Buyer", "Buyer Name"]

A plain list extends the built-in aliases for that field; ``replace: true``
swaps them out entirely.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import yaml
from flask import current_app

from enquiry_app.importer.contracts import get_enquiry_alias_map


class AliasConfigError(RuntimeError):
    """Raised when an alias override file cannot be loaded or validated."""


@dataclass(frozen=True)
class AliasOverride:
    field: str
    aliases: Tuple[str, ...]
    replace: bool = False


@dataclass(frozen=True)
class AliasSpec:
    version: int
    overrides: Tuple[AliasOverride, ...]
    checksum: str
    path: Path

    def apply(self, base: Mapping[str, Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
        merged = {field: tuple(aliases) for field, aliases in base.items()}
        for override in self.overrides:
            if override.replace:
                merged[override.field] = override.aliases
            else:
                merged[override.field] = merged.get(override.field, ()) + override.aliases
        return merged


def _parse_aliases(field: str, payload: Any) -> Tuple[Tuple[str, ...], bool]:
    replace = False
    if isinstance(payload, Mapping):
        replace = bool(payload.get("replace", False))
        payload = payload.get("aliases")
    if not isinstance(payload, (list, tuple)):
        raise AliasConfigError(f"Aliases for '{field}' must be a list of header strings.")
    aliases = []
    for entry in payload:
        if entry is None or not str(entry).strip():
            raise AliasConfigError(f"Aliases for '{field}' cannot contain blank headers.")
        aliases.append(str(entry))
    if replace and not aliases:
        raise AliasConfigError(f"Replacing aliases for '{field}' requires at least one header.")
    return tuple(aliases), replace


def load_alias_overrides(path: str | Path) -> AliasSpec:
    """
    Load and validate a YAML alias override file.
    """

    path = Path(path)
    if not path.exists():
        raise AliasConfigError(f"Alias file not found at {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise AliasConfigError(f"Failed to parse alias YAML at {path}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise AliasConfigError(f"Alias file {path} must contain a mapping at the top level.")

    try:
        version = int(raw.get("version", 1))
    except (TypeError, ValueError) as exc:
        raise AliasConfigError(f"Invalid alias file version: {exc}") from exc

    aliases_payload = raw.get("aliases") or {}
    if not isinstance(aliases_payload, Mapping):
        raise AliasConfigError("'aliases' must map canonical field names to header lists.")

    known_fields = get_enquiry_alias_map()
    overrides = []
    for field, payload in aliases_payload.items():
        field = str(field).strip()
        if field not in known_fields:
            raise AliasConfigError(f"Unknown canonical field '{field}' in alias file.")
        aliases, replace = _parse_aliases(field, payload)
        overrides.append(AliasOverride(field=field, aliases=aliases, replace=replace))

    return AliasSpec(
        version=version,
        overrides=tuple(overrides),
        checksum=_compute_checksum(raw),
        path=path,
    )


def get_active_alias_map() -> Dict[str, Tuple[str, ...]]:
    """
    Built-in aliases merged with the file named by ``IMPORTER_ALIAS_PATH``.
    The parsed file is cached on the app and reloaded when its mtime changes.
    """

    base = get_enquiry_alias_map()
    config_path = current_app.config.get("IMPORTER_ALIAS_PATH")
    if not config_path:
        return base

    config_path = Path(config_path)
    cache: dict[str, tuple[AliasSpec, float]] = current_app.extensions.setdefault("_enquiry_alias_cache", {})
    if not config_path.exists():
        raise AliasConfigError(f"Alias file not found at {config_path}")
    current_mtime = config_path.stat().st_mtime

    cached_entry = cache.get(str(config_path))
    if cached_entry and cached_entry[1] == current_mtime:
        return cached_entry[0].apply(base)

    if cached_entry:
        current_app.logger.debug("Alias file changed, reloading: %s", config_path)
    spec = load_alias_overrides(config_path)
    cache[str(config_path)] = (spec, current_mtime)
    current_app.logger.info(
        "Loaded %s header alias override(s) from %s (checksum %s)",
        len(spec.overrides),
        config_path,
        spec.checksum[:12],
    )
    return spec.apply(base)


def _compute_checksum(payload: Mapping[str, Any]) -> str:
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


__all__ = [
    "AliasConfigError",
    "AliasOverride",
    "AliasSpec",
    "get_active_alias_map",
    "load_alias_overrides",
]
