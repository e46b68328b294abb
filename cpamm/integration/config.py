"""
Engine configuration.

Defaults live on the `AmmConfig` dataclass; an optional YAML file overrides
them. Unknown keys and wrong types are rejected (fail-closed).

Example `amm.yaml`:

    program_id: "0xa3a3...a3"
    default_fee_bps: 30
    require_admin_for_pool_creation: true
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..state.addressing import DEFAULT_PROGRAM_ID
from ..state.pools import DEFAULT_FEE_BPS, validate_fee_bps


@dataclass(frozen=True)
class AmmConfig:
    # Namespace for derived pool/config addresses.
    program_id: str = DEFAULT_PROGRAM_ID
    # Fee written into every new pool record; immutable afterwards.
    default_fee_bps: int = DEFAULT_FEE_BPS
    # If True and a config record exists, only its admin may create pools.
    require_admin_for_pool_creation: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.program_id, str) or not self.program_id:
            raise ValueError("program_id must be a non-empty string")
        try:
            validate_fee_bps(self.default_fee_bps)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc
        if not isinstance(self.require_admin_for_pool_creation, bool):
            raise ValueError("require_admin_for_pool_creation must be a bool")


def config_from_mapping(obj: Optional[Mapping[str, Any]]) -> AmmConfig:
    if obj is None:
        return AmmConfig()
    if not isinstance(obj, Mapping):
        raise ValueError("config must be a mapping")
    known = {f.name for f in fields(AmmConfig)}
    unknown = sorted(set(obj) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {unknown}")
    return AmmConfig(**dict(obj))


def load_config(path: Optional[str | Path] = None) -> AmmConfig:
    """Load config from a YAML file, or return defaults when `path` is None."""
    if path is None:
        return AmmConfig()
    text = Path(path).read_text(encoding="utf-8")
    try:
        obj = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid config YAML: {exc}") from exc
    return config_from_mapping(obj)
