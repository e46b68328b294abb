"""
Engine integration layer: config, operation parsing, and the pool engine
"""

from .config import AmmConfig, config_from_mapping, load_config
from .engine import AmmEngine
from .operations import OperationKind, operation_kind, parse_operation

__all__ = [
    "AmmConfig",
    "config_from_mapping",
    "load_config",
    "AmmEngine",
    "OperationKind",
    "operation_kind",
    "parse_operation",
]
