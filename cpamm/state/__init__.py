"""
State records and external collaborators for the pool core
"""

from .addressing import Authority, derive_config_address, derive_pool_address, derive_pool_authority
from .balances import BalanceTable
from .custody import Custody, InMemoryCustody, MintInfo, TokenAccountInfo
from .pools import DEFAULT_FEE_BPS, ConfigRecord, Pool, PoolStatus, canonical_pair

__all__ = [
    "Authority",
    "derive_config_address",
    "derive_pool_address",
    "derive_pool_authority",
    "BalanceTable",
    "Custody",
    "InMemoryCustody",
    "MintInfo",
    "TokenAccountInfo",
    "DEFAULT_FEE_BPS",
    "ConfigRecord",
    "Pool",
    "PoolStatus",
    "canonical_pair",
]
