"""
Constant-product AMM core.

Subpackages:
- kernels.python: checked fixed-point math, swap and LP kernels
- core: pricing, liquidity, validation, lifecycle planning
- state: pool records, addressing, custody
- integration: config, operation parsing, engine
"""

__version__ = "0.1.0"
