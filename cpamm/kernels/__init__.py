"""
Kernel layer.

Deterministic integer kernels used by the pool engine. `cpamm/kernels/python/`
holds the production Python kernels; `cpamm/core/` wraps them with the public
pricing and liquidity API.
"""
