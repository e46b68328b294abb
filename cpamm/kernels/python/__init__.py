"""
Production Python kernels.

These modules are designed to be:
- deterministic (integer-only, no floats anywhere),
- width-checked (u64 amounts, u128 intermediates, fail-closed on overflow),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, typed results).
"""
