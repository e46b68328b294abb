"""
User token holdings for the in-memory custody host.

Implements BalanceTable[Owner, Mint] -> Amount with u64 bounds.
"""

from typing import Dict, Tuple

from ..errors import MathOverflow
from ..kernels.python.fixed_point_v1 import U64_MAX


# Type aliases
Address = str  # 32-byte identifier as hex string (0x...)
Owner = Address
MintId = Address
Amount = int  # Non-negative integer, at most U64_MAX


class BalanceTable:
    """
    Balance table mapping (owner, mint) -> amount.

    Note: balances live in a plain dict. Callers that need a stable order
    (snapshots, printing) sort keys explicitly.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Owner, MintId], Amount] = {}

    def get(self, owner: Owner, mint: MintId) -> Amount:
        """Get balance for (owner, mint). Returns 0 if not found."""
        return self._balances.get((owner, mint), 0)

    def set(self, owner: Owner, mint: MintId, amount: Amount) -> None:
        """
        Set balance for (owner, mint).

        Raises:
            ValueError: If amount is negative
            MathOverflow: If amount exceeds U64_MAX
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount > U64_MAX:
            raise MathOverflow(f"balance {amount} exceeds u64")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((owner, mint), None)
        else:
            self._balances[(owner, mint)] = amount

    def add(self, owner: Owner, mint: MintId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(owner, mint)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(owner, mint, new_balance)

    def subtract(self, owner: Owner, mint: MintId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(owner, mint, -delta)

    def copy(self) -> "BalanceTable":
        out = BalanceTable()
        out._balances = dict(self._balances)
        return out

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
