"""
Custody directives.

An operation's effects are an ordered tuple of directives. The core only
builds them; `execute_directives` hands them to a custody host under the
pool's authority. Partial application of a tuple is a host bug: run it inside
`custody.atomic()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from ..state.addressing import Authority
from ..state.custody import Custody


@dataclass(frozen=True)
class Pull:
    """user -> vault"""

    amount: int
    user: str
    vault: str


@dataclass(frozen=True)
class Push:
    """vault -> user"""

    amount: int
    vault: str
    user: str


@dataclass(frozen=True)
class MintTo:
    amount: int
    lp_mint: str
    user: str


@dataclass(frozen=True)
class Burn:
    amount: int
    lp_mint: str
    user: str


Directive = Union[Pull, Push, MintTo, Burn]


def execute_directives(custody: Custody, authority: Authority, directives: Sequence[Directive]) -> None:
    """Apply directives in order. Stops at the first failure."""
    for d in directives:
        if isinstance(d, Pull):
            custody.pull(authority, d.amount, d.user, d.vault)
        elif isinstance(d, Push):
            custody.push(authority, d.amount, d.vault, d.user)
        elif isinstance(d, MintTo):
            custody.mint_to(authority, d.amount, d.lp_mint, d.user)
        elif isinstance(d, Burn):
            custody.burn(authority, d.amount, d.lp_mint, d.user)
        else:
            raise TypeError(f"unknown directive: {type(d).__name__}")
