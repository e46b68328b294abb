#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cpamm.core.cpmm import price_impact_bps
from cpamm.errors import AmmError
from cpamm.integration.config import load_config
from cpamm.integration.engine import AmmEngine
from cpamm.state.addressing import derive_pool_authority
from cpamm.state.custody import InMemoryCustody
from cpamm.state.pools import canonical_pair


def main() -> int:
    ap = argparse.ArgumentParser(description="Offline constant-product pool demo (in-memory custody).")
    ap.add_argument("--config", default=None, help="Optional YAML config file")
    ap.add_argument("--mint-x", default="0x" + "22" * 32, help="First token mint (any order)")
    ap.add_argument("--mint-y", default="0x" + "11" * 32, help="Second token mint (any order)")
    ap.add_argument("--deposit-a", type=int, default=1000, help="Deposit of the lower mint")
    ap.add_argument("--deposit-b", type=int, default=4000, help="Deposit of the higher mint")
    ap.add_argument("--amount-in", type=int, default=100)
    ap.add_argument("--min-out", type=int, default=1)
    ap.add_argument("-v", "--verbose", action="store_true", help="Log engine activity")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    lp = "lp"
    lp_mint = "0x" + "33" * 32
    trader = "trader"

    try:
        mint_a, mint_b = canonical_pair(args.mint_x, args.mint_y)
    except AmmError as exc:
        print(f"[offline-demo] FAIL [{exc.code}]: {exc}")
        return 1
    pool_address = derive_pool_authority(mint_a, mint_b, cfg.program_id).pool_address
    custody = InMemoryCustody()
    custody.create_mint(mint_a)
    custody.create_mint(mint_b)
    custody.create_mint(lp_mint, mint_authority=pool_address)
    custody.create_vault("vault-a", mint_a, pool_address)
    custody.create_vault("vault-b", mint_b, pool_address)
    custody.fund(lp, mint_a, args.deposit_a)
    custody.fund(lp, mint_b, args.deposit_b)
    custody.fund(trader, mint_a, args.amount_in)

    engine = AmmEngine(custody, cfg)
    try:
        pool = engine.initialize_pool(lp, mint_a, mint_b, "vault-a", "vault-b", lp_mint)
        print(f"[offline-demo] pool record: {json.dumps(pool.to_dict(), sort_keys=True)}")

        add = engine.add_liquidity(lp, mint_a, mint_b, args.deposit_a, args.deposit_b, 0)
        print(f"[offline-demo] deposited ({add.amount_a}, {add.amount_b}) -> lp_tokens={add.lp_tokens}")

        ra, rb, _supply = engine.reserves(mint_a, mint_b)
        impact = price_impact_bps(args.amount_in, ra, rb, pool.fee_bps)
        swap = engine.swap(trader, mint_a, mint_b, "vault-a", "vault-b", args.amount_in, args.min_out)
        print(f"[offline-demo] swap in={swap.amount_in} out={swap.amount_out} price_impact_bps={impact}")

        ra2, rb2, supply2 = engine.reserves(mint_a, mint_b)
        print(f"[offline-demo] reserves ({ra}, {rb}) -> ({ra2}, {rb2}); k {ra * rb} -> {ra2 * rb2}")

        # Rebuild the engine from exported records, as after a process restart.
        records = json.loads(json.dumps(engine.export_pools()))
        engine = AmmEngine(custody, cfg)
        engine.import_pools(records)
        print(f"[offline-demo] engine restarted from {len(records)} pool record(s)")

        rm = engine.remove_liquidity(lp, mint_a, mint_b, supply2, 0, 0)
        print(f"[offline-demo] withdrew lp={rm.lp_amount} -> ({rm.amount_a}, {rm.amount_b})")
    except AmmError as exc:
        print(f"[offline-demo] FAIL [{exc.code}]: {exc}")
        return 1

    print("[offline-demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
