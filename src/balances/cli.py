#!/usr/bin/env python3
"""
Command-line interface for wallet balances and gas fees.

Usage:
    python -m src.balances.cli currency --address 0x... --chains 1 10 8453
    python -m src.balances.cli tokens --address 0x... --tokens tokens.json
    python -m src.balances.cli fees --chain 1
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List

from src.balances.grouping import relevant_balances
from src.balances.models import TokenDefinition
from src.balances.service import BalanceService
from src.config import get_config
from src.core.rpc import RpcTransport
from src.gas import GasCalculator

logger = logging.getLogger(__name__)


def load_tokens(path: str) -> List[TokenDefinition]:
    """Load token definitions from a token list file or a plain JSON array."""
    data = json.loads(Path(path).read_text())
    if isinstance(data, dict):
        data = data.get("tokens", [])
    return [TokenDefinition.from_dict(token) for token in data]


def print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


async def run_currency(args, service: BalanceService) -> bool:
    balances = await service.get_currency_balances(args.address, args.chains)
    print_json([balance.to_dict() for balance in balances])
    return True


async def run_tokens(args, service: BalanceService) -> bool:
    tokens = load_tokens(args.tokens)
    logger.info(f"Loading balances for {len(tokens)} tokens")

    balances = await service.get_token_balances(args.address, tokens)
    if args.non_zero:
        balances = relevant_balances([], balances)

    print_json([balance.to_dict() for balance in balances])
    return True


async def run_fees(args, calculator: GasCalculator) -> bool:
    fees = await calculator.get_fee_per_gas()
    print_json(fees.to_dict())
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wallet balances and gas fees across EVM chains",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Native balances on Ethereum, Optimism and Base
  python -m src.balances.cli currency --address 0xabc... --chains 1 10 8453

  # Non-zero token balances from a token list
  python -m src.balances.cli tokens --address 0xabc... --tokens tokens.json --non-zero

  # EIP-1559 fees on Arbitrum
  python -m src.balances.cli fees --chain 42161
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    currency = subparsers.add_parser("currency", help="Native currency balances")
    currency.add_argument("--address", required=True, help="Wallet address")
    currency.add_argument(
        "--chains", type=int, nargs="+", required=True, help="Chain IDs to query"
    )

    tokens = subparsers.add_parser("tokens", help="Token balances")
    tokens.add_argument("--address", required=True, help="Wallet address")
    tokens.add_argument("--tokens", required=True, help="Path to a token list JSON file")
    tokens.add_argument(
        "--non-zero", action="store_true", help="Only print tokens with a balance"
    )

    fees = subparsers.add_parser("fees", help="EIP-1559 fee estimate")
    fees.add_argument("--chain", type=int, help="Chain ID (defaults to DEFAULT_CHAIN_ID)")

    return parser


async def main(argv: List[str] = None) -> int:
    """Main CLI function."""
    args = build_parser().parse_args(argv)

    config = get_config()
    transport = RpcTransport(config.chains)

    try:
        if args.command == "fees":
            calculator = GasCalculator.from_config(config, transport, chain_id=args.chain)
            success = await run_fees(args, calculator)
        else:
            service = BalanceService.from_config(config, transport)
            if args.command == "currency":
                success = await run_currency(args, service)
            else:
                success = await run_tokens(args, service)
        return 0 if success else 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1
    finally:
        await transport.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
