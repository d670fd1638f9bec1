#!/usr/bin/env python3
"""Simple CLI for discovering an address's tokens locally"""

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation

from tokenlist.logging_config import setup_logging
from tokenlist.services.address import InvalidAddressError
from tokenlist.services.discovery import DiscoveryPipeline
from tokenlist.services.state import DiscoveryState, TokenListController, TokenListState
from tokenlist.types import TokenRecord


def format_amount(raw: str, decimals: int) -> str:
    try:
        value = Decimal(raw) / (Decimal(10) ** decimals)
    except InvalidOperation:
        return raw
    return f"{value:,.6f}"


def print_token(index: int, token: TokenRecord) -> None:
    badge = "✅" if token.registered else "  "
    balance = format_amount(token.metadata.balance, token.metadata.decimals)
    approvals = len(token.approvals)
    print(f"{index:2d}. {badge} {token.symbol:<10} {balance:>20}  approvals: {approvals}")
    print(f"      {token.address}")


def print_token_list(state: TokenListState) -> None:
    """Pretty print the published token list"""
    if state.current_state == DiscoveryState.FAILED:
        print(f"❌ Discovery failed: {state.error}")
        return

    print(f"\n🔍 Tokens for {state.address}")
    print("=" * 60)

    if not state.tokens:
        print("No token balances")
        return

    visible = state.visible_tokens
    for i, token in enumerate(visible, 1):
        print_token(i, token)

    hidden = len(state.tokens) - len(visible)
    if hidden:
        print(f"\n{hidden} unregistered token(s) hidden, use --all to show them")


async def cli_tokens(address: str, show_all: bool) -> int:
    """CLI command to discover tokens"""
    async with DiscoveryPipeline() as pipeline:
        controller = TokenListController(pipeline, registered_only=not show_all)
        try:
            await controller.run_discovery(address)
        except InvalidAddressError as e:
            print(f"❌ {e}")
            return 2

    print_token_list(controller.state)
    return 1 if controller.state.current_state == DiscoveryState.FAILED else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Token discovery CLI")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    tokens_parser = subparsers.add_parser("tokens", help="List tokens an address approved or holds")
    tokens_parser.add_argument("address", help="Wallet address")
    tokens_parser.add_argument(
        "--all",
        dest="show_all",
        action="store_true",
        help="Include tokens missing from the curated registry",
    )
    return parser


async def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.log_level)

    if args.command == "tokens":
        return await cli_tokens(args.address, args.show_all)

    parser.print_help()
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
