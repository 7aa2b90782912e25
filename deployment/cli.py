#!/usr/bin/env python3
"""
Command line entry point: deploy Auction, Basket and Factory and print their addresses.

Usage:
    basket-deploy --backend web3 --rpc-url http://localhost:8545
    basket-deploy --network development --output deployment_info.json --summary
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.markup import escape

from .config import Backend, Settings, get_settings, validate_settings
from .context import DeploymentContext
from .errors import DeploymentError
from .orchestrator import run_deployment
from .records import build_record, console, display_summary, save_record
from .sequence import default_sequence, load_sequence

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Deploy the Auction, Basket and Factory contracts')
    parser.add_argument('--backend', '-b', choices=[b.value for b in Backend], default=None,
                        help='Framework used to deploy (default: DEPLOY_BACKEND or brownie)')
    parser.add_argument('--network', '-n', default=None,
                        help='Brownie network id, or a display name for the web3 backend')
    parser.add_argument('--rpc-url', dest='rpc_url', default=None,
                        help='JSON-RPC endpoint for the web3 backend')
    parser.add_argument('--build-dir', dest='build_dir', default=None,
                        help='Directory holding compiled contract artifacts (web3 backend)')
    parser.add_argument('--confirmations', type=int, dest='required_confirmations', default=None,
                        help='Confirmations required before an address is reported (default: 1)')
    parser.add_argument('--sequence', dest='sequence_path', default=None,
                        help='YAML file describing a custom deployment sequence')
    parser.add_argument('--output', '-o', dest='output_path', default=None,
                        help='Write a JSON deployment record to this path')
    parser.add_argument('--summary', action='store_true',
                        help='Print a summary table to stderr')
    parser.add_argument('--log-level', dest='log_level', default=None,
                        help='Logging level (default: INFO)')
    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    """Apply command line overrides on top of environment settings"""
    base = base or get_settings()
    overrides = {
        key: getattr(args, key)
        for key in ('network', 'rpc_url', 'build_dir', 'required_confirmations',
                    'sequence_path', 'output_path', 'log_level')
        if getattr(args, key) is not None
    }
    if args.backend is not None:
        overrides['backend'] = Backend(args.backend)
    if 'log_level' in overrides:
        overrides['log_level'] = overrides['log_level'].upper()
    return validate_settings(base.model_copy(update=overrides))


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def build_context(settings: Settings) -> DeploymentContext:
    """Create the framework context for the configured backend"""
    if settings.backend == Backend.WEB3:
        from .web3_context import Web3Context
        return Web3Context.from_settings(settings)

    from .brownie_context import BrownieContext
    return BrownieContext.from_settings(settings)


def deploy(settings: Settings, context: Optional[DeploymentContext] = None, summary: bool = False) -> int:
    """Run a full deployment and return the process exit status"""
    try:
        if context is None:
            context = build_context(settings)
        steps = load_sequence(settings.sequence_path) if settings.sequence_path else default_sequence()

        console.print(f"\n🚀 [bold magenta]Contract Deployment[/bold magenta] on [yellow]{escape(context.network_name)}[/yellow]")
        if context.deployer_address:
            console.print(f"Deploying from account: {context.deployer_address}")

        result = run_deployment(context, steps=steps, confirmations=settings.required_confirmations)

        if settings.output_path:
            save_record(build_record(result, context.block_number()), settings.output_path)
        if summary:
            display_summary(result)

        console.print("\n✅ [bold green]Deployment completed successfully![/bold green]")
        return 0

    except DeploymentError as e:
        console.print(f"\n❌ [bold red]Deployment failed:[/bold red] {escape(str(e))}")
        return 1
    except Exception as e:
        logger.debug("Unexpected deployment error", exc_info=True)
        console.print(f"\n❌ [bold red]Deployment failed:[/bold red] {escape(f'{type(e).__name__}: {e}')}")
        return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except (DeploymentError, ValueError) as e:
        console.print(f"❌ [bold red]Invalid configuration:[/bold red] {escape(str(e))}")
        return 1

    setup_logging(settings.log_level)
    return deploy(settings, summary=args.summary)


if __name__ == "__main__":
    sys.exit(main())
