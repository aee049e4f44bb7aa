"""
Main entry point for the podshare client.

Wires config → ledger → pod directory → mapper → ingress → router and
exposes open/cancel/balance commands.
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from podshare.core.config import Config
from podshare.core.errors import ConfigError, PodshareError
from podshare.crypto.signing import OrderSigner
from podshare.execution.ingress import IngressClient
from podshare.execution.pod_mapper import PodMapper, StaticPodDirectory
from podshare.execution.router import OrderRouter
from podshare.ledger.order_ledger import OrderLedger
from podshare.ledger.store import FileStore, MemoryStore
from podshare.monitoring.logs import configure_logging
from podshare.monitoring.metrics import MetricsCollector
from podshare.orders.order import Order, OrderType, Parity, Token, token_pair


logger = logging.getLogger(__name__)


class PodshareClient:
    """
    Client-side orchestrator.

    Owns the store, ingress connection and router for one trader.
    """

    def __init__(self, config: Config, dry_run: bool = False, available_balance: Optional[Decimal] = None):
        """
        Initialize client.

        Args:
            config: System configuration
            dry_run: Build payloads without contacting the ingress
            available_balance: Deposited balance used for the usable-balance
                check of the next order (checked only when given)
        """
        errors = config.validate()
        if errors:
            raise ConfigError("; ".join(errors))
        if not config.trader.private_key:
            raise ConfigError("PODSHARE_PRIVATE_KEY environment variable required")
        if not config.pods.directory_file:
            raise ConfigError("pods.directory_file required")

        self.config = config
        logger.info("Starting %s client (ingress %s)", config.ingress.network, config.ingress.url)

        # Load inputs before opening the store and ingress
        pod_directory = _load_pod_directory(config.pods.directory_file)
        try:
            self.signer = OrderSigner(config.trader.private_key)
        except ValueError as e:
            raise ConfigError(f"invalid trader private key: {e}") from e

        if config.ledger.backend == "memory":
            self.store = MemoryStore()
        else:
            self.store = FileStore(config.ledger.data_dir)
        self.ledger = OrderLedger(self.store)
        self.ingress = IngressClient(config.ingress.url, config.ingress.timeout_sec)
        self.metrics = MetricsCollector(config)

        balance_source = None
        if available_balance is not None:
            def balance_source(token: int) -> Decimal:
                return available_balance

        self.router = OrderRouter(
            config,
            self.ledger,
            self.ingress,
            pod_directory,
            mapper=PodMapper(config),
            balance_source=balance_source,
            metrics=self.metrics,
            dry_run=dry_run,
        )

    def close(self):
        self.ingress.close()
        self.store.close()


def _load_pod_directory(path: str) -> StaticPodDirectory:
    try:
        return StaticPodDirectory.from_file(path)
    except (OSError, KeyError, TypeError, ValueError, AttributeError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot load pod directory {path}: {type(e).__name__}: {e}") from e


def _token(value: str) -> int:
    """Token by name (ETH) or numeric code (0x1)."""
    try:
        return int(Token[value.upper()])
    except KeyError:
        return int(value, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="podshare")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Build payloads without contacting the ingress")
    sub = parser.add_subparsers(dest="command", required=True)

    p_open = sub.add_parser("open", help="Open an order")
    p_open.add_argument("--side", choices=["buy", "sell"], required=True)
    p_open.add_argument("--priority-token", type=_token, required=True)
    p_open.add_argument("--non-priority-token", type=_token, required=True)
    p_open.add_argument("--price", required=True, help="Decimal price")
    p_open.add_argument("--volume", required=True, help="Decimal volume")
    p_open.add_argument("--min-volume", default=None, help="Decimal minimum volume (default: volume)")
    p_open.add_argument("--type", choices=[t.name.lower() for t in OrderType], default="limit")
    p_open.add_argument("--ttl-hours", type=float, default=24.0)
    p_open.add_argument("--available-balance", type=Decimal, default=None,
                        help="Deposited balance for the usable-balance check")

    p_cancel = sub.add_parser("cancel", help="Cancel an order")
    p_cancel.add_argument("--order-id", required=True, help="Hex order ID")

    p_balance = sub.add_parser("balance", help="Show locked balance of a token")
    p_balance.add_argument("--token", type=_token, required=True)
    return parser


def run(args: argparse.Namespace, config: Config) -> int:
    client = PodshareClient(config, dry_run=args.dry_run,
                            available_balance=getattr(args, "available_balance", None))
    try:
        if args.command == "open":
            order = Order.new(
                parity=Parity.BUY if args.side == "buy" else Parity.SELL,
                tokens=token_pair(args.priority_token, args.non_priority_token),
                price=args.price,
                volume=args.volume,
                minimum_volume=args.min_volume,
                order_type=OrderType[args.type.upper()],
                ttl_sec=int(args.ttl_hours * 3600),
            )
            report = client.router.open_order(order, client.signer.sign_open(order))
            print(f"{report.status}: order {report.order_id} -> {len(report.pod_ids)} pods, {report.fragments} fragments")
            for pod_id in report.failed_pods:
                print(f"  failed pod {pod_id}")
        elif args.command == "cancel":
            order_id = bytes.fromhex(args.order_id.removeprefix("0x"))
            report = client.router.cancel_order(order_id, client.signer.sign_cancel(order_id))
            print(f"{report.status}: order {report.order_id}")
        elif args.command == "balance":
            locked = client.ledger.locked_balance(args.token)
            print(f"locked: {locked}  open orders: {client.ledger.has_open_orders(args.token)}")
        return 0
    finally:
        client.close()


def main(argv: Optional[list] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    # Load .env if present (before Config) to populate PODSHARE_* variables
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    config = Config.from_yaml(args.config) if args.config else Config()
    configure_logging(config.monitoring)

    try:
        return run(args, config)
    except PodshareError as e:
        print(f"[ERROR] {type(e).__name__}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
