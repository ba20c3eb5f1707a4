import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from services.balance import AppNotSupportedError
from services.positions.models import GetBalancesQuery
from .bootstrap import build_container
from .common.logging_setup import setup_logging


def cmd_balances(args: argparse.Namespace) -> int:
    setup_logging()
    try:
        query = GetBalancesQuery(app_id=args.app, network=args.network, addresses=args.address)
    except ValidationError as e:
        logging.error(f"invalid request: {e}")
        return 2

    container = build_container()
    try:
        result = asyncio.run(container.balance_service.get_balances(
            app_id=query.app_id,
            addresses=query.addresses,
            network=query.network,
        ))
    except AppNotSupportedError as e:
        logging.error(str(e))
        return 2

    output = {address: balance.to_dict() for address, balance in result.items()}
    print(json.dumps(output, indent=2))
    return 0


def cmd_apps(_: argparse.Namespace) -> int:
    setup_logging()
    toolkit = build_container().toolkit

    def row(app_id, network, strategy):
        definition = toolkit.app_definitions.get(app_id)
        return {
            "appId": app_id,
            "name": definition.name if definition else app_id,
            "network": network.value,
            "strategy": strategy,
        }

    rows = [
        row(app_id, network, "legacy")
        for app_id, network in toolkit.balance_fetcher_registry.get_supported()
    ]
    rows += [
        row(app_id, network, "generalized")
        for app_id, network in toolkit.position_fetcher_registry.get_app_ids()
        if toolkit.balance_fetcher_registry.get(app_id, network) is None
    ]
    print(json.dumps(rows, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("app-balances")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_bal = sub.add_parser("balances")
    p_bal.add_argument("--app", required=True)
    p_bal.add_argument("--network", required=True)
    p_bal.add_argument("--address", action="append", required=True)
    p_bal.set_defaults(func=cmd_balances)

    sub.add_parser("apps").set_defaults(func=cmd_apps)

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
