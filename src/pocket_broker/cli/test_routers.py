"""CLI to smoke-test a running PocketBroker API.

Usage:
  poetry run test-routers health
  poetry run test-routers market movers
  poetry run test-routers swap quote ETH USDC 1.5 --slippage 1
  poetry run test-routers records transactions --limit 5
  poetry run test-routers admin analytics --token <session-token>
"""
import argparse
import json
import sys

import httpx

RECORD_PATHS = {
    "users": "/api/users",
    "portfolios": "/api/portfolios",
    "transactions": "/api/transactions",
    "watchlists": "/api/watchlists",
    "price-alerts": "/api/price-alerts",
    "subscriptions": "/api/subscriptions",
}

ADMIN_PATHS = {
    "stats": "/api/admin/stats",
    "analytics": "/api/admin/analytics",
    "alerts": "/api/admin/alerts",
    "recent-activity": "/api/admin/recent-activity",
    "subscriptions": "/api/admin/subscriptions",
    "users": "/api/admin/users/list",
    "transactions": "/api/admin/transactions/list",
}


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_market_stats(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/market/stats")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_market_trending(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/market/trending")
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} trending tokens")
    print_json(data)
    return 0


def cmd_market_movers(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/market/movers")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_swap_quote(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "tokenIn": args.token_in,
        "tokenOut": args.token_out,
        "amount": args.amount,
        "slippage": args.slippage,
        "chainId": args.chain_id,
    }
    r = client.post("/api/swap/quote", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_records(client: httpx.Client, args: argparse.Namespace) -> int:
    params: dict[str, str | int] = {"limit": args.limit, "offset": args.offset}
    if args.id is not None:
        params = {"id": args.id}
    r = client.get(RECORD_PATHS[args.resource], params=params)
    r.raise_for_status()
    data = r.json()
    if isinstance(data, list):
        print(f"Found {len(data)} {args.resource}")
    print_json(data)
    return 0


def cmd_admin(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {}
    if args.page is not None:
        params["page"] = args.page
    for pair in args.param or []:
        key, _, value = pair.partition("=")
        params[key] = value
    r = client.get(ADMIN_PATHS[args.report], params=params)
    r.raise_for_status()
    print_json(r.json())
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Smoke-test PocketBroker API routers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="Session token sent as 'Authorization: Bearer <token>'",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    # health
    subparsers.add_parser("health", help="GET / health check")

    # market
    market = subparsers.add_parser("market", help="Market proxy routes (/api/market)")
    market_sub = market.add_subparsers(dest="market_cmd", required=True)
    market_sub.add_parser("stats", help="GET /api/market/stats")
    market_sub.add_parser("trending", help="GET /api/market/trending")
    market_sub.add_parser("movers", help="GET /api/market/movers")

    # swap
    swap = subparsers.add_parser("swap", help="Swap routes (/api/swap)")
    swap_sub = swap.add_subparsers(dest="swap_cmd", required=True)
    p = swap_sub.add_parser("quote", help="POST /api/swap/quote")
    p.add_argument("token_in", help="Input token symbol (e.g. ETH)")
    p.add_argument("token_out", help="Output token symbol (e.g. USDC)")
    p.add_argument("amount", help="Input amount")
    p.add_argument("--slippage", type=float, default=0.5, help="Slippage %% (default: 0.5)")
    p.add_argument("--chain-id", type=int, default=1, help="Chain ID (default: 1)")

    # records
    p = subparsers.add_parser("records", help="Record routes (/api/<resource>)")
    p.add_argument("resource", choices=sorted(RECORD_PATHS))
    p.add_argument("--id", default=None, help="Fetch one record by id")
    p.add_argument("--limit", type=int, default=10, help="Page size (default: 10)")
    p.add_argument("--offset", type=int, default=0, help="Offset (default: 0)")

    # admin
    p = subparsers.add_parser("admin", help="Admin reports (/api/admin), needs --token")
    p.add_argument("report", choices=sorted(ADMIN_PATHS))
    p.add_argument("--page", type=int, default=None, help="Page number for listings")
    p.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Extra query param (repeatable), e.g. --param status=failed",
    )

    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")

    handlers = {
        "health": cmd_health,
        "market": {
            "stats": cmd_market_stats,
            "trending": cmd_market_trending,
            "movers": cmd_market_movers,
        },
        "swap": {"quote": cmd_swap_quote},
        "records": cmd_records,
        "admin": cmd_admin,
    }

    cmd = args.command
    handler = handlers[cmd]
    if isinstance(handler, dict):
        sub = getattr(args, f"{cmd}_cmd", None)
        if sub is None:
            parser.error(f"Missing subcommand for {cmd}")
        handler = handler[sub]

    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout, headers=headers) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
