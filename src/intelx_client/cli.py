"""CLI for IntelX client operations."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .errors import IntelXError
from .keymanager import KEYS, delete_api_key, list_configured_keys, set_api_key


def cmd_keys(args: argparse.Namespace) -> int:
    """Handle key management commands."""
    if args.keys_action == "list":
        print("IntelX settings:")
        print("-" * 40)
        for key_name, configured in list_configured_keys().items():
            symbol = "✓" if configured else "✗"
            state = "configured" if configured else "not configured"
            print(f"{symbol} {key_name}: {state}")
        return 0

    elif args.keys_action == "set":
        if not args.key_name:
            print("Error: key_name required for 'set' action")
            return 1
        if args.key_name not in KEYS:
            print(f"Error: Unknown key '{args.key_name}'")
            print(f"Valid keys: {', '.join(KEYS.keys())}")
            return 1

        import getpass
        value = getpass.getpass(f"Enter value for {args.key_name}: ")

        if set_api_key(args.key_name, value):
            return 0
        return 1

    elif args.keys_action == "delete":
        if not args.key_name:
            print("Error: key_name required for 'delete' action")
            return 1
        if delete_api_key(args.key_name):
            return 0
        print(f"Key {args.key_name} not found or could not be deleted")
        return 1

    return 0


def cmd_analyzers(args: argparse.Namespace) -> int:
    """List analyzer configurations or health-check one analyzer."""
    from .client import IntelXClient

    try:
        with IntelXClient.from_env() as client:
            if args.analyzers_action == "list":
                configs = client.analyzer.get_configs()
                if args.format == "json":
                    print(json.dumps([c.to_dict() for c in configs], indent=2))
                elif not configs:
                    print("No analyzers configured.")
                else:
                    print(f"{'NAME':35s} {'TYPE':12s} {'DISABLED':9s} {'EXTERNAL':9s}")
                    print("-" * 68)
                    for c in configs:
                        print(f"{c.name[:35]:35s} {c.type[:12]:12s} {str(c.disabled):9s} {str(c.external_service):9s}")

            elif args.analyzers_action == "health":
                if not args.name:
                    print("Error: health requires an analyzer name", file=sys.stderr)
                    return 1
                up = client.analyzer.health_check(args.name)
                if args.format == "json":
                    print(json.dumps({"analyzer": args.name, "status": up}, indent=2))
                else:
                    print(f"{args.name}: {'up' if up else 'down'}")
    except IntelXError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="intelx",
        description="IntelX client - query an IntelX instance",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Keys management
    keys_parser = subparsers.add_parser("keys", help="Manage URL, token and certificate settings")
    keys_parser.add_argument(
        "keys_action",
        choices=["list", "set", "delete"],
        help="Key action",
    )
    keys_parser.add_argument("key_name", nargs="?", help="Setting name (e.g., INTELX_TOKEN)")
    keys_parser.set_defaults(func=cmd_keys)

    # Analyzers
    analyzers_parser = subparsers.add_parser("analyzers", help="Analyzer configurations and health")
    analyzers_parser.add_argument(
        "analyzers_action",
        choices=["list", "health"],
        help="Action to perform",
    )
    analyzers_parser.add_argument("name", nargs="?", help="Analyzer name (for health)")
    analyzers_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )
    analyzers_parser.set_defaults(func=cmd_analyzers)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )

    if not args.command:
        parser.print_help()
        return 0

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
