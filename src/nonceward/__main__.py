"""nonceward command line.

Examples:
  nonceward generate delete-post-5 --identity user:42
  nonceward verify 3f9a0c1b2e delete-post-5 --identity user:42
  nonceward policy
  NONCEWARD_API_TOKENS='{"user:42": "<token>"}' nonceward serve --port 8890
"""

import argparse
import logging
import sys

from nonceward.config import get_settings
from nonceward.errors import ConfigurationError
from nonceward.logging_setup import setup_logging
from nonceward.service import get_nonce_service

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _action(value: str) -> str | int:
    # Integer strings become ints. Signing str()-normalises actions, so -1 and "-1" match.
    try:
        return int(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nonceward",
        description="Issue and verify stateless nonces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n\n", 1)[1],
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: from settings, INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Print a nonce for an action")
    gen.add_argument("action", type=_action)
    gen.add_argument("--identity", default="", help="Identity the nonce is bound to")

    ver = sub.add_parser("verify", help="Check a nonce (exit 0 if valid, 1 if not)")
    ver.add_argument("token")
    ver.add_argument("action", type=_action)
    ver.add_argument("--identity", default="", help="Identity the nonce is bound to")

    sub.add_parser("policy", help="Show the active lifetime policy")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind host (default: from settings)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Bind port")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(level=args.log_level or settings.log_level)
    logger.debug("Running command: %s", args.command)

    try:
        if args.command == "generate":
            print(get_nonce_service().generate_token(args.action, args.identity))
            return EXIT_OK

        if args.command == "verify":
            result = get_nonce_service().verify_token(args.token, args.action, args.identity)
            print(result.name)
            return EXIT_OK if result.valid else EXIT_INVALID

        if args.command == "policy":
            service = get_nonce_service()
            print(f"window_seconds={service.policy.window_seconds}")
            print(f"bucket_seconds={service.policy.bucket_seconds}")
            print(f"token_length={service.token_length}")
            return EXIT_OK

        if args.command == "serve":
            from nonceward.api.serve import run_server

            run_server(host=args.host or settings.api_host, port=args.port or settings.api_port)
            return EXIT_OK
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
