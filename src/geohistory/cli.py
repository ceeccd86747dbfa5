# Area: Shared
"""
geohistory.cli — Command-line interface
=======================================

Inspect and edit inference routing, list provider models and send a
single prompt through the router.

Usage:
    python -m geohistory routing
    python -m geohistory models gemini
    python -m geohistory ask "Name the longest river in Africa" --power light
    python -m geohistory set-route light lmstudio qwen/qwen3-vl-8b
    python -m geohistory set-key anthropics --api-key sk-...
    python -m geohistory clear-keys
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ._shared.logging_config import log_inference_error, setup_logging
from .errors import GeoHistoryError, InferenceError
from .inference import InferenceService
from .types import POWER_LEVELS, PROVIDER_KINDS, InferenceJsonRequest, InferenceTextRequest


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="geohistory",
        description="GeoHistory inference routing tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m geohistory routing
  python -m geohistory models local_openai_compatible
  python -m geohistory ask "Who founded Rome?" --power light
  python -m geohistory --config app.config.json --env-file .env routing
        """,
    )

    parser.add_argument("--config", default="app.config.json", help="Path to JSON config file")
    parser.add_argument("--env-file", default=".env", help="Path to .env file with API keys")
    parser.add_argument("--state-dir", help="Directory for saved routing and keys (default: ~/.geohistory)")
    parser.add_argument("--log-file", default="geohistory.log", help="Path to JSON log file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("routing", help="Print the effective routing table")

    models = sub.add_parser("models", help="List models for a provider")
    models.add_argument("provider", choices=PROVIDER_KINDS)

    ask = sub.add_parser("ask", help="Send one prompt through the router")
    ask.add_argument("prompt")
    ask.add_argument("--power", choices=POWER_LEVELS, default="normal")
    ask.add_argument("--model", help="Explicit model (skips the routed model)")
    ask.add_argument("--system", help="System instruction")
    ask.add_argument("--json", action="store_true", help="Request a JSON response")

    route = sub.add_parser("set-route", help="Save a routing override for one power level")
    route.add_argument("level", choices=POWER_LEVELS)
    route.add_argument("provider", choices=PROVIDER_KINDS)
    route.add_argument("model", nargs="?", default="")

    key = sub.add_parser("set-key", help="Save credentials for a provider")
    key.add_argument("provider", choices=PROVIDER_KINDS)
    key.add_argument("--api-key")
    key.add_argument("--base-url")

    sub.add_parser("clear-keys", help="Remove all saved provider credentials")

    return parser.parse_args(argv)


def run_command(args: argparse.Namespace, service: InferenceService) -> int:
    """Execute one parsed command against a service."""
    if args.command == "routing":
        print(json.dumps(service.routing().to_dict(), indent=2))

    elif args.command == "models":
        for model in service.list_models(args.provider):
            print(model)

    elif args.command == "ask":
        if args.json:
            result = service.generate_json(InferenceJsonRequest(
                prompt=args.prompt,
                power=args.power,
                model=args.model,
                system_instruction=args.system,
            ))
            print(json.dumps(result, indent=2))
        else:
            print(service.generate_text(InferenceTextRequest(
                prompt=args.prompt,
                power=args.power,
                model=args.model,
                system_instruction=args.system,
            )))

    elif args.command == "set-route":
        override = service.routing().to_dict()
        override[args.level] = {"provider": args.provider, "model": args.model}
        service.save_routing_override(override)
        print(json.dumps(service.routing().to_dict(), indent=2))

    elif args.command == "set-key":
        service.save_provider_credentials(args.provider, api_key=args.api_key, base_url=args.base_url)
        print(f"Saved credentials for {args.provider}")

    elif args.command == "clear-keys":
        service.clear_provider_credentials()
        print("Cleared saved provider credentials")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.log_file, logging.DEBUG if args.verbose else logging.WARNING)

    service = InferenceService.from_files(
        config_path=args.config,
        env_file=args.env_file,
        state_dir=args.state_dir,
    )

    try:
        return run_command(args, service)
    except InferenceError as e:
        log_inference_error(e)
        return 1
    except GeoHistoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
