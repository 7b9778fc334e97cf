"""Command-line entry point for trimming chat payloads."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config.settings import LimiterConfig, TOKENIZER_BACKENDS, get_default_config
from .core.errors import TokenLimitError
from .core.message_limiter import MessageLimiter
from .utils.message_formatter import MessageFormatter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``trim`` and ``max-tokens`` subcommands."""
    parser = argparse.ArgumentParser(
        prog="message-limiter",
        description="Fit chat messages and tool definitions into a model's token window.",
    )
    parser.add_argument("--config", help="YAML or JSON configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log budget decisions to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    trim = sub.add_parser("trim", help="Trim a {messages, tools} JSON payload")
    trim.add_argument("input", help="JSON file with 'messages' and optional 'tools' ('-' for stdin)")
    trim.add_argument("--model", help="Model identifier (defaults to the configured model)")
    trim.add_argument("--max-tokens", type=int, help="Explicit token budget")
    trim.add_argument("--backend", choices=TOKENIZER_BACKENDS, help="Tokenizer backend")
    trim.add_argument("--summary", action="store_true", help="Print a per-role token summary instead")

    limit = sub.add_parser("max-tokens", help="Print the context window of a model")
    limit.add_argument("model")

    return parser


def _load_config(path: Optional[str]) -> LimiterConfig:
    if path:
        return LimiterConfig.from_file(path)
    return get_default_config()


def _read_payload(path: str) -> dict:
    if path == "-":
        payload = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)

    if not isinstance(payload, dict):
        raise ValueError(f"Payload must be a JSON object, got {type(payload).__name__}")
    messages = payload.get("messages", [])
    if not isinstance(messages, list) or not all(isinstance(m, dict) for m in messages):
        raise ValueError("Payload 'messages' must be a list of objects")
    return payload


def run_trim(args: argparse.Namespace, config: LimiterConfig) -> int:
    if args.backend:
        config.tokenizer_backend = args.backend
    limiter = MessageLimiter.from_config(config)
    formatter = MessageFormatter()

    payload = _read_payload(args.input)
    messages = payload.get("messages", [])
    # Validation only; the original dicts are trimmed and printed unchanged
    formatter.from_openai_messages(messages)
    tools = payload.get("tools", [])
    model = args.model or config.default_model

    try:
        trimmed = limiter.limit(messages, tools, model, args.max_tokens)
    except TokenLimitError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.summary:
        output = {
            "before": formatter.get_role_summary(messages, limiter.tokenizer, model),
            "after": formatter.get_role_summary(trimmed, limiter.tokenizer, model),
        }
    else:
        output = {"messages": trimmed, "tools": tools}
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def run_max_tokens(args: argparse.Namespace, config: LimiterConfig) -> int:
    limiter = MessageLimiter.from_config(config)
    print(limiter.limits.limit_for(args.model))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = _load_config(args.config)
        if args.command == "trim":
            return run_trim(args, config)
        return run_max_tokens(args, config)
    except (OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
