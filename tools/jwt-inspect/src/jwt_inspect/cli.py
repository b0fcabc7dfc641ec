"""
CLI entry point for the JWT Inspect tool.

Subcommands:
    decode    show header, payload and signature (no verification)
    validate  check time claims, algorithm and registered claims
    analyze   list security issues, optionally save a report
    sign      create an HMAC-signed (or unsigned) token
    verify    check a token's signature with an explicit algorithm

Tokens are passed as an argument, piped via --stdin, or entered at a prompt.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time

from .analysis import analyze
from .claims import validate
from .codec import decode
from .config import (
    DEFAULT_CONFIG_PATH,
    PROJECT_ROOT,
    REPORT_FORMATS,
    ConfigError,
    load_config,
    merge_cli_overrides,
)
from .errors import TokenError
from .logging_setup import setup_logging
from .models import SUPPORTED_ALGORITHMS, DecodedToken
from .reports import (
    ReportData,
    generate_json_report,
    generate_markdown_report,
    generate_text_report,
    save_report,
)
from .serializer import parse_object
from .signer import sign, verify

__all__ = ["main"]

logger = logging.getLogger(__name__)

_RENDERERS = {
    "text": generate_text_report,
    "json": generate_json_report,
    "markdown": generate_markdown_report,
}


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def _print_json(label: str, data: dict) -> None:
    """Print a labelled JSON section."""
    print(f"\n{label}:")
    print(json.dumps(data, indent=4))


def _print_result(decoded: DecodedToken) -> None:
    """Pretty-print the decoded token parts."""
    _print_json("Header", decoded.header)
    _print_json("Payload", decoded.payload)
    print(f"\nSignature (base64url encoded):\n{decoded.signature_segment or '(empty)'}")

    print()
    if decoded.time_remaining is None:
        print("Expires   : never (no exp claim)")
    elif decoded.is_expired:
        print("Expires   : EXPIRED")
    else:
        print(f"Expires in: {decoded.expires_in}")
    if decoded.issued_at_iso:
        print(f"Issued at : {decoded.issued_at_iso}")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", default=None,
                        help=f"Path to YAML config file (default: {DEFAULT_CONFIG_PATH})")
    common.add_argument("--verbose", "-v", action="store_true", default=False,
                        help="Enable verbose (debug) logging")

    token_input = argparse.ArgumentParser(add_help=False)
    token_input.add_argument(
        "token",
        nargs="?",
        default=None,
        help="JWT token string (optional, prompts interactively if omitted)",
    )
    token_input.add_argument("--stdin", action="store_true", default=False,
                             help="Read token from stdin (for piping)")

    clock = argparse.ArgumentParser(add_help=False)
    clock.add_argument("--now", type=int, default=None,
                       help="Evaluate time claims at this Unix timestamp (default: current time)")

    parser = argparse.ArgumentParser(
        prog="jwt-inspect",
        description="Decode, validate, analyze, sign and verify JWT tokens.",
        epilog="Examples:\n"
               "  %(prog)s decode <token>\n"
               "  echo '<token>' | %(prog)s analyze --stdin --format markdown --save\n"
               "  %(prog)s sign --payload '{\"sub\": \"42\"}' --secret s3cr3t\n"
               "  %(prog)s verify <token> --alg HS256 --secret s3cr3t\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("decode", parents=[common, token_input, clock],
                   help="Decode a token without verifying it")

    p_validate = sub.add_parser("validate", parents=[common, token_input, clock],
                                help="Validate time claims, algorithm and registered claims")
    p_validate.add_argument("--secret", "-s", default=None,
                            help="Signing secret (overrides config and $JWT_INSPECT_SECRET)")

    p_analyze = sub.add_parser("analyze", parents=[common, token_input, clock],
                               help="List security issues")
    p_analyze.add_argument("--format", "-f", choices=REPORT_FORMATS, default=None,
                           help="Report format (default: text)")
    p_analyze.add_argument("--save", action="store_true", default=False,
                           help="Save the report to the output directory")
    p_analyze.add_argument("--output-dir", "-o", default=None,
                           help="Output directory for saved reports")

    p_sign = sub.add_parser("sign", parents=[common], help="Create a signed token")
    p_sign.add_argument("--payload", "-p", required=True, help="Payload as a JSON object")
    p_sign.add_argument("--header", default='{"typ": "JWT"}', help="Header as a JSON object")
    p_sign.add_argument("--alg", "-a", choices=SUPPORTED_ALGORITHMS, default=None,
                        help="Signing algorithm (default: from config, HS256)")
    p_sign.add_argument("--secret", "-s", default=None, help="Signing secret")

    p_verify = sub.add_parser("verify", parents=[common, token_input],
                              help="Verify a token's signature")
    p_verify.add_argument("--alg", "-a", choices=SUPPORTED_ALGORITHMS, default=None,
                          help="Expected algorithm (default: from config, HS256)")
    p_verify.add_argument("--secret", "-s", default=None, help="Signing secret")

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def _read_token(args: argparse.Namespace) -> str | None:
    """Resolve the token from stdin, the argument, or an interactive prompt."""
    if args.stdin:
        token = sys.stdin.read().strip()
        if not token:
            print("Error: No token received on stdin.")
            return None
        return token
    if args.token:
        return args.token

    print("JWT Token Inspector")
    print("===================")
    try:
        return input("Please enter your JWT token: ").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return None


def _now(args: argparse.Namespace) -> int:
    return args.now if getattr(args, "now", None) is not None else int(time.time())


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def _cmd_decode(args, cfg) -> int:
    token = _read_token(args)
    if token is None:
        return 1
    decoded = decode(token, _now(args))
    _print_result(decoded)
    return 0


def _cmd_validate(args, cfg) -> int:
    token = _read_token(args)
    if token is None:
        return 1
    now = _now(args)
    report = validate(decode(token, now), now, cfg.signing.secret or None)

    print(f"Token is {'VALID' if report.is_valid else 'INVALID'}")
    for msg in report.errors:
        print(f"  [ERROR] {msg}")
    for msg in report.warnings:
        print(f"  [WARN ] {msg}")
    for msg in report.info:
        print(f"  [INFO ] {msg}")
    return 0 if report.is_valid else 1


def _cmd_analyze(args, cfg) -> int:
    token = _read_token(args)
    if token is None:
        return 1
    now = _now(args)
    data = ReportData(
        decoded=decode(token, now), now=now, policy=cfg.policy.to_policy(),
    ).build(key=cfg.signing.secret or None)

    fmt = cfg.report.format
    content = _RENDERERS[fmt](data)
    print(content)

    if args.save or args.output_dir is not None:
        output_dir = cfg.report.output_dir
        if not os.path.isabs(output_dir):
            output_dir = os.path.join(PROJECT_ROOT, output_dir)
        filepath = save_report(content, output_dir, fmt, label=data.decoded.algorithm or "")
        print(f"Report saved: {filepath}")
    return 0


def _cmd_sign(args, cfg) -> int:
    header = parse_object(args.header, "header")
    payload = parse_object(args.payload, "payload")
    print(sign(header, payload, cfg.signing.algorithm, cfg.signing.secret or None))
    return 0


def _cmd_verify(args, cfg) -> int:
    token = _read_token(args)
    if token is None:
        return 1
    algorithm = cfg.signing.algorithm
    if verify(token, algorithm, cfg.signing.secret or None):
        print(f"Signature verified ({algorithm})")
        return 0
    print(f"Signature INVALID ({algorithm})")
    return 1


_COMMANDS = {
    "decode": _cmd_decode,
    "validate": _cmd_validate,
    "analyze": _cmd_analyze,
    "sign": _cmd_sign,
    "verify": _cmd_verify,
}


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Load config (an explicit --config must exist)
    try:
        cfg = load_config(args.config or DEFAULT_CONFIG_PATH, required=args.config is not None)
        cfg = merge_cli_overrides(cfg, args)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    log_file = cfg.log_file
    if log_file and not os.path.isabs(log_file):
        log_file = os.path.join(PROJECT_ROOT, log_file)
    setup_logging(cfg.verbose, log_file)
    logger.debug("Running %s with %r", args.command, cfg.signing)

    try:
        return _COMMANDS[args.command](args, cfg)
    except TokenError as exc:
        print(f"Error: {exc}")
        return 1
