"""
Command-line front end for certificate generation and parsing.

Usage:
    x509-tool to-x509 example.com 127.0.0.1 --ca-constraint 0 --key-usage key_cert_sign,crl_sign
    x509-tool from-x509 certs/server.pem
    cat bundle.pem | x509-tool from-x509

Output is JSON on stdout; logs and errors go to stderr.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from adapters.host import from_x509, to_x509
from certificates.errors import X509Error
from utils.logger import X509Logger


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="x509-tool",
        description="Generate self-signed X.509 certificates and parse existing ones",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("to-x509", help="Generate a new X509 certificate")
    gen.add_argument("subject_alt_names", nargs="*", help="DNS names or IP addresses")
    gen.add_argument("-n", "--name", help="cert name")
    gen.add_argument("-b", "--begin-date", type=_timestamp, help="begin date (ISO 8601)")
    gen.add_argument("-e", "--end-date", type=_timestamp, help="end date (ISO 8601)")
    gen.add_argument(
        "-c", "--ca-constraint", type=int,
        help="CA constraint (0 for unconstrained, positive integer for constrained)",
    )
    gen.add_argument(
        "-u", "--key-usage",
        help="key usage (options: digital_signature, content_commitment, key_encipherment, "
             "data_encipherment, key_agreement, key_cert_sign, crl_sign, encipher_only, decipher_only)",
    )

    parse = subparsers.add_parser("from-x509", help="Parse x509 certificates")
    parse.add_argument("path", nargs="?", help="certificate file (default: stdin)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = X509Logger.get_logger("x509-tool")

    try:
        if args.command == "to-x509":
            result = to_x509(
                args.subject_alt_names,
                name=args.name,
                begin_date=args.begin_date,
                end_date=args.end_date,
                ca_constraint=args.ca_constraint,
                key_usage=args.key_usage,
            )
        else:
            if args.path:
                source = Path(args.path).read_bytes()
            else:
                source = sys.stdin.buffer
            result = from_x509(source)
    except X509Error as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"cannot read input: {e}")
        return 1

    json.dump(result, sys.stdout, indent=2, default=_json_default)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
