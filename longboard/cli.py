"""Command-line interface for longboard using argparse.

Usage:

    longboard get https://example.com
    longboard post https://httpbin.org/post -b '{"a": 1}' -h Content-Type=application/json
    echo hello | longboard put https://httpbin.org/put -c curl
    longboard get https://example.com/login -j ~/.longboard/cookies.jsonl
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, Sequence, TextIO

from . import __version__
from ._backends import get_backend
from ._debug import DebugInfo, DebugOutput
from .builder import build_request, parse_header
from .config import (
    BACKEND_ALIASES,
    DEFAULT_BACKEND,
    BodyKind,
    BodySource,
    LongboardConfig,
    resolve_backend_name,
)
from .cookie_jar import CookieJar
from .models import ConfigError, LongboardError, Method, Response, TransportError
from .printer import ResponsePrinter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def _method_type(value: str) -> Method:
    try:
        return Method.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _header_type(value: str) -> tuple[str, str]:
    try:
        return parse_header(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _backend_type(value: str) -> str:
    try:
        return resolve_backend_name(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _literal_body(value: str) -> BodySource:
    return BodySource(BodyKind.LITERAL, value)


def _file_body(value: str) -> BodySource:
    return BodySource(BodyKind.FILE, value)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the longboard CLI."""
    # -h is taken by headers, so help only answers to --help
    parser = argparse.ArgumentParser(
        prog="longboard",
        description="longboard: the easy way to surf",
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  longboard get https://example.com\n"
            "  longboard post https://httpbin.org/post -b hello -h X-Trace=1\n"
            "  echo hello | longboard put https://httpbin.org/put -c curl\n"
        ),
    )

    parser.add_argument(
        "method",
        type=_method_type,
        help="HTTP method, case-insensitive (get, post, ...).",
    )
    parser.add_argument("url", help="Absolute http:// or https:// URL.")

    parser.add_argument(
        "-f", "--file",
        dest="body_sources",
        action="append",
        type=_file_body,
        metavar="PATH",
        help="provide a path to a file to use as the request body",
    )
    parser.add_argument(
        "-b", "--body",
        dest="body_sources",
        action="append",
        type=_literal_body,
        metavar="TEXT",
        help="provide a request body on the command line",
    )
    parser.add_argument(
        "-h", "--headers",
        nargs="+",
        action="extend",
        type=_header_type,
        default=[],
        metavar="KEY=VALUE",
        help="provide headers in the form -h KEY1=VALUE1 KEY2=VALUE2",
    )
    parser.add_argument(
        "-c", "--client",
        type=_backend_type,
        default=DEFAULT_BACKEND,
        metavar="BACKEND",
        help="http backend. options: {} (default: {})".format(
            ", ".join(BACKEND_ALIASES), DEFAULT_BACKEND
        ),
    )
    parser.add_argument(
        "-j", "--jar",
        metavar="PATH",
        help="persistent cookie jar file, created on first use",
    )
    parser.add_argument(
        "-L", "--location",
        action="store_true",
        help="follow redirects",
    )
    parser.add_argument(
        "-k", "--insecure",
        action="store_true",
        help="skip TLS certificate verification",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="print the request/response trace to stderr",
    )
    parser.add_argument(
        "--help",
        action="help",
        help="show this help message and exit",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> LongboardConfig:
    """Turn parsed arguments into a validated configuration.

    When both ``-b`` and ``-f`` are given, the first one on the command
    line is used.

    Raises:
        ConfigError: If a value fails validation.
    """
    body_sources = args.body_sources or []
    return LongboardConfig(
        method=args.method,
        url=args.url,
        headers=list(args.headers),
        body_source=body_sources[0] if body_sources else None,
        backend=args.client,
        cookie_jar=args.jar,
        follow_redirects=args.location,
        verify_ssl=not args.insecure,
        verbose=args.verbose,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def execute(
    config: LongboardConfig,
    stdin: BinaryIO | None = None,
    stdout: TextIO | None = None,
) -> Response:
    """Send the request described by ``config`` and print the response.

    Loads the cookie jar before the request and saves it afterwards.

    Raises:
        LongboardError: On body, cookie jar, backend, or transport failure.
    """
    jar: CookieJar | None = None
    cookies: dict[str, str] = {}
    if config.cookie_jar is not None:
        jar = CookieJar(config.cookie_jar)
        jar.load()
        cookies = jar.attach(config.url)

    request = build_request(config, stdin=stdin, cookies=cookies)

    debug = DebugOutput(enabled=config.verbose)
    info = DebugInfo.for_request(request, config.backend, cookies)

    try:
        backend = get_backend(
            config.backend,
            follow_redirects=config.follow_redirects,
            verify_ssl=config.verify_ssl,
        )
    except ImportError as e:
        raise ConfigError(str(e)) from e

    with backend:
        try:
            response = backend.send(request)
        except TransportError as e:
            info.error = str(e)
            debug.log_request(info)
            raise

    info.record_response(response)
    debug.log_request(info)

    if jar is not None:
        jar.update(response)
        jar.save()

    ResponsePrinter(stdout).print(response)
    return response


def main(
    argv: Sequence[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run the CLI and return the process exit code.

    The HTTP status of the response does not affect the exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        parser.error(str(e))

    if args.body_sources and len(args.body_sources) > 1:
        first = args.body_sources[0]
        logger.warning(
            "Both -b and -f given; using the first one (%s)",
            "-f" if first.kind is BodyKind.FILE else "-b",
        )

    try:
        execute(config, stdin=stdin, stdout=stdout)
    except LongboardError as e:
        print(f"longboard: error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
