"""
Command line entry point for the TypedAnt language server.

Editors normally launch ``antlsp`` with no arguments and talk to it over
stdin/stdout.  ``--tcp`` serves a single port instead, which makes it easy to
attach a client by hand while debugging.  Logs never go to stdout (that is
the LSP channel); they go to stderr, or to ``--log-file`` when given.
"""
from __future__ import annotations

import argparse
import logging
import sys

from antlsp import __version__

LOG_FORMAT = '%(levelname)s %(name)s: %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='antlsp',
        description='Language server for TypedAnt: diagnostics and identifier completion.',
    )
    parser.add_argument('--version', action='version', version=f'antlsp {__version__}')

    transport = parser.add_argument_group('transport')
    exclusive = transport.add_mutually_exclusive_group()
    exclusive.add_argument('--stdio', action='store_true',
                           help='serve over stdin/stdout (the default)')
    exclusive.add_argument('--tcp', metavar='PORT', type=int,
                           help='serve on a TCP port instead of stdio')
    transport.add_argument('--host', default='127.0.0.1',
                           help='interface to bind with --tcp (default: %(default)s)')

    logs = parser.add_argument_group('logging')
    logs.add_argument('--log-level', metavar='LEVEL', default='WARNING',
                      type=str.upper, choices=LOG_LEVELS,
                      help='one of %(choices)s, case-insensitive (default: %(default)s)')
    logs.add_argument('--log-file', metavar='PATH',
                      help='append logs to PATH instead of stderr')
    return parser


def _configure_logging(level: str, log_file: str | None) -> None:
    if log_file:
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=log_file)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def antlsp(argv: list[str] | None = None) -> None:
    """Run the server until the client disconnects."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level, args.log_file)

    from antlsp.server import server

    if args.tcp is None:
        server.start_io()
    else:
        logging.getLogger(__name__).info('listening on %s:%d', args.host, args.tcp)
        server.start_tcp(args.host, args.tcp)


if __name__ == '__main__':
    antlsp()
