"""Run Julia code from the command line through jlbridge."""

import argparse
import functools
import pathlib
import platform
import sys
from typing import List, Optional

from jlbridge.calling import CallLayer
from jlbridge.config import load_config
from jlbridge.endpoint import load_endpoint
from jlbridge.errors import BridgeError
import jlbridge.logging
from jlbridge.repl_loop import DEFAULT_PROMPT, repl
from jlbridge.runtime import Runtime


arg_parser = argparse.ArgumentParser(
    prog='jlbridge', description='Evaluate Julia code through mexjulia.'
)
arg_parser.add_argument(
    '-e',
    '--eval',
    action='append',
    default=[],
    metavar='EXPR',
    help='evaluate EXPR and print its value (may be repeated)',
)
arg_parser.add_argument(
    '--prompt', default=DEFAULT_PROMPT, help='prompt shown by the REPL'
)
arg_parser.add_argument(
    '--config',
    type=pathlib.Path,
    default=None,
    help='runtime configuration file (default: $JLBRIDGE_CONFIG or ~/.jlbridge/jldict)',
)
arg_parser.add_argument(
    '--endpoint',
    default=None,
    metavar='MODULE[:ATTRIBUTE]',
    help='native binding to load (default: $JLBRIDGE_ENDPOINT or mexjulia)',
)
arg_parser.add_argument(
    '--verbose',
    action='store_true',
    default=False,
    help='print internal logs and errors',
)


def _print_value(value: object) -> None:
    print(repr(value))


def _interactive(layer: CallLayer, prompt: str) -> None:
    print(
        'jlbridge REPL (version {} on Python {}).'.format(
            jlbridge.version, platform.python_version()
        )
    )
    print("Start a line with ';' to leave.")
    try:
        repl(layer, prompt, on_result=_print_value)
    except (EOFError, KeyboardInterrupt):
        print()
    print('Bye!')


def main(argv: Optional[List[str]] = None) -> int:
    args = arg_parser.parse_args(argv)
    if args.verbose:
        jlbridge.logging.init_logging(sys.stderr)

    try:
        endpoint = (
            None if args.endpoint is None else load_endpoint(args.endpoint)
        )
        layer = CallLayer(
            Runtime(
                endpoint=endpoint,
                config_loader=functools.partial(load_config, args.config),
            )
        )
        if args.eval:
            for expression in args.eval:
                _print_value(layer.eval(expression))
        else:
            _interactive(layer, args.prompt)
    except BridgeError as e:
        print(f'{type(e).__name__}: {e}', file=sys.stderr)
        if args.verbose:
            raise
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
