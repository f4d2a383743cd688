"""
Command-line interface for row count assertions.

Available commands:
- check: evaluate one expression
- run: evaluate every expression in a YAML checks file
"""

import sys

from rowcheck.utils.logging import configure_from_env
from rowcheck.utils.metrics import CheckMetrics
from rowcheck.utils.tracing import initialize_tracing, shutdown_tracing

from .commands import cmd_check, cmd_run, load_checks_file, push_metrics
from .credentials import ConfigurationError, get_store_config
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the rowcheck CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_from_env(level=args.log_level, log_file=args.log_file, json_format=args.json_logs)

    if args.command not in ('check', 'run'):
        parser.print_help()
        sys.exit(1)

    if args.trace_console:
        initialize_tracing(console_export=True)

    metrics = CheckMetrics() if args.pushgateway else None
    if args.command == 'check':
        code = cmd_check(args, metrics)
    else:
        code = cmd_run(args, metrics)

    # An ABEND check exits inside the command; this only runs on completion
    push_metrics(args, metrics)
    shutdown_tracing()

    sys.exit(code)


__all__ = [
    'main',
    'cmd_check',
    'cmd_run',
    'load_checks_file',
    'get_store_config',
    'ConfigurationError',
    'create_parser',
]


if __name__ == '__main__':
    main()
