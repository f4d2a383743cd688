"""
Command-line argument parser configuration.

This module sets up the argument parser for the rowcheck CLI tool,
defining all commands and their options.
"""

import argparse

from rowcheck.storage import BACKENDS


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Storage backend options shared by every command"""
    group = parser.add_argument_group("storage backend")
    group.add_argument(
        '--backend',
        choices=BACKENDS,
        default='postgresql',
        help='Database holding the tables (default: postgresql)'
    )
    group.add_argument('--host', help='Database host (env: POSTGRES_HOST / SQLSERVER_HOST)')
    group.add_argument('--port', help='Database port (env: POSTGRES_PORT / SQLSERVER_PORT)')
    group.add_argument('--database', help='Database name (env: POSTGRES_DB / SQLSERVER_DATABASE)')
    group.add_argument('--user', help='Username (env: POSTGRES_USER / SQLSERVER_USER)')
    group.add_argument('--password', help='Password (env: POSTGRES_PASSWORD / SQLSERVER_PASSWORD)')
    group.add_argument(
        '--schema',
        help='Schema for unqualified table names (default: public / dbo)'
    )
    group.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch credentials from HashiCorp Vault'
    )
    group.add_argument(
        '--vault-path',
        help='Vault KV v2 secret path (default: database/<backend>)'
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--format',
        choices=['console', 'json'],
        default='console',
        help='Output format for outcomes on stdout (default: console)'
    )
    parser.add_argument(
        '--output',
        help='Write outcomes to this JSON file'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='rowcheck',
        description="Row count assertions for data pipelines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fail the step (exit 8) unless both tables have the same number of rows
  rowcheck check "orders = staging.orders"

  # Only warn (exit 4) when the daily load is empty
  rowcheck check "daily_load > 0" --severity warn

  # Totals across several tables, credentials from Vault
  rowcheck check "customers = new_customers + old_customers - 3" --use-vault

  # Run every check listed in a YAML file against SQL Server
  rowcheck run --checks-file checks.yaml --backend sqlserver

Exit status is the highest floor raised by a failed check:
  0 = all passed (or failed with severity note), 4 = warning, 8 = error/abend
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (env: LOG_LEVEL, default: INFO)'
    )
    parser.add_argument(
        '--json-logs',
        action='store_true',
        default=None,
        help='Write logs as JSON (env: LOG_JSON)'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to this file, rotated (env: LOG_FILE)'
    )
    parser.add_argument(
        '--trace-console',
        action='store_true',
        help='Export OpenTelemetry spans to the console'
    )
    parser.add_argument(
        '--pushgateway',
        help='Push metrics to this Prometheus Pushgateway (host:port) when done'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Check command ==========
    check_parser = subparsers.add_parser('check', help='Evaluate a single assertion')
    check_parser.add_argument(
        'expr',
        help="Comparison expression, e.g. 'one = two + 3'"
    )
    check_parser.add_argument(
        '--severity',
        default='error',
        help='note, warning (warn), error (err) or abend (abort) (default: error)'
    )
    check_parser.add_argument(
        '--success-msg',
        help='Message written when the assertion holds'
    )
    check_parser.add_argument(
        '--commas',
        default='yes',
        help='Insert thousands separators in echoed expressions (default: yes)'
    )
    _add_output_arguments(check_parser)
    _add_connection_arguments(check_parser)

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Evaluate every assertion in a YAML file')
    run_parser.add_argument(
        '--checks-file',
        required=True,
        help='YAML file listing checks (expr, severity, success_msg, commas)'
    )
    _add_output_arguments(run_parser)
    _add_connection_arguments(run_parser)

    return parser
