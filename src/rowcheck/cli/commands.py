"""
CLI command implementations.

This module contains the two rowcheck commands:
- check: evaluate a single assertion
- run: evaluate every assertion listed in a YAML checks file

Both return the process exit status: the highest floor raised by a failed
assertion (0, 4 or 8). An ABEND assertion terminates the process from
inside the host after its messages are written; the JSON report and the
metrics push happen before that, and nothing runs after it.
"""

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from rowcheck.check import (
    LoggingHost,
    Outcome,
    get_process_exit_status,
    report_outcome,
    run_check,
)
from rowcheck.storage import StorageUnavailableError, create_store
from rowcheck.utils.metrics import CheckMetrics

from .credentials import ConfigurationError, get_store_config

logger = logging.getLogger(__name__)

FAILURE_EXIT_CODE = 8
CHECK_KEYS = {"expr", "severity", "success_msg", "commas"}


def load_checks_file(path: str) -> list[dict[str, Any]]:
    """
    Load assertions from a YAML file

    The file holds either a list of checks or a mapping with a ``checks``
    list and optional ``defaults`` applied to every check. A check is an
    expression string or a mapping with ``expr`` and optional ``severity``,
    ``success_msg`` and ``commas``.

    Example:
        defaults:
          severity: warn
        checks:
          - orders = staging.orders
          - expr: customers > 0
            severity: abend

    Args:
        path: Path to the YAML file

    Returns:
        List of check dictionaries, each with an 'expr' key

    Raises:
        ValueError: If the file structure is invalid
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    defaults: dict[str, Any] = {}
    if isinstance(data, dict):
        defaults = data.get("defaults") or {}
        data = data.get("checks")

    if not isinstance(data, list) or not data:
        raise ValueError(f"{path}: expected a non-empty list of checks")

    unknown_defaults = set(defaults) - (CHECK_KEYS - {"expr"})
    if unknown_defaults:
        raise ValueError(f"{path}: unknown default keys: {', '.join(sorted(unknown_defaults))}")

    checks = []
    for i, entry in enumerate(data, 1):
        if isinstance(entry, str):
            entry = {"expr": entry}
        if not isinstance(entry, dict) or not isinstance(entry.get("expr"), str):
            raise ValueError(f"{path}: check #{i} must be a string or a mapping with 'expr'")

        unknown = set(entry) - CHECK_KEYS
        if unknown:
            raise ValueError(f"{path}: check #{i} has unknown keys: {', '.join(sorted(unknown))}")

        checks.append({**defaults, **entry})

    return checks


def write_outcomes(outcomes: list[Outcome], args: argparse.Namespace) -> None:
    """Print and/or save outcomes according to --format and --output"""
    records = [outcome.to_dict() for outcome in outcomes]

    if args.format == "json":
        print(json.dumps(records, indent=2))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(records, f, indent=2)
        logger.info(f"Outcomes saved to {output_path}")


def push_metrics(args: argparse.Namespace, metrics: CheckMetrics | None) -> None:
    """Push metrics to --pushgateway, if one was given"""
    if metrics is None or not args.pushgateway:
        return
    try:
        metrics.push(args.pushgateway)
    except OSError as e:
        logger.warning(f"Failed to push metrics to {args.pushgateway}: {e}")


def _run_checks(
    checks: list[dict[str, Any]],
    args: argparse.Namespace,
    metrics: CheckMetrics | None,
) -> int:
    exit_status = get_process_exit_status()
    host = LoggingHost(exit_status)
    outcomes = []

    try:
        config = get_store_config(args)
        with create_store(args.backend, config) as store:
            for check in checks:
                outcome = run_check(
                    check["expr"],
                    store,
                    severity=check.get("severity", "error"),
                    success_msg=check.get("success_msg"),
                    commas=check.get("commas", "yes"),
                    metrics=metrics,
                )
                outcomes.append(outcome)
                if outcome.fatal:
                    # Delivery terminates the process: publish everything first
                    write_outcomes(outcomes, args)
                    push_metrics(args, metrics)
                report_outcome(outcome, host, metrics)
    except (ConfigurationError, StorageUnavailableError) as e:
        logger.error(f"Row count assertion could not run: {e}")
        exit_status.raise_floor(FAILURE_EXIT_CODE)

    if outcomes:
        write_outcomes(outcomes, args)

    passed = sum(1 for outcome in outcomes if outcome.passed)
    logger.info(f"{passed}/{len(checks)} assertion(s) passed, exit status {exit_status.code}")
    return exit_status.code


def cmd_check(args: argparse.Namespace, metrics: CheckMetrics | None = None) -> int:
    """
    Evaluate a single assertion

    Args:
        args: Parsed command-line arguments
        metrics: Optional metrics collector

    Returns:
        Process exit status
    """
    check = {
        "expr": args.expr,
        "severity": args.severity,
        "success_msg": args.success_msg,
        "commas": args.commas,
    }
    return _run_checks([check], args, metrics)


def cmd_run(args: argparse.Namespace, metrics: CheckMetrics | None = None) -> int:
    """
    Evaluate every assertion in a YAML checks file

    Args:
        args: Parsed command-line arguments
        metrics: Optional metrics collector

    Returns:
        Process exit status
    """
    try:
        checks = load_checks_file(args.checks_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Failed to load checks file: {e}")
        return get_process_exit_status().raise_floor(FAILURE_EXIT_CODE)

    logger.info(f"Loaded {len(checks)} check(s) from {args.checks_file}")
    return _run_checks(checks, args, metrics)
