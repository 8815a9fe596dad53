"""
Automana CLI — run or validate a rules module.

Commands:
- automana run       — Start one worker per rule and loop forever
- automana validate  — Build and validate rules without contacting Asana

The rules module is a dotted import path (``--rules``, ``rules_module`` in
automana.yaml, or AUTOMANA_RULES) whose ``register(registry)`` adds rules.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from automana.engine.errors import AutomanaError, AutomanaValidationError

logger = logging.getLogger("automana.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="automana",
        description="Automana — periodic rule automation for Asana",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # automana run
    run_parser = subparsers.add_parser("run", help="Run all rules forever")
    run_parser.add_argument("--config", help="Path to automana.yaml (default: auto-discover)")
    run_parser.add_argument("--rules", help="Rules module, e.g. myrules (overrides config)")
    run_parser.add_argument(
        "--iterations", type=int, default=None,
        help="Stop each rule after N iterations (default: run forever)",
    )

    # automana validate
    validate_parser = subparsers.add_parser("validate", help="Validate the rules module")
    validate_parser.add_argument("--config", help="Path to automana.yaml (default: auto-discover)")
    validate_parser.add_argument("--rules", help="Rules module, e.g. myrules (overrides config)")

    args = parser.parse_args(argv)

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "validate":
        return cmd_validate(args)
    else:
        parser.print_help()
        return 0


def _load(args: argparse.Namespace):
    """Load config + rules. Returns (config, registry) or raises AutomanaError."""
    from automana.engine.config import load_platform_config
    from automana.process.registry import load_rules

    config = load_platform_config(args.config)
    module_path = args.rules or config.rules_module
    if not module_path:
        raise AutomanaValidationError(
            "No rules module given (use --rules, rules_module in automana.yaml, or AUTOMANA_RULES)"
        )
    return config, load_rules(module_path)


def cmd_run(args: argparse.Namespace) -> int:
    """Start every rule's worker and block."""
    from automana.client.client import Client
    from automana.engine.logging import configure_logging, init_logging, shutdown_logging
    from automana.process.scheduler import RuleScheduler

    try:
        config, registry = _load(args)
    except AutomanaError as e:
        print(f"[ERROR] {e}")
        return 1

    configure_logging(config.logging.level)
    if config.logging.structured:
        init_logging(
            log_dir=config.logging.directory,
            flush_interval_ms=config.logging.flush_interval_ms,
            flush_batch_size=config.logging.flush_batch_size,
            max_queue_size=config.logging.max_queue_size,
        )

    try:
        with Client.from_config(config.asana) as client:
            scheduler = RuleScheduler(
                registry,
                client,
                iteration_interval=config.scheduler.iteration_interval_seconds,
                max_iterations=args.iterations,
            )
            scheduler.run()
        return 0
    except AutomanaError as e:
        print(f"[ERROR] {e}")
        return 1
    except KeyboardInterrupt:
        print("\nStopped.")
        return 0
    finally:
        shutdown_logging()


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate every rule in the rules module."""
    try:
        _, registry = _load(args)
    except AutomanaError as e:
        print(f"[ERROR] {e}")
        return 1

    errors = 0
    for rule in registry.rules:
        try:
            rule.validate()
            print(f"[OK] {rule!r}")
        except AutomanaValidationError as e:
            print(f"[ERROR] {rule.name}: {e}")
            errors += 1

    print(f"\n{'All rules valid!' if errors == 0 else f'{errors} error(s) found.'}")
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
