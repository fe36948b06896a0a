"""
Command-line interface for railsimplify.

Provides commands for simplifying a network file, validating pieces and
writing a default configuration.
"""

import argparse
import sys

from railsimplify.config import load_config, save_default_config
from railsimplify.errors import SimplifyError
from railsimplify.tracer import configure_tracer, get_tracer


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="railsimplify: merge rail network pieces into fewer, longer ones",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Simplify a network file")
    run_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input network JSON file",
    )
    run_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output JSON file for the simplified pieces",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--report",
        default=None,
        help="Directory to write validation reports to",
    )
    run_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print progress messages",
    )
    _add_trace_arguments(run_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a pieces file")
    validate_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Pieces JSON file",
    )
    validate_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    _add_trace_arguments(validate_parser)

    # Init config command
    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="railsimplify_config.yaml",
        help="Output path for config file",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "validate":
        return handle_validate(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def _add_trace_arguments(parser):
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default=None,
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )


def _configure_tracing(args, config):
    """Command-line flags override the tracing section of the config file."""
    tracing = config.tracing
    configure_tracer(
        enabled=args.trace or tracing.enabled,
        level=args.trace_level or tracing.level,
        file_path=args.trace_file or tracing.file_path,
        json_output=args.trace_json or tracing.json_output,
    )


def handle_run(args):
    """Handle the run command."""
    config = load_config(args.config)
    _configure_tracing(args, config)

    tracer = get_tracer()

    try:
        from railsimplify.io.network_io import load_network, save_pieces
        from railsimplify.pipeline import simplify_network
        from railsimplify.validate.report import format_summary, generate_report
        from railsimplify.validate.rules import run_validation

        log = None if args.quiet else print

        with tracer.span("cli_run", module="cli"):
            network = load_network(args.input)
            pieces = simplify_network(network, log=log, config=config)
            save_pieces(pieces, args.out)

            report = run_validation(pieces, config)
            if args.report:
                generate_report(report, args.report)

        print(f"\nSimplification completed.")
        print(f"  Input pieces: {len(network.pieces)}")
        print(f"  Output pieces: {len(pieces)}")
        print(f"  Validation errors: {report.error_count}")
        print(f"  Validation warnings: {report.warning_count}")
        print(f"\nOutput saved to: {args.out}")

        if report.has_errors:
            print(f"\n[!] Validation errors detected.\n")
            print(format_summary(report))
            return 1

        return 0

    except (SimplifyError, OSError, ValueError) as e:
        tracer.event(f"Simplification failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_validate(args):
    """Handle the validate command."""
    config = load_config(args.config)
    _configure_tracing(args, config)

    tracer = get_tracer()

    try:
        from railsimplify.io.network_io import load_network
        from railsimplify.validate.report import format_summary
        from railsimplify.validate.rules import run_validation

        with tracer.span("cli_validate", module="cli"):
            network = load_network(args.input)
            report = run_validation(network.pieces, config)

        print(format_summary(report))
        return 1 if report.has_errors else 0

    except (SimplifyError, OSError, ValueError) as e:
        tracer.event(f"Validation failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
