"""
Main Entry Point for the Roof Panel Layout Optimization System.

This module orchestrates a run from the command line:
1. Reads a JSON request file
2. Validates it (pydantic request models)
3. Runs the optimizer, the grid preview, or lists the panel catalog
4. Prints a summary or the full JSON result

THIS IS A DECISION-SUPPORT TOOL.
ALL LAYOUTS MUST BE REVIEWED BEFORE INSTALLATION.
"""

import argparse
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from backend.models.request import OptimizationRequest, PreviewRequest
from backend.services.placement_service import (
    PlacementService, handle_optimization_request, handle_preview_request, list_panels_response
)
from geometry import InvalidGeometryError
from panel_catalog import PanelCatalogError

logger = logging.getLogger(__name__)


_cli_handlers: List[logging.Handler] = []


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Console logging, plus an optional rotating log file. Safe to call repeatedly."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    while _cli_handlers:
        handler = _cli_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    root_logger.addHandler(console_handler)
    _cli_handlers.append(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=10*1024*1024, backupCount=5)  # 10MB per file, keep 5 backups
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(file_handler)
        _cli_handlers.append(file_handler)


def load_request(path: str) -> Dict[str, Any]:
    """Read a JSON request body from a file ('-' for stdin)."""
    if path == '-':
        return json.load(sys.stdin)
    with open(path, encoding='utf-8') as handle:
        return json.load(handle)


def format_optimization_summary(result: Dict[str, Any]) -> str:
    """Human-readable summary of an optimization response."""
    lines = [
        "=" * 70,
        "LAYOUT OPTIMIZATION RESULTS",
        "=" * 70,
        f"Generations run: {result['generations_run']} ({result['termination_reason']})",
    ]

    for rank, solution in enumerate(result['solutions'], 1):
        metrics = solution['metrics']
        lines.append("")
        lines.append(f"#{rank} {solution['id']}  score {solution['score']:.1f}")
        lines.append(
            f"  Panels: {metrics['total_panels']}  "
            f"Power: {metrics['total_wattage'] / 1000.0:.2f} kW  "
            f"Production: {metrics['estimated_production']:,.0f} kWh/yr"
        )
        lines.append(
            f"  Coverage: {metrics['roof_coverage']:.1f}%  "
            f"Cost: ${metrics['cost_estimate']:,.0f}"
        )
        lines.append(
            f"  Aesthetic: {metrics['aesthetic_score']:.0f}  "
            f"Maintenance: {metrics['maintenance_score']:.0f}  "
            f"Compliance: {metrics['compliance_score']:.0f}"
        )
        for violation in solution['violations']:
            lines.append(f"  [{violation['severity'].upper()}] {violation['description']}")

    lines.append("=" * 70)
    return "\n".join(lines)


def format_preview_summary(result: Dict[str, Any]) -> str:
    attempted = len(result['panels'])
    return (
        f"Preview: {result['total_fit']} of {attempted} grid positions fit, "
        f"coverage {result['coverage']:.1f}%"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Roof Panel Layout Optimization System',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
This is a DECISION-SUPPORT TOOL.
All layouts must be reviewed before installation.

Example usage:
  python main.py optimize --input request.json --seed 42
  python main.py preview --input request.json --format json
  python main.py panels
        """
    )
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', type=str, default=None, help='Also write logs to this file')

    subparsers = parser.add_subparsers(dest='command', required=True)

    optimize_parser = subparsers.add_parser('optimize', help='Run the layout optimizer')
    optimize_parser.add_argument('--input', required=True, help='JSON request file ("-" for stdin)')
    optimize_parser.add_argument('--seed', type=int, default=None, help='Random seed (overrides the request)')
    optimize_parser.add_argument('--format', choices=['text', 'json'], default='text')

    preview_parser = subparsers.add_parser('preview', help='Fast grid preview')
    preview_parser.add_argument('--input', required=True, help='JSON request file ("-" for stdin)')
    preview_parser.add_argument('--format', choices=['text', 'json'], default='text')

    subparsers.add_parser('panels', help='List registered panel templates')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.log_file)
    logger.debug(f"Running command '{args.command}'")

    service = PlacementService()

    try:
        if args.command == 'panels':
            print(json.dumps(list_panels_response(service).model_dump(), indent=2))
            return 0

        body = load_request(args.input)

        if args.command == 'optimize':
            request = OptimizationRequest.model_validate(body)
            if args.seed is not None:
                request = request.model_copy(update={'seed': args.seed})
            result = handle_optimization_request(request, service).model_dump()
            summary = format_optimization_summary(result)
        else:
            request = PreviewRequest.model_validate(body)
            result = handle_preview_request(request, service).model_dump()
            summary = format_preview_summary(result)

    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        print(f"Error: could not read request: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid request:\n{e}", file=sys.stderr)
        return 1
    except (InvalidGeometryError, PanelCatalogError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == 'json':
        print(json.dumps(result, indent=2))
    else:
        print(summary)
    return 0


if __name__ == '__main__':
    sys.exit(main())
