#!/usr/bin/env python3
"""
CanvasPlace CLI

Command-line interface for the canvas layout engine.

Usage:
    canvasplace layout <canvas.yaml> [options]
    canvasplace check <canvas.yaml> [options]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_inputs(args):
    """Load canvas, config and tables from the command-line arguments."""
    from .canvas.loader import load_canvas
    from .patterns import get_tables
    from .placement.config import LayoutConfig

    canvas, options = load_canvas(Path(args.canvas))

    if getattr(args, 'config', None):
        config = LayoutConfig.from_file(Path(args.config))
    else:
        config = LayoutConfig.from_dict(options)

    overrides = {}
    if getattr(args, 'strategy', None):
        overrides['strategy'] = args.strategy
    if getattr(args, 'spacing', None) is not None:
        overrides['spacing'] = args.spacing
    if getattr(args, 'grid', None) is not None:
        overrides['grid_cell_size'] = args.grid
    if overrides:
        merged = config.to_dict()
        merged.update(overrides)
        config = LayoutConfig.from_dict(merged)

    tables = get_tables(args.patterns)
    return canvas, config, tables


def cmd_layout(args):
    """Distribute and pack a canvas, printing the result as JSON."""
    from .canvas.loader import canvas_to_dict
    from .placement.layout import populate_canvas

    canvas, config, tables = _load_inputs(args)
    laid_out, report = populate_canvas(canvas, config, tables)

    output = canvas_to_dict(laid_out)
    output['report'] = {
        'summary': report.summary(),
        'unassigned': report.unassigned,
        'degraded': [
            {'container': cid, 'item': p.item_id, 'reason': p.reason}
            for cid, p in report.degraded
        ],
    }
    print(json.dumps(output, indent=2))
    return 0


def cmd_check(args):
    """Report overlapping siblings and items outside their container."""
    from .validation.bounds import validate_canvas

    canvas, config, tables = _load_inputs(args)
    clean, issues, overlaps = validate_canvas(canvas, tables, config)

    print(f"Items: {len(canvas.items)}  Containers: {len(canvas.containers)}")
    for issue in issues:
        print(f"  [{issue.severity}] {issue.item_id} ({issue.container_id}): {issue.message}")
    for id1, id2, info in overlaps:
        print(f"  [overlap] {id1} <-> {id2}: "
              f"x={info.overlap_x:.1f} y={info.overlap_y:.1f} distance={info.distance:.1f}")

    if clean:
        print("No layout issues found.")
        return 0
    return 1


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="CanvasPlace - spatial layout for infinite canvases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  canvasplace layout canvas.yaml
  canvasplace layout canvas.yaml --strategy flow --spacing 60
  canvasplace check canvas.yaml
        """,
    )

    parser.add_argument('--version', action='version', version='canvasplace 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    layout_parser = subparsers.add_parser('layout', help='Distribute and pack items')
    layout_parser.add_argument('canvas', help='Path to canvas YAML/JSON file')
    layout_parser.add_argument('--strategy', choices=['occupancy', 'grid', 'flow'],
                               help='Packing strategy (default: occupancy)')
    layout_parser.add_argument('--spacing', type=float, help='Spacing between items')
    layout_parser.add_argument('--grid', type=float, help='Occupancy grid cell size')
    layout_parser.add_argument('--config', help='Layout config YAML file')
    layout_parser.add_argument('--patterns', help='Custom size/category tables YAML')
    layout_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    check_parser = subparsers.add_parser('check', help='Validate an existing layout')
    check_parser.add_argument('canvas', help='Path to canvas YAML/JSON file')
    check_parser.add_argument('--config', help='Layout config YAML file')
    check_parser.add_argument('--patterns', help='Custom size/category tables YAML')
    check_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(args.verbose)

    commands = {
        'layout': cmd_layout,
        'check': cmd_check,
    }

    try:
        return commands[args.command](args)
    except (OSError, ValueError, KeyError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
