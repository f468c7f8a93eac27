#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for RepeatWeaver.

This module provides the main CLI entry point and all subcommands for
repeat graph multiplicity inference.
"""

import logging
import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.schema import (
    VALID_TEMPLATES,
    ConfigValidationError,
    load_config,
    save_config_template,
    validate_config,
)


def setup_logging(level: str, log_file=None):
    """Configure root logging for a CLI run."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    RepeatWeaver: Repeat Graph Multiplicity Inference

    Estimates the copy number of every repeat graph edge from coverage and
    corrects it with a linear program so that flow is conserved at junctions.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='repeatweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(VALID_TEMPLATES),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Balancing: {'ENABLED' if config['multiplicity']['balance'] else 'DISABLED'}")
    click.echo(f"  Solver: {config['multiplicity']['solver']['backend']} "
               f"({config['multiplicity']['solver']['method']})")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    errors = validate_config(config)
    if errors:
        for error in errors:
            click.echo(f"✗ {error}", err=True)
        sys.exit(1)

    mult = config['multiplicity']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo("\nMultiplicity:")
    click.echo(f"  Balance: {mult['balance']}")
    click.echo(f"  Edge cost: {mult['edge_cost']}")
    click.echo(f"  Slack penalty: {mult['slack_penalty']}")
    click.echo(f"  Solver: {mult['solver']['backend']} ({mult['solver']['method']})")
    click.echo("\nOutput:")
    click.echo(f"  Log level: {config['output']['logging']['level']}")


# ============================================================================
# Multiplicity Inference
# ============================================================================

@main.command()
@click.argument('graph_file', type=click.Path(exists=True))
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output prefix (writes <prefix>.gfa, <prefix>_multiplicity.tsv, '
                   '<prefix>_balance.json)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--balance/--no-balance', default=None,
              help='Correct coverage estimates with the flow LP (default: from config)')
@click.pass_context
def infer(ctx, graph_file, output, config_file, balance):
    """
    Infer edge multiplicities of a repeat graph in GFA format.

    Segment coverage is read from dp/DP tags (or KC/RC/FC counts divided
    by length).

    Examples:
        repeatweaver infer assembly_graph.gfa -o out/graph
        repeatweaver infer graph.gfa -o out/graph --no-balance
    """
    from .io_utils.gfa import GFAFormatError, load_repeat_graph_from_gfa
    from .io_utils.export import (
        export_balance_report,
        export_graph_to_gfa,
        export_multiplicity_tsv,
    )
    from .repeat_graph.errors import LPSolveError
    from .repeat_graph.multiplicity_inferer import MultiplicityInferer

    try:
        config = load_config(Path(config_file) if config_file else None)
    except ConfigValidationError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(1)

    errors = validate_config(config)
    if errors:
        for error in errors:
            click.echo(f"✗ {error}", err=True)
        ctx.exit(1)

    level = config['output']['logging']['level']
    if ctx.obj.get('VERBOSE'):
        level = 'DEBUG'
    elif ctx.obj.get('QUIET'):
        level = 'WARNING'
    setup_logging(level, config['output']['logging']['log_file'])
    logger = logging.getLogger(__name__)

    if balance is None:
        balance = config['multiplicity']['balance']

    try:
        loaded = load_repeat_graph_from_gfa(graph_file)
    except GFAFormatError as e:
        click.echo(f"✗ {e}", err=True)
        ctx.exit(1)

    inferer = MultiplicityInferer.from_config(loaded.graph, config)
    report = None
    try:
        if balance:
            report = inferer.fix_edges_multiplicity()
        else:
            inferer.estimate_by_coverage()
    except LPSolveError as e:
        logger.error(str(e))
        click.echo(f"✗ Multiplicity balancing failed: {e}", err=True)
        ctx.exit(1)

    prefix = Path(output)
    prefix.parent.mkdir(parents=True, exist_ok=True)
    out_cfg = config['output']
    if out_cfg['write_gfa']:
        export_graph_to_gfa(loaded.graph, f"{prefix}.gfa", loaded.segment_names)
    if out_cfg['write_tsv']:
        export_multiplicity_tsv(loaded.graph, f"{prefix}_multiplicity.tsv", loaded.segment_names)
    if report is not None and out_cfg['write_report']:
        export_balance_report(report, f"{prefix}_balance.json")

    if not ctx.obj.get('QUIET'):
        click.echo(f"✓ Multiplicities written with prefix: {prefix}")
        if report is not None:
            click.echo(f"  Edges changed by balancing: {len(report.changed_edges)}")
            click.echo(f"  Unbalanced nodes: {report.unbalanced_nodes}")


if __name__ == '__main__':
    main()
