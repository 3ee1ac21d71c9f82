# === FILE: docsweep/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for the DocSweep crawler.

Commands:
  crawl     Run (or resume) a crawl and print the final statistics
  status    Show what the metadata file knows: pages, statistics, pending session
  config    Show the effective configuration

Common options:
  --config PATH       Path to the YAML/JSON config (default: configs/default.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only when omitted)

crawl options:
  --max-pages INT     Override max_pages
  --max-depth INT     Override max_depth
  --force             Rewrite every page regardless of stored fingerprints
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file

Example:
  docsweep --config configs/default.yaml crawl --max-pages 100 --json reports/crawl.json
"""
import asyncio
import sys
from pathlib import Path

import click

from docsweep import __version__
from docsweep.aggregator import aggregate_results
from docsweep.config import load_config
from docsweep.crawler.metadata import MetadataStore
from docsweep.engine import start_crawl
from docsweep.logger import init_logging
from docsweep.report.html_report import render_html
from docsweep.report.json_report import render_json
from docsweep.report.summary import summary_lines

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocSweep, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Log file path (stdout only when omitted)'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """DocSweep command group."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


def _load(ctx, **overrides):
    try:
        return load_config(ctx.obj['config_path'], **overrides)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--max-pages', 'max_pages', type=click.IntRange(min=1), default=None,
              help='Override max_pages')
@click.option('--max-depth', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Override max_depth')
@click.option('--force', 'force', is_flag=True, default=False,
              help='Rewrite every page regardless of stored fingerprints')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.pass_context
def crawl(ctx, max_pages, max_depth, force, json_output, html_output):
    """Run or resume a crawl."""
    cfg = _load(ctx, max_pages=max_pages, max_depth=max_depth, force_recrawl=force or None)
    click.echo(f'Starting crawl from: {cfg.start}')
    try:
        stats = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    for line in summary_lines(stats, cfg.output_directory):
        click.echo(line)

    if not json_output and not html_output:
        return

    report = aggregate_results(MetadataStore.open(cfg.metadata_path), stats, include_pages=True)

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('status', context_settings=CONTEXT_SETTINGS)
@click.option('--pages', 'include_pages', is_flag=True, help='List every stored page')
@click.pass_context
def status(ctx, include_pages):
    """Show stored pages, last statistics and any resumable session as JSON."""
    cfg = _load(ctx)
    store = MetadataStore.open(cfg.metadata_path)
    report = aggregate_results(store, include_pages=include_pages)
    click.echo(report.json(pretty=True))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = _load(ctx)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
