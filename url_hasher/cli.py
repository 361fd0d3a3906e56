# === FILE: url_hasher/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of url_hasher.

Commands:
  fetch     Fetch URLs concurrently and print the MD5 digest of every body
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml when present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

fetch options:
  --parallel N        Number of parallel workers (default from config: 10)
  --timeout SEC       Timeout of a single request (default from config: 3)
  --json PATH         Also save a JSON report
  --pretty            Indent the JSON report

Extra:
  --version, -v       Show the url_hasher version

Example:
  url-hasher fetch --parallel 3 example.com https://www.python.org
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from url_hasher import __version__
from url_hasher.collector import aggregate_outcomes
from url_hasher.config import HasherConfig, load_config
from url_hasher.engine import Engine
from url_hasher.errors import ParameterError
from url_hasher.logger import DEFAULT_FORMAT, init_logging
from url_hasher.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
TOOL_NAME = "url-hasher"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='url-hasher, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """url-hasher: fetch URLs in parallel and print the MD5 digest of each response."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('fetch', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--parallel', '-p', 'parallel',
    type=int,
    default=None,
    help='Number of parallel workers (default from config: 10)'
)
@click.option(
    '--timeout', '-t', 'request_timeout',
    type=float,
    default=None,
    help='Timeout of a single request in seconds (default from config: 3)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also save a JSON report to this file'
)
@click.option(
    '--pretty', is_flag=True,
    help='Indent the JSON report by two spaces'
)
@click.argument('urls', nargs=-1)
@click.pass_context
def fetch(ctx, parallel, request_timeout, json_output, pretty, urls):
    """Fetch URLS concurrently; print "<url> <md5>" or the failure of each."""
    cfg = ctx.obj['config']
    if request_timeout is not None:
        try:
            cfg = HasherConfig(**{**cfg.model_dump(), 'request_timeout': request_timeout})
        except ValidationError as e:
            print_error(f'Invalid --timeout: {e.errors()[0]["msg"]}')
    worker_count = cfg.parallel if parallel is None else parallel

    engine = Engine(cfg)
    try:
        prepared = engine.prepare(worker_count, list(urls))
    except ParameterError as e:
        print_error(f'{e}. Use "{TOOL_NAME} fetch --help" for more information.')

    for url in prepared.invalid:
        click.echo(f'Invalid url: "{url}"')

    async def _runner():
        outcomes = []
        async for outcome in engine.stream(worker_count, prepared.valid):
            click.echo(str(outcome))
            outcomes.append(outcome)
        return outcomes

    try:
        outcomes = asyncio.run(_runner())
    except Exception as e:
        print_error(f'Fetching failed: {e}')

    if json_output:
        report = aggregate_outcomes(outcomes, prepared.invalid)
        try:
            saved = render_json(report, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')
        click.echo(f'JSON report: {saved}', err=True)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


def main():
    cli(prog_name=TOOL_NAME)


if __name__ == "__main__":
    main()
