"""
LimeLight Reporting CLI - Main entry point.
Built with Click for a rich command-line interface.

Reports, categories, time ranges and usage sections are selected by name;
the matching handles are fetched from the service first.
"""

import json
import logging
import sys
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .client import ReportingClient
from .config import ReportingConfig

console = Console()
err_console = Console(stderr=True)


def get_client(ctx) -> ReportingClient:
    """Create and authenticate a client from the YAML config or environment."""
    config_path = ctx.obj.get('config_path')
    try:
        config = ReportingConfig.from_yaml(config_path) if config_path else ReportingConfig.from_env()
    except (OSError, ValueError) as e:
        err_console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(2)

    if ctx.obj.get('debug'):
        config.debug = True

    client = ReportingClient.from_config(config)
    ctx.call_on_close(client.close)

    if client.authenticate() is None:
        fail(client)
    return client


def fail(client: ReportingClient) -> None:
    """Print the recorded fault and exit with status 1."""
    err_console.print(f"[red]{client.error_message() or 'Request failed'}[/red]")
    sys.exit(1)


def checked(client: ReportingClient, value: Any) -> Any:
    if value is None:
        fail(client)
    return value


def select_by_name(records: List[Dict[str, Any]], name: str, kind: str) -> Dict[str, Any]:
    """Pick the single record with the given name, exit if none or several match."""
    matches = [r for r in records if isinstance(r, dict) and r.get('name') == name]
    if len(matches) != 1:
        available = ", ".join(sorted({str(r.get('name')) for r in records if isinstance(r, dict)}))
        err_console.print(
            f"[red]{len(matches)} {kind}(s) named '{name}'. Available: {available or 'none'}[/red]"
        )
        sys.exit(1)
    return matches[0]


def find_report(client: ReportingClient, name: str) -> Dict[str, Any]:
    return select_by_name(checked(client, client.reports()), name, 'report')


def find_time_range(client: ReportingClient, report: Dict[str, Any], name: str) -> Dict[str, Any]:
    return select_by_name(checked(client, client.time_ranges(report)), name, 'time range')


def output(ctx, data: Any, title: str) -> None:
    """Render records as a table, or as JSON with --json."""
    if ctx.obj.get('as_json'):
        click.echo(json.dumps(data, indent=2, default=str))
        return

    if isinstance(data, dict) and 'values' in data:
        render_usage(data, title)
    elif isinstance(data, dict):
        render_records([data], title)
    else:
        render_records(data, title)


def render_records(records: List[Any], title: str) -> None:
    columns: List[str] = []
    for record in records:
        if isinstance(record, dict):
            columns.extend(key for key in record if key not in columns)

    table = Table(title=f"{title} ({len(records)})")
    for column in columns or ['value']:
        table.add_column(column, style="cyan" if column == 'name' else None)

    for record in records:
        if isinstance(record, dict):
            table.add_row(*[_cell(record.get(column)) for column in columns])
        else:
            table.add_row(_cell(record))

    console.print(table)


def render_usage(usage: Dict[str, Any], title: str) -> None:
    summary = Table(title=title)
    summary.add_column("Property", style="cyan")
    summary.add_column("Value", style="green")
    for key, value in usage.items():
        if key != 'values':
            summary.add_row(key, _cell(value))
    console.print(summary)

    table = Table(title="Variables")
    table.add_column("Type", style="cyan")
    table.add_column("Label")
    table.add_column("Units")
    table.add_column("Samples", justify="right")
    table.add_column("Max", justify="right")
    for value in usage['values']:
        samples = [s for s in value['samples'] if s is not None]
        table.add_row(
            _cell(value['type']),
            _cell(value['label']),
            _cell(value['units']),
            str(len(value['samples'])),
            f"{max(samples):.2f}" if samples else 'N/A',
        )
    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return 'N/A'
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


@click.group()
@click.version_option(version=__version__, prog_name='limelight-reporting')
@click.option('--config', '-c', 'config_path', default=None,
              help='Path to YAML config file (default: LIMELIGHT_* environment variables)')
@click.option('--json', 'as_json', is_flag=True, help='Print raw JSON instead of tables')
@click.option('--debug', is_flag=True, help='Log SOAP request/response envelopes')
@click.pass_context
def cli(ctx, config_path, as_json, debug):
    """LimeLight Reporting Service - query reports and usage data."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['as_json'] = as_json
    ctx.obj['debug'] = debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


@cli.command()
@click.pass_context
def reports(ctx):
    """List available reports."""
    client = get_client(ctx)
    output(ctx, checked(client, client.reports()), "Reports")


@cli.command()
@click.argument('report')
@click.pass_context
def categories(ctx, report):
    """List categories of REPORT."""
    client = get_client(ctx)
    report_handle = find_report(client, report)
    output(ctx, checked(client, client.categories(report_handle)), f"Categories of {report}")


@cli.command('time-ranges')
@click.argument('report')
@click.pass_context
def time_ranges(ctx, report):
    """List time ranges of REPORT."""
    client = get_client(ctx)
    report_handle = find_report(client, report)
    output(ctx, checked(client, client.time_ranges(report_handle)), f"Time ranges of {report}")


@cli.command('report-data')
@click.argument('report')
@click.argument('category')
@click.argument('time_range')
@click.option('--order-by', '-o', default=None,
              help="Field and direction, e.g. 'num_bytes desc'")
@click.pass_context
def report_data(ctx, report, category, time_range, order_by):
    """Fetch data of REPORT for CATEGORY over TIME_RANGE."""
    client = get_client(ctx)
    report_handle = find_report(client, report)

    category_handle = client.category(category, report_handle)
    if category_handle is None:
        if client.error:
            fail(client)
        err_console.print(f"[red]No unique category named '{category}'[/red]")
        sys.exit(1)

    range_handle = find_time_range(client, report_handle, time_range)
    rows = checked(client, client.report_data(report_handle, category_handle, range_handle, order_by))
    output(ctx, rows, f"{report} / {category} / {time_range}")


@cli.command('current-traffic')
@click.pass_context
def current_traffic(ctx):
    """Show current traffic (bytes/sec in and out)."""
    client = get_client(ctx)
    output(ctx, checked(client, client.current_traffic()), "Current traffic")


@cli.command('disk-usage')
@click.argument('report')
@click.argument('time_range')
@click.pass_context
def disk_usage(ctx, report, time_range):
    """Show disk usage samples of REPORT over TIME_RANGE."""
    client = get_client(ctx)
    report_handle = find_report(client, report)
    range_handle = find_time_range(client, report_handle, time_range)
    output(ctx, checked(client, client.disk_usage(report_handle, range_handle)), "Disk usage")


@cli.command('network-sections')
@click.argument('report')
@click.pass_context
def network_sections(ctx, report):
    """List network usage sections of REPORT."""
    client = get_client(ctx)
    report_handle = find_report(client, report)
    output(ctx, checked(client, client.network_usage_sections(report_handle)), f"Sections of {report}")


@cli.command('network-usage')
@click.argument('report')
@click.argument('section')
@click.option('--start', '-s', required=True, type=click.DateTime(),
              help='Start date-time, service time (UTC-07:00)')
@click.option('--end', '-e', required=True, type=click.DateTime(),
              help='End date-time, service time (UTC-07:00)')
@click.option('--interval', '-i', default=300, show_default=True, type=click.IntRange(min=1),
              help='Seconds between samples')
@click.pass_context
def network_usage(ctx, report, section, start, end, interval):
    """Show network usage samples of REPORT for SECTION."""
    client = get_client(ctx)
    report_handle = find_report(client, report)
    section_handle = select_by_name(
        checked(client, client.network_usage_sections(report_handle)), section, 'section'
    )
    usage = checked(client, client.network_usage(report_handle, section_handle, start, end, interval))
    output(ctx, usage, f"Network usage: {section}")


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    cli(args=argv)


if __name__ == '__main__':
    main()
