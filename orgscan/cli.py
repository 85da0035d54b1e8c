"""
Command-line interface for the organization summary engine.

Provides commands for summarizing a batch of repository records and
writing the default configuration file.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import click

from orgscan import __version__
from orgscan.utils.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.pass_context
def cli(ctx, verbose, log_file):
    """
    Organization repository summary engine

    Aggregate languages and topics across an organization and infer
    relationships between its repositories.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_logging(
        level="DEBUG" if verbose else "WARNING",
        log_file=Path(log_file) if log_file else None,
    )


def _report_paths(output, format, organization, output_dir):
    """Map the requested format onto the files to write."""
    base = Path(output) if output else Path(output_dir) / f"{organization}-analysis"

    if format == "both":
        return {
            "json": base.with_name(base.name + ".json"),
            "markdown": base.with_name(base.name + ".md"),
        }
    if output:
        return {format: base}
    suffix = ".json" if format == "json" else ".md"
    return {format: base.with_name(base.name + suffix)}


def _load_config(config_path, topic_threshold, contributor_threshold):
    from orgscan.core.config import Config

    config = Config.load_from_file(config_path) if config_path else Config.load_from_env()

    # per-run overrides stay out of the shared configuration
    config = config.copy()
    if topic_threshold is not None:
        config.relationships.topic_similarity_threshold = topic_threshold
    if contributor_threshold is not None:
        config.relationships.contributor_overlap_threshold = contributor_threshold
    config.validate()

    return config


def _print_digest(summary, paths):
    stats = summary.relationship_statistics
    by_kind = stats.get("edges_by_kind", {})

    click.echo("=" * 60)
    click.echo("ANALYSIS COMPLETE")
    click.echo("=" * 60)
    click.echo(f"Total repositories: {summary.total_repositories}")
    click.echo(f"  public / private: {summary.public_repositories} / {summary.private_repositories}")
    click.echo(f"Total stars:        {summary.total_stars}")
    click.echo(f"Total forks:        {summary.total_forks}")
    click.echo(f"Languages found:    {len(summary.languages)}")
    click.echo(f"Topics found:       {len(summary.topics)}")
    click.echo(f"Relationships:      {stats.get('edge_count', 0)}")
    for kind, count in by_kind.items():
        click.echo(f"  {kind}: {count}")
    cycles = stats.get("dependency_cycles") or []
    if cycles:
        click.echo(f"Dependency cycles:  {len(cycles)}")
        for cycle in cycles:
            click.echo(f"  {' -> '.join(cycle + cycle[:1])}")
    click.echo("=" * 60)
    for path in paths.values():
        click.echo(f"Report saved to: {path}")


@cli.command()
@click.argument("records_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--org",
    help="Organization name (defaults to the one stored in RECORDS_FILE)"
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output path (base path when --format is both)"
)
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "markdown", "both"]),
    default="json",
    help="Output format (default: json)"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file written by 'orgscan init'"
)
@click.option(
    "--topic-threshold",
    type=float,
    help="Minimum topic-similarity strength, exclusive (0-1)"
)
@click.option(
    "--contributor-threshold",
    type=float,
    help="Minimum contributor-overlap strength, exclusive (0-1)"
)
@click.pass_context
def summarize(ctx, records_file, org, output, format, config_path,
              topic_threshold, contributor_threshold):
    """
    Summarize the repositories listed in RECORDS_FILE.

    RECORDS_FILE is the JSON batch written by the acquisition layer.

    Examples:

        orgscan summarize acme-repos.json

        orgscan summarize repos.json --org acme -f both -o reports/acme

        orgscan summarize repos.json --topic-threshold 0.5
    """
    from orgscan.records.loader import load_records
    from orgscan.reporting.formatter import format_summary
    from orgscan.summary.assembler import SummaryAssembler

    try:
        config = _load_config(config_path, topic_threshold, contributor_threshold)

        file_org, records = load_records(Path(records_file))
        organization = org or file_org
        if not organization:
            click.echo("Error: organization name is required (use --org)", err=True)
            sys.exit(1)

        click.echo(f"Analyzing {len(records)} repositories for {organization}...")
        summary = SummaryAssembler(config).assemble(
            records,
            organization,
            scan_date=datetime.now(timezone.utc).isoformat(),
        )

        paths = _report_paths(output, format, organization, config.output_dir)
        for format_type, path in paths.items():
            format_summary(summary, format_type, path, config=config.report)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get("verbose"):
            import traceback
            traceback.print_exc()
        sys.exit(1)

    _print_digest(summary, paths)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="orgscan.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Write the default configuration file.

    Edit the file and pass it to 'orgscan summarize --config'.
    """
    from orgscan.core.config import Config

    Config.reset()
    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
