"""touchgrass CLI — check whether a coordinate is outdoors.

Usage::

    touchgrass detect -- 40.7812 -73.9665
    touchgrass detect --threshold 60 --json -- 40.7812 -73.9665
    touchgrass grass -- 40.7812 -73.9665
    touchgrass --version
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace

import click
from dotenv import load_dotenv

from touchgrass.core.config import DEFAULT_CONFIG
from touchgrass.core.exceptions import TouchGrassError


@click.group(invoke_without_command=True)
@click.version_option(package_name="touchgrass")
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """touchgrass — outdoor and grass detection for a coordinate."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("lat", type=click.FloatRange(-90, 90))
@click.argument("lng", type=click.FloatRange(-180, 180))
@click.option("--override", is_flag=True, help="Force a positive verdict (manual override).")
@click.option(
    "--threshold",
    type=click.IntRange(0, 100),
    default=None,
    help="Confidence needed to count as outdoors (default 70).",
)
@click.option(
    "--radius",
    type=click.IntRange(1, 50_000),
    default=None,
    help="Place search radius in meters (default 250).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def detect(
    lat: float,
    lng: float,
    override: bool,
    threshold: int | None,
    radius: int | None,
    as_json: bool,
) -> None:
    """Detect whether LAT LNG is an outdoor natural location."""
    from touchgrass.api import detect as _detect

    config = DEFAULT_CONFIG
    if radius is not None:
        config = replace(config, search=replace(config.search, search_radius_m=radius))

    try:
        result = _detect(
            lat, lng, manual_override=override, threshold=threshold, config=config
        )
    except TouchGrassError as exc:
        click.secho(f"❌ Error: {exc}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return

    verdict = "🌳 Outdoors" if result.is_outdoors else "🏠 Not outdoors"
    click.secho(
        f"{verdict} ({result.confidence}% confidence, {result.space_category.value})",
        fg="green" if result.is_outdoors else "yellow",
    )
    for line in result.explanations.positive:
        click.echo(f"   + {line}")
    for line in result.explanations.negative:
        click.echo(f"   - {line}")


@cli.command()
@click.argument("lat", type=click.FloatRange(-90, 90))
@click.argument("lng", type=click.FloatRange(-180, 180))
@click.option("--override", is_flag=True, help="Force a positive verdict (manual override).")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
def grass(lat: float, lng: float, override: bool, as_json: bool) -> None:
    """Check whether LAT LNG is somewhere you can touch grass."""
    from touchgrass.api import touching_grass

    try:
        result = touching_grass(lat, lng, manual_override=override)
    except TouchGrassError as exc:
        click.secho(f"❌ Error: {exc}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return

    if result.is_touching_grass:
        click.secho(f"🌱 Touching grass ({result.confidence}% confidence)", fg="green")
    else:
        click.secho(f"🚫 Not touching grass ({result.confidence}% confidence)", fg="yellow")
    for reason in result.reasons:
        click.echo(f"   • {reason}")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the detection web API."""
    from touchgrass.web.server import run

    click.echo(f"🚀 Serving touchgrass API on http://{host}:{port}")
    run(host=host, port=port)


if __name__ == "__main__":
    cli()
