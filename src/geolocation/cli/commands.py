import asyncio
from pathlib import Path

import click

from geolocation import utils
from geolocation.errors import ConfigError, LocationParseError
from geolocation.location import Location
from geolocation.models import AuthorizationLevel
from geolocation.service import LocationService, StaticLocationProvider
from geolocation.utils import LOCATION_CONFIG

# coordinates such as "-90, 180" must not be read as options
_COORDINATE_ARGS = {"ignore_unknown_options": True}


def _parse_or_fail(text: str) -> Location:
    try:
        return Location.from_string(text)
    except LocationParseError as e:
        raise click.ClickException(
            f"{e}. Expected two numbers separated by a comma, e.g. '52.09, 5.11'."
        ) from e


@click.command()
@click.argument(
    "path",
    type=click.Path(exists=False, file_okay=False, dir_okay=True),
)
def init(path):
    """Initialize a directory with an example location service config file."""
    path = Path(path)
    path.mkdir(exist_ok=True)

    config = path / LOCATION_CONFIG

    if config.exists():
        raise FileExistsError(
            f"File '{config}' already exist. Please remove it or choose another directory."
        )

    config.write_text(utils.get_example_config())
    click.echo(f"Created '{config.name}' at {path}.")


@click.command(context_settings=_COORDINATE_ARGS)
@click.argument("text", type=str)
def parse(text):
    """Parse a location from '<latitude>, <longitude>' text and report whether it is valid."""
    location = _parse_or_fail(text)
    click.echo(f"{location} ({'valid' if location.is_valid else 'invalid'})")


@click.command(context_settings=_COORDINATE_ARGS)
@click.argument("x", type=float)
@click.argument("y", type=float)
def check(x, y):
    """Print the location for X and Y, or 'unknown' if they are out of range."""
    click.echo(Location.checked(x, y))


@click.command(context_settings=_COORDINATE_ARGS)
@click.argument("text", type=str)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    required=True,
    help="YAML file to write the location to.",
)
def encode(text, output):
    """Parse a location from text and write it to a YAML file."""
    location = _parse_or_fail(text)
    location.to_yaml(output)
    click.echo(f"Wrote {location} to '{output}'.")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
)
def decode(file):
    """Read a location from a YAML file with keys x and y."""
    click.echo(Location.from_yaml(file))


@click.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, readable=True),
)
@click.option(
    "--level",
    type=click.Choice([level.name for level in AuthorizationLevel], case_sensitive=False),
    default=None,
    help="Authorization level to request. Defaults to the level in the config file.",
)
@click.option(
    "--wait",
    is_flag=True,
    default=False,
    help="Wait for a pending authorization decision before resolving the location.",
)
def locate(path, level, wait):
    """
    Request the location from the static provider configured in PATH.

    Reads the static_provider section of the location config file in PATH, which
    can be created with `geolocation init`.
    """
    config = utils._get_service_config(Path(path))
    if config.static_provider is None:
        raise ConfigError(
            f"No static_provider configured in '{Path(path) / LOCATION_CONFIG}'."
        )

    service = LocationService(
        StaticLocationProvider.from_config(config.static_provider), config
    )
    auth_level = AuthorizationLevel[level.upper()] if level else None

    if wait:
        location = asyncio.run(service.request_async(auth_level))
    else:
        location = service.request(auth_level)
    click.echo(location)
