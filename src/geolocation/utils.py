from __future__ import annotations

from functools import lru_cache
from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from geolocation.models import ServiceConfig

LOCATION_CONFIG = "location_config.yaml"


def load_static_file(name: str) -> str:
    """Load static file from the ``geolocation.static`` module by file name."""
    return files("geolocation.static").joinpath(name).read_text(encoding="utf-8")


@lru_cache(None)
def get_example_config() -> str:
    """Get the example configuration file."""
    return load_static_file(LOCATION_CONFIG)


def _get_service_config(config_dir: Path) -> ServiceConfig:
    """Load ServiceConfig object from yaml config file in `config_dir`."""
    from geolocation.models import ServiceConfig

    file_path = config_dir.joinpath(LOCATION_CONFIG)
    try:
        return ServiceConfig.from_yaml(file_path)
    except FileNotFoundError as e:
        raise FileNotFoundError(
            f'Location config not found. Save it to "{file_path}".'
        ) from e
