"""Application version, read from the installed distribution or pyproject.toml."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "tasks-app"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).parents[3] / "pyproject.toml"


def get_version() -> str:
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        with _PYPROJECT.open("rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
