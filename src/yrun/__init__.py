"""yrun - pick a package.json script with fuzzy autocomplete and run it."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

try:
    __version__ = _version("yrun")
except PackageNotFoundError:
    __version__ = "0.3.0-dev"
