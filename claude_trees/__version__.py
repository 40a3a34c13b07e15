"""Version information for claude-trees."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("claude-trees")
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    __version__ = "0.0.0+unknown"
