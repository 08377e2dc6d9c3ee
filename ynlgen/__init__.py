"""ynlgen - Python binding generator for YAML netlink specifications."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ynlgen")
except PackageNotFoundError:
    __version__ = "(local)"
