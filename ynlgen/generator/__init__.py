"""YAML netlink specification parser and code generator."""

from .parser import ParseError as ParseError
from .parser import normalize as normalize
from .parser import parse as parse
from .parser import parse_file as parse_file
from .python import Config as Config
from .python import render as render
from .resolver import AttributeIndex as AttributeIndex
from .resolver import InconsistentSpecError as InconsistentSpecError
from .types import *
