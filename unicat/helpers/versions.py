"""
Detecting the library's own version, as installed.

The version is determined only once at startup when the code is loaded.
It is ``None`` when running from a source checkout without installation.
"""
import importlib.metadata
from typing import Optional

version: Optional[str]

try:
    version = importlib.metadata.version(__name__.split('.')[0])  # usually "unicat".
except importlib.metadata.PackageNotFoundError:
    version = None
