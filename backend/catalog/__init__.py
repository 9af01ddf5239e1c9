"""Product catalog service."""

from .constants import APP_VERSION

__version__ = APP_VERSION
