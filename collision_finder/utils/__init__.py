"""Small, side-effect free helpers.

Keep this package dependency-light to avoid circular imports.
"""

from .net import short_hostname  # noqa: F401
