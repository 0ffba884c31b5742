"""Text exporters for gmodel closures."""

from .geo import format_geo, write_geo
from .dmg import format_dmg, write_dmg

__all__ = ['format_geo', 'write_geo', 'format_dmg', 'write_dmg']
