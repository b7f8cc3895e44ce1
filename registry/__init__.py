"""Registry module exports"""

from .catalog import ChainCatalog
from .sync import RegistrySync

__all__ = ['ChainCatalog', 'RegistrySync']
