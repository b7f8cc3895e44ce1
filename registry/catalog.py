"""Chain list from the registry checkout"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

CHAIN_NAME_PATTERN = re.compile(r"^[A-Za-z0-9]")


class ChainCatalog:
    """Names of the chains available in the registry directory"""

    def __init__(self, root: Path):
        self.root = Path(root)

    def list(self) -> list[str]:
        """Top-level chain directories, sorted without regard to case"""
        try:
            names = [
                entry.name for entry in self.root.iterdir()
                if entry.is_dir() and CHAIN_NAME_PATTERN.match(entry.name)
            ]
        except OSError as e:
            logger.warning(f"Cannot read registry at {self.root}: {e}")
            return []

        # Stable sort: names equal up to case keep their listing order
        return sorted(names, key=str.casefold)

    def chain_dir(self, chain: str) -> Path:
        return self.root / chain
