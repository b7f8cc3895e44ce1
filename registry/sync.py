"""Keeps the local chain-registry checkout up to date"""

import asyncio
import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class RegistrySyncError(Exception):
    """git exited with an error"""


class RegistrySync:
    """Clones the registry once and pulls it when it gets stale"""

    def __init__(self, repo_url: str, repo_dir: Path, stale_hours: float):
        self.repo_url = repo_url
        self.repo_dir = Path(repo_dir)
        self.stale_hours = stale_hours

    def is_stale(self) -> bool:
        age_hours = (time.time() - self.repo_dir.stat().st_mtime) / 3600
        return age_hours > self.stale_hours

    async def _git(self, *args: str) -> str:
        process = await asyncio.create_subprocess_exec(
            "git", *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise RegistrySyncError(stderr.decode(errors="replace").strip())
        return stdout.decode(errors="replace").strip()

    async def clone_or_update(self) -> bool:
        """
        Clone the registry if missing, pull it if stale

        Returns:
            True if git was run successfully, False if nothing was done or it failed
        """
        try:
            if not self.repo_dir.exists():
                logger.info(f"Cloning repository: {self.repo_url}")
                await self._git("clone", self.repo_url, str(self.repo_dir))
                logger.info("Repository cloned successfully")
                return True

            if self.is_stale():
                logger.info(f"Updating repository in {self.repo_dir}")
                await self._git("-C", str(self.repo_dir), "pull")
                # pull leaves mtime alone when nothing changed
                os.utime(self.repo_dir)
                logger.info("Repository updated successfully")
                return True
        except (OSError, RegistrySyncError) as e:
            logger.warning(f"Registry update failed, using old data: {e}")
        return False
