"""
Listing revalidation state shared by form actions and the invoices table
"""

import hashlib
import logging
import uuid
from typing import Dict, Optional

logger = logging.getLogger(__name__)

class PathRevalidator:
    """
    Global singleton tracking a version number per dashboard path

    Form actions bump the version of the listing they changed. The listing
    endpoint turns the version into an ETag, so clients keep serving their
    cached copy until a mutation invalidates it.

    Versions live in process memory and restart from 0, so every ETag also
    carries a generation id drawn when the state is created. Tags handed
    out by another process or an earlier run never match.
    """

    _instance: Optional['PathRevalidator'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Initialize version state"""
        self._versions: Dict[str, int] = {}
        self._generation = uuid.uuid4().hex[:8]

    @property
    def generation(self) -> str:
        return self._generation

    def revalidate(self, path: str) -> int:
        """
        Mark the cached representation of a path as stale

        Args:
            path: Dashboard path whose cached copy must be refreshed

        Returns:
            The new version of the path
        """
        version = self._versions.get(path, 0) + 1
        self._versions[path] = version
        logger.info(f"Revalidated {path} (version {version})")
        return version

    def version(self, path: str) -> int:
        """Current version of a path (0 until first revalidated)"""
        return self._versions.get(path, 0)

    def etag(self, path: str, variant: str = "") -> str:
        """Weak ETag for a path version; variant separates query/page combinations"""
        suffix = ""
        if variant:
            suffix = "-" + hashlib.sha1(variant.encode("utf-8")).hexdigest()[:12]
        return f'W/"{self._generation}.{self.version(path)}{suffix}"'

    def reset(self):
        """Forget all versions and start a new generation, as a restart would"""
        self._initialize()

# Global singleton instance
revalidator = PathRevalidator()


def revalidate_path(path: str) -> int:
    """Revalidate a path on the global revalidator"""
    return revalidator.revalidate(path)
