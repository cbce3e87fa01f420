"""
Instance Repository - loads the public instance list from docs/instances.md.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..models import Instance
from ..parsers import InstanceTableParser

logger = logging.getLogger(__name__)


class InstanceRepository:
    """
    Read-only access to the documented public instances.

    The markdown file is parsed on first access and cached until reload().
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._instances: Optional[List[Instance]] = None
        self._parser = InstanceTableParser()

    def _load(self) -> List[Instance]:
        if not self.path.exists():
            logger.warning(f"Instances file not found: {self.path}")
            return []

        instances = self._parser.parse(self.path.read_text(encoding="utf-8"))
        logger.info(f"Loaded {len(instances)} instances from {self.path}")
        return instances

    def list_instances(self,
                       network: Optional[str] = None,
                       tls: Optional[bool] = None,
                       ipv6: Optional[bool] = None) -> List[Instance]:
        """
        Get instances, optionally filtered.

        Args:
            network: Only instances on this network (case-insensitive)
            tls: Only instances with (True) or without (False) TLS
            ipv6: Only instances with (True) or without (False) IPv6

        Returns:
            List of matching instances in document order
        """
        if self._instances is None:
            self._instances = self._load()

        instances = self._instances
        if network:
            instances = [i for i in instances if i.network.lower() == network.lower()]
        if tls is not None:
            instances = [i for i in instances if i.tls == tls]
        if ipv6 is not None:
            instances = [i for i in instances if i.ipv6 == ipv6]
        return instances

    def reload(self):
        """Drop the cached list so the next access re-reads the file"""
        self._instances = None
