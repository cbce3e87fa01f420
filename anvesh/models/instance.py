"""
Public instance data model - Value Object pattern.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Instance:
    """
    A publicly reachable Anvesh deployment as listed in docs/instances.md.

    Attributes:
        url: Base URL of the instance
        network: Network label (www, tor, i2p, ...)
        version: Deployed version string
        location: Hosting location
        cdn: Whether the instance sits behind a CDN
        maintainer: Who runs it
        tls: TLS available
        ipv6: Reachable over IPv6
        comment: Free-form remark
    """
    url: str
    network: str = "www"
    version: str = ""
    location: str = ""
    cdn: bool = False
    maintainer: str = ""
    tls: bool = False
    ipv6: bool = False
    comment: str = ""

    def __post_init__(self):
        """Validate invariants"""
        if not self.url:
            raise ValueError("Instance url cannot be empty")
        if not self.url.lower().startswith(("http://", "https://")):
            raise ValueError(f"Instance url must be http(s): {self.url}")

    def to_dict(self) -> dict:
        return asdict(self)
