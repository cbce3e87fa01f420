"""
Public instance list formatter.
"""

import json
from typing import List

from .base_formatter import OutputFormatter
from ..models import Instance


def _flag(value: bool) -> str:
    return "yes" if value else "no"


class InstanceFormatter(OutputFormatter):
    """Formats instances as a table (default) or JSON"""

    def format(self, instances: List[Instance]) -> str:
        if self.output_format == "json":
            return json.dumps([i.to_dict() for i in instances], indent=2, ensure_ascii=False)

        if not instances:
            return "No instances listed."

        lines = []
        lines.append("\n{:<45} {:<8} {:<10} {:<5} {:<5} {:<5} {:<20}".format(
            "URL", "NETWORK", "VERSION", "TLS", "IPV6", "CDN", "MAINTAINER"
        ))
        lines.append("=" * 103)
        for instance in instances:
            lines.append("{:<45} {:<8} {:<10} {:<5} {:<5} {:<5} {:<20}".format(
                instance.url,
                instance.network,
                instance.version,
                _flag(instance.tls),
                _flag(instance.ipv6),
                _flag(instance.cdn),
                instance.maintainer
            ))
        return "\n".join(lines)
