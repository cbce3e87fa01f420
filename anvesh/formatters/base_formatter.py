"""
Base output formatter - Abstract base class for formatters.
"""

from abc import ABC, abstractmethod
from typing import Any


class OutputFormatter(ABC):
    """
    Abstract base class for output formatters.

    Design Pattern: Strategy Pattern
    Different formatters for different output styles (list, table, JSON).
    """

    def __init__(self, output_format: str = "list"):
        """
        Initialize formatter.

        Args:
            output_format: Output format type
        """
        self.output_format = output_format

    @abstractmethod
    def format(self, data: Any) -> str:
        """
        Format data for output.

        Args:
            data: Data to format

        Returns:
            Formatted string for output
        """
        pass
