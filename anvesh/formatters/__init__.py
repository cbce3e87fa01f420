"""
Output formatters - Strategy Pattern for different output formats.
"""

from .base_formatter import OutputFormatter
from .results_formatter import SearchResultsFormatter
from .instance_formatter import InstanceFormatter

__all__ = ['OutputFormatter', 'SearchResultsFormatter', 'InstanceFormatter']
