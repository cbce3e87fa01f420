"""
Filter components for filtering search results.
"""

from .result_filter import ResultFilter, load_patterns

__all__ = ['ResultFilter', 'load_patterns']
