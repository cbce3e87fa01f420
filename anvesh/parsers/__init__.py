"""
Parser utilities for extracting structured data from various sources.
"""

from .instance_parser import InstanceTableParser

__all__ = ['InstanceTableParser']
