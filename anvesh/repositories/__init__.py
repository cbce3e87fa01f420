"""
Repositories and factories - Factory Pattern implementation.
"""

from .engine_factory import EngineFactory
from .instance_repository import InstanceRepository

__all__ = ['EngineFactory', 'InstanceRepository']
