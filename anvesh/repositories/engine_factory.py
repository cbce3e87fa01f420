"""
Engine Factory - Factory Pattern implementation.
Creates search engine instances from their configured names.
"""

import logging
from typing import Dict, List, Type

from ..engines import SearchEngine, DuckDuckGo, Brave, Searx
from ..models import EngineError, EngineErrorType

logger = logging.getLogger(__name__)


class EngineFactory:
    """
    Factory for creating upstream engine instances.

    Design Pattern: Factory Pattern + Registry Pattern
    Registers all available engines and creates instances on demand.
    """

    # Engine registry, keyed by lowercase name
    _ENGINES: Dict[str, Type[SearchEngine]] = {
        "duckduckgo": DuckDuckGo,
        "brave": Brave,
        "searx": Searx,
    }

    @classmethod
    def create_engine(cls, engine_name: str, **kwargs) -> SearchEngine:
        """
        Create an engine instance.

        Args:
            engine_name: Engine name, case-insensitive
            **kwargs: Passed to the engine constructor (e.g. timeout)

        Returns:
            Initialized engine instance

        Raises:
            EngineError: NO_SUCH_ENGINE_FOUND if the name is not registered
        """
        engine_class = cls._ENGINES.get(engine_name.strip().lower())

        if not engine_class:
            raise EngineError(EngineErrorType.NO_SUCH_ENGINE_FOUND, engine_name)

        logger.debug(f"Creating engine: {engine_name}")
        return engine_class(**kwargs)

    @classmethod
    def get_supported_engines(cls) -> List[str]:
        """
        Get list of supported engine names.

        Returns:
            Sorted engine names
        """
        return sorted(cls._ENGINES.keys())

    @classmethod
    def register_engine(cls, engine_name: str, engine_class: Type[SearchEngine]):
        """
        Register a new engine (for extensibility).

        Args:
            engine_name: Engine name
            engine_class: Engine class to register
        """
        cls._ENGINES[engine_name.lower()] = engine_class
        logger.info(f"Registered engine: {engine_name}")

    @classmethod
    def unregister_engine(cls, engine_name: str):
        cls._ENGINES.pop(engine_name.lower(), None)
