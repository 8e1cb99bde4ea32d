"""Per-pass state shared by the definition and property builders."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .dialect import Dialect
from .schema import Definition

logger = logging.getLogger(__name__)


class DefinitionTable:
    """Definitions registered during one generation pass, keyed by name.

    A fresh table is created every time a document is generated, so
    regenerating never sees stale entries.
    """

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self.definitions: dict[str, Definition] = {}
        self._sources: dict[str, object] = {}
        self._building: set[str] = set()

    def __contains__(self, name: str) -> bool:
        return name in self.definitions

    def __getitem__(self, name: str) -> Definition:
        return self.definitions[name]

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, name: str) -> Definition | None:
        return self.definitions.get(name)

    def is_done(self, name: str, source: object) -> bool:
        """True when name was already built from this same source type."""
        return name in self.definitions and self._sources.get(name) is source

    def is_building(self, name: str) -> bool:
        return name in self._building

    @contextmanager
    def building(self, name: str) -> Iterator[None]:
        self._building.add(name)
        try:
            yield
        finally:
            self._building.discard(name)

    def put(self, name: str, definition: Definition, source: object = None) -> None:
        previous = self.definitions.get(name)
        if previous is not None and previous != definition:
            logger.warning("Definition %s registered twice with different content, keeping the latest", name)
        self.definitions[name] = definition
        if source is not None:
            self._sources[name] = source
        logger.debug("Registered definition %s", name)

    def to_wire(self) -> dict[str, dict]:
        return {name: d.to_wire() for name, d in self.definitions.items()}
