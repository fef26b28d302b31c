"""Named acknowledgment presets with case-insensitive lookup.

The table is declared explicitly below and frozen when the module is first
imported. Lookups afterwards only read it, so any number of threads may call
``resolve`` without locking.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from types import MappingProxyType

from . import presets
from .concern import AckSpec
from .errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    name: str
    spec: AckSpec
    # Set for deprecated aliases: the name to use instead.
    replacement: str | None = None

    @property
    def deprecated(self) -> bool:
        return self.replacement is not None


class AckSpecRegistry:
    def __init__(self, entries: Iterable[RegistryEntry]) -> None:
        table: dict[str, RegistryEntry] = {}
        for entry in entries:
            if not isinstance(entry.name, str) or not entry.name:
                raise InvalidArgument(f"preset name must be a non-empty string, got {entry.name!r}")
            if not isinstance(entry.spec, AckSpec):
                raise InvalidArgument(f"preset {entry.name!r} is not an AckSpec: {entry.spec!r}")
            key = entry.name.lower()
            if key in table:
                raise InvalidArgument(f"duplicate preset name {key!r}")
            replacement = entry.replacement.lower() if entry.replacement else None
            table[key] = RegistryEntry(name=key, spec=entry.spec, replacement=replacement)

        for entry in table.values():
            if entry.replacement is not None and entry.replacement not in table:
                raise InvalidArgument(
                    f"preset {entry.name!r} points at unknown replacement {entry.replacement!r}"
                )

        self._table = MappingProxyType(table)
        logger.debug("Built write concern registry with %d names", len(table))

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._table

    def entry(self, name: str) -> RegistryEntry | None:
        """Look up the registry entry for ``name`` without deprecation warnings."""
        if not isinstance(name, str):
            raise InvalidArgument(f"preset name must be a string, got {type(name).__name__}")
        return self._table.get(name.lower())

    def resolve(self, name: str) -> AckSpec | None:
        """Return the preset called ``name`` (any case), or None if there is none.

        Deprecated aliases still resolve, with a DeprecationWarning.
        """
        entry = self.entry(name)
        if entry is None:
            return None
        if entry.replacement is not None:
            warnings.warn(
                f"write concern {entry.name!r} is deprecated, use {entry.replacement!r}",
                DeprecationWarning,
                stacklevel=2,
            )
        return entry.spec

    def is_deprecated(self, name: str) -> bool:
        entry = self.entry(name)
        return entry is not None and entry.deprecated

    def names(self) -> list[str]:
        return list(self._table)

    def canonical_names(self) -> list[str]:
        return [k for k, e in self._table.items() if not e.deprecated]

    def items(self) -> list[tuple[str, AckSpec]]:
        return [(k, e.spec) for k, e in self._table.items()]

    def entries(self) -> list[RegistryEntry]:
        return list(self._table.values())


DEFAULT_ENTRIES: tuple[RegistryEntry, ...] = (
    RegistryEntry("acknowledged", presets.ACKNOWLEDGED),
    RegistryEntry("unacknowledged", presets.UNACKNOWLEDGED),
    RegistryEntry("w1", presets.W1),
    RegistryEntry("w2", presets.W2),
    RegistryEntry("w3", presets.W3),
    RegistryEntry("journaled", presets.JOURNALED),
    RegistryEntry("majority", presets.MAJORITY),
    RegistryEntry("fsynced", presets.FSYNCED, replacement="journaled"),
    RegistryEntry("normal", presets.NORMAL, replacement="unacknowledged"),
    RegistryEntry("safe", presets.SAFE, replacement="acknowledged"),
    RegistryEntry("replica_acknowledged", presets.REPLICA_ACKNOWLEDGED, replacement="w2"),
    RegistryEntry("replicas_safe", presets.REPLICAS_SAFE, replacement="w2"),
    RegistryEntry("fsync_safe", presets.FSYNC_SAFE, replacement="journaled"),
    RegistryEntry("journal_safe", presets.JOURNAL_SAFE, replacement="journaled"),
)

DEFAULT_REGISTRY = AckSpecRegistry(DEFAULT_ENTRIES)


resolve = DEFAULT_REGISTRY.resolve
