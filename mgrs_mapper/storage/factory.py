"""Store factory: selects the durable store backend by name.

The factory maintains a registry of known backends.  New backends are
registered with ``register_store``.

Usage::

    from mgrs_mapper.storage.factory import get_store

    store = get_store("json_file", config)
    adapter = PersistenceAdapter(store)

The backend name is read from the ``MGRS_MAPPER_STORE`` environment
variable via ``MapperConfig.store``.  The name ``"none"`` selects no
store at all; the persistence adapter then runs in-memory only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mgrs_mapper.storage.base import KeyValueStore, StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable

    from mgrs_mapper.core.config import MapperConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Backend name constants
# ---------------------------------------------------------------------------

JSON_FILE = "json_file"
MEMORY = "memory"
NO_STORE = "none"

# ---------------------------------------------------------------------------
# Backend registry
# ---------------------------------------------------------------------------

# Each entry maps a backend name to a callable that builds the store
# from the mapper configuration.

_STORE_REGISTRY: dict[str, Callable[[MapperConfig], KeyValueStore]] = {}


def _register_builtin_stores() -> None:
    """Register the built-in store backends.

    Called once on first ``get_store`` invocation.
    """

    def _json_file(config: MapperConfig) -> KeyValueStore:
        from mgrs_mapper.storage.json_file import JsonFileStore

        return JsonFileStore(config.resolved_store_path)

    def _memory(config: MapperConfig) -> KeyValueStore:
        from mgrs_mapper.storage.memory import MemoryStore

        return MemoryStore()

    _STORE_REGISTRY[JSON_FILE] = _json_file
    _STORE_REGISTRY[MEMORY] = _memory


def _ensure_registry() -> None:
    """Initialise the backend registry once (idempotent)."""
    if not _STORE_REGISTRY:
        _register_builtin_stores()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_store(
    name: str,
    builder: Callable[[MapperConfig], KeyValueStore],
) -> None:
    """Register a custom store backend.

    Args:
        name: Backend name (e.g. ``"sqlite"``).
        builder: Callable taking a ``MapperConfig`` and returning a store.

    Raises:
        ValueError: If the name is empty or reserved.
    """
    if not name:
        msg = "Store name must be non-empty"
        raise ValueError(msg)
    if name == NO_STORE:
        msg = f"Store name {NO_STORE!r} is reserved"
        raise ValueError(msg)
    _ensure_registry()
    _STORE_REGISTRY[name] = builder
    logger.debug("Registered store backend: %s", name)


def get_store(name: str, config: MapperConfig) -> KeyValueStore | None:
    """Create and return a store instance.

    Args:
        name: Backend identifier (``"json_file"``, ``"memory"`` or ``"none"``).
        config: Mapper configuration (supplies the store path).

    Returns:
        A ``KeyValueStore``, or ``None`` for the ``"none"`` backend.

    Raises:
        StorageUnavailableError: If the named backend is not registered.
    """
    if name == NO_STORE:
        logger.info("No durable store configured; AOIs are kept in memory only")
        return None

    _ensure_registry()
    builder = _STORE_REGISTRY.get(name)
    if builder is None:
        available = ", ".join([*sorted(_STORE_REGISTRY), NO_STORE])
        msg = f"Unknown store backend: {name!r}. Available: {available}"
        raise StorageUnavailableError(msg, store=name)

    logger.info("Creating store backend: %s", name)
    return builder(config)


def list_stores() -> list[str]:
    """Return the names of all registered store backends."""
    _ensure_registry()
    return sorted(_STORE_REGISTRY)
