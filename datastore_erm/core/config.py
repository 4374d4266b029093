"""Configuration and backend loading.

ErmConfig is a Pydantic model for type-safe engine configuration. Backends
are resolved by name and imported lazily.
"""

from __future__ import annotations

import importlib
from typing import Any

from pydantic import BaseModel

from datastore_erm.core.exceptions import BackendLoadError


class ErmConfig(BaseModel):
    """Configuration for an Engine."""

    backend: str = "memory"
    strict: bool = False
    extra: dict[str, Any] = {}


# Backend module mapping: backend name -> (module_path, class_name)
_BACKEND_MAP: dict[str, tuple[str, str]] = {
    "memory": ("datastore_erm.adapters.memory", "InMemoryBackend"),
}


def load_backend(config: ErmConfig) -> Any:
    """Instantiate the backend named by ``config.backend``.

    Raises:
        BackendLoadError: If the name is unknown or the backend cannot be built.
    """
    name = config.backend.lower()
    if name not in _BACKEND_MAP:
        raise BackendLoadError(f"Unsupported backend: {config.backend}")

    module_path, cls_name = _BACKEND_MAP[name]
    try:
        module = importlib.import_module(module_path)
        backend_cls = getattr(module, cls_name)
    except (ImportError, AttributeError) as e:
        raise BackendLoadError(f"Failed to load backend '{config.backend}': {e}") from e

    try:
        return backend_cls.from_config(config)
    except TypeError as e:
        raise BackendLoadError(f"Invalid options for backend '{config.backend}': {e}") from e
