from __future__ import annotations

import importlib.util
import inspect
import traceback
from pathlib import Path
from types import ModuleType
from typing import Any

import structlog

from streamhound.domain.adapters import AdapterLoadError, SiteAdapterProtocol

log = structlog.get_logger(__name__)


def _import_module_from_path(path: Path) -> ModuleType:
    module_name = f"streamhound_dynamic_adapter_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, str(path))
    if spec is None or spec.loader is None:
        raise AdapterLoadError(f"Could not create import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except SyntaxError as e:
        tb = traceback.format_exc()
        raise AdapterLoadError(f"SyntaxError while importing {path}:\n{tb}") from e
    except Exception as e:
        tb = traceback.format_exc()
        raise AdapterLoadError(f"Error while importing {path}:\n{tb}") from e

    return module


def load_python_adapter(path: Path) -> SiteAdapterProtocol:
    """Import *path* and return its module-level ``adapter`` object."""
    try:
        module = _import_module_from_path(path)
        if not hasattr(module, "adapter"):
            raise AdapterLoadError("Adapter module must export 'adapter' variable")

        adapter: Any = getattr(module, "adapter")
        if not inspect.iscoroutinefunction(getattr(adapter, "get_streams", None)):
            raise AdapterLoadError("Adapter must have async 'get_streams' method")
        if (
            not hasattr(adapter, "name")
            or not isinstance(adapter.name, str)
            or not adapter.name
        ):
            raise AdapterLoadError("Adapter must have non-empty 'name' attribute")

        return adapter
    except AdapterLoadError as e:
        log.error(
            "adapter_load_failed",
            adapter_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise
