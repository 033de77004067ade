from .httpx_base import HttpxAdapterBase
from .loader import load_python_adapter
from .registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "HttpxAdapterBase",
    "load_python_adapter",
]
