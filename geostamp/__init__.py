from __future__ import annotations

from typing import TYPE_CHECKING, Any

# Keep imports lazy so `geostamp --help` stays fast.
__all__ = ["distance_meters", "find_privacy_zone", "load_processing_options", "PhotoBatchProcessor"]

_EXPORTS = {
    "distance_meters": "geostamp.geo",
    "find_privacy_zone": "geostamp.geo",
    "load_processing_options": "geostamp.run_config",
    "PhotoBatchProcessor": "geostamp.processor",
}

if TYPE_CHECKING:
    from geostamp.geo import distance_meters, find_privacy_zone
    from geostamp.processor import PhotoBatchProcessor
    from geostamp.run_config import load_processing_options


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        import importlib

        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module 'geostamp' has no attribute '{name}'")
