"""Reference data shipped with the package."""

from .catalog import load_catalog, serialize_catalog

__all__ = ["load_catalog", "serialize_catalog"]
