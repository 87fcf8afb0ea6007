"""Color occurrence scanner over the explicit import closure of a root file."""

from .config import ConfigError, InspectorConfig, load_config
from .models import ColorEntry, ColorOccurrence, FileGroup, Inventory
from .orchestrator import ColorInspector

__version__ = "0.1.0"

__all__ = [
    "ColorEntry",
    "ColorInspector",
    "ColorOccurrence",
    "ConfigError",
    "FileGroup",
    "InspectorConfig",
    "Inventory",
    "load_config",
]
