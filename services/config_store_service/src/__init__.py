"""
Config Store Service Source Package
Contains the typed, hot-reloadable configuration store.
"""

from .config_store import ConfigurationStore, RELOAD_INTERVAL_KEY
from .monitoring_config import MonitoringConfiguration
from .reload_scheduler import ReloadScheduler
from .typed_cache import TypedCache
from .schemas import (
    ConfigSource,
    PatternGroup,
    SnapshotMetadata,
    ReloadResponse,
    ConfigValueResponse,
    ConfigKeysResponse,
)
from .source_loader import (
    ConfigSourceError,
    RawSnapshot,
    RawSourceLoader,
    PropertySource,
    FileSource,
    PackageResourceSource,
    HttpSource,
    MappingSource,
    source_for,
)
from .properties import PropertiesSyntaxError, parse_properties
from .parsers import resolve_label
from .validator import ConfigValidationError

__all__ = [
    # Main components
    "ConfigurationStore",
    "MonitoringConfiguration",
    "ReloadScheduler",
    "TypedCache",
    "RELOAD_INTERVAL_KEY",

    # Schemas
    "ConfigSource",
    "PatternGroup",
    "SnapshotMetadata",
    "ReloadResponse",
    "ConfigValueResponse",
    "ConfigKeysResponse",

    # Sources
    "ConfigSourceError",
    "RawSnapshot",
    "RawSourceLoader",
    "PropertySource",
    "FileSource",
    "PackageResourceSource",
    "HttpSource",
    "MappingSource",
    "source_for",

    # Parsing
    "PropertiesSyntaxError",
    "parse_properties",
    "resolve_label",
    "ConfigValidationError",
]
