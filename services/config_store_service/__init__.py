"""
Config Store Service
Provides typed, hot-reloadable configuration for monitoring components.
"""

from .src.config_store import ConfigurationStore
from .src.monitoring_config import MonitoringConfiguration
from .src.admin_api import app, create_app
from .src.schemas import (
    ConfigSource,
    PatternGroup,
    SnapshotMetadata,
)
from .src.source_loader import (
    RawSnapshot,
    FileSource,
    PackageResourceSource,
    HttpSource,
    MappingSource,
    source_for,
)

__version__ = "0.1.0"
__all__ = [
    "ConfigurationStore",
    "MonitoringConfiguration",
    "app",
    "create_app",
    "ConfigSource",
    "PatternGroup",
    "SnapshotMetadata",
    "RawSnapshot",
    "FileSource",
    "PackageResourceSource",
    "HttpSource",
    "MappingSource",
    "source_for",
]
