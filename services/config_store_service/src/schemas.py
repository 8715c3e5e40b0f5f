import re
from datetime import datetime, UTC
from enum import Enum
from typing import List, NamedTuple
from pydantic import BaseModel, Field


class ConfigSource(str, Enum):
    FILE = "file"
    PACKAGE_RESOURCE = "package_resource"
    HTTP = "http"
    MAPPING = "mapping"


class PatternGroup(NamedTuple):
    """A compiled regex and the label it maps matching values to."""
    pattern: re.Pattern
    label: str


class SnapshotMetadata(BaseModel):
    generation: int = Field(..., description="Number of loads performed, starting at 1")
    source: ConfigSource = Field(..., description="Kind of source the snapshot came from")
    location: str = Field(..., description="Where the source was read from")
    key_count: int = Field(..., description="Number of keys in the snapshot")
    checksum: str = Field(..., description="sha256 of the sorted snapshot")
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC), description="Load timestamp")
    failed: bool = Field(False, description="Whether the load failed and produced an empty snapshot")


class ReloadResponse(BaseModel):
    success: bool = Field(..., description="Whether the source was read without errors")
    message: str = Field(..., description="Response message")
    metadata: SnapshotMetadata = Field(..., description="Metadata of the installed snapshot")


class ConfigValueResponse(BaseModel):
    key: str = Field(..., description="Configuration key")
    value: str = Field(..., description="Raw value of the key")
    generation: int = Field(..., description="Generation the value was read from")


class ConfigKeysResponse(BaseModel):
    keys: List[str] = Field(default_factory=list, description="Sorted keys of the current snapshot")
    generation: int = Field(..., description="Generation the keys were read from")
