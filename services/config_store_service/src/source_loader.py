from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional
import httpx
import yaml

from shared.common_utils.logger import logger
from .properties import PropertiesSyntaxError, parse_properties
from .schemas import ConfigSource
from .validator import ConfigValidationError, flatten_scalar_mapping, generate_snapshot_checksum

DEFAULT_RESOURCE_NAME = "hotconf.properties"
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigSourceError(Exception):
    def __init__(self, message: str, missing: bool = False):
        super().__init__(message)
        self.missing = missing


class RawSnapshot(Mapping[str, str]):
    """Immutable key/value set produced by one load."""

    __slots__ = ("_values", "source", "location", "failed", "checksum")

    def __init__(
        self,
        values: Mapping[str, str],
        source: ConfigSource = ConfigSource.MAPPING,
        location: str = "<memory>",
        failed: bool = False,
    ):
        self._values: Dict[str, str] = dict(values)
        self.source = source
        self.location = location
        self.failed = failed
        self.checksum = generate_snapshot_checksum(self._values)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RawSnapshot(location={self.location!r}, keys={len(self._values)}, failed={self.failed})"


def parse_document(content: str, yaml_document: bool) -> Dict[str, str]:
    """Parses a properties or flat YAML document into raw values."""
    try:
        if yaml_document:
            return flatten_scalar_mapping(yaml.safe_load(content))
        return parse_properties(content)
    except (yaml.YAMLError, ConfigValidationError, PropertiesSyntaxError) as e:
        raise ConfigSourceError(f"Malformed configuration document: {e}") from e


class PropertySource(ABC):
    kind: ConfigSource

    @property
    @abstractmethod
    def location(self) -> str:
        ...

    @abstractmethod
    def read(self) -> Dict[str, str]:
        """Reads the raw values. Raises ConfigSourceError when the source cannot be read."""


class FileSource(PropertySource):
    kind = ConfigSource.FILE

    def __init__(self, path):
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError as e:
            raise ConfigSourceError(f"Properties file not found at {self.path}", missing=True) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigSourceError(f"Could not read properties file {self.path}: {e}") from e
        return parse_document(content, self.path.suffix.lower() in YAML_SUFFIXES)


class PackageResourceSource(PropertySource):
    """A resource bundled inside an importable package."""

    kind = ConfigSource.PACKAGE_RESOURCE

    def __init__(self, package: str, name: str = DEFAULT_RESOURCE_NAME):
        self.package = package
        self.name = name

    @property
    def location(self) -> str:
        return f"package:{self.package}/{self.name}"

    def read(self) -> Dict[str, str]:
        try:
            resource = resources.files(self.package).joinpath(self.name)
            with resource.open("r", encoding="utf-8") as f:
                content = f.read()
        except (ModuleNotFoundError, FileNotFoundError) as e:
            raise ConfigSourceError(f"Resource {self.location} not found", missing=True) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigSourceError(f"Could not read resource {self.location}: {e}") from e
        return parse_document(content, self.name.lower().endswith(YAML_SUFFIXES))


class HttpSource(PropertySource):
    """Fetches a properties (or YAML) document from a remote config service."""

    kind = ConfigSource.HTTP

    def __init__(self, url: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def location(self) -> str:
        return self.url

    def read(self) -> Dict[str, str]:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                content = response.text
                content_type = response.headers.get("content-type", "")
        except httpx.HTTPStatusError as e:
            raise ConfigSourceError(
                f"Config service returned {e.response.status_code} for {self.url}",
                missing=e.response.status_code == 404,
            ) from e
        except httpx.HTTPError as e:
            raise ConfigSourceError(f"Could not fetch {self.url}: {e}") from e

        yaml_document = "yaml" in content_type or self.url.lower().endswith(YAML_SUFFIXES)
        return parse_document(content, yaml_document)


class MappingSource(PropertySource):
    kind = ConfigSource.MAPPING

    def __init__(self, values: Mapping[str, object], location: str = "<memory>"):
        self.values = values
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    def read(self) -> Dict[str, str]:
        return {str(key): str(value) for key, value in self.values.items()}


def source_for(location: str, http_timeout: float = 5.0) -> PropertySource:
    """
    Builds a source from a location string:
    http(s):// URLs, package:<module>/<resource> or a file path.
    """
    if location.startswith(("http://", "https://")):
        return HttpSource(location, timeout=http_timeout)
    if location.startswith("package:"):
        package, _, name = location[len("package:"):].partition("/")
        return PackageResourceSource(package, name or DEFAULT_RESOURCE_NAME)
    return FileSource(location)


class RawSourceLoader:
    """Loads RawSnapshots from a source. Load failures produce an empty snapshot and are never raised."""

    def __init__(self, source: PropertySource):
        self.source = source

    def load(self) -> RawSnapshot:
        logger.info(f"Loading properties from {self.source.location}")
        try:
            values = self.source.read()
        except ConfigSourceError as e:
            if e.missing:
                logger.warning(f"{e}. Using empty snapshot.")
            else:
                logger.error(f"{e}. Using empty snapshot.")
            return self._empty_snapshot()
        except Exception as e:
            logger.error(f"Unexpected error while loading {self.source.location}: {e!r}", exc_info=True)
            return self._empty_snapshot()

        logger.info(f"Loaded {len(values)} properties from {self.source.location}")
        return RawSnapshot(values, self.source.kind, self.source.location)

    def _empty_snapshot(self) -> RawSnapshot:
        return RawSnapshot({}, self.source.kind, self.source.location, failed=True)
