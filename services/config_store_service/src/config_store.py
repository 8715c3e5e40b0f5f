import re
import threading
from datetime import timedelta
from functools import partial
from typing import Callable, Hashable, List, Optional, Tuple, TypeVar, Union

from shared.common_utils.logger import logger
from ..config.env_settings import settings
from . import parsers
from .reload_scheduler import ReloadScheduler
from .schemas import PatternGroup, SnapshotMetadata
from .source_loader import PropertySource, RawSnapshot, RawSourceLoader, source_for
from .typed_cache import TypedCache

T = TypeVar("T")

RELOAD_INTERVAL_KEY = "hotconf.properties.reload_interval_seconds"


class _Generation:
    """A snapshot and the cache of values derived from it, always swapped together."""

    __slots__ = ("number", "snapshot", "cache", "metadata")

    def __init__(self, number: int, snapshot: RawSnapshot):
        self.number = number
        self.snapshot = snapshot
        self.cache = TypedCache()
        self.metadata = SnapshotMetadata(
            generation=number,
            source=snapshot.source,
            location=snapshot.location,
            key_count=len(snapshot),
            checksum=snapshot.checksum,
            failed=snapshot.failed,
        )


class ConfigurationStore:
    """
    Typed, cached access to a periodically reloaded set of raw properties.

    Getters never raise: malformed values are logged and replaced by the
    supplied default. Each getter call reads a single generation, so a value
    is always derived from exactly one snapshot.
    """

    def __init__(
        self,
        source: Union[PropertySource, str, None] = None,
        reload_interval_seconds: Optional[int] = None,
    ):
        if source is None:
            source = settings.SOURCE
        if isinstance(source, str):
            source = source_for(source, http_timeout=settings.HTTP_TIMEOUT)
        if reload_interval_seconds is None:
            reload_interval_seconds = settings.RELOAD_INTERVAL_SECONDS

        self._loader = RawSourceLoader(source)
        # Guards the generation swap, never held during I/O; getters never take it
        self._reload_lock = threading.Lock()
        self._generation = _Generation(1, self._loader.load())

        # Read once; later reloads do not change the interval
        if reload_interval_seconds is None:
            reload_interval_seconds = parsers.parse_long(self._generation.snapshot, RELOAD_INTERVAL_KEY, -1)
        self.reload_interval_seconds = reload_interval_seconds

        self._scheduler = ReloadScheduler(self.reload)
        self._scheduler.start(reload_interval_seconds)

    @property
    def source(self) -> PropertySource:
        return self._loader.source

    @property
    def snapshot(self) -> RawSnapshot:
        return self._generation.snapshot

    @property
    def generation(self) -> int:
        return self._generation.number

    @property
    def metadata(self) -> SnapshotMetadata:
        return self._generation.metadata

    def current(self) -> Tuple[RawSnapshot, SnapshotMetadata]:
        """Snapshot and metadata of the same generation."""
        generation = self._generation
        return generation.snapshot, generation.metadata

    @property
    def reloading(self) -> bool:
        return self._scheduler.running

    def reload(self) -> SnapshotMetadata:
        """Loads the source again and installs the new snapshot with an empty cache."""
        snapshot = self._loader.load()
        with self._reload_lock:
            previous = self._generation
            installed = _Generation(previous.number + 1, snapshot)
            self._generation = installed
        previous.cache.clear()

        if snapshot.checksum != previous.snapshot.checksum:
            logger.info(f"Configuration changed, installed generation {installed.number}")
        return installed.metadata

    def close(self) -> None:
        self._scheduler.stop()

    def __enter__(self) -> "ConfigurationStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, kind: str, key: str, default: Hashable, parse: Callable[..., T]) -> T:
        generation = self._generation
        return generation.cache.get_or_compute(
            (kind, key, default),
            lambda: parse(generation.snapshot, key, default),
        )

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._get("string", key, default, parsers.parse_string)

    def get_boolean(self, key: str, default: bool) -> bool:
        return self._get("boolean", key, default, parsers.parse_boolean)

    def get_long(self, key: str, default: int) -> int:
        return self._get("long", key, default, parsers.parse_long)

    def get_int(self, key: str, default: int) -> int:
        return self._get("int", key, default, parsers.parse_int)

    def get_duration(self, key: str, default: Union[timedelta, int]) -> timedelta:
        """Integer defaults are seconds."""
        if not isinstance(default, timedelta):
            default = timedelta(seconds=default)
        return self._get("duration", key, default, parsers.parse_duration)

    def get_string_list(self, key: str, default: Optional[str] = "") -> List[str]:
        return list(self._get("string_list", key, default, parsers.parse_string_list))

    def get_lowercase_string_list(self, key: str, default: Optional[str] = "") -> List[str]:
        parse = partial(parsers.parse_string_list, lowercase=True)
        return list(self._get("lowercase_string_list", key, default, parse))

    def get_pattern_list(self, key: str, default: Optional[str] = "") -> List[re.Pattern]:
        return list(self._get("pattern_list", key, default, parsers.parse_pattern_list))

    def get_pattern_group_map(self, key: str, default: Optional[str] = "") -> List[PatternGroup]:
        return list(self._get("pattern_groups", key, default, parsers.parse_pattern_groups))
