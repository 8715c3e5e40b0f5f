import re
from typing import List, Optional

from .config_store import ConfigurationStore
from .schemas import PatternGroup

DEFAULT_CONFIDENTIAL_QUERY_PARAMS = "(?i).*pass.*, (?i).*credit.*, (?i).*pwd.*"
DEFAULT_URL_GROUPS = (
    r"/\d+:          /{id},"
    r"(.*)\.js:      *.js,"
    r"(.*)\.css:     *.css,"
    r"(.*)\.jpg:     *.jpg,"
    r"(.*)\.jpeg:    *.jpeg,"
    r"(.*)\.png:     *.png"
)


class MonitoringConfiguration(ConfigurationStore):
    """Request monitoring, reporting and profiling settings."""

    # Request monitor
    @property
    def warmup_request_count(self) -> int:
        return self.get_int("monitor.warmup_request_count", 0)

    @property
    def warmup_duration_seconds(self) -> int:
        return self.get_int("monitor.warmup_duration_seconds", 0)

    @property
    def collect_request_stats(self) -> bool:
        return self.get_boolean("monitor.collect_request_stats", True)

    @property
    def request_timer_enabled(self) -> bool:
        return self.get_boolean("monitor.request_timer_enabled", True)

    @property
    def collect_headers(self) -> bool:
        return self.get_boolean("monitor.http.collect_headers", True)

    @property
    def excluded_headers(self) -> List[str]:
        return self.get_lowercase_string_list("monitor.http.headers.excluded", "cookie")

    @property
    def confidential_query_param_patterns(self) -> List[re.Pattern]:
        return self.get_pattern_list(
            "monitor.http.query_params.confidential.regex", DEFAULT_CONFIDENTIAL_QUERY_PARAMS
        )

    @property
    def url_grouping_patterns(self) -> List[PatternGroup]:
        return self.get_pattern_group_map("monitor.http.url_groups", DEFAULT_URL_GROUPS)

    # Reporting
    @property
    def console_reporting_interval_seconds(self) -> int:
        return self.get_long("reporting.interval.console_seconds", 60)

    @property
    def report_to_management_interface(self) -> bool:
        return self.get_boolean("reporting.management_interface", True)

    @property
    def remote_reporting_interval_seconds(self) -> int:
        return self.get_long("reporting.interval.remote_seconds", 60)

    @property
    def remote_host(self) -> Optional[str]:
        return self.get_string("reporting.remote.host")

    @property
    def remote_port(self) -> int:
        return self.get_int("reporting.remote.port", 2003)

    @property
    def excluded_metric_patterns(self) -> List[str]:
        return self.get_string_list("metrics.excluded.pattern", "")

    # Profiler
    @property
    def min_execution_time_nanos(self) -> int:
        return self.get_long("profiler.min_execution_time_nanos", 0)

    @property
    def call_stack_sampling_rate(self) -> int:
        """Collect a call stack every N requests per group, -1 disables sampling."""
        return self.get_int("profiler.call_stack_every_x_requests_to_group", -1)

    @property
    def log_call_stacks(self) -> bool:
        return self.get_boolean("profiler.log_call_stacks", True)

    @property
    def report_call_stacks_remotely(self) -> bool:
        return self.get_boolean("profiler.report_call_stacks_remotely", False)

    # Identity
    @property
    def application_name(self) -> Optional[str]:
        return self.get_string("application_name")

    @property
    def instance_name(self) -> Optional[str]:
        return self.get_string("instance_name")

    @property
    def server_url(self) -> Optional[str]:
        return self.get_string("server_url")
