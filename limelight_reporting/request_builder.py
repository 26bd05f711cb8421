"""Typed parameter lists for each Reporting Service operation."""

from typing import Any, Dict, List, Optional

from .date_utils import Timestamp, format_service_datetime
from .models import (
    TYPE_CATEGORY,
    TYPE_REPORT,
    TYPE_TIME_RANGE,
    TYPE_USAGE_SECTION,
    XSD_DATETIME,
    XSD_INT,
    XSD_STRING,
    SOAPParam,
)


# Accepted by getReportData's orderBy ("<field> [asc|desc]"); not validated client-side
ORDER_BY_FIELDS = ('item_name', 'num_bytes', 'num_seconds', 'num_users', 'num_requests')
ORDER_BY_DIRECTIONS = ('asc', 'desc')

Handle = Dict[str, Any]


class RequestBuilder:
    """
    Builds the ordered parameter list of each operation.

    Handles (report, category, time range, usage section) are re-wrapped with
    their declared type and otherwise passed through untouched. The access
    token is not part of these lists; AccessTokenManager.bind() supplies it.
    """

    @staticmethod
    def get_access(username: str, password: str) -> List[SOAPParam]:
        return [
            SOAPParam('username', XSD_STRING, username),
            SOAPParam('password', XSD_STRING, password),
        ]

    @staticmethod
    def available_reports() -> List[SOAPParam]:
        return []

    @staticmethod
    def available_counters() -> List[SOAPParam]:
        return []

    @staticmethod
    def current_traffic() -> List[SOAPParam]:
        return []

    @staticmethod
    def available_categories(report: Handle) -> List[SOAPParam]:
        return [SOAPParam.struct('report', TYPE_REPORT, report)]

    @staticmethod
    def available_time_ranges(report: Handle) -> List[SOAPParam]:
        return [SOAPParam.struct('report', TYPE_REPORT, report)]

    @staticmethod
    def report_data(
        report: Handle,
        category: Handle,
        time_range: Handle,
        order_by: Optional[str] = None
    ) -> List[SOAPParam]:
        """
        Parameters for getReportData.

        Args:
            report: Report handle
            category: Category handle
            time_range: Time-range handle
            order_by: "<field> [asc|desc]", e.g. 'num_bytes desc'; None or ''
                means no explicit order and is sent as an empty string
        """
        return [
            SOAPParam.struct('report', TYPE_REPORT, report),
            SOAPParam.struct('category', TYPE_CATEGORY, category),
            SOAPParam.struct('timeRange', TYPE_TIME_RANGE, time_range),
            SOAPParam('orderBy', XSD_STRING, order_by or ''),
        ]

    @staticmethod
    def disk_usage(report: Handle, time_range: Handle) -> List[SOAPParam]:
        # getDiskUsage spells the time range parameter in lower case
        return [
            SOAPParam.struct('report', TYPE_REPORT, report),
            SOAPParam.struct('timerange', TYPE_TIME_RANGE, time_range),
        ]

    @staticmethod
    def network_usage_sections(report: Handle) -> List[SOAPParam]:
        return [SOAPParam.struct('report', TYPE_REPORT, report)]

    @staticmethod
    def network_usage(
        report: Handle,
        section: Handle,
        start: Timestamp,
        end: Timestamp,
        interval: int
    ) -> List[SOAPParam]:
        """
        Parameters for getNetworkUsage.

        Args:
            report: Report handle
            section: Usage section handle from network_usage_sections()
            start: Start date-time (datetime or epoch seconds)
            end: End date-time (datetime or epoch seconds)
            interval: Seconds between samples (typically 60 or 300)

        Raises:
            ValueError: If interval is not a positive integer
        """
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ValueError(f"interval must be a positive number of seconds, got {interval!r}")

        return [
            SOAPParam.struct('report', TYPE_REPORT, report),
            SOAPParam.struct('section', TYPE_USAGE_SECTION, section),
            SOAPParam('startDateTime', XSD_DATETIME, format_service_datetime(start)),
            SOAPParam('endDateTime', XSD_DATETIME, format_service_datetime(end)),
            SOAPParam('interval', XSD_INT, interval),
        ]
