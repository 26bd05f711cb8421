"""
LimeLight Reporting Service client.

High-level client exposing one method per Reporting Service operation.
Report, category, time-range and usage-section records returned by the
listing calls are handles: pass them back unchanged to later calls.

Example Usage:
    from limelight_reporting import ReportingClient

    client = ReportingClient(username='luxuser', password='luxpass')
    if client.authenticate() is None:
        raise SystemExit(client.error_message())

    reports = client.reports()
    categories = client.categories(reports[0])
    ranges = client.time_ranges(reports[0])

    # order_by: item_name, num_bytes, num_seconds, num_users or num_requests,
    # optionally followed by asc/desc (e.g. 'num_bytes desc')
    rows = client.report_data(reports[0], categories[0], ranges[1], order_by='num_bytes desc')

    traffic = client.current_traffic()
    usage = client.disk_usage(reports[0], ranges[0])

    sections = client.network_usage_sections(reports[0])
    usage = client.network_usage(reports[0], sections[1], start, end, 300)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .access import AccessTokenManager
from .config import DEFAULT_PROXY, DEFAULT_TYPES_NAMESPACE, DEFAULT_URI, ReportingConfig
from .date_utils import Timestamp
from .errors import SOAPFaultError, UnknownOperationError
from .models import CallResult, Fault, SOAPParam
from .operations import get_operation_config
from .request_builder import Handle, RequestBuilder
from .response_normalizer import ResponseNormalizer
from .soap_client import SOAPClient
from .tracing import log_exchange

logger = logging.getLogger(__name__)


class ReportingClient:
    """
    Reporting Service client with access token handling.

    Every call follows the same protocol: clear the recorded fault, build the
    parameters (binding the access token for authenticated operations), call
    the channel, then either record the fault and return None or return the
    normalized result.

    Attributes:
        error: Fault of the most recent call, None if it succeeded
    """

    def __init__(
        self,
        username: str,
        password: str,
        proxy: str = DEFAULT_PROXY,
        uri: str = DEFAULT_URI,
        types_namespace: str = DEFAULT_TYPES_NAMESPACE,
        timeout: int = 60,
        retries: int = 3,
        channel=None,
        debug: bool = False
    ):
        """
        Initialize Reporting Service client.

        Args:
            username: LimeLight Network CONTROL username
            password: LimeLight Network CONTROL password
            proxy: Address to send SOAP requests to
            uri: Method namespace / SOAP action base
            types_namespace: Namespace of the service's encoded types
            timeout: Request timeout in seconds (default: 60)
            retries: Connection-level retry attempts (default: 3)
            channel: Object exposing call(operation, parameters); a SOAPClient
                is created from the endpoint settings when omitted
            debug: Log every request/response envelope at DEBUG level

        Raises:
            ValueError: If username or password is blank
        """
        if not username or not str(username).strip():
            raise ValueError("username must not be blank")
        if not password:
            raise ValueError("password must not be blank")

        self.username = username
        self.password = password
        self.channel = channel or SOAPClient(
            base_url=proxy,
            uri=uri,
            types_namespace=types_namespace,
            timeout=timeout,
            retries=retries
        )
        self.access = AccessTokenManager(self.channel)
        self.error: Optional[Fault] = None

        if debug:
            self.debug(True)

        logger.debug(f"Reporting client initialized: {getattr(self.channel, 'base_url', proxy)}")

    @classmethod
    def from_config(cls, config: ReportingConfig, channel=None) -> 'ReportingClient':
        """Create client from ReportingConfig."""
        return cls(
            username=config.username,
            password=config.password,
            channel=channel or SOAPClient.from_config(config),
            debug=config.debug,
        )

    @classmethod
    def from_env(cls) -> 'ReportingClient':
        """
        Create client from environment variables (.env file).

        See ReportingConfig.from_env() for the variables read.
        """
        return cls.from_config(ReportingConfig.from_env())

    # =========================================================================
    # Fault state and diagnostics
    # =========================================================================

    def error_message(self) -> str:
        """Formatted fault of the most recent call, '' when there is none."""
        if not self.error:
            return ''
        return self.error.format()

    def debug(self, enable: bool = True) -> None:
        """
        Enable or disable request/response logging of SOAP exchanges.

        Args:
            enable: True to log exchanges at DEBUG level, False to stop (default: True)
        """
        if not hasattr(self.channel, 'add_hook'):
            logger.warning(f"Channel {type(self.channel).__name__} does not support exchange hooks")
            return
        if enable:
            self.channel.add_hook(log_exchange)
        else:
            self.channel.remove_hook(log_exchange)

    @property
    def is_authenticated(self) -> bool:
        return self.access.is_authenticated

    @property
    def token(self) -> Optional[Dict[str, str]]:
        """Copy of the current access token (None before authentication)."""
        return self.access.token

    # =========================================================================
    # RPC
    # =========================================================================

    def rpc(self, operation: str, parameters: Optional[Sequence[SOAPParam]] = None) -> CallResult:
        """
        Dispatch one operation and return its explicit outcome.

        The access token is bound as the first parameter for every operation
        that requires one.

        Args:
            operation: SOAP operation name (e.g., "getAvailableReports")
            parameters: Operation parameters from RequestBuilder

        Returns:
            CallResult holding the normalized value or the fault

        Raises:
            UnknownOperationError: If the operation is not registered
            NotAuthenticatedError: If the operation needs a token and none is held
        """
        self.error = None
        config = get_operation_config(operation)

        call_parameters = list(parameters or [])
        if config.requires_access:
            call_parameters.insert(0, self.access.bind(operation))

        try:
            payload = self.channel.call(operation, call_parameters)
        except SOAPFaultError as e:
            return self._record(CallResult(operation, fault=Fault.from_error(e)))

        return CallResult(operation, value=ResponseNormalizer.normalize(config, payload))

    def _record(self, result: CallResult) -> CallResult:
        if not result.ok:
            self.error = result.fault
            logger.error(f"{result.operation}: {result.fault.format()}")
        return result

    # =========================================================================
    # Authentication
    # =========================================================================

    def authenticate(self) -> Optional[Dict[str, str]]:
        """
        Authenticate and get access token for RPC (getAccess).

        Returns:
            Access token fields, or None on fault (see error_message())
        """
        self.error = None
        logger.info(f"Authenticating to LimeLight Reporting Service as {self.username}")
        result = self._record(self.access.authenticate(self.username, self.password))
        if result.ok:
            logger.info("LimeLight authentication successful")
        return result.unwrap()

    auth = authenticate

    # =========================================================================
    # Listings
    # =========================================================================

    def reports(self) -> Optional[List[Dict[str, Any]]]:
        """
        Available reports for the user (getAvailableReports).

        Returns:
            List of {desc, name, id, key} handles, or None on fault
        """
        return self.rpc('getAvailableReports', RequestBuilder.available_reports()).unwrap()

    def counters(self) -> Optional[List[Dict[str, Any]]]:
        """Available reports for WM counter stats (getAvailableCounters)."""
        return self.rpc('getAvailableCounters', RequestBuilder.available_counters()).unwrap()

    def categories(self, report: Handle) -> Optional[List[Dict[str, Any]]]:
        """
        Categories of a report (getAvailableCategories).

        Category names seen in practice: 'Day', 'Day of Week', 'Duration',
        'Errors', 'File Size', 'File Type', 'Geo', 'Hour', 'Hour of Day',
        'Missing Files', 'Published Hosts', 'Referer Domains', 'Status',
        'URL Prefixes', 'URLs', 'User Agent'.

        Args:
            report: Report handle from reports()

        Returns:
            List of {desc, name, id, key} handles, or None on fault
        """
        return self.rpc('getAvailableCategories', RequestBuilder.available_categories(report)).unwrap()

    def category(self, name: str, report: Handle) -> Optional[Dict[str, Any]]:
        """
        Shortcut to get the category with the given name from categories(report).

        Zero or several matching categories are reported as a warning and
        yield None; an ambiguous match is never resolved by picking one.

        Args:
            name: Exact category name (e.g., "Day")
            report: Report handle from reports()

        Returns:
            The matching category handle, or None
        """
        categories = self.categories(report)
        if categories is None:
            return None

        matches = [c for c in categories if isinstance(c, dict) and c.get('name') == name]
        if not matches:
            logger.warning(f"No category matches {name} found")
            return None
        if len(matches) > 1:
            logger.warning(f"{len(matches)} categories found matching {name}, expected exactly one")
            return None
        return matches[0]

    def time_ranges(self, report: Handle) -> Optional[List[Dict[str, Any]]]:
        """
        Available time ranges of a report (getAvailableTimeRanges).

        Range names seen in practice: 'monthly', 'weekly', 'daily', 'hourly'.
        'start' and 'end' are seconds since epoch; the ranges are laid out in
        MST (UTC-07:00), see date_utils.time_range_bounds().

        Args:
            report: Report handle from reports()

        Returns:
            List of {sum_id, desc, name, type, key, start, end} handles, or None on fault
        """
        return self.rpc('getAvailableTimeRanges', RequestBuilder.available_time_ranges(report)).unwrap()

    def network_usage_sections(self, report: Handle) -> Optional[List[Dict[str, Any]]]:
        """Network usage sections available for a report (getNetworkUsageSections)."""
        return self.rpc('getNetworkUsageSections', RequestBuilder.network_usage_sections(report)).unwrap()

    # =========================================================================
    # Data
    # =========================================================================

    def report_data(
        self,
        report: Handle,
        category: Handle,
        time_range: Handle,
        order_by: Optional[str] = None
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Raw report data for a report, category and time range (getReportData).

        Args:
            report: Report handle
            category: Category handle
            time_range: Time-range handle
            order_by: "<field> [asc|desc]"; field is one of item_name, num_bytes,
                num_seconds, num_users, num_requests. Not validated locally:
                the service answers invalid values with a fault.

        Returns:
            List of data rows, or None on fault
        """
        parameters = RequestBuilder.report_data(report, category, time_range, order_by)
        return self.rpc('getReportData', parameters).unwrap()

    def current_traffic(self) -> Optional[Dict[str, Any]]:
        """
        Current traffic in bytes/sec in and out (getCurrentTraffic).

        The service faults with CustomerNotConfiguredException when the
        customer does not receive traffic data through the API, and with
        TrafficDatabaseUnreachableException when its database is down.
        """
        return self.rpc('getCurrentTraffic', RequestBuilder.current_traffic()).unwrap()

    def disk_usage(self, report: Handle, time_range: Handle) -> Optional[Dict[str, Any]]:
        """
        Raw 5-minute disk usage samples for a time range (getDiskUsage).

        Returns:
            {startTime, startTimeEpoch, endTime, endTimeEpoch, interval, nsamples,
             values: [{type, label, units, samples: [float]}]}, or None on fault
        """
        return self.rpc('getDiskUsage', RequestBuilder.disk_usage(report, time_range)).unwrap()

    def network_usage(
        self,
        report: Handle,
        section: Handle,
        start: Timestamp,
        end: Timestamp,
        interval: int
    ) -> Optional[Dict[str, Any]]:
        """
        Raw network usage samples (getNetworkUsage).

        The returned start/end may differ from the requested ones depending on
        data availability.

        Args:
            report: Report handle
            section: Usage section handle from network_usage_sections()
            start: Start date-time (datetime or epoch seconds)
            end: End date-time (datetime or epoch seconds)
            interval: Seconds between samples (typically 60 or 300)

        Returns:
            Usage aggregate (same shape as disk_usage()), or None on fault
        """
        parameters = RequestBuilder.network_usage(report, section, start, end, interval)
        return self.rpc('getNetworkUsage', parameters).unwrap()

    def call_operation(
        self,
        operation: str,
        parameters: Optional[Sequence[SOAPParam]] = None
    ) -> Any:
        """
        Generic method to call any registered operation.

        Intended for operations without a dedicated method (getStreams,
        getCounterUsage, getLiveWMCounters, ...): their result is returned as
        parsed, without normalization.

        Args:
            operation: SOAP operation name from OPERATION_REGISTRY
            parameters: Operation parameters, access token excluded

        Returns:
            Result payload, or None on fault

        Raises:
            UnknownOperationError: If operation is not in OPERATION_REGISTRY or
                takes no access token (getAccess goes through authenticate())
        """
        if not get_operation_config(operation).requires_access:
            raise UnknownOperationError(operation)
        return self.rpc(operation, parameters).unwrap()

    # =========================================================================
    # Resources
    # =========================================================================

    def close(self):
        """Close the underlying channel."""
        if hasattr(self.channel, 'close'):
            self.channel.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
