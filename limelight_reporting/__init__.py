"""
LimeLight Reporting Service API client.

Authenticates against the Reporting Service SOAP endpoint, then lists
reports, categories and time ranges and fetches report data, current
traffic, disk usage and network usage.

Example Usage:
    from limelight_reporting import ReportingClient

    with ReportingClient(username='luxuser', password='luxpass') as client:
        if client.authenticate() is None:
            print(client.error_message())
        else:
            for report in client.reports():
                print(report['name'])
"""

__version__ = '0.1.0'

# Configuration
from .config import ReportingConfig

# Errors
from .errors import (
    ReportingError,
    SOAPFaultError,
    SOAPTransportError,
    UnknownOperationError,
    NotAuthenticatedError,
)

# Models
from .models import SOAPParam, Fault, CallResult, SOAPExchange

# Operations
from .operations import OPERATION_REGISTRY, OperationConfig, ResultShape

# Components
from .soap_client import SOAPClient
from .access import AccessTokenManager
from .request_builder import RequestBuilder, ORDER_BY_FIELDS, ORDER_BY_DIRECTIONS
from .response_normalizer import ResponseNormalizer
from .client import ReportingClient

# Tracing
from .tracing import log_exchange, track_outbound_api

# Date utilities
from .date_utils import (
    SERVICE_TIMEZONE,
    epoch_to_service_datetime,
    format_service_datetime,
    parse_service_datetime,
    time_range_bounds,
)


__all__ = [
    # Version
    '__version__',

    # Configuration
    'ReportingConfig',

    # Errors
    'ReportingError',
    'SOAPFaultError',
    'SOAPTransportError',
    'UnknownOperationError',
    'NotAuthenticatedError',

    # Models
    'SOAPParam',
    'Fault',
    'CallResult',
    'SOAPExchange',

    # Operations
    'OPERATION_REGISTRY',
    'OperationConfig',
    'ResultShape',

    # Components
    'SOAPClient',
    'AccessTokenManager',
    'RequestBuilder',
    'ORDER_BY_FIELDS',
    'ORDER_BY_DIRECTIONS',
    'ResponseNormalizer',
    'ReportingClient',

    # Tracing
    'log_exchange',
    'track_outbound_api',

    # Date utilities
    'SERVICE_TIMEZONE',
    'epoch_to_service_datetime',
    'format_service_datetime',
    'parse_service_datetime',
    'time_range_bounds',
]
