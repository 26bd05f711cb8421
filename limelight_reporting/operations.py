"""
Reporting Service operation registry.

One OperationConfig per operation: the SOAP operation name, the parameter
name the access token is bound under, and the shape of its result.

Access token binding (the service requires the same SOAPAccess structure
under three different parameter names):
- soap_access:  report-scoped operations
- access_token: getCurrentTraffic
- userAccess:   user-scoped listings (reports, counters)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .errors import UnknownOperationError


class ResultShape(Enum):
    """How an operation's result payload is normalized."""
    TOKEN = "token"  # getAccess: SOAPAccess record
    LIST = "list"  # collection of records under Item
    RECORD = "record"  # single record passed through
    USAGE = "usage"  # SOAPNetworkUsage aggregate
    RAW = "raw"  # parsed payload returned as-is


ACCESS_SOAP_ACCESS = 'soap_access'
ACCESS_TOKEN = 'access_token'
ACCESS_USER_ACCESS = 'userAccess'


@dataclass(frozen=True)
class OperationConfig:
    """
    Configuration for a single Reporting Service operation.

    Attributes:
        operation: SOAP operation name (e.g., "getAvailableReports")
        access_param: Parameter name the access token is bound under (None for getAccess)
        shape: Result normalization rule
    """
    operation: str
    access_param: Optional[str]
    shape: ResultShape

    @property
    def result_tag(self) -> str:
        """XML tag holding the operation's result."""
        return f"{self.operation}Result"

    @property
    def requires_access(self) -> bool:
        return self.access_param is not None


def _op(operation: str, access_param: Optional[str], shape: ResultShape) -> OperationConfig:
    return OperationConfig(operation=operation, access_param=access_param, shape=shape)


# Registry: every operation the client may dispatch.
# This table is exhaustive; AccessTokenManager.bind() rejects anything else.
OPERATION_REGISTRY: Dict[str, OperationConfig] = {
    # Authentication (no token)
    'getAccess': _op('getAccess', None, ResultShape.TOKEN),

    # userAccess
    'getAvailableReports': _op('getAvailableReports', ACCESS_USER_ACCESS, ResultShape.LIST),
    'getAvailableCounters': _op('getAvailableCounters', ACCESS_USER_ACCESS, ResultShape.LIST),

    # access_token
    'getCurrentTraffic': _op('getCurrentTraffic', ACCESS_TOKEN, ResultShape.RECORD),

    # soap_access
    'getAvailableCategories': _op('getAvailableCategories', ACCESS_SOAP_ACCESS, ResultShape.LIST),
    'getAvailableTimeRanges': _op('getAvailableTimeRanges', ACCESS_SOAP_ACCESS, ResultShape.LIST),
    'getReportData': _op('getReportData', ACCESS_SOAP_ACCESS, ResultShape.LIST),
    'getDiskUsage': _op('getDiskUsage', ACCESS_SOAP_ACCESS, ResultShape.USAGE),
    'getNetworkUsageSections': _op('getNetworkUsageSections', ACCESS_SOAP_ACCESS, ResultShape.LIST),
    'getNetworkUsage': _op('getNetworkUsage', ACCESS_SOAP_ACCESS, ResultShape.USAGE),
    'getCounterRanges': _op('getCounterRanges', ACCESS_SOAP_ACCESS, ResultShape.RAW),
    'getCounterSections': _op('getCounterSections', ACCESS_SOAP_ACCESS, ResultShape.RAW),
    'getCounterUsage': _op('getCounterUsage', ACCESS_SOAP_ACCESS, ResultShape.RAW),
    'getLiveWMAggregate': _op('getLiveWMAggregate', ACCESS_SOAP_ACCESS, ResultShape.RAW),
    'getLiveWMCounters': _op('getLiveWMCounters', ACCESS_SOAP_ACCESS, ResultShape.RAW),
    'getReportSummary': _op('getReportSummary', ACCESS_SOAP_ACCESS, ResultShape.RAW),  # deprecated by the service
    'getStreams': _op('getStreams', ACCESS_SOAP_ACCESS, ResultShape.RAW),
}


def get_operation_config(operation: str) -> OperationConfig:
    """
    Get configuration for a specific operation.

    Args:
        operation: SOAP operation name

    Returns:
        OperationConfig for the operation

    Raises:
        UnknownOperationError: If operation is not in OPERATION_REGISTRY
    """
    try:
        return OPERATION_REGISTRY[operation]
    except KeyError:
        raise UnknownOperationError(operation) from None


def list_operations() -> list:
    """Names of all registered operations."""
    return list(OPERATION_REGISTRY.keys())
