"""
Value types shared by the channel, request builder and client.

SOAPParam is the typed parameter handed to the SOAP channel; Fault and
CallResult carry the outcome of a single remote call.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from .errors import SOAPFaultError


# Nominal XML schema type tags
XSD_STRING = 'xsd:string'
XSD_INT = 'xsd:int'
XSD_DATETIME = 'xsd:dateTime'

# Reporting Service encoded types (prefix bound to the types namespace)
TYPE_ACCESS = 'types:SOAPAccess'
TYPE_REPORT = 'types:SOAPAvailableReport'
TYPE_CATEGORY = 'types:SOAPAvailableCategory'
TYPE_TIME_RANGE = 'types:SOAPAvailableTimeRange'
TYPE_USAGE_SECTION = 'types:SOAPNetworkUsageSection'


@dataclass(frozen=True)
class SOAPParam:
    """
    Named and typed SOAP parameter.

    Attributes:
        name: Element name in the request body
        type: Type tag emitted as xsi:type (e.g. "xsd:string", "types:SOAPAccess")
        value: Scalar value, or a list of SOAPParam for structured types
    """
    name: str
    type: str
    value: Union[str, int, float, None, List['SOAPParam']] = None

    @property
    def is_struct(self) -> bool:
        return isinstance(self.value, list)

    @classmethod
    def struct(cls, name: str, type: str, record: Dict[str, Any]) -> 'SOAPParam':
        """
        Wrap a record as a structured parameter, one string child per field.

        Field order follows the record's own key order. Values are not inspected.
        """
        children = [
            cls(name=key, type=XSD_STRING, value='' if value is None else str(value))
            for key, value in record.items()
        ]
        return cls(name=name, type=type, value=children)


@dataclass(frozen=True)
class Fault:
    """Structured error returned by the remote service."""
    code: str
    message: str
    detail: str = ''

    @classmethod
    def from_error(cls, error: SOAPFaultError) -> 'Fault':
        return cls(code=error.code, message=error.message, detail=error.detail)

    def format(self) -> str:
        """Human-readable rendering used by ReportingClient.error_message()."""
        return f"SOAP RPC Error({self.code}): {self.message}, {self.detail}"

    def __str__(self) -> str:
        return self.format()


@dataclass
class CallResult:
    """
    Outcome of one remote call: either a value or a fault, never both.

    Attributes:
        operation: SOAP operation name
        value: Normalized payload (None on fault)
        fault: Fault returned by the service (None on success)
    """
    operation: str
    value: Any = None
    fault: Optional[Fault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self, default: Any = None) -> Any:
        """Return the value on success, default on fault."""
        return self.value if self.ok else default


# Scalar fields of a SOAPNetworkUsage aggregate, copied verbatim
USAGE_SCALAR_FIELDS = (
    'startTime',
    'startTimeEpoch',
    'endTime',
    'endTimeEpoch',
    'interval',
    'nsamples',
)


def empty_usage_aggregate() -> Dict[str, Any]:
    """Aggregate returned when the service sends no usage result at all."""
    aggregate: Dict[str, Any] = {name: None for name in USAGE_SCALAR_FIELDS}
    aggregate['values'] = []
    return aggregate


@dataclass
class SOAPExchange:
    """
    One request/response round trip, passed to channel hooks.

    Attributes:
        operation: SOAP operation name
        action: SOAP action URI
        url: Endpoint URL
        request_body: Serialized request envelope
        response_body: Raw response body (None when no response was received)
        status_code: HTTP status code (None when no response was received)
        elapsed_ms: Wall time of the HTTP round trip in milliseconds
        fault: Fault raised for this exchange, if any
    """
    operation: str
    action: str
    url: str
    request_body: str
    response_body: Optional[str] = None
    status_code: Optional[int] = None
    elapsed_ms: float = 0.0
    fault: Optional[Fault] = None
