"""
SOAP Client Module

SOAP 1.2 channel for the LimeLight Reporting Service. Serializes a named
operation with typed parameters into a request envelope, posts it and returns
the parsed <operation>Result payload, or raises SOAPFaultError.

Key Features:
- Typed parameters (xsi:type) including structured types (SOAPAccess, handles)
- Connection pooling and connection-level retry (never retries SOAP faults)
- SOAP 1.2 fault detection (SOAP 1.1 faults are recognised as well)
- XML response parsing to Python dict/list with namespace stripping
- Exchange hooks for request/response tracing

Example Usage:
    from limelight_reporting.soap_client import SOAPClient
    from limelight_reporting.models import SOAPParam

    soap_client = SOAPClient(base_url="http://soap.llnw.net/ReportingService/Service.asmx")

    token = soap_client.call(
        operation="getAccess",
        parameters=[
            SOAPParam("username", "xsd:string", "luxuser"),
            SOAPParam("password", "xsd:string", "luxpass"),
        ],
    )
"""

import logging
import time
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_PROXY, DEFAULT_TYPES_NAMESPACE, DEFAULT_URI, ReportingConfig
from .errors import SOAPFaultError, SOAPTransportError
from .models import Fault, SOAPExchange, SOAPParam
from .tracing import ExchangeHook, track_outbound_api

logger = logging.getLogger(__name__)


SOAP12_ENV_NS = 'http://www.w3.org/2003/05/soap-envelope'
SOAP11_ENV_NS = 'http://schemas.xmlsoap.org/soap/envelope/'
XSI_NS = 'http://www.w3.org/2001/XMLSchema-instance'
XSD_NS = 'http://www.w3.org/2001/XMLSchema'


class SOAPClient:
    """
    SOAP 1.2 channel for Reporting Service operations.

    The channel knows nothing about access tokens or result shapes: callers
    pass the full, ordered parameter list and receive the raw parsed result.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PROXY,
        uri: str = DEFAULT_URI,
        types_namespace: str = DEFAULT_TYPES_NAMESPACE,
        timeout: int = 60,
        retries: int = 3,
        pool_connections: int = 10,
        pool_maxsize: int = 20,
        hooks: Optional[Sequence[ExchangeHook]] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize SOAP channel.

        Args:
            base_url: Service endpoint (e.g., http://soap.llnw.net/ReportingService/Service.asmx)
            uri: Method namespace, also the SOAP action base (e.g., http://www.llnw.com/Reporting)
            types_namespace: Namespace bound to the "types" prefix
            timeout: Request timeout in seconds (default: 60)
            retries: Connection-level retry attempts (default: 3)
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
            hooks: Callables invoked with a SOAPExchange after every round trip
            session: Pre-configured requests.Session (mainly for tests)
        """
        self.base_url = base_url
        self.uri = uri.rstrip('/')
        self.types_namespace = types_namespace
        self.timeout = timeout
        self.retries = retries
        self.hooks: List[ExchangeHook] = list(hooks or [])

        # Create HTTP session with connection pooling
        self.session = session or self._create_session(pool_connections, pool_maxsize)

    @classmethod
    def from_config(cls, config: ReportingConfig, **kwargs) -> 'SOAPClient':
        """Create a channel from ReportingConfig."""
        return cls(
            base_url=config.proxy,
            uri=config.uri,
            types_namespace=config.types_namespace,
            timeout=config.timeout,
            retries=config.retries,
            pool_connections=config.pool_connections,
            pool_maxsize=config.pool_maxsize,
            **kwargs
        )

    def _create_session(self, pool_connections: int, pool_maxsize: int) -> requests.Session:
        """
        Create HTTP session with connection pooling and retry logic.

        Only connection failures and gateway errors are retried; a SOAP fault
        (HTTP 500 with a Fault body) is returned to the caller untouched.

        Returns:
            Configured requests.Session
        """
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=self.retries,
            status_forcelist=[502, 503, 504],
            allowed_methods=["POST"],
            backoff_factor=1,  # Exponential backoff: 1s, 2s, 4s
            raise_on_status=False
        )

        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=pool_connections,
            pool_maxsize=pool_maxsize
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def add_hook(self, hook: ExchangeHook) -> None:
        """Register an exchange hook (no-op if already registered)."""
        if hook not in self.hooks:
            self.hooks.append(hook)

    def remove_hook(self, hook: ExchangeHook) -> None:
        """Unregister an exchange hook (no-op if not registered)."""
        if hook in self.hooks:
            self.hooks.remove(hook)

    def soap_action(self, operation: str) -> str:
        """SOAP action URI for an operation."""
        return f"{self.uri}/{operation}"

    @track_outbound_api(
        service_name="limelight-reporting",
        endpoint_extractor=lambda args, kwargs: kwargs.get('operation', args[1] if len(args) > 1 else 'unknown')
    )
    def call(self, operation: str, parameters: Optional[Sequence[SOAPParam]] = None) -> Any:
        """
        Make SOAP call and return the parsed result payload.

        Args:
            operation: SOAP operation name (e.g., "getAvailableReports")
            parameters: Ordered, typed parameters (access token included by the caller)

        Returns:
            Parsed content of <operation>Result: dict for structures, list for
            repeated elements, str for simple values, None when absent or nil

        Raises:
            SOAPFaultError: If SOAP fault is encountered
            SOAPTransportError: If the HTTP exchange fails or the body is not a SOAP envelope
        """
        action = self.soap_action(operation)
        envelope = self._build_soap_envelope(operation, parameters or [])

        # SOAP 1.2 carries the action inside the Content-Type header
        headers = {
            "Content-Type": f'application/soap+xml; charset=utf-8; action="{action}"',
        }

        exchange = SOAPExchange(
            operation=operation,
            action=action,
            url=self.base_url,
            request_body=envelope,
        )

        start = time.monotonic()
        try:
            try:
                response = self.session.post(
                    self.base_url,
                    data=envelope.encode('utf-8'),
                    headers=headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                raise SOAPTransportError(f"{type(e).__name__}: {e}", detail=self.base_url) from e
            finally:
                exchange.elapsed_ms = (time.monotonic() - start) * 1000

            exchange.status_code = response.status_code
            exchange.response_body = response.text

            return self._parse_soap_response(
                response.content,
                operation=operation,
                status_code=response.status_code
            )
        except SOAPFaultError as e:
            exchange.fault = Fault.from_error(e)
            raise
        finally:
            self._run_hooks(exchange)

    def _run_hooks(self, exchange: SOAPExchange) -> None:
        for hook in self.hooks:
            try:
                hook(exchange)
            except Exception as e:
                # Hook errors are logged, never raised
                logger.warning(f"SOAP exchange hook {hook!r} failed: {e}")

    def _build_soap_envelope(self, operation: str, parameters: Sequence[SOAPParam]) -> str:
        """
        Build SOAP 1.2 envelope with all parameters.

        Args:
            operation: SOAP operation name
            parameters: Typed parameters (including access token)

        Returns:
            SOAP XML envelope as string
        """
        param_xml = "".join(self._param_xml(param, indent=6) for param in parameters)

        envelope = f"""<?xml version="1.0" encoding="utf-8"?>
<soap12:Envelope xmlns:xsi="{XSI_NS}"
                 xmlns:xsd="{XSD_NS}"
                 xmlns:soap12="{SOAP12_ENV_NS}"
                 xmlns:tns="{self.uri}"
                 xmlns:types="{self.types_namespace}">
  <soap12:Body>
    <tns:{operation}>
{param_xml}    </tns:{operation}>
  </soap12:Body>
</soap12:Envelope>"""

        return envelope

    def _param_xml(self, param: SOAPParam, indent: int) -> str:
        """Serialize one parameter (recursively for structured types)."""
        pad = " " * indent
        if param.is_struct:
            children = "".join(self._param_xml(child, indent + 2) for child in param.value)
            return f'{pad}<{param.name} xsi:type="{param.type}">\n{children}{pad}</{param.name}>\n'
        if param.value is None:
            return f'{pad}<{param.name} xsi:nil="true"/>\n'
        return f'{pad}<{param.name} xsi:type="{param.type}">{_escape(param.value)}</{param.name}>\n'

    def _parse_soap_response(
        self,
        response_xml: bytes,
        operation: str,
        status_code: int = 200
    ) -> Any:
        """
        Parse SOAP XML response to the Python value of <operation>Result.

        Args:
            response_xml: SOAP response XML bytes
            operation: SOAP operation name
            status_code: HTTP status code of the response

        Returns:
            Parsed result payload (None when the result element is absent)

        Raises:
            SOAPFaultError: If SOAP fault is present
            SOAPTransportError: If the body is not XML, or HTTP failed without a fault
        """
        try:
            root = ET.fromstring(response_xml)
        except ET.ParseError as e:
            snippet = response_xml[:200].decode('utf-8', errors='replace') if response_xml else ''
            if status_code >= 400:
                raise SOAPTransportError(f"HTTP {status_code}", detail=snippet) from e
            raise SOAPTransportError(f"Invalid XML response for {operation}", detail=snippet) from e

        # Check for SOAP fault (servers answer faults with HTTP 500)
        self._check_soap_fault(root)

        if status_code >= 400:
            raise SOAPTransportError(f"HTTP {status_code}", detail=f"{operation} returned no SOAP fault")

        self._strip_namespaces(root)

        result = root.find(f".//{operation}Result")
        if result is None:
            logger.debug(f"{operation}: no {operation}Result element in response")
            return None

        return element_to_value(result)

    def _strip_namespaces(self, root: ET.Element) -> None:
        """
        Remove XML namespaces from all elements in-place.

        Args:
            root: XML root element
        """
        for elem in root.iter():
            if "}" in elem.tag:
                elem.tag = elem.tag.split("}", 1)[1]

    def _check_soap_fault(self, root: ET.Element) -> None:
        """
        Check for SOAP fault and raise exception if found.

        Args:
            root: XML root element

        Raises:
            SOAPFaultError: If SOAP fault is present
        """
        fault = root.find(f".//{{{SOAP12_ENV_NS}}}Fault")
        if fault is not None:
            code = fault.findtext(f"{{{SOAP12_ENV_NS}}}Code/{{{SOAP12_ENV_NS}}}Value", "Unknown")
            message = fault.findtext(f"{{{SOAP12_ENV_NS}}}Reason/{{{SOAP12_ENV_NS}}}Text", "Unknown error")
            detail = _element_text(fault.find(f"{{{SOAP12_ENV_NS}}}Detail"))
            raise SOAPFaultError(code.strip(), message.strip(), detail)

        fault = root.find(f".//{{{SOAP11_ENV_NS}}}Fault")
        if fault is not None:
            # SOAP 1.1 children are unqualified
            code = fault.findtext("faultcode", "Unknown")
            message = fault.findtext("faultstring", "Unknown error")
            detail = _element_text(fault.find("detail"))
            raise SOAPFaultError(code.strip(), message.strip(), detail)

    def close(self):
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def element_to_value(elem: ET.Element) -> Any:
    """
    Convert a namespace-stripped element to plain Python data.

    - xsi:nil elements become None
    - leaf elements become their text ('' when empty)
    - elements with children become dicts; a tag repeated among siblings
      becomes a list in document order, a tag seen once stays a single value
    """
    if _is_nil(elem):
        return None

    children = list(elem)
    if not children:
        return elem.text if elem.text is not None else ''

    data: Dict[str, Any] = {}
    for child in children:
        value = element_to_value(child)
        if child.tag in data:
            existing = data[child.tag]
            if isinstance(existing, _Repeated):
                existing.append(value)
            else:
                data[child.tag] = _Repeated([existing, value])
        else:
            data[child.tag] = value

    return {key: list(value) if isinstance(value, _Repeated) else value for key, value in data.items()}


class _Repeated(list):
    """Marker for siblings collected under one tag."""


def _is_nil(elem: ET.Element) -> bool:
    for key, value in elem.attrib.items():
        if key == 'nil' or key.endswith('}nil'):
            return str(value).lower() in ('true', '1')
    return False


def _element_text(elem: Optional[ET.Element]) -> str:
    """Flatten an element (e.g. fault Detail) to its stripped text content."""
    if elem is None:
        return ''
    return " ".join(part.strip() for part in elem.itertext() if part and part.strip())


def _escape(value: Any) -> str:
    """Escape XML special characters in text content."""
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
