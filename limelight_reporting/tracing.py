"""
Outbound call tracing for the SOAP channel.

Provides:
- track_outbound_api() decorator timing channel calls and logging the outcome
- log_exchange() hook dumping request/response envelopes at DEBUG level
- sanitize() to mask credentials before anything is logged

Hooks are plain callables taking a SOAPExchange; SOAPClient invokes every
registered hook after each round trip.
"""

import functools
import logging
import re
import time
from typing import Callable, Optional

from .models import SOAPExchange

logger = logging.getLogger(__name__)

ExchangeHook = Callable[[SOAPExchange], None]

_SECRET_ELEMENT_RE = re.compile(
    r'(<(?:[\w.-]+:)?(password|token)\b[^>]*>)([^<]*)(</)',
    re.IGNORECASE,
)

# Elements whose every field is an access credential: SOAPAccess-typed
# parameters in requests, and the getAccess result in responses
_ACCESS_STRUCT_RE = re.compile(
    r'(<((?:[\w.-]+:)?[\w.-]+)\b[^>]*\btype="(?:[\w.-]+:)?SOAPAccess"[^>]*(?<!/)>)(.*?)(</\2\s*>)',
    re.DOTALL,
)
_ACCESS_RESULT_RE = re.compile(
    r'(<((?:[\w.-]+:)?getAccessResult)\b[^>]*(?<!/)>)(.*?)(</\2\s*>)',
    re.DOTALL,
)
_FIELD_TEXT_RE = re.compile(r'>([^<]*\S[^<]*)<')

# Upper bound for any message body written to the log
MAX_LOGGED_CHARS = 4000


def _mask_fields(match) -> str:
    body = match.group(3)
    if '<' not in body:
        body = '***' if body.strip() else body
    else:
        body = _FIELD_TEXT_RE.sub('>***<', body)
    return match.group(1) + body + match.group(4)


def sanitize(text: Optional[str], limit: int = MAX_LOGGED_CHARS) -> Optional[str]:
    """Mask credential values (password, token, SOAPAccess fields) and truncate."""
    if not text:
        return text
    masked = _ACCESS_STRUCT_RE.sub(_mask_fields, str(text))
    masked = _ACCESS_RESULT_RE.sub(_mask_fields, masked)
    masked = _SECRET_ELEMENT_RE.sub(r'\1***\4', masked)
    if len(masked) > limit:
        return masked[:limit] + f"... ({len(masked) - limit} more chars)"
    return masked


def log_exchange(exchange: SOAPExchange) -> None:
    """
    Debug hook: log the full request and response of one SOAP exchange.

    Register with SOAPClient.add_hook() or ReportingClient.debug().
    """
    logger.debug(
        f"SOAP request {exchange.operation} -> {exchange.url}\n"
        f"SOAPAction: {exchange.action}\n{sanitize(exchange.request_body)}"
    )
    logger.debug(
        f"SOAP response {exchange.operation} <- HTTP {exchange.status_code} "
        f"({exchange.elapsed_ms:.1f} ms)\n{sanitize(exchange.response_body)}"
    )


def track_outbound_api(service_name: str, endpoint_extractor=None):
    """
    Decorator for tracking outbound API calls on client methods.

    Args:
        service_name: e.g. "limelight-reporting"
        endpoint_extractor: Optional callable(args, kwargs) -> str
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            endpoint = 'unknown'
            if endpoint_extractor:
                try:
                    endpoint = endpoint_extractor(args, kwargs)
                except (IndexError, KeyError, AttributeError):
                    endpoint = 'unknown'

            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.monotonic() - start) * 1000
                logger.info(
                    f"[{service_name}] {endpoint} failed after {elapsed_ms:.1f} ms: "
                    f"{sanitize(str(e), limit=500)}"
                )
                raise

            elapsed_ms = (time.monotonic() - start) * 1000
            logger.debug(f"[{service_name}] {endpoint} succeeded in {elapsed_ms:.1f} ms")
            return result

        return wrapper
    return decorator
