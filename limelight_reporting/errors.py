"""
Exception hierarchy for the LimeLight Reporting client.

Remote faults are raised by the SOAP channel and converted into fault state by
ReportingClient. Programmer errors (unknown operation, missing authentication)
propagate to the caller.
"""

from typing import Optional


class ReportingError(Exception):
    """Base exception for all reporting client errors."""
    pass


class SOAPFaultError(ReportingError):
    """
    Exception raised when a SOAP fault is encountered.

    Attributes:
        code: Fault code (e.g. "soap:Receiver")
        message: Fault reason text
        detail: Fault detail text (may be empty)
    """

    def __init__(self, code: str, message: str, detail: Optional[str] = None):
        self.code = code
        self.message = message
        self.detail = detail if detail is not None else ''
        super().__init__(f"SOAP Fault [{code}]: {message}")


class SOAPTransportError(SOAPFaultError):
    """HTTP/connection failure reported by the channel as a fault-like outcome."""

    CODE = 'Transport'

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(self.CODE, message, detail)


class UnknownOperationError(ReportingError, KeyError):
    """Operation name is not part of the supported Reporting Service operation set."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"unknown method name for SOAP RPC: {operation}")

    def __str__(self) -> str:
        return self.args[0]


class NotAuthenticatedError(ReportingError, RuntimeError):
    """An authenticated operation was invoked before a successful authentication."""
    pass
