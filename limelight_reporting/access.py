"""
Access token lifecycle for the Reporting Service.

getAccess returns a SOAPAccess structure that every later call must send
back verbatim, wrapped under a per-operation parameter name.
"""

import logging
from typing import Dict, Optional

from .errors import NotAuthenticatedError, SOAPFaultError, UnknownOperationError
from .models import TYPE_ACCESS, CallResult, Fault, SOAPParam
from .operations import get_operation_config
from .request_builder import RequestBuilder
from .response_normalizer import ResponseNormalizer

logger = logging.getLogger(__name__)


GET_ACCESS = 'getAccess'
EMPTY_TOKEN_FAULT_CODE = 'Client.EmptyAccess'


class AccessTokenManager:
    """
    Holds the current access token and binds it into authenticated calls.

    Lifetime: set by a successful authenticate(), replaced only by the next
    successful authenticate(), never persisted.
    """

    def __init__(self, channel):
        """
        Args:
            channel: Object exposing call(operation, parameters) (e.g. SOAPClient)
        """
        self.channel = channel
        self._token: Optional[Dict[str, str]] = None

    @property
    def token(self) -> Optional[Dict[str, str]]:
        return dict(self._token) if self._token else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def authenticate(self, username: str, password: str) -> CallResult:
        """
        Call getAccess and store the returned token.

        A failed attempt leaves any previously stored token in place.

        Returns:
            CallResult with the token as value, or the fault
        """
        parameters = RequestBuilder.get_access(username, password)
        try:
            payload = self.channel.call(GET_ACCESS, parameters)
        except SOAPFaultError as e:
            return CallResult(GET_ACCESS, fault=Fault.from_error(e))

        token = ResponseNormalizer.access_token(payload)
        if not token:
            return CallResult(
                GET_ACCESS,
                fault=Fault(EMPTY_TOKEN_FAULT_CODE, "getAccess returned no access token", ''),
            )

        self._token = token
        logger.debug(f"Access token stored ({len(token)} fields)")
        return CallResult(GET_ACCESS, value=dict(token))

    def bind(self, operation: str) -> SOAPParam:
        """
        Wrap the token under the parameter name required by an operation.

        Args:
            operation: SOAP operation name

        Returns:
            SOAPParam typed types:SOAPAccess, one string child per token field

        Raises:
            UnknownOperationError: If operation takes no access token or is unknown
            NotAuthenticatedError: If no token has been obtained yet
        """
        config = get_operation_config(operation)
        if not config.requires_access:
            raise UnknownOperationError(operation)
        if not self._token:
            raise NotAuthenticatedError(
                f"{operation} requires an access token; call authenticate() first"
            )
        return SOAPParam.struct(config.access_param, TYPE_ACCESS, self._token)

    def clear(self) -> None:
        """Forget the current token."""
        self._token = None
