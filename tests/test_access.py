"""
Unit tests for the access token lifecycle.

Tests AccessTokenManager.authenticate() and the per-operation bind table.
"""
import pytest

from limelight_reporting import (
    AccessTokenManager,
    NotAuthenticatedError,
    SOAPFaultError,
    SOAPParam,
    UnknownOperationError,
)
from limelight_reporting.access import EMPTY_TOKEN_FAULT_CODE
from limelight_reporting.operations import list_operations


SOAP_ACCESS_OPERATIONS = [
    'getAvailableCategories', 'getAvailableTimeRanges', 'getCounterRanges',
    'getCounterSections', 'getCounterUsage', 'getDiskUsage', 'getLiveWMAggregate',
    'getLiveWMCounters', 'getNetworkUsage', 'getNetworkUsageSections',
    'getReportData', 'getReportSummary', 'getStreams',
]


@pytest.fixture
def manager(channel, access_token):
    channel.queue('getAccess', access_token)
    manager = AccessTokenManager(channel)
    assert manager.authenticate('luxuser', 'luxpass').ok
    return manager


class TestBind:
    """Tests for the operation -> parameter name table."""

    @pytest.mark.parametrize('operation', SOAP_ACCESS_OPERATIONS)
    def test_soap_access_operations(self, manager, operation):
        assert manager.bind(operation).name == 'soap_access'

    def test_current_traffic_uses_access_token(self, manager):
        assert manager.bind('getCurrentTraffic').name == 'access_token'

    @pytest.mark.parametrize('operation', ['getAvailableCounters', 'getAvailableReports'])
    def test_user_access_operations(self, manager, operation):
        assert manager.bind(operation).name == 'userAccess'

    def test_bound_parameter_carries_every_token_field(self, manager, access_token):
        param = manager.bind('getReportData')

        assert param.type == 'types:SOAPAccess'
        assert [child.name for child in param.value] == list(access_token)
        assert all(child.type == 'xsd:string' for child in param.value)
        assert {child.name: child.value for child in param.value} == access_token

    @pytest.mark.parametrize('operation', ['getSomething', 'categories', '', 'getAccess'])
    def test_unknown_operation_fails_fast(self, manager, operation):
        with pytest.raises(UnknownOperationError):
            manager.bind(operation)

    def test_bind_before_authentication_raises(self, channel):
        manager = AccessTokenManager(channel)

        with pytest.raises(NotAuthenticatedError):
            manager.bind('getAvailableReports')


class TestAuthenticate:
    """Tests for getAccess handling."""

    def test_sends_username_and_password(self, channel, access_token):
        channel.queue('getAccess', access_token)
        AccessTokenManager(channel).authenticate('luxuser', 'luxpass')

        operation, params = channel.calls[0]
        assert operation == 'getAccess'
        assert params == [
            SOAPParam('username', 'xsd:string', 'luxuser'),
            SOAPParam('password', 'xsd:string', 'luxpass'),
        ]

    def test_stores_token(self, manager, access_token):
        assert manager.is_authenticated
        assert manager.token == access_token

    def test_token_values_are_strings(self, channel):
        channel.queue('getAccess', {'id': '5', 'expires': None})
        manager = AccessTokenManager(channel)

        result = manager.authenticate('u', 'p')

        assert result.value == {'id': '5', 'expires': ''}

    def test_fault_returns_fault_and_no_token(self, channel):
        channel.queue('getAccess', SOAPFaultError('soap:Sender', 'Invalid login', 'bad password'))
        manager = AccessTokenManager(channel)

        result = manager.authenticate('luxuser', 'wrong')

        assert not result.ok
        assert result.fault.code == 'soap:Sender'
        assert result.value is None
        assert not manager.is_authenticated

    def test_failed_reauthentication_keeps_previous_token(self, manager, channel, access_token):
        channel.queue('getAccess', SOAPFaultError('soap:Receiver', 'Down', ''))

        assert not manager.authenticate('luxuser', 'luxpass').ok
        assert manager.token == access_token

    def test_successful_reauthentication_replaces_token(self, manager, channel):
        channel.queue('getAccess', {'token': 'fresh'})

        manager.authenticate('luxuser', 'luxpass')

        assert manager.token == {'token': 'fresh'}

    @pytest.mark.parametrize('payload', [None, '', {}])
    def test_empty_token_is_a_fault(self, channel, payload):
        channel.queue('getAccess', payload)
        manager = AccessTokenManager(channel)

        result = manager.authenticate('luxuser', 'luxpass')

        assert result.fault.code == EMPTY_TOKEN_FAULT_CODE
        assert not manager.is_authenticated

    def test_token_property_is_a_copy(self, manager):
        manager.token['token'] = 'tampered'

        assert manager.token['token'] == 'abc123'


def test_every_registered_operation_binds_except_get_access(manager):
    operations = list_operations()

    assert len(operations) == 17
    for operation in operations:
        if operation == 'getAccess':
            continue
        assert manager.bind(operation).name in ('soap_access', 'access_token', 'userAccess')
