"""Pytest fixtures for limelight_reporting tests."""
import pytest

from limelight_reporting import ReportingClient, SOAPFaultError


class FakeChannel:
    """In-memory channel: records calls and replays queued outcomes per operation."""

    def __init__(self):
        self.calls = []
        self.outcomes = {}

    def queue(self, operation, outcome):
        """Queue a payload (or an exception to raise) for the next call of operation."""
        self.outcomes.setdefault(operation, []).append(outcome)

    def call(self, operation, parameters=None):
        self.calls.append((operation, list(parameters or [])))
        pending = self.outcomes.get(operation)
        outcome = pending.pop(0) if pending else None
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def params_of(self, index=-1):
        return self.calls[index][1]


@pytest.fixture
def access_token():
    """SOAPAccess structure as returned by getAccess."""
    return {'username': 'luxuser', 'token': 'abc123', 'expires': '1331000000'}


@pytest.fixture
def report():
    return {'desc': 'HTTP traffic', 'name': 'HTTP', 'id': '17', 'key': 'rpt-17'}


@pytest.fixture
def time_range():
    return {
        'sum_id': '3', 'desc': 'Last day', 'name': 'daily', 'type': 'd',
        'key': 'tr-3', 'start': '1330585200', 'end': '1330671600',
    }


@pytest.fixture
def category():
    return {'desc': 'By day', 'name': 'Day', 'id': '1', 'key': 'cat-1'}


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def client(channel):
    """Unauthenticated client over the fake channel."""
    return ReportingClient(username='luxuser', password='luxpass', channel=channel)


@pytest.fixture
def authed_client(client, channel, access_token):
    """Client that already holds an access token."""
    channel.queue('getAccess', access_token)
    assert client.authenticate() == access_token
    channel.calls.clear()
    return client


@pytest.fixture
def fault():
    return SOAPFaultError('soap:Receiver', 'Server was unable to process request.', 'Invalid report key')


class HookedFakeChannel(FakeChannel):
    """Fake channel that also accepts exchange hooks."""

    def __init__(self):
        super().__init__()
        self.hooks = []

    def add_hook(self, hook):
        if hook not in self.hooks:
            self.hooks.append(hook)

    def remove_hook(self, hook):
        if hook in self.hooks:
            self.hooks.remove(hook)


@pytest.fixture
def hooked_channel():
    return HookedFakeChannel()
