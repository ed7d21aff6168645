"""Shared fixtures: an in-memory stand-in for the remote services."""

import copy
import pytest

from agentcheckout.config import CheckoutConfig
from agentcheckout.models import Recipient, PhysicalAddress


WALLET = "0xagentwallet"


class FakeHTTPClient:
    """Replays scripted responses and records every call.

    Responses are queued per (method, endpoint). Each call pops the next
    one; the last response repeats. An Exception instance is raised instead
    of returned.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, method, endpoint, *responses):
        self.routes.setdefault((method, endpoint), []).extend(responses)
        return self

    def _respond(self, method, endpoint, **kwargs):
        self.calls.append({"method": method, "endpoint": endpoint, **kwargs})
        queue = self.routes.get((method, endpoint))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {endpoint}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)

    def get(self, endpoint, params=None, headers=None):
        return self._respond("GET", endpoint, params=params, headers=headers)

    def post(self, endpoint, data=None, headers=None):
        return self._respond("POST", endpoint, data=data, headers=headers)

    def calls_to(self, method, endpoint):
        return [c for c in self.calls if c["method"] == method and c["endpoint"] == endpoint]

    def close(self):
        self.closed = True


@pytest.fixture
def fake_http():
    """Fresh fake client for the order and wallet services."""
    return FakeHTTPClient()


@pytest.fixture
def recipient():
    return Recipient(
        email="buyer@example.com",
        physical_address=PhysicalAddress(
            name="Ada Buyer",
            line1="1 Main St",
            city="Springfield",
            state="IL",
            postal_code="62701",
            country="US",
        ),
    )


@pytest.fixture
def config(recipient):
    """Config with zero poll interval so polling tests never sleep."""
    return CheckoutConfig(
        api_key="sk_test_key",
        agent_wallet_address=WALLET,
        recipient=recipient,
        poll_max_attempts=5,
        poll_max_attempts_extended=8,
        poll_interval_ms=0,
    )
