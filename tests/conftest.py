"""Pytest configuration and shared fixtures.

Provides in-memory stand-ins for the identity provider and the completion
provider so the service can be exercised without network access.
"""

import json
import os

# Settings are read at import time; pin the providers before anything imports them.
os.environ["AWS_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["LLM_PROVIDER"] = "bedrock"
os.environ["IDENTITY_PROVIDER"] = "cognito"

import pytest
from loguru import logger

from dreamlens.api.service import DreamAnalysisService
from dreamlens.shared.errors import Unauthorized
from dreamlens.shared.identity import bearer_token
from dreamlens.shared.models import Principal

VALID_TOKEN = "valid-token"

FLIGHT_ANALYSIS = {
    "title": "Flight",
    "interpretation": "Flying over the ocean suggests a wish to rise above current pressures.",
    "mood": "Peaceful",
    "keywords": ["flying", "ocean"],
}


class FakeIdentity:
    """Resolves a fixed set of tokens; records every verify call."""

    def __init__(self, principals=None):
        self.principals = principals if principals is not None else {
            VALID_TOKEN: Principal(id="user-123", email="dreamer@example.com")
        }
        self.calls = []

    def verify(self, authorization):
        self.calls.append(authorization)
        token = bearer_token(authorization)
        if token not in self.principals:
            raise Unauthorized()
        return self.principals[token]


class FakeCompletion:
    """Returns queued raw completions (or raises queued exceptions) in order."""

    model_id = "fake-model"

    def __init__(self, *responses):
        self.responses = list(responses) or [json.dumps(FLIGHT_ANALYSIS)]
        self.calls = []

    def complete(self, dream_content):
        self.calls.append(dream_content)
        item = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def service(identity, completion):
    return DreamAnalysisService(identity, completion, max_request_bytes=1024)


@pytest.fixture
def auth_header():
    return f"Bearer {VALID_TOKEN}"


@pytest.fixture
def log_records():
    """Captures Loguru records emitted while the test runs."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests with mocked dependencies"
    )
