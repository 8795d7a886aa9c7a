import os
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from stack_deployer.core.models import StackEvent

ROOT_STACK_ID = "arn:aws:cloudformation:eu-central-1:123456789012:stack/app/11111111-aaaa-bbbb-cccc-000000000000"
NESTED_STACK_ID = "arn:aws:cloudformation:eu-central-1:123456789012:stack/app-apiMyApi-1ABC/22222222-aaaa-bbbb-cccc-000000000000"


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars():
    """Set mock environment variables to prevent accidental cloud calls."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-central-1"


@pytest.fixture(autouse=True)
def mock_sleep(monkeypatch):
    """Skip time.sleep calls to speed up tests."""
    monkeypatch.setattr("time.sleep", lambda x: None)


@pytest.fixture
def start_time():
    return datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event(start_time):
    """
    Build a StackEvent from an API-shaped payload.

    ``offset`` is the number of seconds after ``start_time`` (negative for
    history from earlier operations).
    """
    def _make(
        event_id,
        offset,
        logical_id="Resource",
        physical_id="physical-id",
        status="CREATE_IN_PROGRESS",
        resource_type="AWS::S3::Bucket",
        stack_id=ROOT_STACK_ID,
        reason=None,
    ):
        payload = {
            "EventId": str(event_id),
            "StackId": stack_id,
            "LogicalResourceId": logical_id,
            "PhysicalResourceId": physical_id,
            "ResourceType": resource_type,
            "ResourceStatus": status,
            "Timestamp": start_time + timedelta(seconds=offset),
        }
        if reason is not None:
            payload["ResourceStatusReason"] = reason
        return StackEvent.from_api(payload)

    return _make


@pytest.fixture
def stack_client():
    """MagicMock StackClient with empty default answers."""
    client = MagicMock()
    client.describe_stack_events.return_value = []
    client.describe_stack_resources.return_value = []
    client.describe_stack_outputs.return_value = {}
    client.stack_exists.return_value = False
    client.create_stack.return_value = ROOT_STACK_ID
    client.update_stack.return_value = ROOT_STACK_ID
    return client


@pytest.fixture
def renderer():
    return MagicMock()


@pytest.fixture
def root_stack_id():
    return ROOT_STACK_ID


@pytest.fixture
def nested_stack_id():
    return NESTED_STACK_ID
