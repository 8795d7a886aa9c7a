"""
Unit tests for the JSON project metadata store.
"""

import json
import pytest

from stack_deployer.core.exceptions import ConfigurationError
from stack_deployer.core.models import StackIdentifiers
from stack_deployer.core.protocols import MetadataStore
from stack_deployer.metadata import ProjectMetadataStore


@pytest.fixture
def metadata_path(tmp_path):
    path = tmp_path / "project-meta.json"
    path.write_text(json.dumps({
        "providers": {
            "awscloudformation": {
                "StackName": "app",
                "DeploymentBucketName": "app-deployment",
            }
        },
        "api": {"MyApi": {"service": "AppSync"}},
        "storage": {"Photos": {"service": "S3"}, "Notes": {"service": "DynamoDB"}},
    }))
    return path


def test_implements_protocol(metadata_path):
    assert isinstance(ProjectMetadataStore(metadata_path), MetadataStore)


def test_read_stack_identifiers(metadata_path):
    identifiers = ProjectMetadataStore(metadata_path).read_stack_identifiers()

    assert identifiers.stack_name == "app"
    assert identifiers.deployment_bucket == "app-deployment"
    assert identifiers.stack_id == ""


def test_missing_file_has_no_identifiers(tmp_path):
    store = ProjectMetadataStore(tmp_path / "missing.json")

    assert store.read_stack_identifiers() == StackIdentifiers()
    assert store.resource_keys() == []


def test_resource_keys_skip_providers(metadata_path):
    keys = ProjectMetadataStore(metadata_path).resource_keys()

    assert sorted(keys) == [("api", "MyApi"), ("storage", "Notes"), ("storage", "Photos")]


def test_write_resource_outputs_overwrites(metadata_path):
    store = ProjectMetadataStore(metadata_path)

    store.write_resource_outputs("api", "MyApi", {"GraphQLAPIIdOutput": "old", "Stale": "x"})
    store.write_resource_outputs("api", "MyApi", {"GraphQLAPIIdOutput": "new"})

    assert store.read_resource_outputs("api", "MyApi") == {"GraphQLAPIIdOutput": "new"}
    # Other resource attributes survive
    assert store.load()["api"]["MyApi"]["service"] == "AppSync"


def test_write_stack_identifiers_keeps_existing_fields(metadata_path):
    store = ProjectMetadataStore(metadata_path)

    store.write_stack_identifiers(StackIdentifiers(stack_name="app", stack_id="arn:stack-id"))

    identifiers = store.read_stack_identifiers()
    assert identifiers.stack_id == "arn:stack-id"
    assert identifiers.deployment_bucket == "app-deployment"


def test_write_stack_identifiers_creates_file(tmp_path):
    store = ProjectMetadataStore(tmp_path / "nested" / "meta.json", provider_name="custom")

    store.write_stack_identifiers(StackIdentifiers(stack_name="app"))

    assert store.load() == {"providers": {"custom": {"StackName": "app"}}}


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "meta.json"
    path.write_text("[1, 2")

    with pytest.raises(ConfigurationError):
        ProjectMetadataStore(path).load()


def test_non_object_raises(tmp_path):
    path = tmp_path / "meta.json"
    path.write_text("[]")

    with pytest.raises(ConfigurationError):
        ProjectMetadataStore(path).load()


@pytest.mark.parametrize("providers", [["awscloudformation"], {"awscloudformation": "app"}])
def test_malformed_providers_section_raises(tmp_path, providers):
    path = tmp_path / "meta.json"
    path.write_text(json.dumps({"providers": providers}))
    store = ProjectMetadataStore(path)

    with pytest.raises(ConfigurationError):
        store.read_stack_identifiers()
    with pytest.raises(ConfigurationError):
        store.write_stack_identifiers(StackIdentifiers(stack_name="app"))
