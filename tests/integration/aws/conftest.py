import json
import pytest
import boto3
from moto import mock_aws

REGION = "eu-central-1"
DEPLOYMENT_BUCKET = "app-deployment"

ROOT_TEMPLATE = {
    "AWSTemplateFormatVersion": "2010-09-09",
    "Parameters": {
        "DeploymentBucketName": {"Type": "String", "Default": ""},
        "Env": {"Type": "String", "Default": "dev"},
    },
    "Resources": {
        "SiteBucket": {"Type": "AWS::S3::Bucket"},
    },
    "Outputs": {
        "SiteBucketName": {"Value": {"Ref": "SiteBucket"}},
    },
}


@pytest.fixture(scope="function")
def aws():
    """Mocked AWS session with the deployment bucket already created."""
    with mock_aws():
        s3 = boto3.client("s3", region_name=REGION)
        s3.create_bucket(
            Bucket=DEPLOYMENT_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": REGION},
        )
        yield {
            "cloudformation": boto3.client("cloudformation", region_name=REGION),
            "s3": s3,
        }


@pytest.fixture
def root_template():
    return json.loads(json.dumps(ROOT_TEMPLATE))


@pytest.fixture
def template_url(aws, root_template):
    """Upload the root template and return its path-style URL."""
    aws["s3"].put_object(Bucket=DEPLOYMENT_BUCKET, Key="root-stack.json", Body=json.dumps(root_template))
    return f"https://s3.amazonaws.com/{DEPLOYMENT_BUCKET}/root-stack.json"


@pytest.fixture
def project_path(tmp_path, root_template):
    """Project directory with config, metadata and a local root template."""
    project = tmp_path / "app"
    project.mkdir()
    (project / "config_deployer.json").write_text(json.dumps({
        "mode": "DEBUG",
        "poll_interval_seconds": 0.05,
        "max_operation_seconds": 30,
        "waiter_delay_seconds": 1,
        "capabilities": ["CAPABILITY_IAM"],
    }))
    (project / "project-meta.json").write_text(json.dumps({
        "providers": {"awscloudformation": {"DeploymentBucketName": DEPLOYMENT_BUCKET}},
        "hosting": {"Site": {"service": "S3"}},
    }))
    (project / "root-stack.json").write_text(json.dumps(root_template))
    return project
