"""
AWS provider implementation.

AWSProvider creates and manages the family of AWS objects the deployer
needs:
    - SDK clients (boto3 CloudFormation and S3)
    - The CloudFormation stack client used by the controller
    - The S3 artifact uploader used for template uploads

Usage:
    provider = AWSProvider()
    provider.initialize_clients({
        "aws_access_key_id": "...",
        "aws_secret_access_key": "...",
        "aws_region": "eu-central-1"
    })

    stack_client = provider.stack_client()
    uploader = provider.artifact_uploader("my-deployment-bucket")
"""

import stack_deployer.constants as CONSTANTS
from stack_deployer.providers.base import BaseProvider

from .artifacts import S3ArtifactUploader
from .cloudformation import CloudFormationStackClient


class AWSProvider(BaseProvider):
    """
    AWS provider: boto3 clients plus the adapters built on them.

    Attributes:
        name: Always "aws" for this provider
        waiter_delay: Seconds between terminal-status waiter polls
        max_operation_seconds: Upper bound for waits on a stack operation
    """

    name: str = "aws"

    def __init__(
        self,
        waiter_delay: int = CONSTANTS.DEFAULT_WAITER_DELAY_SECONDS,
        max_operation_seconds: int = CONSTANTS.DEFAULT_MAX_OPERATION_SECONDS
    ):
        super().__init__()
        self.waiter_delay = waiter_delay
        self.max_operation_seconds = max_operation_seconds

    def initialize_clients(self, credentials: dict) -> None:
        """
        Initialize boto3 clients.

        Args:
            credentials: AWS credentials dictionary containing:
                - aws_access_key_id: AWS access key (optional)
                - aws_secret_access_key: AWS secret key (optional)
                - aws_region: AWS region (default: "eu-central-1")
        """
        from .clients import create_aws_clients

        self._region = credentials.get("aws_region", CONSTANTS.DEFAULT_AWS_REGION)
        self._clients = create_aws_clients(
            access_key_id=credentials.get("aws_access_key_id"),
            secret_access_key=credentials.get("aws_secret_access_key"),
            region=self._region
        )
        self._initialized = True
        self._log_initialized(self.name)

    def stack_client(self) -> CloudFormationStackClient:
        return CloudFormationStackClient(
            self.clients["cloudformation"],
            waiter_delay=self.waiter_delay,
            max_operation_seconds=self.max_operation_seconds,
        )

    def artifact_uploader(self, bucket_name: str) -> S3ArtifactUploader:
        return S3ArtifactUploader(self.clients["s3"], bucket_name)
