"""
AWS provider package.

Modules:
    clients: boto3 client construction
    cloudformation: CloudFormationStackClient (stack control plane)
    artifacts: S3ArtifactUploader (template upload)
    provider: AWSProvider wiring the above together
"""

from .artifacts import S3ArtifactUploader
from .cloudformation import CloudFormationStackClient
from .provider import AWSProvider

__all__ = ["AWSProvider", "CloudFormationStackClient", "S3ArtifactUploader"]
