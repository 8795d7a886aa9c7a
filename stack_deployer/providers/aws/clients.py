"""
AWS SDK client initialization.

We return a dictionary of clients rather than individual module-level
variables. This allows the provider to manage client lifecycle and
enables easy testing via mocking.

Usage:
    from stack_deployer.providers.aws.clients import create_aws_clients

    clients = create_aws_clients(
        access_key_id="...",
        secret_access_key="...",
        region="eu-central-1"
    )
    # clients["cloudformation"], clients["s3"]
"""

from typing import Dict, Any, Optional
import boto3


def create_aws_clients(
    access_key_id: Optional[str],
    secret_access_key: Optional[str],
    region: str
) -> Dict[str, Any]:
    """
    Create and return the boto3 clients needed for stack deployment.

    Empty credentials fall back to boto3's default credential chain
    (environment, shared config, instance role).

    Args:
        access_key_id: AWS access key ID
        secret_access_key: AWS secret access key
        region: AWS region (e.g., "eu-central-1")

    Returns:
        Dictionary mapping service names to boto3 client instances.

    Client Keys:
        - cloudformation: stack control plane
        - s3: template artifact upload
    """
    config = {"region_name": region}
    if access_key_id and secret_access_key:
        config["aws_access_key_id"] = access_key_id
        config["aws_secret_access_key"] = secret_access_key

    return {
        "cloudformation": boto3.client("cloudformation", **config),
        "s3": boto3.client("s3", **config),
    }
