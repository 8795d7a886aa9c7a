"""
Template artifact upload to the project's deployment bucket.
"""

import os

import stack_deployer.constants as CONSTANTS
from stack_deployer.logger import logger


class S3ArtifactUploader:
    """
    Uploads local files into a deployment bucket.

    Args:
        s3_client: boto3 S3 client
        bucket_name: Target deployment bucket
    """

    def __init__(self, s3_client, bucket_name: str):
        if not bucket_name:
            raise ValueError("bucket_name is required")
        self.s3 = s3_client
        self.bucket_name = bucket_name

    def upload(self, local_path: str) -> str:
        """
        Upload ``local_path`` under its base name.

        Returns:
            URL of the uploaded object, usable as a CloudFormation TemplateURL.

        Raises:
            botocore.exceptions.ClientError: If the upload fails
        """
        key = os.path.basename(local_path)
        with open(local_path, "rb") as f:
            self.s3.put_object(Bucket=self.bucket_name, Key=key, Body=f)
        logger.info(f"Uploaded {key} to S3 Bucket: {self.bucket_name}")
        return CONSTANTS.S3_TEMPLATE_URL_FORMAT.format(bucket=self.bucket_name, key=key)
