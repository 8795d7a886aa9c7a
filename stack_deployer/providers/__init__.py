"""
Cloud provider implementations.

Only AWS is supported: stacks are CloudFormation stacks and deployment
artifacts live in S3.
"""

from .aws import AWSProvider

__all__ = ["AWSProvider"]
