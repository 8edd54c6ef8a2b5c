"""
S3Client - S3/MinIO operations behind the s3:// stream wrapper.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .s3_config import S3Config


class S3Client:
    """
    Wrapper for S3/MinIO operations.
    
    Keys passed in are stream wrapper targets; the configured prefix is
    added here.
    """
    
    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.
        
        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        
        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            verify=config.verify_ssl
        )
    
    def object_exists(self, key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=self.config.key_for(key))
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise
    
    def download_object(self, key: str) -> bytes:
        """
        Download an object from S3.
        
        Raises:
            FileNotFoundError: If the object does not exist
        """
        try:
            response = self._client.get_object(
                Bucket=self.config.bucket, Key=self.config.key_for(key)
            )
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                raise FileNotFoundError(f"s3://{key}") from e
            raise
        return response['Body'].read()
    
    def upload_object(
        self, 
        key: str, 
        data: bytes, 
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Upload an object to S3."""
        self._client.put_object(
            Bucket=self.config.bucket,
            Key=self.config.key_for(key),
            Body=data,
            ContentType=content_type
        )
