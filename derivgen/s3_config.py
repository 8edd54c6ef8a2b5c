"""
S3Config - Configuration for the s3:// stream wrapper.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional


def _env_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off')


@dataclass
class S3Config:
    """
    S3/MinIO connection settings.
    
    Attributes:
        endpoint: S3 endpoint URL (None for AWS default)
        bucket: Bucket holding the s3:// file system
        prefix: Key prefix inside the bucket ('' for bucket root)
        access_key: Access key ID
        secret_key: Secret access key
        region: Region name
        verify_ssl: Verify TLS certificates
    """
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    prefix: str = ''
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = 'us-east-1'
    verify_ssl: bool = True
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'S3Config':
        """Create configuration from S3_* environment variables (or a given mapping)."""
        env = os.environ if environ is None else environ
        return cls(
            endpoint=env.get('S3_ENDPOINT') or None,
            bucket=env.get('S3_BUCKET') or None,
            prefix=env.get('S3_PREFIX', ''),
            access_key=env.get('S3_ACCESS_KEY') or None,
            secret_key=env.get('S3_SECRET_KEY') or None,
            region=env.get('S3_REGION') or 'us-east-1',
            verify_ssl=_env_bool(env.get('S3_VERIFY_SSL')),
        )
    
    @property
    def enabled(self) -> bool:
        """True when enough is configured to register s3://."""
        return bool(self.endpoint or self.bucket)
    
    def key_for(self, target: str) -> str:
        """Object key for a stream wrapper target path."""
        target = target.lstrip('/')
        prefix = self.prefix.strip('/')
        return f"{prefix}/{target}" if prefix else target
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors."""
        errors = []
        if not self.bucket:
            errors.append("S3_BUCKET is required when S3 is enabled")
        if bool(self.access_key) != bool(self.secret_key):
            errors.append("S3_ACCESS_KEY and S3_SECRET_KEY must be set together")
        return errors
