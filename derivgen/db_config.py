"""
DbConfig - Connection settings for the Drupal site database.
"""

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional


@dataclass
class DbConfig:
    """
    MySQL connection settings.
    
    Attributes:
        host: Database host
        port: Database port
        database: Schema name
        user: User name
        password: Password
        prefix: Drupal table prefix ('' when unprefixed)
        pool_size: Connection pool size
    """
    host: str = 'localhost'
    port: int = 3306
    database: str = ''
    user: str = ''
    password: str = ''
    prefix: str = ''
    pool_size: int = 4
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DbConfig':
        """Create configuration from DRUPAL_DB_* environment variables (or a given mapping)."""
        env = os.environ if environ is None else environ
        return cls(
            host=env.get('DRUPAL_DB_HOST', 'localhost'),
            port=int(env.get('DRUPAL_DB_PORT', '3306')),
            database=env.get('DRUPAL_DB_NAME', ''),
            user=env.get('DRUPAL_DB_USER', ''),
            password=env.get('DRUPAL_DB_PASSWORD', ''),
            prefix=env.get('DRUPAL_DB_PREFIX', ''),
            pool_size=int(env.get('DRUPAL_DB_POOL_SIZE', '4')),
        )
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors."""
        errors = []
        if not self.database:
            errors.append("Database name is required (DRUPAL_DB_NAME)")
        if not self.user:
            errors.append("Database user is required (DRUPAL_DB_USER)")
        if self.pool_size < 1:
            errors.append(f"Pool size must be at least 1, got {self.pool_size}")
        return errors
