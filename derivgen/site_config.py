"""
SiteConfig - Where the Drupal site keeps its config export, files and database.

Values come from an optional INI file, then environment variables, then
command line overrides (applied by the CLI).
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .db_config import DbConfig
from .exceptions import ConfigError
from .local_client import LocalConfig
from .s3_config import S3Config

# INI section/key -> environment variable
INI_KEYS = {
    'site': {
        'config_dir': 'DRUPAL_CONFIG_DIR',
        'public_path': 'DRUPAL_PUBLIC_PATH',
        'private_path': 'DRUPAL_PRIVATE_PATH',
        'default_scheme': 'DRUPAL_DEFAULT_SCHEME',
        'jpeg_quality': 'DRUPAL_JPEG_QUALITY',
    },
    'database': {
        'host': 'DRUPAL_DB_HOST',
        'port': 'DRUPAL_DB_PORT',
        'name': 'DRUPAL_DB_NAME',
        'user': 'DRUPAL_DB_USER',
        'password': 'DRUPAL_DB_PASSWORD',
        'prefix': 'DRUPAL_DB_PREFIX',
        'pool_size': 'DRUPAL_DB_POOL_SIZE',
    },
    's3': {
        'endpoint': 'S3_ENDPOINT',
        'bucket': 'S3_BUCKET',
        'prefix': 'S3_PREFIX',
        'access_key': 'S3_ACCESS_KEY',
        'secret_key': 'S3_SECRET_KEY',
        'region': 'S3_REGION',
        'verify_ssl': 'S3_VERIFY_SSL',
    },
}

SCHEMES = ('public', 'private', 's3')


@dataclass
class SiteConfig:
    """
    Drupal site layout.

    Attributes:
        config_dir: Config sync directory (drush config:export output)
        public_path: Local directory behind public://
        private_path: Local directory behind private:// (None if unused)
        default_scheme: Scheme used for scheme-less file URIs
        jpeg_quality: Quality for JPEG derivatives
        db: Site database settings
        s3: S3 settings for s3:// (None if unused)
    """
    config_dir: str = ''
    public_path: str = 'sites/default/files'
    private_path: Optional[str] = None
    default_scheme: str = 'public'
    jpeg_quality: int = 75
    db: DbConfig = field(default_factory=DbConfig)
    s3: Optional[S3Config] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SiteConfig':
        """Create configuration from environment variables (or a given mapping)."""
        env = os.environ if environ is None else environ
        s3 = S3Config.from_env(env)
        return cls(
            config_dir=env.get('DRUPAL_CONFIG_DIR', ''),
            public_path=env.get('DRUPAL_PUBLIC_PATH') or 'sites/default/files',
            private_path=env.get('DRUPAL_PRIVATE_PATH') or None,
            default_scheme=env.get('DRUPAL_DEFAULT_SCHEME') or 'public',
            jpeg_quality=int(env.get('DRUPAL_JPEG_QUALITY') or 75),
            db=DbConfig.from_env(env),
            s3=s3 if s3.enabled else None,
        )

    @classmethod
    def load(
        cls,
        ini_path: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> 'SiteConfig':
        """
        Load configuration from an INI file overlaid with the environment.

        Args:
            ini_path: Optional INI file with [site], [database] and [s3] sections
            environ: Environment mapping (default: os.environ)

        Raises:
            ConfigError: If the INI file cannot be read or has a bad value
        """
        env = os.environ if environ is None else environ
        values: Dict[str, str] = {}
        if ini_path:
            values.update(read_ini(ini_path))
        values.update({k: v for k, v in env.items() if v != ''})
        try:
            return cls.from_env(values)
        except ValueError as e:
            raise ConfigError(f"Invalid site configuration: {e}") from e

    def validate(self, require_db: bool = True) -> List[str]:
        """Return a list of configuration errors."""
        errors = []
        if not self.config_dir:
            errors.append("Config directory is required (DRUPAL_CONFIG_DIR or --config-dir)")
        elif not Path(self.config_dir).is_dir():
            errors.append(f"Config directory does not exist: {self.config_dir}")
        if self.default_scheme not in SCHEMES:
            errors.append(f"Unknown default scheme: {self.default_scheme}")
        if not 0 < self.jpeg_quality <= 100:
            errors.append(f"JPEG quality must be between 1 and 100, got {self.jpeg_quality}")
        errors.extend(f"public:// {e}" for e in LocalConfig(self.public_path).validate())
        if self.private_path is not None:
            errors.extend(f"private:// {e}" for e in LocalConfig(self.private_path).validate())
        if require_db:
            errors.extend(self.db.validate())
        if self.s3 is not None:
            errors.extend(self.s3.validate())
        return errors


def read_ini(path: str) -> Dict[str, str]:
    """Read an INI site file into environment-variable-keyed values."""
    parser = configparser.ConfigParser()
    try:
        with open(path) as f:
            parser.read_file(f)
    except (OSError, configparser.Error) as e:
        raise ConfigError(f"Cannot read site config {path}: {e}") from e

    values = {}
    for section, keys in INI_KEYS.items():
        if not parser.has_section(section):
            continue
        for key, env_name in keys.items():
            value = parser.get(section, key, fallback=None)
            if value is not None:
                values[env_name] = value
    return values
