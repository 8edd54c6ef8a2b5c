"""
LocalClient - Local filesystem operations behind public:// and private://.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

# Drupal's default file_chmod_file mode, masked by the process umask
FILE_MODE = 0o664


@dataclass
class LocalConfig:
    """
    Local file system settings.
    
    Attributes:
        root_path: Directory that targets are resolved against
    """
    root_path: str
    
    def validate(self) -> List[str]:
        """Return a list of configuration errors."""
        errors = []
        if not self.root_path:
            errors.append("Root path is required")
        elif not os.path.isdir(self.root_path):
            errors.append(f"Root path does not exist or is not a directory: {self.root_path}")
        return errors


class LocalClient:
    """
    Same interface as S3Client, backed by a local directory.
    
    Keys are paths relative to the configured root.
    """
    
    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.root = Path(config.root_path)
        self.logger = logger or logging.getLogger(__name__)
    
    def get_path(self, key: str) -> Path:
        """Absolute path for a key."""
        return self.root / key.lstrip('/')
    
    def object_exists(self, key: str) -> bool:
        """Check if a file exists."""
        return self.get_path(key).is_file()
    
    def download_object(self, key: str) -> bytes:
        """Read a file."""
        return self.get_path(key).read_bytes()
    
    def upload_object(
        self, 
        key: str, 
        data: bytes, 
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Write a file, creating parent directories as needed."""
        path = self.get_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        
        # Readers never see a half-written derivative
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix='.derivgen-')
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.chmod(tmp_name, FILE_MODE & ~current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
        self.logger.debug(f"Wrote {path} ({len(data)} bytes, {content_type})")


def current_umask() -> int:
    """Read the process umask without changing it."""
    mask = os.umask(0)
    os.umask(mask)
    return mask
