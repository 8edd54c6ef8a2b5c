"""
StreamWrappers - Resolves scheme://target file URIs to storage clients.
"""

import logging
import mimetypes
from typing import Dict, Optional, Union

from .exceptions import StreamWrapperError
from .local_client import LocalClient, LocalConfig
from .s3_client import S3Client
from .site_config import SiteConfig

StorageClient = Union[LocalClient, S3Client]


class StreamWrappers:
    """
    Registry of stream wrappers keyed by URI scheme.

    Each wrapper is a storage client exposing object_exists, download_object
    and upload_object over target paths.
    """

    def __init__(
        self,
        clients: Dict[str, StorageClient],
        default_scheme: str = 'public',
        logger: Optional[logging.Logger] = None
    ):
        self.clients = dict(clients)
        self.default_scheme = default_scheme
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_site_config(
        cls,
        config: SiteConfig,
        logger: Optional[logging.Logger] = None
    ) -> 'StreamWrappers':
        """Register public://, and private:// and s3:// when configured."""
        clients: Dict[str, StorageClient] = {
            'public': LocalClient(LocalConfig(root_path=config.public_path), logger),
        }
        if config.private_path:
            clients['private'] = LocalClient(LocalConfig(root_path=config.private_path), logger)
        if config.s3 is not None:
            clients['s3'] = S3Client(config.s3, logger)
        return cls(clients, default_scheme=config.default_scheme, logger=logger)

    @staticmethod
    def get_scheme(uri: str) -> Optional[str]:
        """Scheme of a URI, or None if it has none."""
        if '://' not in uri:
            return None
        scheme = uri.split('://', 1)[0]
        return scheme or None

    @staticmethod
    def get_target(uri: str) -> str:
        """Path part of a URI, without the scheme and surrounding slashes."""
        if '://' in uri:
            uri = uri.split('://', 1)[1]
        return uri.strip('/\\')

    def is_valid_scheme(self, scheme: Optional[str]) -> bool:
        return scheme is not None and scheme in self.clients

    def get_client(self, uri: str) -> StorageClient:
        """
        Storage client for a URI.

        Raises:
            StreamWrapperError: If the scheme has no registered wrapper
        """
        scheme = self.get_scheme(uri) or self.default_scheme
        try:
            return self.clients[scheme]
        except KeyError:
            raise StreamWrapperError(f"No stream wrapper registered for {scheme}://") from None

    def exists(self, uri: str) -> bool:
        return self.get_client(uri).object_exists(self.get_target(uri))

    def read(self, uri: str) -> bytes:
        """
        Read a file.

        Raises:
            FileNotFoundError: If the file does not exist
            StreamWrapperError: If the scheme has no registered wrapper
        """
        return self.get_client(uri).download_object(self.get_target(uri))

    def write(self, uri: str, data: bytes, content_type: Optional[str] = None) -> None:
        if content_type is None:
            content_type = mimetypes.guess_type(self.get_target(uri))[0] or 'application/octet-stream'
        self.get_client(uri).upload_object(self.get_target(uri), data, content_type)
