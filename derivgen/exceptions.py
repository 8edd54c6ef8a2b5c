"""
Exceptions raised by derivgen's storage and configuration layers.
"""


class DerivgenError(Exception):
    """Base class for derivgen errors."""


class ConfigError(DerivgenError):
    """Site configuration or config export could not be read."""


class StorageError(DerivgenError):
    """A database-backed storage lookup failed."""


class StorageNotFoundError(StorageError):
    """The entity type or field has no storage table."""


class StreamWrapperError(DerivgenError):
    """A URI uses a scheme with no configured stream wrapper."""


class ImageEffectError(DerivgenError):
    """An image effect has unusable settings or cannot be applied."""
