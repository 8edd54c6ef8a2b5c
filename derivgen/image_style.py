"""
ImageStyle - Maps source images to derivative URIs and materializes them.
"""

import logging
import posixpath
from typing import List, Optional

from .exceptions import ImageEffectError
from .image_effects import ImageEffect
from .image_toolkit import ImageToolkit
from .stream_wrappers import StreamWrappers


class ImageStyle:
    """
    A named chain of image effects.

    Derivatives live at {scheme}://styles/{name}/{source_scheme}/{target},
    with the converted extension appended when an effect changes the format.
    """

    def __init__(
        self,
        name: str,
        effects: Optional[List[ImageEffect]] = None,
        label: str = '',
        stream_wrappers: Optional[StreamWrappers] = None,
        toolkit: Optional[ImageToolkit] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize image style.

        Args:
            name: Machine name of the style
            effects: Effects to apply (sorted by weight here)
            label: Human-readable label
            stream_wrappers: File system access for sources and derivatives
            toolkit: Image toolkit for decoding and encoding
            logger: Optional logger instance
        """
        self.name = name
        self.label = label or name
        self.effects = sorted(effects or [], key=lambda e: e.weight)
        self.stream_wrappers = stream_wrappers
        self.toolkit = toolkit or ImageToolkit(logger=logger)
        self.logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"ImageStyle({self.name!r}, effects={len(self.effects)})"

    def get_derivative_extension(self, extension: str) -> str:
        """Extension of derivatives made from a source with this extension."""
        for effect in self.effects:
            extension = effect.derivative_extension(extension)
        return extension

    def build_uri(self, uri: str) -> str:
        """
        Derivative URI for a source URI.

        Examples:
            public://photos/a.jpg -> public://styles/thumb/public/photos/a.jpg
            private://a.png with image_convert to webp
                -> private://styles/thumb/private/a.png.webp
        """
        wrappers = self.stream_wrappers
        scheme = StreamWrappers.get_scheme(uri)
        default_scheme = wrappers.default_scheme if wrappers else 'public'
        if scheme is None or (wrappers is not None and not wrappers.is_valid_scheme(scheme)):
            scheme = default_scheme
        path = StreamWrappers.get_target(uri)
        return f"{scheme}://styles/{self.name}/{scheme}/{self._add_extension(path)}"

    def _add_extension(self, path: str) -> str:
        source_ext = posixpath.splitext(path)[1].lstrip('.')
        derivative_ext = self.get_derivative_extension(source_ext)
        if derivative_ext != source_ext:
            return f"{path}.{derivative_ext}"
        return path

    def create_derivative(self, original_uri: str, derivative_uri: str) -> bool:
        """
        Create a derivative image.

        Args:
            original_uri: Source image URI
            derivative_uri: Where to write the derivative (see build_uri)

        Returns:
            True on success, False if the source is missing or unreadable,
            an effect fails, or the derivative format is unsupported

        Raises:
            StreamWrapperError: If either URI uses an unregistered scheme
            Exception: Storage errors from reading or writing propagate
        """
        if self.stream_wrappers is None:
            raise RuntimeError(f"Image style {self.name} has no stream wrappers")

        extension = posixpath.splitext(StreamWrappers.get_target(derivative_uri))[1]
        if not self.toolkit.is_supported(extension):
            self.logger.error(
                f"Unsupported derivative format '{extension}' for style {self.name}: {derivative_uri}"
            )
            return False

        try:
            data = self.stream_wrappers.read(original_uri)
        except FileNotFoundError:
            self.logger.debug(f"Source image not found: {original_uri}")
            return False

        img = self.toolkit.load(data)
        if img is None:
            self.logger.debug(f"Source is not a valid image: {original_uri}")
            return False

        for effect in self.effects:
            try:
                img = effect.apply(img)
            except ImageEffectError as e:
                self.logger.error(
                    f"Image style {self.name}: effect {effect.effect_id} failed on {original_uri}: {e}"
                )
                return False

        derivative_data, content_type = self.toolkit.encode(img, extension)
        self.stream_wrappers.write(derivative_uri, derivative_data, content_type)
        self.logger.debug(f"Created {derivative_uri} ({len(derivative_data)} bytes)")
        return True
