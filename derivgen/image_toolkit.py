"""
ImageToolkit - Decodes source images and encodes derivatives with Pillow.
"""

import io
import logging
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError


class ImageToolkit:
    """
    Pillow-backed image toolkit.

    Output format follows the derivative's file extension.
    """

    FORMATS = {
        'jpg': ('JPEG', 'image/jpeg'),
        'jpeg': ('JPEG', 'image/jpeg'),
        'png': ('PNG', 'image/png'),
        'gif': ('GIF', 'image/gif'),
        'webp': ('WEBP', 'image/webp'),
    }

    def __init__(
        self,
        jpeg_quality: int = 75,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize toolkit.

        Args:
            jpeg_quality: Quality for JPEG and WebP output (default: 75)
            logger: Optional logger instance
        """
        self.jpeg_quality = jpeg_quality
        self.logger = logger or logging.getLogger(__name__)

    def is_supported(self, extension: str) -> bool:
        return extension.lower().lstrip('.') in self.FORMATS

    def load(self, data: bytes) -> Optional[Image.Image]:
        """
        Decode image bytes.

        Returns:
            The decoded image, or None if the data is not a readable image
        """
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
            return img
        except (UnidentifiedImageError, OSError) as e:
            self.logger.debug(f"Cannot decode image: {e}")
            return None

    def encode(self, img: Image.Image, extension: str) -> Tuple[bytes, str]:
        """
        Encode an image for the given derivative extension.

        Args:
            img: Image to encode
            extension: Target extension (e.g. 'jpg', '.webp')

        Returns:
            Tuple of (image_bytes, content_type)

        Raises:
            ValueError: If the extension has no supported output format
        """
        ext = extension.lower().lstrip('.')
        if ext not in self.FORMATS:
            raise ValueError(f"Unsupported derivative format: {extension}")
        output_format, content_type = self.FORMATS[ext]

        output = io.BytesIO()
        if output_format == 'JPEG':
            img = self._convert_color_mode(img)
            img.save(output, format='JPEG', quality=self.jpeg_quality, optimize=True)
        elif output_format == 'PNG':
            img.save(output, format='PNG', optimize=True)
        elif output_format == 'GIF':
            img.save(output, format='GIF')
        else:
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA' if 'A' in img.getbands() else 'RGB')
            img.save(output, format='WEBP', quality=self.jpeg_quality)

        return output.getvalue(), content_type

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white for formats without alpha."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img
