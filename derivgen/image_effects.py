"""
Image effects - The core image style effects, implemented with Pillow.

Each effect is built from the `effects` entry of an image style config:

    id: image_scale
    weight: 1
    data: {width: 100, height: 100, upscale: false}
"""

import logging
import random
from typing import Any, Dict, Optional, Tuple, Type

from PIL import Image, ImageColor, ImageOps

from .exceptions import ImageEffectError

RESAMPLE = Image.Resampling.LANCZOS

ANCHOR_OFFSETS = {
    'left': 0.0, 'top': 0.0,
    'center': 0.5,
    'right': 1.0, 'bottom': 1.0,
}


def _dimension(data: Dict[str, Any], key: str, required: bool = True) -> Optional[int]:
    value = data.get(key)
    if value in (None, ''):
        if required:
            raise ImageEffectError(f"Missing {key}")
        return None
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ImageEffectError(f"Invalid {key}: {value!r}") from None
    if value <= 0:
        raise ImageEffectError(f"Invalid {key}: {value}")
    return value


def parse_anchor(anchor: str) -> Tuple[float, float]:
    """Convert 'left-top' / 'center-center' style anchors to Pillow centering."""
    parts = (anchor or 'center-center').split('-')
    if len(parts) != 2:
        raise ImageEffectError(f"Invalid anchor: {anchor!r}")
    x, y = parts
    try:
        return ANCHOR_OFFSETS[x], ANCHOR_OFFSETS[y]
    except KeyError:
        raise ImageEffectError(f"Invalid anchor: {anchor!r}") from None


def scale_dimensions(
    size: Tuple[int, int],
    width: Optional[int],
    height: Optional[int],
    upscale: bool = False
) -> Optional[Tuple[int, int]]:
    """
    Fit (width, height) into the target box keeping the aspect ratio.

    Returns:
        The new size, or None when the image would be enlarged and
        upscaling is off
    """
    orig_w, orig_h = size
    aspect = orig_h / orig_w
    if (width and not height) or (width and height and aspect < height / width):
        height = int(round(width * aspect))
    else:
        width = int(round(height / aspect))

    if not upscale and (width >= orig_w or height >= orig_h):
        return None
    return max(width, 1), max(height, 1)


class ImageEffect:
    """Base class for image style effects."""

    effect_id = ''

    def __init__(self, data: Optional[Dict[str, Any]] = None, weight: int = 0, uuid: str = ''):
        self.data = data or {}
        self.weight = weight
        self.uuid = uuid

    def apply(self, img: Image.Image) -> Image.Image:
        raise NotImplementedError

    def derivative_extension(self, extension: str) -> str:
        """Extension of the derivative given the source extension."""
        return extension

    def __repr__(self) -> str:
        return f"{type(self).__name__}(weight={self.weight}, data={self.data!r})"


class ScaleEffect(ImageEffect):
    effect_id = 'image_scale'

    def apply(self, img: Image.Image) -> Image.Image:
        width = _dimension(self.data, 'width', required=False)
        height = _dimension(self.data, 'height', required=False)
        if not width and not height:
            raise ImageEffectError("Scale needs a width or a height")
        size = scale_dimensions(img.size, width, height, bool(self.data.get('upscale')))
        if size is None:
            return img
        return img.resize(size, RESAMPLE)


class ResizeEffect(ImageEffect):
    effect_id = 'image_resize'

    def apply(self, img: Image.Image) -> Image.Image:
        size = (_dimension(self.data, 'width'), _dimension(self.data, 'height'))
        return img.resize(size, RESAMPLE)


class ScaleAndCropEffect(ImageEffect):
    effect_id = 'image_scale_and_crop'

    def apply(self, img: Image.Image) -> Image.Image:
        size = (_dimension(self.data, 'width'), _dimension(self.data, 'height'))
        centering = parse_anchor(self.data.get('anchor', 'center-center'))
        return ImageOps.fit(img, size, method=RESAMPLE, centering=centering)


class CropEffect(ImageEffect):
    effect_id = 'image_crop'

    def apply(self, img: Image.Image) -> Image.Image:
        width = _dimension(self.data, 'width')
        height = _dimension(self.data, 'height')
        fx, fy = parse_anchor(self.data.get('anchor', 'left-top'))
        x = int(round((img.width - width) * fx))
        y = int(round((img.height - height) * fy))
        return img.crop((x, y, x + width, y + height))


class DesaturateEffect(ImageEffect):
    effect_id = 'image_desaturate'

    def apply(self, img: Image.Image) -> Image.Image:
        gray = ImageOps.grayscale(img)
        if 'A' in img.getbands():
            gray = gray.convert('LA')
            gray.putalpha(img.getchannel('A'))
        return gray


class RotateEffect(ImageEffect):
    effect_id = 'image_rotate'

    def apply(self, img: Image.Image) -> Image.Image:
        try:
            degrees = float(self.data.get('degrees', 0))
        except (TypeError, ValueError):
            raise ImageEffectError(f"Invalid degrees: {self.data.get('degrees')!r}") from None
        if self.data.get('random'):
            limit = int(abs(degrees))
            degrees = random.randint(-limit, limit)

        bgcolor = self.data.get('bgcolor')
        if bgcolor:
            try:
                fill = ImageColor.getrgb(bgcolor)
            except ValueError:
                raise ImageEffectError(f"Invalid bgcolor: {bgcolor!r}") from None
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA' if 'A' in img.getbands() else 'RGB')
        else:
            if img.mode not in ('RGBA', 'LA'):
                img = img.convert('RGBA')
            fill = (0, 0, 0, 0) if img.mode == 'RGBA' else (0, 0)

        # Pillow rotates counter-clockwise
        return img.rotate(-degrees, resample=Image.Resampling.BICUBIC, expand=True, fillcolor=fill)


class ConvertEffect(ImageEffect):
    effect_id = 'image_convert'

    def apply(self, img: Image.Image) -> Image.Image:
        return img

    def derivative_extension(self, extension: str) -> str:
        target = str(self.data.get('extension') or '').lower().lstrip('.')
        return target or extension


EFFECTS: Dict[str, Type[ImageEffect]] = {
    cls.effect_id: cls
    for cls in (
        ScaleEffect, ResizeEffect, ScaleAndCropEffect, CropEffect,
        DesaturateEffect, RotateEffect, ConvertEffect,
    )
}


def create_effect(
    config: Dict[str, Any],
    logger: Optional[logging.Logger] = None
) -> Optional[ImageEffect]:
    """
    Build an effect from its config entry.

    Returns:
        The effect, or None if the effect id is not supported
    """
    logger = logger or logging.getLogger(__name__)
    effect_id = config.get('id', '')
    effect_cls = EFFECTS.get(effect_id)
    if effect_cls is None:
        logger.warning(f"Unsupported image effect '{effect_id}' ignored")
        return None
    try:
        weight = int(config.get('weight') or 0)
    except (TypeError, ValueError):
        weight = 0
    return effect_cls(data=config.get('data') or {}, weight=weight, uuid=config.get('uuid', ''))
