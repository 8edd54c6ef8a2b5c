"""Tests for image effects."""

import pytest
from PIL import Image

from derivgen.exceptions import ImageEffectError
from derivgen.image_effects import (
    ConvertEffect,
    CropEffect,
    DesaturateEffect,
    ResizeEffect,
    RotateEffect,
    ScaleAndCropEffect,
    ScaleEffect,
    create_effect,
    parse_anchor,
    scale_dimensions,
)


@pytest.fixture
def landscape():
    """A 200x100 RGB image."""
    return Image.new('RGB', (200, 100), color='blue')


class TestScaleDimensions:
    """Tests for scale_dimensions()."""

    def test_width_only(self):
        assert scale_dimensions((200, 100), 100, None) == (100, 50)

    def test_height_only(self):
        assert scale_dimensions((200, 100), None, 50) == (100, 50)

    def test_fits_box(self):
        """Test the limiting side wins."""
        assert scale_dimensions((200, 100), 100, 100) == (100, 50)
        assert scale_dimensions((100, 200), 100, 100) == (50, 100)

    def test_no_upscale(self):
        """Test enlarging returns None without upscale."""
        assert scale_dimensions((200, 100), 400, None) is None

    def test_upscale(self):
        assert scale_dimensions((200, 100), 400, None, upscale=True) == (400, 200)


class TestParseAnchor:
    """Tests for parse_anchor()."""

    def test_anchors(self):
        assert parse_anchor('left-top') == (0.0, 0.0)
        assert parse_anchor('center-center') == (0.5, 0.5)
        assert parse_anchor('right-bottom') == (1.0, 1.0)

    def test_invalid(self):
        with pytest.raises(ImageEffectError):
            parse_anchor('middle')


class TestEffects:
    """Tests for the effect classes."""

    def test_scale(self, landscape):
        assert ScaleEffect({'width': 50}).apply(landscape).size == (50, 25)

    def test_scale_keeps_small_image(self, landscape):
        """Test a scale larger than the source leaves it alone."""
        assert ScaleEffect({'width': 500, 'upscale': False}).apply(landscape).size == (200, 100)

    def test_scale_needs_dimension(self, landscape):
        with pytest.raises(ImageEffectError):
            ScaleEffect({}).apply(landscape)

    def test_resize(self, landscape):
        """Test resize ignores the aspect ratio."""
        assert ResizeEffect({'width': 30, 'height': 40}).apply(landscape).size == (30, 40)

    def test_resize_invalid(self, landscape):
        with pytest.raises(ImageEffectError):
            ResizeEffect({'width': 'wide', 'height': 40}).apply(landscape)

    def test_scale_and_crop(self, landscape):
        assert ScaleAndCropEffect({'width': 50, 'height': 50}).apply(landscape).size == (50, 50)

    def test_crop_anchor(self):
        """Test crop takes the anchored region."""
        img = Image.new('RGB', (100, 100), 'white')
        img.paste((255, 0, 0), (50, 50, 100, 100))

        cropped = CropEffect({'width': 50, 'height': 50, 'anchor': 'right-bottom'}).apply(img)

        assert cropped.size == (50, 50)
        assert cropped.getpixel((10, 10)) == (255, 0, 0)

    def test_desaturate(self, landscape):
        assert DesaturateEffect().apply(landscape).mode == 'L'

    def test_desaturate_keeps_alpha(self):
        img = Image.new('RGBA', (10, 10), (255, 0, 0, 100))

        result = DesaturateEffect().apply(img)

        assert result.mode == 'LA'
        assert result.getpixel((0, 0))[1] == 100

    def test_rotate_expands(self, landscape):
        """Test a quarter turn swaps the dimensions."""
        rotated = RotateEffect({'degrees': 90, 'bgcolor': '#FFFFFF'}).apply(landscape)

        assert rotated.size == (100, 200)

    def test_rotate_transparent(self, landscape):
        rotated = RotateEffect({'degrees': 45}).apply(landscape)

        assert rotated.mode == 'RGBA'
        assert rotated.getpixel((0, 0))[3] == 0

    def test_rotate_bad_color(self, landscape):
        with pytest.raises(ImageEffectError):
            RotateEffect({'degrees': 10, 'bgcolor': 'not-a-colour'}).apply(landscape)

    def test_convert_extension(self):
        effect = ConvertEffect({'extension': 'webp'})

        assert effect.derivative_extension('jpg') == 'webp'
        assert ConvertEffect({}).derivative_extension('jpg') == 'jpg'


class TestCreateEffect:
    """Tests for create_effect()."""

    def test_known(self):
        effect = create_effect({'id': 'image_scale', 'weight': '3', 'uuid': 'u1', 'data': {'width': 5}})

        assert isinstance(effect, ScaleEffect)
        assert effect.weight == 3
        assert effect.data == {'width': 5}

    def test_unknown(self, caplog):
        """Test unsupported effects are logged and ignored."""
        assert create_effect({'id': 'image_watermark'}) is None
        assert any('image_watermark' in r.getMessage() for r in caplog.records)
