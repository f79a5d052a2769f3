"""
Tests for the render pipeline.

Tests cover:
- Identity render
- Size clamp on large sources
- Crop sampling and out-of-bounds transparency
- Rotation direction and size
- Argument validation
"""

import numpy as np
import pytest
from PIL import Image

from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings, CropRect, SourceImage
from CPS_Libs.ImageEditingLib.render_pipeline import (
    RenderedOutput,
    render,
    rotate_about_center,
)
from conftest import make_gradient


class TestRender:
    """Test render()."""

    def test_identity_render(self, gradient_source):
        """Neutral settings reproduce the source pixels."""
        output = render(gradient_source, AdjustmentSettings())

        assert isinstance(output, RenderedOutput)
        assert output.size == gradient_source.size
        assert output.image.tobytes() == gradient_source.image.tobytes()

    def test_source_not_modified(self, gradient_source):
        """The source image is never written to."""
        before = gradient_source.image.tobytes()

        render(gradient_source, AdjustmentSettings(rotate=30, invert=100, blur=2))

        assert gradient_source.image.tobytes() == before

    def test_large_source_clamped(self, make_source):
        """A 3200x1600 source renders at 1600x800."""
        source = make_source(3200, 1600)

        output = render(source, AdjustmentSettings())

        assert output.size == (1600, 800)
        assert output.geometry.ratio == 0.5

    def test_custom_max_dimension(self, gradient_source):
        """max_dimension bounds the output."""
        output = render(gradient_source, AdjustmentSettings(), max_dimension=32)

        assert output.size == (32, 24)

    def test_scale(self, gradient_source):
        """Scale resizes the output."""
        output = render(gradient_source, AdjustmentSettings(scale=0.5))

        assert output.size == (32, 24)

    def test_crop_samples_region(self, gradient_source):
        """The bottom-right quarter crop starts at the source center."""
        settings = AdjustmentSettings(crop=CropRect(0.5, 0.5, 0.5, 0.5))

        output = render(gradient_source, settings)

        assert output.size == (32, 24)
        expected = np.array(gradient_source.pixel(32, 24), dtype=int)
        actual = np.array(output.image.getpixel((0, 0)), dtype=int)
        assert np.abs(expected - actual).max() <= 1

    def test_degenerate_crop(self, gradient_source):
        """A zero-size crop still renders at least 1x1."""
        settings = AdjustmentSettings(crop=CropRect(0.5, 0.5, 0, 0))

        output = render(gradient_source, settings)

        assert output.width >= 1
        assert output.height >= 1

    def test_crop_past_edge_is_transparent(self, make_source):
        """The part of the crop beyond the image is left transparent."""
        source = make_source(40, 30, color=(255, 0, 0, 255))
        settings = AdjustmentSettings(crop=CropRect(0.5, 0, 1, 1))

        output = render(source, settings)

        assert output.size == (40, 30)
        assert output.image.getpixel((5, 15)) == (255, 0, 0, 255)
        assert output.image.getpixel((35, 15))[3] == 0

    def test_rotation_keeps_size(self, gradient_source):
        """Rotation never changes the output size."""
        output = render(gradient_source, AdjustmentSettings(rotate=45))

        assert output.size == gradient_source.size

    def test_rotation_leaves_corners_transparent(self, make_source):
        """Corners uncovered by a 45 degree rotation are transparent."""
        source = make_source(40, 40, color=(0, 0, 255, 255))

        output = render(source, AdjustmentSettings(rotate=45))

        assert output.image.getpixel((0, 0))[3] == 0
        assert output.image.getpixel((20, 20)) == (0, 0, 255, 255)

    def test_rotation_is_clockwise(self):
        """Positive degrees rotate clockwise: left half moves to the top."""
        image = Image.new("RGBA", (40, 40), (0, 0, 255, 255))
        image.paste((255, 0, 0, 255), (0, 0, 20, 40))
        source = SourceImage("img", "halves.png", image)

        output = render(source, AdjustmentSettings(rotate=90))

        top = output.image.getpixel((20, 5))
        bottom = output.image.getpixel((20, 35))
        assert top[0] > 200 and top[2] < 50
        assert bottom[2] > 200 and bottom[0] < 50

    def test_rotated_edges_keep_color(self):
        """Anti-aliased edges fade in alpha only, without darkening."""
        image = Image.new("RGBA", (40, 40), (255, 0, 0, 255))

        rotated = np.array(rotate_about_center(image, 30))

        visible = rotated[..., 3] > 0
        partial = visible & (rotated[..., 3] < 255)
        assert partial.any()
        assert (rotated[visible][:, 0] == 255).all()
        assert (rotated[visible][:, 1:3] == 0).all()

    def test_full_turn_is_noop(self):
        """Multiples of 360 degrees return the image as is."""
        image = make_gradient(8, 8)

        assert rotate_about_center(image, 360) is image
        assert rotate_about_center(image, 0) is image

    def test_filters_applied_after_geometry(self, solid_source):
        """Filters act on the drawn, resized result."""
        output = render(solid_source, AdjustmentSettings(invert=100, scale=0.5))

        assert output.size == (20, 15)
        assert output.image.getpixel((10, 7)) == (127, 127, 127, 255)


class TestRenderErrors:
    """Test argument validation."""

    def test_rejects_non_source(self):
        with pytest.raises(TypeError):
            render(Image.new("RGBA", (4, 4)), AdjustmentSettings())

    def test_rejects_undecoded_source(self):
        source = SourceImage("img", "broken.png", None)

        with pytest.raises(ValueError):
            render(source, AdjustmentSettings())
