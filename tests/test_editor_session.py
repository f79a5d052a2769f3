"""
Tests for the editor session.

Tests cover:
- Preview renders triggered by state changes
- Crop draft staging and apply
- Image selection and removal
- Export, share and batch export through the session
- Slider metadata used by the session
"""

import io

import pytest
from PIL import Image

from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings, CropRect, SourceImage
from CPS_Libs.SessionLib.controls import (
    ADJUST_SLIDERS,
    CROP_INPUTS,
    TRANSFORM_SLIDERS,
    format_value,
    get_slider,
)
from CPS_Libs.SessionLib.editor_session import EditorSession
from CPS_Libs.SessionLib.image_collection import ImageCollection
from CPS_Libs.constants import NOTICE_NOTHING_TO_EXPORT, NOTICE_SHARE_UNSUPPORTED


def png(name, size=(24, 16), color="red"):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return name, buffer.getvalue()


@pytest.fixture
def previews():
    return []


@pytest.fixture
def session(previews):
    return EditorSession(preview_listener=previews.append, clock=lambda: 1700000000.5)


@pytest.fixture
def loaded_session(session):
    session.add_files([png("a.png"), png("b.png", (10, 10), "blue"), png("c.png", (8, 4))])
    return session


class TestPreview:
    """Preview rendering."""

    def test_first_images_render_once(self, session, previews):
        session.add_files([png("a.png"), png("b.png")])

        assert len(previews) == 1
        assert previews[0].size == (24, 16)

    def test_adding_more_images_does_not_rerender(self, loaded_session, previews):
        loaded_session.add_files([png("d.png")])

        assert len(previews) == 1

    def test_update_renders(self, loaded_session, previews):
        loaded_session.update("brightness", 150)

        assert len(previews) == 2
        assert loaded_session.settings.brightness == 150

    def test_unchanged_value_skips_render(self, loaded_session, previews):
        loaded_session.update("contrast", 100)

        assert len(previews) == 1

    def test_update_clamps(self, loaded_session):
        settings = loaded_session.update("scale", 10)

        assert settings.scale == 3.0

    def test_update_unknown_field(self, loaded_session):
        with pytest.raises(KeyError):
            loaded_session.update("crop", 0.5)

    def test_apply_preset_renders(self, loaded_session, previews):
        loaded_session.apply_preset("Mono")

        assert len(previews) == 2
        assert loaded_session.settings.grayscale == 100

    def test_no_images_no_render(self, session, previews):
        session.update("brightness", 120)

        assert previews == []
        assert session.render_active() is None

    def test_undecodable_files_ignored(self, session, previews):
        added = session.add_files([("junk.png", b"nope")])

        assert added == []
        assert previews == []


class TestCropDraft:
    """Crop inputs are staged until applied."""

    def test_set_field_does_not_render(self, loaded_session, previews):
        draft = loaded_session.set_crop_field("w", 0.5)

        assert draft.w == 0.5
        assert loaded_session.settings.crop == CropRect()
        assert len(previews) == 1

    def test_non_numeric_becomes_zero(self, loaded_session):
        assert loaded_session.set_crop_field("x", "abc").x == 0.0

    def test_apply_crop(self, loaded_session, previews):
        loaded_session.set_crop_field("w", 0.5)
        loaded_session.set_crop_field("h", 0.5)

        settings = loaded_session.apply_crop()

        assert settings.crop == CropRect(0, 0, 0.5, 0.5)
        assert previews[-1].size == (12, 8)

    def test_reset_draft_keeps_applied_crop(self, loaded_session):
        loaded_session.set_crop_field("w", 0.5)
        loaded_session.apply_crop()

        draft = loaded_session.reset_crop_draft()

        assert draft == CropRect()
        assert loaded_session.settings.crop.w == 0.5

    def test_draft_follows_applied_crop(self, loaded_session):
        loaded_session.set_crop_field("y", 0.25)
        loaded_session.apply_crop()

        assert loaded_session.state.crop_draft == loaded_session.settings.crop


class TestSelection:
    """Active image selection."""

    def test_select_renders_new_image(self, loaded_session, previews):
        loaded_session.select(1)

        assert loaded_session.active_image.name == "b.png"
        assert previews[-1].size == (10, 10)

    def test_select_out_of_range(self, loaded_session):
        with pytest.raises(IndexError):
            loaded_session.select(3)

    def test_settings_survive_selection(self, loaded_session):
        loaded_session.update("sepia", 40)

        loaded_session.select(2)

        assert loaded_session.settings.sepia == 40

    def test_remove_active_last(self, loaded_session):
        loaded_session.select(2)
        removed = loaded_session.active_image

        assert loaded_session.remove(removed.image_id)
        assert loaded_session.state.active_index == 1
        assert loaded_session.active_image.name == "b.png"

    def test_remove_before_active(self, loaded_session):
        loaded_session.select(1)
        first = loaded_session.collection.get(0)

        loaded_session.remove(first.image_id)

        assert loaded_session.active_image.name == "b.png"

    def test_remove_unknown(self, loaded_session):
        assert not loaded_session.remove("missing")

    def test_remove_other_image_keeps_preview(self, loaded_session, previews):
        last = loaded_session.collection.get(2)

        loaded_session.remove(last.image_id)

        assert loaded_session.active_image.name == "a.png"
        assert len(previews) == 1

    def test_remove_active_renders_next(self, loaded_session, previews):
        first = loaded_session.collection.get(0)

        loaded_session.remove(first.image_id)

        assert loaded_session.active_image.name == "b.png"
        assert len(previews) == 2
        assert previews[-1].size == (10, 10)

    def test_remove_last_image_clears_preview(self, session, previews):
        (only,) = session.add_files([png("solo.png")])

        assert session.remove(only.image_id)

        assert previews[-1] is None
        assert session.active_image is None


class TestSessionExport:
    """Export, share and batch export."""

    def test_export_image(self, loaded_session, recording_sink):
        outcome = loaded_session.export_image("png", recording_sink)

        assert outcome.success
        assert recording_sink.calls[0][0] == "edited-1700000000500.png"
        assert recording_sink.calls[0][2] == "image/png"

    def test_export_without_images(self, session, recording_sink):
        outcome = session.export_image("png", recording_sink)

        assert outcome.message == NOTICE_NOTHING_TO_EXPORT
        assert recording_sink.calls == []

    def test_export_without_sink(self, loaded_session):
        assert loaded_session.export_image("png").message == NOTICE_NOTHING_TO_EXPORT

    def test_share_unsupported(self, loaded_session):
        assert loaded_session.share_image().message == NOTICE_SHARE_UNSUPPORTED

    def test_batch_export(self, loaded_session, recording_sink, previews):
        loaded_session.select(1)
        loaded_session.update("brightness", 130)
        settings_before = loaded_session.settings
        state_before = loaded_session.state
        renders_before = len(previews)

        outcome = loaded_session.batch_export(recording_sink)

        assert [call[0] for call in recording_sink.calls] == [
            "a-batch.jpg",
            "b-batch.jpg",
            "c-batch.jpg",
        ]
        assert outcome.success
        assert loaded_session.settings == settings_before
        assert loaded_session.state == state_before
        assert len(previews) == renders_before

    def test_batch_items_share_current_settings(self, loaded_session):
        loaded_session.update("invert", 100)

        items = loaded_session.batch_items()

        assert [image.name for image, _ in items] == ["a.png", "b.png", "c.png"]
        assert all(settings.invert == 100 for _, settings in items)

    def test_batch_export_skips_undecoded(self, recording_sink):
        collection = ImageCollection([
            SourceImage("a", "ok.png", Image.new("RGBA", (4, 4), "red")),
            SourceImage("b", "pending.png", None),
        ])
        session = EditorSession(collection=collection)

        outcome = session.batch_export(recording_sink)

        assert [call[0] for call in recording_sink.calls] == ["ok-batch.jpg"]
        assert outcome.filenames == ("ok-batch.jpg",)
        assert not outcome.success

    def test_batch_export_empty(self, session, recording_sink):
        outcome = session.batch_export(recording_sink)

        assert outcome.message == NOTICE_NOTHING_TO_EXPORT
        assert recording_sink.calls == []


class TestControls:
    """Slider metadata."""

    def test_adjust_panel_order(self):
        assert [spec.label for spec in ADJUST_SLIDERS] == [
            "Brightness",
            "Contrast",
            "Saturation",
            "Hue",
            "Exposure",
            "Blur",
            "Grayscale",
            "Sepia",
            "Invert",
        ]

    def test_transform_sliders(self):
        rotate, scale = TRANSFORM_SLIDERS

        assert (rotate.minimum, rotate.maximum, rotate.step) == (-180, 180, 1)
        assert (scale.minimum, scale.maximum, scale.step) == (0.1, 3.0, 0.01)

    def test_crop_inputs(self):
        assert [spec.label for spec in CROP_INPUTS] == ["X", "Y", "W", "H"]

    def test_get_slider(self):
        assert get_slider("saturation").maximum == 300
        with pytest.raises(KeyError):
            get_slider("sharpness")

    def test_format_value(self):
        assert format_value(1.5, 0.01) == "1.50"
        assert format_value(120.0, 1) == "120"
        assert get_slider("scale").format_value(2) == "2.00"
        assert format_value("n/a") == "n/a"

    def test_settings_defaults_match_sliders(self):
        defaults = AdjustmentSettings()

        for spec in ADJUST_SLIDERS + TRANSFORM_SLIDERS:
            value = getattr(defaults, spec.field)
            assert spec.minimum <= value <= spec.maximum
