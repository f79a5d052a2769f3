"""
Editor Session: the thin layer between the UI and the render pipeline.

The session owns an immutable EditorState snapshot (settings, active index,
staged crop) and the image collection. Every operation that changes what the
active image looks like replaces the snapshot and renders the preview once,
synchronously, handing the result to the preview listener.

Exports never touch the snapshot: batch export is given explicit
(image, settings) pairs built from the current state, so the settings in
effect before a batch are still in effect after it.

Example:
    >>> session = EditorSession(preview_listener=surface.show)
    >>> session.add_files(["beach.jpg", "city.png"])
    >>> session.apply_preset("Film Warm")
    >>> session.update("rotate", 15)
    >>> session.export_image("jpeg", DirectoryDownloadSink("exports"))
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, List, Optional, Tuple

from CPS_Libs.ExportLib.download_sink import DownloadSink
from CPS_Libs.ExportLib.export_actions import (
    ExportOutcome,
    batch_export,
    export_rendered,
    share_rendered,
)
from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings, CropRect, SourceImage
from CPS_Libs.ImageEditingLib.presets import apply_preset
from CPS_Libs.ImageEditingLib.render_pipeline import RenderedOutput, render
from CPS_Libs.SessionLib.controls import get_slider
from CPS_Libs.SessionLib.image_collection import ImageCollection, ImageFile
from CPS_Libs.constants import (
    BATCH_EXPORT_QUALITY,
    FORMAT_PNG,
    MAX_OUTPUT_DIMENSION,
    NOTICE_NOTHING_TO_EXPORT,
    SINGLE_EXPORT_QUALITY,
)

logger = logging.getLogger(__name__)

# Receives None when the collection becomes empty
PreviewListener = Callable[[Optional[RenderedOutput]], Any]


@dataclass(frozen=True)
class EditorState:
    """Snapshot of everything the preview depends on besides the images.

    Attributes:
        settings: Committed adjustment/transform settings
        active_index: Index of the active image in the collection
        crop_draft: Crop values typed in but not applied yet
    """
    settings: AdjustmentSettings = field(default_factory=AdjustmentSettings)
    active_index: int = 0
    crop_draft: CropRect = field(default_factory=CropRect)


class EditorSession:
    """Editor state plus the operations the UI calls."""

    def __init__(
        self,
        collection: Optional[ImageCollection] = None,
        preview_listener: Optional[PreviewListener] = None,
        max_dimension: int = MAX_OUTPUT_DIMENSION,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize a session.

        Args:
            collection: Image collection (default: new empty collection)
            preview_listener: Called with each preview render
            max_dimension: Largest allowed output width/height
            clock: Returns seconds since the epoch, used for export filenames
        """
        self._collection = collection if collection is not None else ImageCollection()
        self._preview_listener = preview_listener
        self._max_dimension = max_dimension
        self._clock = clock
        self._state = EditorState()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def settings(self) -> AdjustmentSettings:
        return self._state.settings

    @property
    def collection(self) -> ImageCollection:
        return self._collection

    @property
    def active_image(self) -> Optional[SourceImage]:
        return self._collection.get(self._state.active_index)

    def set_preview_listener(self, listener: Optional[PreviewListener]) -> None:
        self._preview_listener = listener

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_active(self) -> Optional[RenderedOutput]:
        """
        Render the active image with the committed settings.

        Returns:
            RenderedOutput, or None when there is no decoded active image
        """
        image = self.active_image
        if image is None or not image.is_decoded:
            return None
        return render(image, self._state.settings, self._max_dimension)

    def _refresh_preview(self) -> Optional[RenderedOutput]:
        output = self.render_active()
        if output is not None and self._preview_listener is not None:
            self._preview_listener(output)
        return output

    def _commit(self, state: EditorState) -> None:
        previous = self._state
        if state.settings.crop != previous.settings.crop:
            state = replace(state, crop_draft=state.settings.crop)
        self._state = state
        if state.settings != previous.settings or state.active_index != previous.active_index:
            self._refresh_preview()

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def add_files(self, sources: Iterable[ImageFile]) -> List[SourceImage]:
        """
        Decode and append input files.

        When the collection was empty the first added image becomes active
        and is rendered.

        Returns:
            The images that decoded and were added
        """
        was_empty = self._collection.is_empty()
        added = self._collection.add_files(sources)
        if was_empty and added:
            self._state = replace(self._state, active_index=0)
            self._refresh_preview()
        return added

    def select(self, index: int) -> None:
        """
        Make the image at index active.

        Raises:
            IndexError: If index is outside the collection
        """
        if not 0 <= index < len(self._collection):
            raise IndexError(f"Image index {index} out of range for {len(self._collection)} images")
        self._commit(replace(self._state, active_index=index))

    def remove(self, image_id: str) -> bool:
        """
        Remove an image; the active index is kept in range.

        The preview is re-rendered only when the active image changes. When
        the last image goes, the preview listener receives None.
        """
        previous_active = self.active_image
        removed_index = self._collection.index_of(image_id)
        if not self._collection.remove(image_id):
            return False

        active = self._state.active_index
        if removed_index < active or active >= len(self._collection):
            active = max(0, active - 1)
        self._state = replace(self._state, active_index=active)

        if self._collection.is_empty():
            if self._preview_listener is not None:
                self._preview_listener(None)
        elif self.active_image is not previous_active:
            self._refresh_preview()
        return True

    # ------------------------------------------------------------------
    # Adjustments
    # ------------------------------------------------------------------

    def update(self, field_name: str, value: Any) -> AdjustmentSettings:
        """
        Set one slider field; the value is coerced and clamped to its range.

        Raises:
            KeyError: If no slider controls field_name
        """
        get_slider(field_name)
        settings = self._state.settings.with_value(field_name, value)
        self._commit(replace(self._state, settings=settings))
        return settings

    def apply_preset(self, name: str) -> AdjustmentSettings:
        """
        Apply a named preset over the current settings.

        Raises:
            KeyError: If no preset has that name
        """
        settings = apply_preset(self._state.settings, name)
        self._commit(replace(self._state, settings=settings))
        return settings

    # ------------------------------------------------------------------
    # Crop draft
    # ------------------------------------------------------------------

    def set_crop_field(self, name: str, value: Any) -> CropRect:
        """Stage one crop value; non-numeric input becomes 0."""
        draft = self._state.crop_draft.with_field(name, value)
        self._state = replace(self._state, crop_draft=draft)
        return draft

    def reset_crop_draft(self) -> CropRect:
        draft = CropRect.full()
        self._state = replace(self._state, crop_draft=draft)
        return draft

    def apply_crop(self) -> AdjustmentSettings:
        """Commit the staged crop to the settings."""
        settings = self._state.settings.with_crop(self._state.crop_draft)
        self._commit(replace(self._state, settings=settings))
        return settings

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _timestamp_ms(self) -> int:
        return int(self._clock() * 1000)

    def export_image(
        self,
        save_format: str = FORMAT_PNG,
        sink: Optional[DownloadSink] = None,
        quality: float = SINGLE_EXPORT_QUALITY,
    ) -> ExportOutcome:
        """
        Export the active image as a single download.

        Returns:
            ExportOutcome; with no active image nothing is rendered or delivered
        """
        output = self.render_active()
        if output is None or sink is None:
            return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)
        return export_rendered(output, save_format, sink, quality, self._timestamp_ms())

    def share_image(self, share_target: Any = None) -> ExportOutcome:
        """Share the active image as a JPEG through the platform share target."""
        return share_rendered(self.render_active(), share_target)

    def batch_items(self) -> List[Tuple[SourceImage, AdjustmentSettings]]:
        """(image, settings) pairs for every image, all with the current settings."""
        settings = self._state.settings
        return [(image, settings) for image in self._collection]

    def batch_export(
        self,
        sink: Optional[DownloadSink] = None,
        quality: float = BATCH_EXPORT_QUALITY,
    ) -> ExportOutcome:
        """
        Export every image in collection order with the current settings.

        The session state is left exactly as it was.
        """
        items = self.batch_items()
        if not items or sink is None:
            return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)
        logger.debug(f"Batch exporting {len(items)} images")
        return batch_export(items, sink, quality, self._max_dimension)
