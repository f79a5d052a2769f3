"""
Export actions: single download, share and batch export.

Every action returns an ExportOutcome instead of raising for user-level
failures (encoder produced nothing, no share capability, share cancelled,
a sink refused the file).

Batch export takes an explicit list of (image, settings) pairs and runs
render, encode and deliver for each pair in order before moving on. Images
that are not decoded are skipped, and duplicate names get a numeric suffix.

Classes:
    ExportOutcome: Result of an export action
    SharedFile: File attachment handed to a share target

Functions:
    single_export_filename: 'edited-<timestamp>.<ext>'
    batch_export_filename: '<original-basename>-batch.jpg'
    unique_filename: Suffix a filename already used in the same batch
    export_rendered: Encode and deliver one rendered output
    share_rendered: Encode a rendered output as JPEG and share it
    batch_export: Render, encode and deliver a list of images sequentially
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Set, Tuple

from CPS_Libs.ExportLib.download_sink import DownloadSink
from CPS_Libs.ExportLib.encode_adapter import ExportConfig, encode_image
from CPS_Libs.ImageEditingLib.image_models import AdjustmentSettings, SourceImage
from CPS_Libs.ImageEditingLib.render_pipeline import RenderedOutput, render
from CPS_Libs.constants import (
    BATCH_EXPORT_FORMAT,
    BATCH_EXPORT_QUALITY,
    BATCH_EXPORT_SUFFIX,
    FORMAT_EXTENSIONS,
    FORMAT_JPEG,
    FORMAT_MIME_TYPES,
    MAX_OUTPUT_DIMENSION,
    NOTICE_NOTHING_TO_EXPORT,
    NOTICE_SHARE_CANCELLED,
    NOTICE_SHARE_UNSUPPORTED,
    SHARE_FILENAME,
    SHARE_QUALITY,
    SHARE_TEXT,
    SHARE_TITLE,
    SINGLE_EXPORT_PREFIX,
    SINGLE_EXPORT_QUALITY,
)

logger = logging.getLogger(__name__)

_EXTENSION_PATTERN = re.compile(r"\.[^.]+$")


@dataclass(frozen=True)
class ExportOutcome:
    """Result of an export action.

    Attributes:
        success: True when every file was delivered
        message: User-facing notice (empty on a plain success)
        filenames: Names of the files that were delivered, in order
    """
    success: bool
    message: str = ""
    filenames: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SharedFile:
    filename: str
    data: bytes
    mime_type: str


def single_export_filename(save_format: str, timestamp_ms: Optional[int] = None) -> str:
    """Name a single download 'edited-<timestamp-ms>.<ext>'."""
    config = ExportConfig(save_format=save_format)
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{SINGLE_EXPORT_PREFIX}{timestamp_ms}.{config.extension}"


def batch_export_filename(original_name: str) -> str:
    """Name a batch download after the source file with its last extension stripped."""
    basename = _EXTENSION_PATTERN.sub("", original_name)
    return f"{basename}{BATCH_EXPORT_SUFFIX}.{FORMAT_EXTENSIONS[BATCH_EXPORT_FORMAT]}"


def unique_filename(filename: str, used: Set[str]) -> str:
    """
    Return filename, or 'name-2.ext', 'name-3.ext', ... if it is already used.

    Example:
        >>> unique_filename("beach-batch.jpg", {"beach-batch.jpg"})
        'beach-batch-2.jpg'
    """
    if filename not in used:
        return filename
    match = _EXTENSION_PATTERN.search(filename)
    stem, extension = (filename[:match.start()], match.group()) if match else (filename, "")
    counter = 2
    while f"{stem}-{counter}{extension}" in used:
        counter += 1
    return f"{stem}-{counter}{extension}"


def _deliver(sink: DownloadSink, filename: str, data: bytes, mime_type: str) -> bool:
    try:
        sink(filename, data, mime_type)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not deliver '{filename}': {e}")
        return False
    return True


def export_rendered(
    output: Optional[RenderedOutput],
    save_format: str,
    sink: DownloadSink,
    quality: float = SINGLE_EXPORT_QUALITY,
    timestamp_ms: Optional[int] = None,
) -> ExportOutcome:
    """
    Encode one rendered output and hand it to a download sink.

    Args:
        output: Rendered output, or None when nothing is rendered
        save_format: 'png', 'jpeg' or 'webp'
        sink: Download sink receiving (filename, data, mime_type)
        quality: 0-1 quality for lossy formats
        timestamp_ms: Timestamp used in the filename (default: now)

    Returns:
        ExportOutcome naming the delivered file, or carrying a notice
    """
    if output is None:
        return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)

    config = ExportConfig(save_format=save_format, quality=quality)
    data = encode_image(output, config.save_format, config.quality)
    if not data:
        return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)

    filename = single_export_filename(config.save_format, timestamp_ms)
    if not _deliver(sink, filename, data, config.mime_type):
        return ExportOutcome(False, f"Could not save {filename}.")

    logger.debug(f"Exported {filename}")
    return ExportOutcome(True, "", (filename,))


def share_rendered(output: Optional[RenderedOutput], share_target: Any) -> ExportOutcome:
    """
    Share a rendered output as a JPEG attachment.

    The share target is any object with a share(files, title, text) method.
    A missing target is reported as unsupported; an exception raised by the
    target (user cancelled, platform error) is reported and never propagated.

    Args:
        output: Rendered output, or None when nothing is rendered
        share_target: Platform share capability, or None

    Returns:
        ExportOutcome describing what happened
    """
    if share_target is None or not callable(getattr(share_target, "share", None)):
        logger.info("Share requested but no share capability is available")
        return ExportOutcome(False, NOTICE_SHARE_UNSUPPORTED)

    if output is None:
        return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)

    data = encode_image(output, FORMAT_JPEG, SHARE_QUALITY)
    if not data:
        return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)

    shared = SharedFile(SHARE_FILENAME, data, FORMAT_MIME_TYPES[FORMAT_JPEG])
    try:
        share_target.share(files=[shared], title=SHARE_TITLE, text=SHARE_TEXT)
    except Exception as e:
        logger.warning(f"Share did not complete: {e}")
        return ExportOutcome(False, NOTICE_SHARE_CANCELLED)

    return ExportOutcome(True, "", (SHARE_FILENAME,))


def batch_export(
    items: Iterable[Tuple[SourceImage, AdjustmentSettings]],
    sink: DownloadSink,
    quality: float = BATCH_EXPORT_QUALITY,
    max_dimension: int = MAX_OUTPUT_DIMENSION,
) -> ExportOutcome:
    """
    Export a list of images, one full render/encode/deliver cycle at a time.

    Args:
        items: (image, settings) pairs, exported in order
        sink: Download sink receiving (filename, data, mime_type)
        quality: 0-1 JPEG quality (default 0.9)
        max_dimension: Largest allowed output width/height

    Returns:
        ExportOutcome listing delivered filenames; success is False if any
        image was not decoded or could not be encoded or delivered
    """
    items = list(items)
    if not items:
        return ExportOutcome(False, NOTICE_NOTHING_TO_EXPORT)

    mime_type = FORMAT_MIME_TYPES[BATCH_EXPORT_FORMAT]
    delivered: List[str] = []
    failed: List[str] = []
    used: Set[str] = set()

    for source, settings in items:
        filename = unique_filename(batch_export_filename(source.name), used)
        used.add(filename)
        if not source.is_decoded:
            logger.warning(f"Skipping '{source.name}' in batch export: image is not decoded")
            failed.append(filename)
            continue
        output = render(source, settings, max_dimension)
        data = encode_image(output, BATCH_EXPORT_FORMAT, quality)
        if not data:
            failed.append(filename)
            continue
        if _deliver(sink, filename, data, mime_type):
            delivered.append(filename)
        else:
            failed.append(filename)

    logger.debug(f"Batch export delivered {len(delivered)} of {len(items)} images")

    if failed:
        message = f"Exported {len(delivered)} of {len(items)} images. Skipped: {', '.join(failed)}"
        return ExportOutcome(False, message, tuple(delivered))
    return ExportOutcome(True, f"Exported {len(delivered)} images.", tuple(delivered))
