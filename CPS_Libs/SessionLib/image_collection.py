"""
Image ingestion and the ordered image collection.

Input files arrive as paths, raw bytes, file-like objects or
(filename, bytes) pairs. Each one is decoded eagerly to RGBA and wrapped in
a SourceImage with a fresh uuid and the original filename. A file that
cannot be decoded is logged and left out; it never reaches the pipeline.

Classes:
    ImageCollection: Ordered list of decoded SourceImages

Functions:
    decode_image_file: Decode one input file into a SourceImage
    get_supported_image_formats: Supported input extensions
    is_supported_format: Check a path's extension
"""

import concurrent.futures
import io
import logging
import uuid
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator, List, Optional, Tuple, Union

from PIL import Image

from CPS_Libs.ImageEditingLib.image_models import SourceImage
from CPS_Libs.constants import RGBA_MODE, SUPPORTED_STANDARD_IMAGES

logger = logging.getLogger(__name__)

ImageFile = Union[str, Path, bytes, BinaryIO, Tuple[str, bytes]]

DEFAULT_BLOB_NAME = "image"


def get_supported_image_formats() -> List[str]:
    """
    Get list of supported standard image formats.

    Returns:
        List of file extensions (e.g., ['.bmp', '.gif', ...])
    """
    return sorted(SUPPORTED_STANDARD_IMAGES)


def is_supported_format(file_path: Union[str, Path]) -> bool:
    """Check if a file path has a supported image extension."""
    return Path(file_path).suffix.lower() in SUPPORTED_STANDARD_IMAGES


def _open_source(source: ImageFile, name: Optional[str]) -> Tuple[Any, str]:
    """Return something Image.open accepts plus the filename to keep."""
    if isinstance(source, tuple):
        blob_name, data = source
        return io.BytesIO(data), name or str(blob_name)
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source)), name or DEFAULT_BLOB_NAME
    if isinstance(source, (str, Path)):
        path = Path(source)
        return path, name or path.name
    if hasattr(source, "read"):
        stream_name = Path(str(getattr(source, "name", DEFAULT_BLOB_NAME))).name
        return source, name or stream_name
    raise TypeError(f"Expected path, bytes or file-like object, got {type(source)}")


def decode_image_file(source: ImageFile, name: Optional[str] = None) -> Optional[SourceImage]:
    """
    Decode one input file into a SourceImage.

    Args:
        source: Path, raw bytes, binary file-like object or (filename, bytes)
        name: Filename to keep (default: taken from the source)

    Returns:
        SourceImage in RGBA, or None if the file could not be decoded

    Raises:
        TypeError: If source is none of the accepted kinds
    """
    fp, filename = _open_source(source, name)
    try:
        with Image.open(fp) as img:
            img.load()
            decoded = img.convert(RGBA_MODE)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(f"Failed to decode image '{filename}': {e}")
        return None

    image = SourceImage(image_id=uuid.uuid4().hex, name=filename, image=decoded)
    logger.debug(f"Decoded '{filename}' ({image.width}x{image.height}) as {image.image_id}")
    return image


class ImageCollection:
    """Ordered collection of decoded source images."""

    def __init__(self, images: Iterable[SourceImage] = ()):
        self._images: List[SourceImage] = list(images)

    def __len__(self) -> int:
        return len(self._images)

    def __iter__(self) -> Iterator[SourceImage]:
        return iter(list(self._images))

    @property
    def images(self) -> Tuple[SourceImage, ...]:
        return tuple(self._images)

    def is_empty(self) -> bool:
        return not self._images

    def get(self, index: int) -> Optional[SourceImage]:
        """Image at index, or None when the index is out of range."""
        if 0 <= index < len(self._images):
            return self._images[index]
        return None

    def index_of(self, image_id: str) -> int:
        """Position of an image, or -1 if it is not in the collection."""
        for index, image in enumerate(self._images):
            if image.image_id == image_id:
                return index
        return -1

    def add(self, image: SourceImage) -> None:
        if not isinstance(image, SourceImage):
            raise TypeError(f"Expected SourceImage, got {type(image)}")
        self._images.append(image)

    def add_files(
        self,
        sources: Iterable[ImageFile],
        use_threading: bool = True,
        max_workers: int = None,
    ) -> List[SourceImage]:
        """
        Decode input files and append the ones that decode, in input order.

        Args:
            sources: Input files
            use_threading: Decode on a thread pool when more than one file (default: True)
            max_workers: Maximum number of threads (default: None = CPU count)

        Returns:
            The SourceImages that were added
        """
        sources = list(sources)
        if use_threading and len(sources) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
                decoded = list(executor.map(decode_image_file, sources))
        else:
            decoded = [decode_image_file(source) for source in sources]

        added = [image for image in decoded if image is not None]
        self._images.extend(added)

        skipped = len(sources) - len(added)
        if skipped:
            logger.warning(f"Skipped {skipped} of {len(sources)} files that could not be decoded")
        return added

    def remove(self, image_id: str) -> bool:
        """
        Remove an image by id.

        Returns:
            True if removed, False if no image had that id
        """
        index = self.index_of(image_id)
        if index < 0:
            return False
        del self._images[index]
        logger.debug(f"Removed image {image_id}")
        return True
