"""
Download sinks for exported images.

A download sink is any callable accepting (filename, data, mime_type). The
editor hands every encoded export to one. DirectoryDownloadSink is the
file-system implementation: it writes into a base directory and refuses
filenames that would escape it.

Classes:
    DirectoryDownloadSink: Saves downloads into a directory
"""

import logging
from pathlib import Path
from typing import Any, Callable, List, Union

logger = logging.getLogger(__name__)

# Signature of a download sink
DownloadSink = Callable[[str, bytes, str], Any]


class DirectoryDownloadSink:
    """Saves downloaded files into a base directory."""

    def __init__(
        self,
        directory: Union[str, Path],
        create_directories: bool = True,
        overwrite: bool = False,
    ):
        """
        Initialize the sink.

        Args:
            directory: Directory downloads are written to
            create_directories: Create the directory if it doesn't exist (default: True)
            overwrite: Overwrite existing files (default: False)
        """
        self._base_dir = Path(directory).resolve()
        self.create_directories = create_directories
        self.overwrite = overwrite
        self.saved: List[Path] = []

    @property
    def directory(self) -> Path:
        return self._base_dir

    def resolve_path(self, filename: str) -> Path:
        """
        Resolve a download filename inside the base directory.

        Raises:
            ValueError: If filename is empty, absolute, contains '..' or
                resolves outside the base directory
        """
        if not filename or not str(filename).strip():
            raise ValueError("Download filename cannot be empty")

        path = Path(filename)
        if path.is_absolute():
            raise ValueError(f"Download filename must be relative: {filename}")

        for part in path.parts:
            if part == "..":
                raise ValueError(
                    f"Path traversal detected: download filename contains '..': {filename}"
                )

        resolved_path = (self._base_dir / path).resolve()
        try:
            resolved_path.relative_to(self._base_dir)
        except ValueError:
            raise ValueError(
                f"Security: download filename '{filename}' resolves to '{resolved_path}' "
                f"which is outside the download directory '{self._base_dir}'"
            )
        return resolved_path

    def __call__(self, filename: str, data: bytes, mime_type: str = "") -> Path:
        """
        Write one download to disk.

        Returns:
            Path the file was written to

        Raises:
            ValueError: If the filename is invalid, or the file exists and overwrite=False
            OSError: If the file cannot be written
        """
        output_file = self.resolve_path(filename)

        if self.create_directories:
            output_file.parent.mkdir(parents=True, exist_ok=True)

        if output_file.exists() and not self.overwrite:
            raise ValueError(
                f"Output file already exists: {output_file}. "
                f"Set overwrite=True to replace."
            )

        try:
            output_file.write_bytes(data)
        except OSError as e:
            raise OSError(f"Failed to save download to {output_file}: {e}") from e

        self.saved.append(output_file)
        logger.debug(f"Saved {len(data)} bytes ({mime_type or 'unknown type'}) to {output_file}")
        return output_file
