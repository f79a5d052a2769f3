"""
ExportLib - Encoding and delivery of rendered images

This module handles encoding rendered output to PNG/JPEG/WEBP bytes and
delivering it as a download, a share attachment or a batch of downloads.
"""

from CPS_Libs.ExportLib.encode_adapter import ExportConfig, encode_image, normalize_format
from CPS_Libs.ExportLib.download_sink import DirectoryDownloadSink, DownloadSink
from CPS_Libs.ExportLib.export_actions import (
    ExportOutcome,
    SharedFile,
    batch_export,
    batch_export_filename,
    unique_filename,
    export_rendered,
    share_rendered,
    single_export_filename,
)

__all__ = [
    "ExportConfig",
    "encode_image",
    "normalize_format",
    "DirectoryDownloadSink",
    "DownloadSink",
    "ExportOutcome",
    "SharedFile",
    "batch_export",
    "batch_export_filename",
    "unique_filename",
    "export_rendered",
    "share_rendered",
    "single_export_filename",
]
