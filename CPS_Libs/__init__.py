"""
CPS_Libs - Creative Photo Studio Library Modules

This package contains the image-transform core of the Creative Photo Studio
editor, organized into specialized sub-packages:

- ImageEditingLib: Data models, geometry, filter chain, render pipeline, presets
- SessionLib: Image ingestion, control metadata and the editor session
- ExportLib: Encoding, download sinks, single/share/batch export
"""

__version__ = "0.1.0"
