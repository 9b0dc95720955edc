"""
Image and annotation sources.

Local directories are the only source: images to scan, annotation files
and persisted patches all come from there.
"""

from .local import (
    ScanResult,
    scan_files,
    image_name,
    load_image,
    find_annotation,
    find_image,
    ensure_output_dir,
)

__all__ = [
    "ScanResult",
    "scan_files",
    "image_name",
    "load_image",
    "find_annotation",
    "find_image",
    "ensure_output_dir",
]
