"""Crop catalog and status lifecycle."""

from vadi_hisaab.crops.catalog import (
    CUSTOM_CROP_EMOJI,
    KNOWN_CROPS,
    CatalogCrop,
    find_crop,
    resolve_crop,
)
from vadi_hisaab.crops.lifecycle import CropLifecycle

__all__ = [
    "CUSTOM_CROP_EMOJI",
    "KNOWN_CROPS",
    "CatalogCrop",
    "CropLifecycle",
    "find_crop",
    "resolve_crop",
]
