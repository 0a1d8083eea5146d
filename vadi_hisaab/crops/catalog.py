"""
Known crops offered on the crop form.

Stored value is the English name; the Gujarati label and emoji are for
display. Anything else typed by the farmer is a custom crop.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


CUSTOM_CROP_EMOJI = "🌱"


class CatalogCrop(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    emoji: str


KNOWN_CROPS: tuple[CatalogCrop, ...] = (
    CatalogCrop(value="Cotton", label="કપાસ", emoji="🌿"),
    CatalogCrop(value="Groundnut", label="મગફળી", emoji="🥜"),
    CatalogCrop(value="Jeera", label="જીરું", emoji="🌱"),
    CatalogCrop(value="Onion", label="ડુંગળી", emoji="🧅"),
    CatalogCrop(value="Garlic", label="લસણ", emoji="🧄"),
    CatalogCrop(value="Chana", label="ચણા", emoji="🫘"),
    CatalogCrop(value="Wheat", label="ઘઉં", emoji="🌾"),
    CatalogCrop(value="Bajra", label="બાજરી", emoji="🌾"),
    CatalogCrop(value="Maize", label="મકાઈ", emoji="🌽"),
)

_BY_VALUE = {crop.value.lower(): crop for crop in KNOWN_CROPS}


def find_crop(value: str) -> Optional[CatalogCrop]:
    """Catalog entry by English name (case-insensitive)."""
    if not value:
        return None
    return _BY_VALUE.get(value.strip().lower())


def resolve_crop(choice: Optional[str], custom: Optional[str] = None) -> tuple[str, str]:
    """
    Crop name and emoji for a form submission.

    Custom text wins over a catalog choice, as on the crop form.

    Raises:
        ValueError: Neither a choice nor custom text was given
    """
    custom = (custom or "").strip()
    if custom:
        return custom, CUSTOM_CROP_EMOJI
    crop = find_crop(choice or "")
    if crop is not None:
        return crop.value, crop.emoji
    if choice and choice.strip():
        return choice.strip(), CUSTOM_CROP_EMOJI
    raise ValueError("A crop must be chosen or typed in")
