"""Farmer profile display mapping and session cache."""

from vadi_hisaab.profile.cache import ProfileCache
from vadi_hisaab.profile.mapper import ProfileLocationMapper, ProfileMappingError

__all__ = ["ProfileCache", "ProfileLocationMapper", "ProfileMappingError"]
