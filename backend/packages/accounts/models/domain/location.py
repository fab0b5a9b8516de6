"""
Domain models for locations.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator

from packages.accounts.models.domain.enums import LanguageMode, ToneOfVoice

STAR_RATINGS = (1, 2, 3, 4, 5)


class StarConfig(BaseModel):
    """Reply policy for reviews with a given star rating."""

    custom_instructions: str = ""
    auto_reply: bool = False


def default_star_configs() -> Dict[int, StarConfig]:
    return {rating: StarConfig() for rating in STAR_RATINGS}


def _require_all_ratings(v):
    if v is not None and set(v.keys()) != set(STAR_RATINGS):
        raise ValueError("star_configs must define ratings 1 through 5")
    return v


class Location(BaseModel):
    id: str
    account_id: str
    name: str
    address: Optional[str] = None
    google_location_id: Optional[str] = None

    tone_of_voice: ToneOfVoice = ToneOfVoice.FRIENDLY
    language_mode: LanguageMode = LanguageMode.AUTO_DETECT
    max_sentences: Optional[int] = None
    signature: Optional[str] = None
    star_configs: Dict[int, StarConfig] = Field(default_factory=default_star_configs)
    qr_style: Optional[Dict[str, Any]] = None
    breadcrumb: Optional[Dict[str, Any]] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def auto_reply_enabled_for(self, rating: int) -> bool:
        config = self.star_configs.get(rating)
        return bool(config and config.auto_reply)


class LocationCreateModel(BaseModel):
    """Model for creating a new location."""

    account_id: str
    name: str = Field(min_length=1, max_length=255)
    address: Optional[str] = None
    google_location_id: Optional[str] = None
    tone_of_voice: ToneOfVoice = ToneOfVoice.FRIENDLY
    language_mode: LanguageMode = LanguageMode.AUTO_DETECT
    max_sentences: Optional[int] = Field(default=None, ge=1)
    signature: Optional[str] = None
    star_configs: Dict[int, StarConfig] = Field(default_factory=default_star_configs)
    qr_style: Optional[Dict[str, Any]] = None
    breadcrumb: Optional[Dict[str, Any]] = None

    class Config:
        use_enum_values = True

    @field_validator("star_configs")
    @classmethod
    def validate_star_configs(cls, v):
        return _require_all_ratings(v)


class LocationConfigUpdateModel(BaseModel):
    """Partial update of a location's reply configuration."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tone_of_voice: Optional[ToneOfVoice] = None
    language_mode: Optional[LanguageMode] = None
    max_sentences: Optional[int] = Field(default=None, ge=1)
    signature: Optional[str] = None
    star_configs: Optional[Dict[int, StarConfig]] = None
    qr_style: Optional[Dict[str, Any]] = None
    breadcrumb: Optional[Dict[str, Any]] = None

    class Config:
        use_enum_values = True

    @field_validator("star_configs")
    @classmethod
    def validate_star_configs(cls, v):
        return _require_all_ratings(v)
