import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CameraMetadata(CamelModel):
    aperture: Optional[str] = None
    shutter_speed: Optional[str] = None
    iso: Optional[str] = None
    focal_length: Optional[str] = None

    @field_validator("aperture", "shutter_speed", "iso", "focal_length", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            return value.strip() or None
        # Clients sometimes send iso as a bare number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ValueError("camera metadata values must be strings")

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}

    def is_empty(self) -> bool:
        return not any((self.aperture, self.shutter_speed, self.iso, self.focal_length))


class PhotoRecord(CamelModel):
    file_name: str
    date: datetime.date
    caption: str = ""
    size: int = Field(ge=0)
    uploaded_at: datetime.datetime
    url: str
    location: Optional[str] = None
    taken_at: Optional[str] = None
    camera_metadata: Optional[CameraMetadata] = Field(None, alias="metadata")

    @field_validator("caption", mode="before")
    @classmethod
    def _caption_or_empty(cls, value):
        return "" if value is None else value

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler):
        return {k: v for k, v in handler(self).items() if v is not None}


class UploadResponse(CamelModel):
    success: bool = True
    file_path: str
    date: datetime.date
    caption: str
    metadata: PhotoRecord
    replaced: bool = False
    replaced_file_name: Optional[str] = None


class PhotoListResponse(CamelModel):
    success: bool = True
    photos: list[PhotoRecord]
    timestamp: datetime.datetime
