"""Wire models for the release index."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class ReleaseMetadata(BaseModel):
    """JSON body returned by ``<repo>/releases/<tag>``.

    Only ``tag_name`` is used; other fields of the payload are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    tag_name: str

    @field_validator("tag_name")
    @classmethod
    def _tag_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("tag_name is empty")
        return value


__all__ = ["ReleaseMetadata"]
