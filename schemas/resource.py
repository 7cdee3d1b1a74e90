from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ID_PATTERN, Difficulty, Language, check_url

ResourceType = Literal["docs", "tutorial", "paper", "book", "dataset", "tool"]


class Resource(BaseModel):
    id: str = Field(pattern=ID_PATTERN)
    title: str = Field(min_length=1)
    type: ResourceType
    url: str
    tags: List[str] = Field(min_length=1)
    description: str = Field(min_length=10)
    language: Language
    difficulty: Optional[Difficulty] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_url(v, "Resource URL")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        cleaned = [tag.strip() for tag in v]
        if any(not tag for tag in cleaned):
            raise ValueError("Tag cannot be empty")
        return cleaned
