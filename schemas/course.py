"""
Course schema definition for YAML content under ``courses/``.

Design choices:
- Nested records (sessions, materials, references) are their own models so validation errors carry a precise path.
- Unknown YAML keys are ignored (model_config extra="ignore") so content authors can add fields ahead of the code.
- URLs are kept as plain strings; they are validated but never normalised.
"""
from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import ID_PATTERN, Difficulty, Language, check_date_string, check_url, coerce_date_string


class Reference(BaseModel):
    title: str = Field(min_length=1, description="Reference title")
    url: str
    type: Optional[Literal["paper", "book", "tutorial", "docs"]] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_url(v, "Reference URL")


class SessionMaterials(BaseModel):
    slides: Optional[str] = None
    code_repo: Optional[str] = None
    recording: Optional[str] = None
    references: List[Reference] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("slides", "code_repo", "recording")
    @classmethod
    def validate_material_url(cls, v: Optional[str], info) -> Optional[str]:
        return check_url(v, f"{info.field_name} URL")


class Session(BaseModel):
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    objectives: List[str] = Field(min_length=1, description="Learning objectives of the session")
    materials: SessionMaterials = Field(default_factory=SessionMaterials)

    model_config = ConfigDict(extra="ignore")

    @field_validator("objectives")
    @classmethod
    def validate_objectives(cls, v: List[str]) -> List[str]:
        if any(not item or not item.strip() for item in v):
            raise ValueError("Objective cannot be empty")
        return v


class ExternalLinks(BaseModel):
    course_page: Optional[str] = None
    materials_repo: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("course_page", "materials_repo")
    @classmethod
    def validate_link(cls, v: Optional[str], info) -> Optional[str]:
        return check_url(v, f"{info.field_name} URL")


class Course(BaseModel):
    id: str = Field(pattern=ID_PATTERN, description="Unique course identifier, also used as URL slug")
    title: str = Field(min_length=1)
    type: Literal["course", "workshop", "reading_group"]
    year: int = Field(ge=2000, description="Year the course ran")
    difficulty: Difficulty
    tags: List[str] = Field(min_length=1)
    instructors: List[str] = Field(min_length=1)
    language: Language
    summary: str = Field(min_length=10)
    sessions: List[Session] = Field(min_length=1)
    external_links: ExternalLinks = Field(default_factory=ExternalLinks)
    last_updated: str = Field(description="Last content update, YYYY-MM-DD")

    model_config = ConfigDict(extra="ignore")

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: int) -> int:
        if v > date.today().year + 5:
            raise ValueError("Year cannot be too far in the future")
        return v

    @field_validator("tags", "instructors")
    @classmethod
    def validate_non_empty_items(cls, v: List[str], info) -> List[str]:
        cleaned = [item.strip() for item in v]
        if any(not item for item in cleaned):
            raise ValueError(f"{info.field_name} entries cannot be empty")
        return cleaned

    @field_validator("last_updated", mode="before")
    @classmethod
    def coerce_last_updated(cls, v):
        return coerce_date_string(v)

    @field_validator("last_updated")
    @classmethod
    def validate_last_updated(cls, v: str) -> str:
        return check_date_string(v)

    @property
    def tag_set(self) -> frozenset:
        return frozenset(tag.lower() for tag in self.tags)
