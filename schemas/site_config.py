from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import check_date_string, check_url, coerce_date_string


class SocialLink(BaseModel):
    name: str = Field(min_length=1)
    url: str
    icon: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_url(v, "Social link URL")


class NavigationItem(BaseModel):
    label: str = Field(min_length=1)
    href: str = Field(min_length=1)
    active: Optional[bool] = None
    children: Optional[List["NavigationItem"]] = None


class Announcement(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    date: str
    type: Literal["info", "warning", "success"]

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        return coerce_date_string(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return check_date_string(v)


class SiteInfo(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=10)
    url: str
    social_links: List[SocialLink] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_url(v, "Site URL")


class SiteConfig(BaseModel):
    site_info: SiteInfo
    navigation: List[NavigationItem] = Field(min_length=1)
    featured_courses: List[str] = Field(default_factory=list)
    announcements: List[Announcement] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


NavigationItem.model_rebuild()
