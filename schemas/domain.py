from __future__ import annotations

from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

DomainId = Literal["urban", "environmental", "transportation", "social", "economics", "computational"]


class DomainInfo(BaseModel):
    """Static description of a thematic domain. Immutable once built."""

    id: DomainId
    label: str
    description: str
    tools: Tuple[str, ...] = ()
    methodologies: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class DomainCount(BaseModel):
    courses: int = 0
    resources: int = 0
    total: int = 0


class DomainToolkit(BaseModel):
    tools: List[str] = Field(default_factory=list)
    methodologies: List[str] = Field(default_factory=list)
