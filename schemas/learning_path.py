"""
Learning path schema.

Steps are normalised on load: they are sorted by ``order`` and the order values
must form the contiguous sequence 1..n. A step points at most at one entity.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import ID_PATTERN


class LearningStep(BaseModel):
    order: int = Field(gt=0, description="Position of the step, starting at 1")
    type: Literal["course", "resource", "practice"]
    course_id: Optional[str] = Field(default=None, min_length=1)
    resource_id: Optional[str] = Field(default=None, min_length=1)
    note: str = Field(min_length=1)
    optional: bool = False

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def validate_reference(self) -> "LearningStep":
        if self.course_id and self.resource_id:
            raise ValueError("A step can reference either course_id or resource_id, not both")
        if self.type == "course" and not self.course_id:
            raise ValueError('course_id is required when type is "course"')
        if self.type == "resource" and not self.resource_id:
            raise ValueError('resource_id is required when type is "resource"')
        return self


class LearningPath(BaseModel):
    id: str = Field(pattern=ID_PATTERN)
    title: str = Field(min_length=1)
    description: str = Field(min_length=10)
    recommended_audience: str = Field(min_length=1)
    estimated_duration: str = Field(min_length=1)
    steps: List[LearningStep] = Field(min_length=1)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def validate_step_order(self) -> "LearningPath":
        ordered = sorted(self.steps, key=lambda step: step.order)
        orders = [step.order for step in ordered]
        expected = list(range(1, len(ordered) + 1))
        if orders != expected:
            raise ValueError(f"Step orders must be contiguous from 1, got {orders}")
        self.steps = ordered
        return self

    @property
    def referenced_course_ids(self) -> List[str]:
        return [step.course_id for step in self.steps if step.course_id]

    @property
    def referenced_resource_ids(self) -> List[str]:
        return [step.resource_id for step in self.steps if step.resource_id]
