from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["high", "medium", "low"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PlanResource(_CamelModel):
    type: Literal["youtube", "reading", "web"] | None = None
    title: str | None = None
    url: str


class PlanTopic(_CamelModel):
    name: str = Field(min_length=1)
    priority: Priority | None = None
    resources: list[PlanResource] = Field(default_factory=list)


class PlanModule(_CamelModel):
    module_label: str = Field(alias="moduleLabel", min_length=1)
    topics: list[PlanTopic] = Field(default_factory=list)


class StudyPlan(_CamelModel):
    course_code: str = Field(alias="courseCode")
    course_title: str = Field(alias="courseTitle")
    modules: list[PlanModule] = Field(default_factory=list)


class StudyPlanEmailRequest(BaseModel):
    to: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    plan: StudyPlan


class RenderedStudyPlan(BaseModel):
    subject: str
    text: str
