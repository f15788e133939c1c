from __future__ import annotations

from fastapi import APIRouter, Depends

from studybuddy.core.dependencies import get_study_plan_mailer
from studybuddy.schemas.study_plan import RenderedStudyPlan, StudyPlan, StudyPlanEmailRequest
from studybuddy.services.study_plan_email import (
    StudyPlanMailer,
    render_study_plan_email,
    study_plan_subject,
)

router = APIRouter(prefix="/api/study-plan", tags=["study-plan"])


@router.post("/render", response_model=RenderedStudyPlan)
def render(plan: StudyPlan) -> RenderedStudyPlan:
    return RenderedStudyPlan(subject=study_plan_subject(plan), text=render_study_plan_email(plan))


@router.post("/email")
def email(
    payload: StudyPlanEmailRequest,
    mailer: StudyPlanMailer = Depends(get_study_plan_mailer),
) -> dict[str, bool]:
    mailer.send(payload.plan, to=payload.to)
    return {"sent": True}
