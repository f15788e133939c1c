"""Plain-text rendering and SMTP delivery of study plans."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any, Iterable

from studybuddy.core.exceptions import ConfigurationError
from studybuddy.core.settings import Settings, settings
from studybuddy.schemas.study_plan import PlanModule, PlanTopic, StudyPlan

logger = logging.getLogger(__name__)


def render_study_plan_email(plan: StudyPlan) -> str:
    """Render a study plan as deterministic plain text.

    Layout::

        Study Plan for CS1 - Intro

        M1:
        - Loops (Priority: high)
          Resources:
          - Vid: http://x

    """
    lines = [f"Study Plan for {plan.course_code} - {plan.course_title}", ""]
    for module in plan.modules:
        lines.append(f"{module.module_label}:")
        for topic in module.topics:
            line = f"- {topic.name}"
            if topic.priority:
                line += f" (Priority: {topic.priority})"
            lines.append(line)
            if topic.resources:
                lines.append("  Resources:")
                for resource in topic.resources:
                    label = resource.title or resource.type or ""
                    lines.append(f"  - {label}: {resource.url}")
        lines.append("")
    return "\n".join(lines) + "\n"


def study_plan_subject(plan: StudyPlan) -> str:
    return f"Study Plan: {plan.course_code} - {plan.course_title}"


def plan_from_course(
    course_code: str,
    course_title: str,
    modules: Iterable[dict[str, Any]],
) -> StudyPlan:
    """Build a shareable plan from course modules whose topics are plain names."""
    return StudyPlan(
        course_code=course_code,
        course_title=course_title,
        modules=[
            PlanModule(
                module_label=m.get("module_label") or m.get("raw") or "Untitled Module",
                topics=[
                    PlanTopic(name=t, priority="medium")
                    for t in (m.get("topics") or [])
                    if isinstance(t, str) and t.strip()
                ],
            )
            for m in modules
        ],
    )


@dataclass
class StudyPlanMailer:
    cfg: Settings | None = None

    def __post_init__(self) -> None:
        if self.cfg is None:
            self.cfg = settings

    def build_message(self, plan: StudyPlan, *, to: str) -> EmailMessage:
        sender = self.cfg.smtp_from_email
        if not sender:
            raise ConfigurationError("SMTP_FROM_EMAIL not configured", code="smtp_not_configured")
        msg = EmailMessage()
        msg["From"] = formataddr((self.cfg.smtp_from_name, sender))
        msg["To"] = to
        msg["Subject"] = study_plan_subject(plan)
        msg.set_content(render_study_plan_email(plan))
        return msg

    def send(self, plan: StudyPlan, *, to: str) -> None:
        host = self.cfg.smtp_host
        if not host:
            raise ConfigurationError("SMTP_HOST not configured", code="smtp_not_configured")
        msg = self.build_message(plan, to=to)

        server = smtplib.SMTP(host, self.cfg.smtp_port, timeout=20)
        try:
            if self.cfg.smtp_use_tls:
                server.starttls()
            if self.cfg.smtp_username and self.cfg.smtp_password:
                server.login(self.cfg.smtp_username, self.cfg.smtp_password.get_secret_value())
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:  # pragma: no cover - best effort cleanup
                pass
        logger.info("Study plan for %s sent to %s", plan.course_code, to)


def send_study_plan_email(plan: StudyPlan, to: str, *, cfg: Settings | None = None) -> None:
    StudyPlanMailer(cfg=cfg).send(plan, to=to)


__all__ = [
    "StudyPlanMailer",
    "plan_from_course",
    "render_study_plan_email",
    "send_study_plan_email",
    "study_plan_subject",
]
