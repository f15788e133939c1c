from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient
from studybuddy.api.study_plan import routes as study_plan_routes
from studybuddy.core.dependencies import get_study_plan_mailer
from studybuddy.core.exceptions import register_exception_handlers
from studybuddy.core.settings import Settings
from studybuddy.services.study_plan_email import StudyPlanMailer

PLAN = {
    "courseCode": "CS1",
    "courseTitle": "Intro",
    "modules": [
        {
            "moduleLabel": "M1",
            "topics": [
                {
                    "name": "Loops",
                    "priority": "high",
                    "resources": [{"title": "Vid", "url": "http://x"}],
                }
            ],
        }
    ],
}


class _FakeMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send(self, plan, *, to: str) -> None:  # noqa: ANN001
        self.sent.append((plan.course_code, to))


def _app(mailer) -> FastAPI:  # noqa: ANN001
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(study_plan_routes.router)
    app.dependency_overrides[get_study_plan_mailer] = lambda: mailer
    return app


def test_render_returns_subject_and_text():
    client = TestClient(_app(_FakeMailer()))
    resp = client.post("/api/study-plan/render", json=PLAN)

    assert resp.status_code == 200
    data = resp.json()
    assert data["subject"] == "Study Plan: CS1 - Intro"
    assert "- Loops (Priority: high)" in data["text"]


def test_email_uses_mailer():
    mailer = _FakeMailer()
    client = TestClient(_app(mailer))
    resp = client.post("/api/study-plan/email", json={"to": "student@example.com", "plan": PLAN})

    assert resp.status_code == 200
    assert resp.json() == {"sent": True}
    assert mailer.sent == [("CS1", "student@example.com")]


def test_email_without_smtp_config_is_a_configuration_error():
    mailer = StudyPlanMailer(cfg=Settings(_env_file=None, SMTP_HOST=None))
    client = TestClient(_app(mailer))
    resp = client.post("/api/study-plan/email", json={"to": "student@example.com", "plan": PLAN})

    assert resp.status_code == 500
    assert resp.json()["code"] == "smtp_not_configured"
