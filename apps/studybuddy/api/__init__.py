"""API router registration helpers.

Routers are imported lazily inside `register_routes` so importing a single
route module (as tests do) does not pull in every service.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from studybuddy.api.chat import router as chat_router
    from studybuddy.api.quiz import router as quiz_router
    from studybuddy.api.study_plan import router as study_plan_router
    from studybuddy.api.system import router as system_router

    routers = [
        system_router,
        quiz_router,
        chat_router,
        study_plan_router,
    ]
    for router in routers:
        app.include_router(router)
