from studybuddy.api.study_plan.routes import router

__all__ = ["router"]
