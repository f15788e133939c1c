from studybuddy.api.quiz.routes import router

__all__ = ["router"]
