from studybuddy.api.chat.routes import router

__all__ = ["router"]
