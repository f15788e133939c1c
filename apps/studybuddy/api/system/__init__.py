from studybuddy.api.system.routes import router

__all__ = ["router"]
