from fastapi import APIRouter

from studybuddy.core.settings import settings

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health")
def health():
    return {"status": "ok", "message": f"{settings.app_name} relay is running"}
