import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see studybuddy.core.settings).
from studybuddy.api import register_routes
from studybuddy.core.exceptions import register_exception_handlers
from studybuddy.core.logging import setup_logging
from studybuddy.core.settings import settings

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.log_level or settings.log_level_fallback)

app = FastAPI(title="Learning Buddy API")
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger = logging.getLogger(__name__)
logger.info("Learning Buddy API initialized (LLM runtime at %s)", settings.ollama_base_url)


if __name__ == "__main__":
    uvicorn.run("studybuddy.main:app", host=settings.host, port=settings.port, log_level="info")
