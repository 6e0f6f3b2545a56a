"""
FastAPI application entry point.

Assembles the FastAPI app with the agents and collaborations routers.
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentcollab.collaboration.collaboration_api import router as collaborations_router
from agentcollab.roster.agents_api import router as agents_router


# ============================================================================
# Logging configuration
# ============================================================================
LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-40s | %(message)s"
)

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)

# Quiet noisy third-party loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)


app = FastAPI(
    title="AgentCollab",
    description="Multi-agent collaboration pipeline built with LangGraph",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(agents_router)
app.include_router(collaborations_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "AgentCollab",
        "version": "0.1.0",
        "endpoints": {
            "agents": "/api/agents",
            "collaborations": "/api/collaborations",
        },
        "phases": ["planning", "execution", "integration"],
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
