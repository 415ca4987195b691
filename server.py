from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from loguru import logger

# Settings import loads .env / .env.local before anything reads the environment
from notegraph.config import configure_logging, get_settings
from notegraph.database import database
from notegraph.graph.session import GraphSession
from notegraph.services.graph_service import KnowledgeGraphService
from notegraph.services.note_store import NoteStore
from notegraph.api import notes as notes_router
from notegraph.api import search as search_router
from notegraph.api import graph as graph_router

settings = get_settings()
configure_logging(settings.log_level)


# --- App Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # On startup:
    # Initialize database tables (a broken database is not fatal: the store degrades to memory)
    try:
        await database.init_models()
    except Exception as e:
        logger.warning("Database init skipped due to error: {}", e)

    session = GraphSession(
        settings.width,
        settings.height,
        fps=settings.fps,
        seed=settings.layout_seed,
    )
    service = KnowledgeGraphService(NoteStore(), session)
    await service.startup()

    app.state.settings = settings
    app.state.graph_service = service

    # The layout loop is cancelled on every shutdown path
    async with session.loop.running():
        logger.info("Knowledge graph server running")
        yield

    # On shutdown:
    await database.engine.dispose()


# --- Main App Setup ---
app = FastAPI(lifespan=lifespan, title="Knowledge Graph Notes")

# CORS for local dev (Vite at 5173)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(notes_router.router)
app.include_router(search_router.router)
app.include_router(graph_router.router)


# --- Health Check ---
@app.get("/api/health")
async def health():
    service = getattr(app.state, "graph_service", None)
    return {
        "status": "ok",
        "notes": len(service.session.notes) if service else 0,
        "connections": len(service.session.connections) if service else 0,
        "storeDegraded": bool(service and service.store.degraded),
        "loopRunning": bool(service and service.session.loop.is_running),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
