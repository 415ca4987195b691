import os
import tempfile

import pytest
import pytest_asyncio

# Must run before anything imports notegraph.database (the engine is built at import time)
_TMP_DIR = tempfile.mkdtemp(prefix="notegraph-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP_DIR}/test_notegraph.db")
os.environ.setdefault("GRAPH_LAYOUT_SEED", "7")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from notegraph.database.database import init_models, make_engine, make_sessionmaker
from notegraph.graph.session import GraphSession
from notegraph.services.graph_service import KnowledgeGraphService
from notegraph.services.note_store import NoteStore


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """A private SQLite database per test."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path}/store.db")
    await init_models(engine)
    yield make_sessionmaker(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def store(session_factory):
    return NoteStore(session_factory)


@pytest.fixture
def graph_session():
    return GraphSession(800, 600, seed=3)


@pytest_asyncio.fixture
async def service(store, graph_session):
    svc = KnowledgeGraphService(store, graph_session)
    await svc.startup()
    return svc
