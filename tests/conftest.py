import contextlib

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from common.assets import DEFAULT_ASSETS
from db.database import PriceDatabase


@contextlib.asynccontextmanager
async def _serve(routes):
    app = web.Application()
    app.add_routes(routes)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


@pytest.fixture
def serve():
    """Async context manager running a local aiohttp app for the given routes."""
    return _serve


@pytest.fixture
def assets():
    return DEFAULT_ASSETS


@pytest.fixture
def database(tmp_path):
    db = PriceDatabase(str(tmp_path / "prices.db"))
    db.connect_to_db()
    yield db
    db.close_connection()


def fetch_rows(db: PriceDatabase) -> list[tuple[str, float]]:
    return db.conn.execute("SELECT coin, price_usd FROM prices ORDER BY id").fetchall()


@pytest.fixture
def rows():
    return fetch_rows
