"""
공통 테스트 픽스처
- 테스트마다 임시 SQLite 파일 DB 로 앱을 새로 만들고 테이블을 생성
"""
import httpx
import pytest
import pytest_asyncio

from common.config import Settings
from common.database.mariadb_board import init_models
from gateway.main import create_app

TEST_SECRET = "test-secret-key"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "mariadb_board_url": f"sqlite+aiosqlite:///{tmp_path / 'board.db'}",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def app(settings):
    app = create_app(settings)
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def db(app):
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def hasher(app):
    return app.state.password_hasher


@pytest.fixture
def token_service(app):
    return app.state.token_service
