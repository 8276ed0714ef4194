# test/conftest.py
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from book_composer import main, store
from book_composer.books_client import BooksApiClient
from book_composer.composer import PostComposer
from book_composer.image_picker import (
    GRANTED,
    ImagePicker,
    LocalImagePicker,
    PermissionResponse,
    PickedAsset,
    PickerResult,
)
from book_composer.store import Base

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
API_URL = "http://books.test/api"


class FakeBooksApi:
    """Records requests to /books and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 201
        self.body: object = {"_id": "book-1", "title": "Dune"}
        self.error: Exception | None = None
        self.on_request = None

    def respond(self, status_code: int, body: object) -> None:
        self.status_code = status_code
        self.body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request:
            self.on_request(request)
        if self.error:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakePicker(ImagePicker):
    def __init__(self, status: str = GRANTED, uri: str | None = None):
        self.status = status
        self.uri = uri
        self.permission_requests = 0
        self.launches = []
        self.released = []
        self.error: Exception | None = None

    async def request_media_library_permissions(self) -> PermissionResponse:
        self.permission_requests += 1
        return PermissionResponse(self.status)

    async def launch_image_library(self, options) -> PickerResult:
        self.launches.append(options)
        if self.error:
            raise self.error
        if self.uri is None:
            return PickerResult(canceled=True)
        return PickerResult(canceled=False, assets=[PickedAsset(self.uri)])

    def release(self, uri: str) -> None:
        self.released.append(uri)


def make_image(path, size=(800, 400), fmt="PNG"):
    Image.new("RGB", size, color=(200, 120, 40)).save(path, format=fmt)
    return path


async def fixed_token() -> str:
    return "test-token"


@pytest.fixture
def books_api():
    return FakeBooksApi()


@pytest.fixture
def sample_image(tmp_path):
    return make_image(tmp_path / "cover.png")


@pytest.fixture
def composer(books_api):
    return PostComposer(
        books=BooksApiClient(API_URL, transport=books_api.transport()),
        picker=FakePicker(),
        token_source=fixed_token,
    )


@pytest.fixture
def filled_composer(composer, sample_image):
    """Composer with a complete draft: Dune, 5 stars, a PNG cover."""
    composer.picker.uri = sample_image.resolve().as_uri()
    composer.set_title("Dune")
    composer.set_caption("Great read")
    composer.select_rating(5)
    return composer


@pytest_asyncio.fixture(scope="function")
async def session_factory():
    """
    Creates a fresh in-memory database for each test function.
    StaticPool keeps that database alive across sessions.
    """
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(session_factory, books_api, tmp_path, monkeypatch):
    """
    AsyncClient against the app with the token store pointed at the test
    database and a fresh screen wired to the fake books API.
    """
    monkeypatch.delenv("BOOKS_API_TOKEN", raising=False)
    original_store_session = store.async_session
    original_composer = main.app.state.composer

    store.async_session = session_factory
    main.app.state.composer = PostComposer(
        books=BooksApiClient(API_URL, transport=books_api.transport()),
        picker=LocalImagePicker(tmp_path / "media"),
        platform="android",
    )

    transport = ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    store.async_session = original_store_session
    main.app.state.composer = original_composer


@pytest.fixture
def image_factory(tmp_path):
    def _make(name="cover.png", size=(800, 400), fmt="PNG"):
        return make_image(tmp_path / name, size=size, fmt=fmt)

    return _make
