import logging
from contextlib import asynccontextmanager

import dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from book_composer.books_client import BooksApiClient
from book_composer.composer import PostComposer
from book_composer.image_picker import LocalImagePicker
from book_composer.perf import request_timing_middleware
from book_composer.routes import auth, composer
from book_composer.settings_loader import load_settings
from book_composer.store import init_db

logger = logging.getLogger(__name__)
logging.basicConfig()
logging.getLogger("book_composer").setLevel(logging.INFO)

dotenv.load_dotenv()

settings = load_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Initialize database
    await init_db()
    logger.info(f"Composer ready, posting to {settings.api_url}/books")
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_timing_middleware)

# One screen instance per process
app.state.composer = PostComposer(
    books=BooksApiClient(settings.api_url),
    picker=LocalImagePicker(settings.media_dir),
    platform=settings.platform,
)

app.include_router(composer.router)
app.include_router(auth.router)
