# book_composer/routes/composer.py
import asyncio
import logging
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from book_composer.composer import PostComposer
from book_composer.image_picker import LocalImagePicker
from book_composer.models import ScreenView, TextIn
from book_composer.perf import timed_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/composer", tags=["composer"])


def get_composer(request: Request) -> PostComposer:
    return request.app.state.composer


def save_upload(upload: BinaryIO, suffix: str) -> Path:
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        shutil.copyfileobj(upload, tmp)
    return Path(tmp.name)


@router.get("")
async def screen(composer: PostComposer = Depends(get_composer)) -> ScreenView:
    return composer.view()


@router.put("/title")
async def edit_title(
    payload: TextIn, composer: PostComposer = Depends(get_composer)
) -> ScreenView:
    composer.set_title(payload.text)
    return composer.view()


@router.put("/caption")
async def edit_caption(
    payload: TextIn, composer: PostComposer = Depends(get_composer)
) -> ScreenView:
    composer.set_caption(payload.text)
    return composer.view()


@router.put("/rating/{position}")
async def pick_rating(
    position: int, composer: PostComposer = Depends(get_composer)
) -> ScreenView:
    try:
        composer.select_rating(position)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return composer.view()


@router.post("/image")
@timed_action("select image")
async def pick_image(
    file: UploadFile | None = File(None),
    composer: PostComposer = Depends(get_composer),
) -> ScreenView:
    """
    Runs image selection. The uploaded file is what the user "picks";
    posting without a file is the same as closing the picker.
    """
    staged = None
    if isinstance(composer.picker, LocalImagePicker):
        if file is not None:
            staged = await asyncio.to_thread(
                save_upload, file.file, Path(file.filename or "").suffix
            )
        composer.picker.stage(staged)

    try:
        await composer.select_image()
    finally:
        if staged is not None:
            staged.unlink(missing_ok=True)

    return composer.view()


@router.delete("/image")
async def remove_image(composer: PostComposer = Depends(get_composer)) -> ScreenView:
    composer.clear_image()
    return composer.view()


@router.post("/submit")
@timed_action("share")
async def submit(composer: PostComposer = Depends(get_composer)) -> ScreenView:
    # Failures come back as notices on the view, never as HTTP errors
    await composer.submit()
    return composer.view()


@router.delete("/notices")
async def dismiss_notices(
    composer: PostComposer = Depends(get_composer),
) -> ScreenView:
    composer.alerts.dismiss_all()
    return composer.view()

