# book_composer/image_picker.py
"""
Image selection for the composer.

ImagePicker is the seam the screen depends on. LocalImagePicker is the
server-side implementation: the front end stages a candidate file (an
upload), and launching the library "picks" it, applying the requested
crop and quality the way a phone's editor would.
"""
import asyncio
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlparse

from PIL import Image

logger = logging.getLogger(__name__)

GRANTED = "granted"
DENIED = "denied"


@dataclass
class PermissionResponse:
    status: str

    @property
    def granted(self) -> bool:
        return self.status == GRANTED


@dataclass
class PickerOptions:
    media_types: str = "images"
    allows_editing: bool = False
    aspect: Tuple[int, int] = (4, 3)
    quality: float = 1.0  # 0..1 compression hint


@dataclass
class PickedAsset:
    uri: str


@dataclass
class PickerResult:
    canceled: bool
    assets: List[PickedAsset] = field(default_factory=list)


class ImagePicker(ABC):
    @abstractmethod
    async def request_media_library_permissions(self) -> PermissionResponse:
        ...

    @abstractmethod
    async def launch_image_library(self, options: PickerOptions) -> PickerResult:
        ...

    def release(self, uri: str) -> None:
        """Called when a picked image is no longer needed by the screen."""


def crop_to_aspect(image: Image.Image, aspect: Tuple[int, int]) -> Image.Image:
    """Centre-crops an image to the given width:height ratio."""
    width, height = image.size
    target = aspect[0] / aspect[1]
    if width / height > target:
        new_width = round(height * target)
        left = (width - new_width) // 2
        return image.crop((left, 0, left + new_width, height))
    new_height = round(width / target)
    top = (height - new_height) // 2
    return image.crop((0, top, width, top + new_height))


def edit_image(source: Path, target: Path, options: PickerOptions) -> Tuple[int, int]:
    """Writes the cropped, re-encoded copy of source to target. Returns its size."""
    with Image.open(source) as original:
        fmt = original.format
        edited = crop_to_aspect(original, options.aspect)
        if fmt == "JPEG" and edited.mode not in ("RGB", "L"):
            edited = edited.convert("RGB")
        edited.save(
            target,
            format=fmt,
            quality=max(1, int(options.quality * 100)),
        )
    return edited.size


class LocalImagePicker(ImagePicker):
    def __init__(self, media_dir: str | Path):
        self.media_dir = Path(media_dir)
        self.staged: Optional[Path] = None

    def stage(self, path: str | Path | None) -> None:
        """Offers a file for the next launch. None means the user backs out."""
        self.staged = Path(path) if path is not None else None

    async def request_media_library_permissions(self) -> PermissionResponse:
        self.media_dir.mkdir(parents=True, exist_ok=True)
        if os.access(self.media_dir, os.R_OK | os.W_OK):
            return PermissionResponse(GRANTED)
        logger.warning(f"Media directory {self.media_dir} is not accessible")
        return PermissionResponse(DENIED)

    async def launch_image_library(self, options: PickerOptions) -> PickerResult:
        source, self.staged = self.staged, None
        if source is None:
            return PickerResult(canceled=True)

        if not options.allows_editing:
            return PickerResult(canceled=False, assets=[PickedAsset(source.resolve().as_uri())])

        self.media_dir.mkdir(parents=True, exist_ok=True)
        target = self.media_dir / f"{uuid.uuid4().hex}{source.suffix.lower()}"
        try:
            size = await asyncio.to_thread(edit_image, source, target, options)
        except Exception:
            target.unlink(missing_ok=True)
            raise

        logger.info(f"Picked {source.name} -> {target.name} {size}")
        return PickerResult(canceled=False, assets=[PickedAsset(target.resolve().as_uri())])

    def release(self, uri: str) -> None:
        """Deletes an edited copy. Files outside the media directory are left alone."""
        path = Path(unquote(urlparse(uri).path)).resolve()
        if path.parent != self.media_dir.resolve():
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove {path.name}: {e}")
            return
        logger.info(f"Released {path.name}")
