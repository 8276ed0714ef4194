# book_composer/composer.py
"""
The "Add Book Recommendation" screen.

PostComposer owns one draft and the submitting flag. Every failure is
converted into an alert here; nothing propagates past the screen.
"""
import logging
from contextlib import contextmanager
from typing import Awaitable, Callable, List, Optional

from book_composer.books_client import GENERIC_ERROR, BooksApiClient
from book_composer.draft import (
    MAX_RATING,
    DraftPost,
    image_info_from_uri,
    is_complete,
)
from book_composer.image_picker import ImagePicker, PickerOptions
from book_composer.models import (
    ImageField,
    ScreenView,
    Star,
    SubmitButton,
    TextField,
)
from book_composer.perf import async_perf_log
from book_composer.store import get_token
from book_composer.ui import HOME_ROUTE, Alerts, Navigator

logger = logging.getLogger(__name__)

STAR_COLOR = "#f4b400"
TEXT_SECONDARY = "#688f68"

# Picker settings used for every selection
PICKER_OPTIONS = PickerOptions(
    media_types="images",
    allows_editing=True,
    aspect=(4, 3),
    quality=0.3,
)


class PostComposer:
    def __init__(
        self,
        books: BooksApiClient,
        picker: ImagePicker,
        alerts: Alerts | None = None,
        navigator: Navigator | None = None,
        token_source: Callable[[], Awaitable[Optional[str]]] = get_token,
        platform: str = "ios",
    ):
        self.books = books
        self.picker = picker
        self.alerts = alerts or Alerts()
        self.navigator = navigator or Navigator()
        self.token_source = token_source
        self.platform = platform

        self.draft = DraftPost()
        self.submitting = False

    # --- Field edits ---
    def set_title(self, text: str) -> None:
        self.draft.title = text

    def set_caption(self, text: str) -> None:
        self.draft.caption = text

    def select_rating(self, position: int) -> None:
        if not 1 <= position <= MAX_RATING:
            raise ValueError(f"Rating must be between 1 and {MAX_RATING}")
        self.draft.rating = position

    def _release_image(self, keep: Optional[str] = None) -> None:
        image = self.draft.selected_image
        if image is not None and image.local_uri != keep:
            self.picker.release(image.local_uri)

    def clear_image(self) -> None:
        self._release_image()
        self.draft.selected_image = None

    def reset(self) -> None:
        self._release_image()
        self.draft = DraftPost()

    def rating_stars(self) -> List[Star]:
        stars = []
        for i in range(1, MAX_RATING + 1):
            filled = i <= self.draft.rating
            stars.append(
                Star(
                    position=i,
                    filled=filled,
                    icon="star" if filled else "star-outline",
                    color=STAR_COLOR if filled else TEXT_SECONDARY,
                )
            )
        return stars

    # --- Image selection ---
    async def select_image(self) -> None:
        try:
            if self.platform != "web":
                permission = await self.picker.request_media_library_permissions()
                if not permission.granted:
                    self.alerts.alert(
                        "Permission Denied",
                        "We need camera roll permissions to upload an image",
                    )
                    return

            result = await self.picker.launch_image_library(PICKER_OPTIONS)

            if not result.canceled:
                asset = result.assets[0]
                self._release_image(keep=asset.uri)
                self.draft.selected_image = image_info_from_uri(asset.uri)
        except Exception as e:
            logger.error(f"Error picking image: {e}")
            self.alerts.alert("Error", "There was a problem selecting your image")

    # --- Submission ---
    @contextmanager
    def _submitting(self):
        self.submitting = True
        try:
            yield
        finally:
            self.submitting = False

    async def submit(self) -> bool:
        """Validates and posts the draft. Returns True when the post was created."""
        if not is_complete(self.draft):
            self.alerts.alert("Error", "Please fill in all fields")
            return False

        draft = self.draft
        with self._submitting():
            try:
                async with async_perf_log("Create book recommendation", logger):
                    token = await self.token_source()
                    await self.books.create_book(
                        token,
                        title=draft.title,
                        caption=draft.caption,
                        rating=draft.rating,
                        image=draft.selected_image,
                    )
            except Exception as e:
                logger.error(f"Error creating post: {e}")
                message = getattr(e, "message", None)
                self.alerts.alert("Error", str(message) if message else GENERIC_ERROR)
                return False

            self.alerts.alert("Success", "Your book recommendation has been posted!")
            self.reset()
            self.navigator.push(HOME_ROUTE)
            return True

    # --- Rendering ---
    def view(self) -> ScreenView:
        image = self.draft.selected_image
        return ScreenView(
            header="Add Book Recommendation",
            subtitle="Share your favourite reads with others",
            title=TextField(
                label="Book Title",
                placeholder="Enter book title",
                value=self.draft.title,
            ),
            rating_label="Your Rating",
            rating=self.draft.rating,
            stars=self.rating_stars(),
            image=ImageField(preview_uri=image.local_uri if image else None),
            caption=TextField(
                label="Caption",
                placeholder="Write your review or thoughts about this book...",
                value=self.draft.caption,
                multiline=True,
            ),
            submit=SubmitButton(enabled=not self.submitting, loading=self.submitting),
            notices=list(self.alerts.notices),
            route=self.navigator.current_route,
        )

