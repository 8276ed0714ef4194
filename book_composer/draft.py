# book_composer/draft.py
"""
The in-progress book recommendation held by the composer screen.

A draft lives only in memory. It is created when the screen mounts,
mutated by user input and reset after a successful submission.
"""
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_RATING = 3
MAX_RATING = 5
DEFAULT_FILE_TYPE = "jpg"


@dataclass(frozen=True)
class SelectedImage:
    local_uri: str
    mime_type: str
    file_name: str


@dataclass
class DraftPost:
    title: str = ""
    caption: str = ""
    rating: int = DEFAULT_RATING
    selected_image: Optional[SelectedImage] = None


def image_info_from_uri(uri: str) -> SelectedImage:
    """
    Derives the upload content type and file name from a picked image URI.

    Everything after the last "." of the final path segment is taken as the
    file type, so "file:///tmp/cover.png" becomes image/png + photo.png.
    A segment without a dot defaults to jpg, as does one that ends in a dot.
    """
    parts = uri.rsplit("/", 1)[-1].split(".")
    file_type = parts[-1] if len(parts) > 1 and parts[-1] else DEFAULT_FILE_TYPE
    return SelectedImage(
        local_uri=uri,
        mime_type=f"image/{file_type}",
        file_name=f"photo.{file_type}",
    )


def missing_fields(draft: DraftPost) -> List[str]:
    """Names of the required fields that are not filled in yet."""
    missing = []
    if not draft.title:
        missing.append("title")
    if not draft.caption:
        missing.append("caption")
    if not draft.selected_image:
        missing.append("image")
    # 0 is treated the same as "no rating"
    if not draft.rating:
        missing.append("rating")
    return missing


def is_complete(draft: DraftPost) -> bool:
    return not missing_fields(draft)
