# --- Pydantic Models ---
from typing import List

from pydantic import BaseModel

from book_composer.ui import Notice


class TextIn(BaseModel):
    text: str


class TokenIn(BaseModel):
    token: str


class Star(BaseModel):
    position: int
    filled: bool
    icon: str
    color: str


class TextField(BaseModel):
    label: str
    placeholder: str
    value: str
    multiline: bool = False


class ImageField(BaseModel):
    label: str = "Book Image"
    preview_uri: str | None = None
    placeholder: str = "Tap to select image"


class SubmitButton(BaseModel):
    label: str = "Share"
    enabled: bool = True
    loading: bool = False


class ScreenView(BaseModel):
    header: str
    subtitle: str
    title: TextField
    rating_label: str
    rating: int
    stars: List[Star]
    image: ImageField
    caption: TextField
    submit: SubmitButton
    notices: List[Notice]
    route: str
