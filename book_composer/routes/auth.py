# book_composer/routes/auth.py
from fastapi import APIRouter, HTTPException

from book_composer.models import TokenIn
from book_composer.store import clear_token, get_token, set_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/token")
async def save_token(payload: TokenIn) -> dict:
    if not payload.token.strip():
        raise HTTPException(400, "Empty token")
    await set_token(payload.token.strip())
    return {"connected": True}


@router.delete("/token")
async def logout() -> dict:
    await clear_token()
    return {"connected": bool(await get_token())}


@router.get("/status")
async def status() -> dict:
    """Whether a bearer token is available for submissions"""
    token = await get_token()
    return {"connected": bool(token)}
