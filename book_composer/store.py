import os
from typing import Optional

import dotenv
from sqlalchemy import String, delete, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

dotenv.load_dotenv()

DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///./app.db")
TOKEN_KEY = "books_api_token"

# Database setup
engine = create_async_engine(
    DB_URL,
    echo=False,
)
async_session = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


class Token(Base):
    __tablename__ = "tokens"
    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(String(50), unique=True)
    value: Mapped[str] = mapped_column(String(500))


async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Token Helpers ---
async def get_token(key: str = TOKEN_KEY) -> Optional[str]:
    async with async_session() as session:
        result = await session.execute(select(Token).where(Token.key == key))
        token = result.scalar_one_or_none()
        return token.value if token else os.environ.get("BOOKS_API_TOKEN")


async def set_token(value: str, key: str = TOKEN_KEY) -> None:
    async with async_session() as session:
        result = await session.execute(select(Token).where(Token.key == key))
        token = result.scalar_one_or_none()
        if token:
            token.value = value
        else:
            session.add(Token(key=key, value=value))
        await session.commit()


async def clear_token(key: str = TOKEN_KEY) -> None:
    async with async_session() as session:
        await session.execute(delete(Token).where(Token.key == key))
        await session.commit()
