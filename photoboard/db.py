"""
Database abstraction for accounts and photos, with a SQLAlchemy-backed
implementation (Postgres in production) and an in-memory one for tests.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Protocol

from sqlalchemy import JSON, Column, Float, Integer, String, create_engine, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from photoboard.errors import DatabaseUnavailableError, PhotoNotFoundError
from photoboard.likes import apply_toggle

logger = logging.getLogger(__name__)


class DbClient(Protocol):
    """Interface for database access."""

    def create_account(
        self, username: str, password_hash: str, profile: dict | None = None
    ) -> "AccountRecord":
        ...

    def get_account(self, account_id: str) -> Optional["AccountRecord"]:
        ...

    def get_accounts(self, account_ids: Iterable[str]) -> dict[str, "AccountRecord"]:
        ...

    def find_accounts_by_username(self, username: str) -> list["AccountRecord"]:
        ...

    def create_photo(self, url: str, user_id: str) -> "PhotoRecord":
        ...

    def get_photo(self, photo_id: str) -> Optional["PhotoRecord"]:
        ...

    def list_photos(self) -> list["PhotoRecord"]:
        ...

    def list_top_photos(self, limit: int) -> list["PhotoRecord"]:
        ...

    def toggle_like(self, photo_id: str, actor_id: str) -> "PhotoRecord":
        ...

    def close(self) -> None:
        ...


@dataclass
class AccountRecord:
    account_id: str
    username: str
    password_hash: str
    profile: dict = field(default_factory=dict)
    created_at: float = field(default_factory=lambda: time.time())


@dataclass
class PhotoRecord:
    photo_id: str
    url: str
    user_id: str
    likes: int = 0
    liked_by: list[str] = field(default_factory=list)
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "photo_id": self.photo_id,
            "url": self.url,
            "user_id": self.user_id,
            "likes": self.likes,
            "liked_by": list(self.liked_by),
            "created_at": self.created_at,
        }


def _rank(photos: Iterable[PhotoRecord], limit: int) -> list[PhotoRecord]:
    if limit <= 0:
        return []
    # sorted() is stable, so equal like counts keep store order.
    return sorted(photos, key=lambda photo: photo.likes, reverse=True)[:limit]


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.accounts: Dict[str, AccountRecord] = {}
        self.photos: Dict[str, PhotoRecord] = {}
        self._toggle_lock = threading.Lock()

    def create_account(
        self, username: str, password_hash: str, profile: dict | None = None
    ) -> AccountRecord:
        record = AccountRecord(
            account_id=uuid.uuid4().hex,
            username=username,
            password_hash=password_hash,
            profile=dict(profile or {}),
        )
        self.accounts[record.account_id] = record
        return record

    def get_account(self, account_id: str) -> Optional[AccountRecord]:
        return self.accounts.get(account_id)

    def get_accounts(self, account_ids: Iterable[str]) -> dict[str, AccountRecord]:
        return {
            account_id: self.accounts[account_id]
            for account_id in set(account_ids)
            if account_id in self.accounts
        }

    def find_accounts_by_username(self, username: str) -> list[AccountRecord]:
        return [a for a in self.accounts.values() if a.username == username]

    def create_photo(self, url: str, user_id: str) -> PhotoRecord:
        record = PhotoRecord(photo_id=uuid.uuid4().hex, url=url, user_id=user_id)
        self.photos[record.photo_id] = record
        return record

    def get_photo(self, photo_id: str) -> Optional[PhotoRecord]:
        return self.photos.get(photo_id)

    def list_photos(self) -> list[PhotoRecord]:
        return list(self.photos.values())

    def list_top_photos(self, limit: int) -> list[PhotoRecord]:
        return _rank(self.photos.values(), limit)

    def toggle_like(self, photo_id: str, actor_id: str) -> PhotoRecord:
        with self._toggle_lock:
            photo = self.photos.get(photo_id)
            if photo is None:
                raise PhotoNotFoundError(photo_id)
            toggled = apply_toggle(photo, actor_id)
            self.photos[photo_id] = toggled
            return toggled

    def close(self) -> None:
        pass


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, **engine_kwargs):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        engine_kwargs.setdefault("pool_pre_ping", True)
        if not database_url.startswith("sqlite"):
            engine_kwargs.setdefault("pool_recycle", 1800)
        try:
            self.engine = create_engine(database_url, future=True, **engine_kwargs)
        except (SQLAlchemyError, ImportError) as exc:
            # Malformed URL or missing DBAPI driver.
            raise DatabaseUnavailableError(str(exc)) from exc
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )

    def connect(self) -> None:
        """
        Verify the database is reachable and create missing tables.

        Raises DatabaseUnavailableError when the connection cannot be made.
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise DatabaseUnavailableError(str(exc)) from exc
        logger.info("Database connected: %s", self.engine.url.render_as_string())

    def close(self) -> None:
        self.engine.dispose()

    def _to_account_record(self, row: "AccountRow") -> AccountRecord:
        return AccountRecord(
            account_id=row.account_id,
            username=row.username,
            password_hash=row.password_hash,
            profile=dict(row.profile or {}),
            created_at=row.created_at,
        )

    def _to_photo_record(self, row: "PhotoRow") -> PhotoRecord:
        return PhotoRecord(
            photo_id=row.photo_id,
            url=row.url,
            user_id=row.user_id,
            likes=row.likes,
            liked_by=list(row.liked_by or []),
            created_at=row.created_at,
        )

    def create_account(
        self, username: str, password_hash: str, profile: dict | None = None
    ) -> AccountRecord:
        with self.Session() as session:
            row = AccountRow(
                account_id=uuid.uuid4().hex,
                username=username,
                password_hash=password_hash,
                profile=dict(profile or {}),
                created_at=time.time(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_account_record(row)

    def get_account(self, account_id: str) -> Optional[AccountRecord]:
        with self.Session() as session:
            stmt = select(AccountRow).where(AccountRow.account_id == account_id)
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return self._to_account_record(row)

    def get_accounts(self, account_ids: Iterable[str]) -> dict[str, AccountRecord]:
        ids = set(account_ids)
        if not ids:
            return {}
        with self.Session() as session:
            stmt = select(AccountRow).where(AccountRow.account_id.in_(ids))
            rows = session.execute(stmt).scalars().all()
            return {row.account_id: self._to_account_record(row) for row in rows}

    def find_accounts_by_username(self, username: str) -> list[AccountRecord]:
        with self.Session() as session:
            stmt = (
                select(AccountRow)
                .where(AccountRow.username == username)
                .order_by(AccountRow.seq.asc())
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_account_record(row) for row in rows]

    def create_photo(self, url: str, user_id: str) -> PhotoRecord:
        with self.Session() as session:
            row = PhotoRow(
                photo_id=uuid.uuid4().hex,
                url=url,
                user_id=user_id,
                likes=0,
                liked_by=[],
                created_at=time.time(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_photo_record(row)

    def get_photo(self, photo_id: str) -> Optional[PhotoRecord]:
        with self.Session() as session:
            stmt = select(PhotoRow).where(PhotoRow.photo_id == photo_id)
            row = session.execute(stmt).scalar_one_or_none()
            if not row:
                return None
            return self._to_photo_record(row)

    def list_photos(self) -> list[PhotoRecord]:
        with self.Session() as session:
            stmt = select(PhotoRow).order_by(PhotoRow.seq.asc())
            rows = session.execute(stmt).scalars().all()
            return [self._to_photo_record(row) for row in rows]

    def list_top_photos(self, limit: int) -> list[PhotoRecord]:
        if limit <= 0:
            return []
        with self.Session() as session:
            stmt = (
                select(PhotoRow)
                .order_by(PhotoRow.likes.desc(), PhotoRow.seq.asc())
                .limit(limit)
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_photo_record(row) for row in rows]

    def toggle_like(self, photo_id: str, actor_id: str) -> PhotoRecord:
        with self.Session() as session:
            # Row lock serializes concurrent toggles on the same photo.
            row = session.execute(locked_photo_select(photo_id)).scalar_one_or_none()
            if not row:
                raise PhotoNotFoundError(photo_id)
            toggled = apply_toggle(self._to_photo_record(row), actor_id)
            row.liked_by = list(toggled.liked_by)
            row.likes = toggled.likes
            session.commit()
            return toggled


def locked_photo_select(photo_id: str):
    """SELECT of one photo row holding a row lock until commit."""
    return select(PhotoRow).where(PhotoRow.photo_id == photo_id).with_for_update()


Base = declarative_base()


class AccountRow(Base):
    __tablename__ = "accounts"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String, nullable=False, unique=True, index=True)
    username = Column(String, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    profile = Column(JSON, nullable=False, default=dict)
    created_at = Column(Float, nullable=False)


class PhotoRow(Base):
    __tablename__ = "photos"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    photo_id = Column(String, nullable=False, unique=True, index=True)
    url = Column(String, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    likes = Column(Integer, nullable=False, default=0, index=True)
    liked_by = Column(JSON, nullable=False, default=list)
    created_at = Column(Float, nullable=False)
