"""
HTTP routes for the photoboard API.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from photoboard.config import Settings
from photoboard.db import AccountRecord, DbClient, PhotoRecord
from photoboard.dependencies import (
    get_app_settings,
    get_db_client,
    get_media_relay,
    get_token_issuer,
)
from photoboard.errors import (
    InvalidCredentialsError,
    MediaRelayError,
    PhotoNotFoundError,
)
from photoboard.likes import toggle_like
from photoboard.media import MediaRelay
from photoboard.passwords import find_account_by_credentials, hash_password
from photoboard.schemas import (
    AccountResponse,
    HealthResponse,
    LikeRequest,
    LoginRequest,
    LoginResponse,
    PhotoResponse,
    PhotoWithOwnerResponse,
    SignupRequest,
)
from photoboard.tokens import TokenIssuer

logger = logging.getLogger(__name__)

router = APIRouter()

# Keys that may not be smuggled into the stored profile.
RESERVED_PROFILE_KEYS = frozenset({"_id", "id", "username", "password", "password_hash"})


def _account_response(account: AccountRecord) -> AccountResponse:
    profile = {
        k: v for k, v in account.profile.items() if k not in RESERVED_PROFILE_KEYS
    }
    return AccountResponse(_id=account.account_id, username=account.username, **profile)


def _photo_response(photo: PhotoRecord) -> PhotoResponse:
    return PhotoResponse(
        _id=photo.photo_id,
        url=photo.url,
        user=photo.user_id,
        likes=photo.likes,
        likedBy=list(photo.liked_by),
    )


def _photo_with_owner(
    photo: PhotoRecord, owner: Optional[AccountRecord]
) -> PhotoWithOwnerResponse:
    return PhotoWithOwnerResponse(
        _id=photo.photo_id,
        url=photo.url,
        user=_account_response(owner) if owner else None,
        likes=photo.likes,
        likedBy=list(photo.liked_by),
    )


def _with_owners(
    db: DbClient, photos: Iterable[PhotoRecord]
) -> list[PhotoWithOwnerResponse]:
    photos = list(photos)
    owners = db.get_accounts(photo.user_id for photo in photos)
    return [_photo_with_owner(photo, owners.get(photo.user_id)) for photo in photos]


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


@router.post("/signup", response_model=AccountResponse)
def signup(
    payload: SignupRequest,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_app_settings),
):
    profile = {
        k: v
        for k, v in (payload.model_extra or {}).items()
        if k not in RESERVED_PROFILE_KEYS
    }
    account = db.create_account(
        payload.username,
        hash_password(payload.password, rounds=settings.bcrypt_rounds),
        profile,
    )
    logger.info("Created account %s", account.account_id)
    return _account_response(account)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    try:
        account = find_account_by_credentials(db, payload.username, payload.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(token=tokens.issue(account.account_id))


@router.post("/upload", response_model=PhotoResponse)
async def upload_photo(
    image: UploadFile | None = File(None),
    userId: str | None = Form(None),
    db: DbClient = Depends(get_db_client),
    media: MediaRelay = Depends(get_media_relay),
):
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not userId:
        raise HTTPException(status_code=400, detail="userId is required")

    try:
        url = await run_in_threadpool(
            media.upload,
            data,
            filename=image.filename,
            content_type=image.content_type,
        )
    except MediaRelayError:
        logger.exception("Media upload failed for user %s", userId)
        raise HTTPException(status_code=500, detail="Error uploading to media host")

    photo = await run_in_threadpool(db.create_photo, url, userId)
    logger.info("Created photo %s for user %s", photo.photo_id, userId)
    return _photo_response(photo)


@router.post("/like", response_model=PhotoWithOwnerResponse)
def like_photo(payload: LikeRequest, db: DbClient = Depends(get_db_client)):
    """
    Toggle the caller's like on a photo: likes it if not yet liked, unlikes
    it otherwise.
    """
    try:
        photo = toggle_like(db, payload.photoId, payload.userId)
    except PhotoNotFoundError:
        raise HTTPException(status_code=404, detail="Photo not found")
    return _photo_with_owner(photo, db.get_account(photo.user_id))


@router.get("/photos", response_model=list[PhotoWithOwnerResponse])
def list_photos(db: DbClient = Depends(get_db_client)):
    return _with_owners(db, db.list_photos())


@router.get("/top-photos", response_model=list[PhotoWithOwnerResponse])
def top_photos(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_app_settings),
):
    return _with_owners(db, db.list_top_photos(settings.top_photos_limit))
