"""
Pydantic schemas for the photoboard HTTP API.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    # Extra profile fields are accepted and stored alongside the account.
    model_config = ConfigDict(extra="allow")

    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1, max_length=256)


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str


class LikeRequest(BaseModel):
    photoId: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1)


class AccountResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    username: str


class PhotoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    url: str
    user: str
    likes: int = Field(..., ge=0)
    likedBy: list[str]


class PhotoWithOwnerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    url: str
    user: Optional[AccountResponse] = None
    likes: int = Field(..., ge=0)
    likedBy: list[str]


class HealthResponse(BaseModel):
    status: Literal["ok"]
