"""
Authentication API routes.

Endpoints: register, login, photo, me.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
import logging

from newsdesk.api.dependencies import get_upload_dir
from newsdesk.api.schemas import (
    LoginRequest,
    LoginResponse,
    PhotoResponse,
    RegisterResponse,
    UserOut,
)
from newsdesk.auth.dependencies import get_auth_service, get_current_user
from newsdesk.auth.service import AuthService, DuplicateEmailError
from newsdesk.core.models import User
from newsdesk.utils.uploads import photo_filename, save_upload

logger = logging.getLogger(__name__)

router = APIRouter()


async def _store_photo(photo: Optional[UploadFile], upload_dir: Path) -> Optional[str]:
    if photo is None or not photo.filename:
        return None
    filename = photo_filename(photo.filename)
    await save_upload(photo, upload_dir, filename)
    return f"/uploads/{filename}"


# ── Registration ──

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    userName: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    userPass: Optional[str] = Form(None),
    userPhoto: Optional[UploadFile] = File(None),
    auth: AuthService = Depends(get_auth_service),
    upload_dir: Path = Depends(get_upload_dir),
):
    """Register a new user account (multipart, optional photo)."""
    if not userName or not email or not userPass:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields (userName, email, userPass) are required.",
        )

    photo_url = await _store_photo(userPhoto, upload_dir)
    try:
        user = await auth.create_user(
            user_name=userName, email=email, password=userPass, photo=photo_url
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    token, _ = auth.create_access_token(user.id)
    return RegisterResponse(
        message="User registered successfully!", user_id=user.id, token=token
    )


# ── Login ──

@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Authenticate with email and password."""
    if not req.email or not req.user_pass:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required.",
        )

    user, matched = await auth.authenticate(req.email, req.user_pass)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found. Please check your email.",
        )
    if not matched:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials. Please check your password.",
        )

    token, _ = auth.create_access_token(user.id)
    return LoginResponse(
        message="Login successful!", token=token, user=UserOut.from_user(user)
    )


# ── Profile ──

@router.get("/me", response_model=UserOut)
async def get_profile(user: User = Depends(get_current_user)):
    """Get current user profile."""
    return UserOut.from_user(user)


@router.post("/photo", response_model=PhotoResponse)
async def update_photo(
    userPhoto: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
    upload_dir: Path = Depends(get_upload_dir),
):
    """Replace the current user's photo."""
    photo_url = await _store_photo(userPhoto, upload_dir)
    if photo_url is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

    updated = await auth.update_photo(user.id, photo_url)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")

    return PhotoResponse(message="Photo updated successfully!", user=UserOut.from_user(updated))
