from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from config import ACCESS_TOKEN_EXPIRE_MINUTES
from database import get_session, store_operation
from models import Profile
from schemas.user_schema import (
    LoginSchema,
    PasswordChangeSchema,
    ProfileReadSchema,
    ProfileUpdateSchema,
    SignupSchema,
    Token,
)
from security.token_jwt import create_access_token
from security.oauth2 import get_current_user
from services import profiles as profile_service

router = APIRouter(tags=["Auth"])


@router.post("/signup", response_model=ProfileReadSchema, status_code=status.HTTP_201_CREATED)
def signup(req: SignupSchema, db: Session = Depends(get_session)):
    with store_operation(db, "create account"):
        return profile_service.signup(db, req)


@router.post("/login", response_model=Token, status_code=status.HTTP_202_ACCEPTED)
def login(req: LoginSchema, db: Session = Depends(get_session)):
    user = profile_service.authenticate(db, req.email, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    # 🚫 Check if the user is deactivated
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Login failed. Please contact admin."
        )

    expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    token = create_access_token(
        data={
            "sub": user.email,
            "user_id": user.id,
            "name": user.full_name,
            "role": user.role.value,
        },
        expires_delta=expires
    )
    return Token(access_token=token)


@router.get("/me", response_model=ProfileReadSchema)
def get_current_user_info(current_user: Profile = Depends(get_current_user)):
    """Get current user information"""
    return current_user


@router.patch("/me", response_model=ProfileReadSchema)
def update_current_user(
    payload: ProfileUpdateSchema,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "update profile"):
        return profile_service.update_profile(db, current_user, payload)


@router.post("/me/password", status_code=status.HTTP_200_OK)
def change_password(
    payload: PasswordChangeSchema,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "update password"):
        profile_service.change_password(db, current_user, payload.new_password, payload.confirm_password)
    return {"message": "Password updated successfully"}
