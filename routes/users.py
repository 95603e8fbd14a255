import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from database import get_db
from models import User
from auth import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    get_current_active_user,
)
from utils.jwt_handler import REFRESH_TOKEN, decode_jwt_token

logger = logging.getLogger(__name__)

router = APIRouter()


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "securepassword123"
            }
        }
    )


class AuthResponse(BaseModel):
    message: str
    token: str
    refreshToken: str
    email: str
    role: str


class RefreshRequest(BaseModel):
    refreshToken: str


class RefreshResponse(BaseModel):
    accessToken: str


class UserResponse(BaseModel):
    id: int
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)


def _auth_response(user: User, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(user),
        refreshToken=create_refresh_token(user),
        email=user.email,
        role=user.role,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(credentials: Credentials, db: Session = Depends(get_db)):
    email = credentials.email.lower()

    # Check if user exists
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )
    
    # Create new user; roles other than "user" are granted out of band
    new_user = User(
        email=email,
        hashed_password=get_password_hash(credentials.password),
        role="user",
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"New user registered: {new_user.id}")
    return _auth_response(new_user, "User created")


@router.post("/login", response_model=AuthResponse)
def login(credentials: Credentials, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.lower()).first()
    
    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return _auth_response(user, "Login successful")


@router.post("/refresh", response_model=RefreshResponse)
def refresh(request: RefreshRequest, db: Session = Depends(get_db)):
    payload = decode_jwt_token(request.refreshToken, token_type=REFRESH_TOKEN)
    user = None
    if payload and str(payload.get("sub", "")).isdigit():
        user = db.get(User, int(payload["sub"]))

    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    return RefreshResponse(accessToken=create_access_token(user))


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_active_user)):
    return current_user
