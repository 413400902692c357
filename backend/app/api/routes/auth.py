"""
Authentication routes for signup and login.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.schemas.user import UserCreate, UserLogin, Token, UserResponse
from app.models.user import User
from app.core.exceptions import ConflictError
from app.core.security import verify_password, get_password_hash, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user. Invites are matched on the email given here."""
    email = user_data.email.lower()
    taken = db.query(User).filter(
        or_(User.username == user_data.username, User.email == email)
    ).first()
    if taken:
        field = "Username" if taken.username == user_data.username else "Email"
        raise ConflictError(f"{field} already exists")

    new_user = User(
        username=user_data.username,
        email=email,
        name=user_data.name or user_data.username,
        hashed_password=get_password_hash(user_data.password)
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"User {new_user.id} signed up")
    return new_user


@router.post("/login", response_model=Token)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange username and password for a bearer token."""
    user = db.query(User).filter(User.username == credentials.username).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    token = create_access_token(data={"sub": user.username, "user_id": user.id})
    return Token(access_token=token)
