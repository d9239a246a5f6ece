import logging

from fastapi import APIRouter, Depends, status

from db import store
from db.database import get_db
from models.user import LoginResponse, UserCredentials, UserPublic
from utils.auth import create_access_token, hash_password, verify_password
from utils.errors import Conflict, Unauthenticated, ValidationError
from utils.normalize import missing_fields

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserPublic)
def register(credentials: UserCredentials, conn = Depends(get_db)):
    """Create an account with an inactive subscription."""
    if missing_fields(credentials.model_dump(), ["email", "password"]):
        raise ValidationError("Email and password are required")
    email = credentials.email.strip().lower()
    user = store.insert_user(conn, email, hash_password(credentials.password))
    if user is None:
        raise Conflict("Email already registered")
    return user

@router.post("/login", response_model=LoginResponse)
def login(credentials: UserCredentials, conn = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    if missing_fields(credentials.model_dump(), ["email", "password"]):
        raise ValidationError("Email and password are required")
    user = store.get_user_by_email(conn, credentials.email.strip().lower())
    if user is None:
        raise ValidationError("User not found")
    if not verify_password(credentials.password, user["password_hash"]):
        raise Unauthenticated("Incorrect password")
    logger.info("User %s logged in", user["id"])
    return {"token": create_access_token(user["id"]), "user": user}
