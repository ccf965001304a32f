# auth.py
# signup/login + bearer JWT dependency. routes that need a user take Depends(get_current_user)

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
import jwt
from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool
from config import Settings
from errors import AuthError, ValidationError
from models import AuthResponse, LoginRequest, SignupRequest, UserOut
from store import UserStore

log = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        return False


def issue_token(user_id: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {"id": user_id, "iat": now, "exp": now + timedelta(hours=settings.jwt_ttl_hours)}
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")


def verify_token(token: str, settings: Settings) -> str:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
    except jwt.PyJWTError as e:
        raise AuthError("Invalid token") from e
    user_id = payload.get("id")
    if not user_id:
        raise AuthError("Invalid token")
    return str(user_id)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_users(request: Request) -> UserStore:
    return request.app.state.users


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> str:
    """Owner id from `Authorization: Bearer <token>`."""
    if not authorization:
        raise AuthError("No token")
    parts = authorization.split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise AuthError("No token")
    return verify_token(token, settings)


def _auth_response(user: dict, settings: Settings) -> AuthResponse:
    user_id = str(user["_id"])
    return AuthResponse(
        token=issue_token(user_id, settings),
        user=UserOut(id=user_id, name=user.get("name"), email=user["email"]),
    )


@auth_router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(req: SignupRequest, settings: Settings = Depends(get_settings),
                 users: UserStore = Depends(get_users)):
    email = req.email.strip().lower()
    if len(req.password.encode()) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    hashed = await run_in_threadpool(hash_password, req.password)
    user = await run_in_threadpool(users.create, email, hashed, req.name)
    log.info("signup %s", email)
    return _auth_response(user, settings)


@auth_router.post("/login", response_model=AuthResponse)
async def login(req: LoginRequest, settings: Settings = Depends(get_settings),
                users: UserStore = Depends(get_users)):
    email = req.email.strip().lower()
    user = await run_in_threadpool(users.by_email, email)
    if not user or not await run_in_threadpool(check_password, req.password, user["password_hash"]):
        raise AuthError("Invalid email or password")
    return _auth_response(user, settings)
