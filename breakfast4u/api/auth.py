"""
Authentication API endpoints and request-scoped auth dependencies
"""
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from breakfast4u.config import get_settings
from breakfast4u.database import get_db
from breakfast4u.models.user import User, UserRole
from breakfast4u.schemas.common import envelope
from breakfast4u.schemas.user import (
    UserRegister, UserLogin, ProfileUpdate, UserResponse, TokenResponse
)
from breakfast4u.services.access import Actor
from breakfast4u.services.email_service import notify
from breakfast4u.services import email_templates
from breakfast4u.utils.errors import UnauthenticatedError, ForbiddenError, InvalidStateError
from breakfast4u.utils.helpers import utcnow
from breakfast4u.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

router = APIRouter()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# --- Password / token helpers ---

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role.value})


def actor_from_user(user: User) -> Actor:
    return Actor(id=user.id, role=user.role, email=user.email, name=user.name)


async def _resolve_actor(token: str, db: AsyncSession) -> Actor:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise UnauthenticatedError("Not authorized, token failed")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthenticatedError("Not authorized, user not found")
    if not user.is_active:
        raise UnauthenticatedError("Account has been deactivated")
    return actor_from_user(user)


# --- Dependencies ---

async def get_current_actor(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    if not token:
        raise UnauthenticatedError()
    return await _resolve_actor(token, db)


async def get_optional_actor(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[Actor]:
    """Like get_current_actor, but anonymous callers and bad tokens yield None"""
    if not token:
        return None
    try:
        return await _resolve_actor(token, db)
    except UnauthenticatedError:
        return None


def require_roles(*roles: UserRole):
    """Dependency factory gating a route on the caller's role"""
    async def _checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in roles:
            raise ForbiddenError(f"User role {actor.role.value} is not authorized to access this route")
        return actor
    return _checker


# --- Endpoints ---

@router.post("/register", status_code=201)
async def register(
    data: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """Register a customer account and send a welcome email"""
    existing = await db.execute(select(User).where(User.email == data.email))
    if existing.scalar_one_or_none():
        raise InvalidStateError("User already exists with this email")

    user = User(
        name=data.name,
        email=data.email,
        phone=data.phone,
        hashed_password=get_password_hash(data.password),
        role=UserRole.USER,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.email})")

    await notify(user.email, email_templates.welcome(user.name))

    return envelope(
        TokenResponse(access_token=token_for(user), user=UserResponse.model_validate(user)),
        message="User registered successfully",
    )


async def _login(email: str, password: str, db: AsyncSession) -> dict:
    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(password, user.hashed_password):
        raise UnauthenticatedError("Invalid credentials")
    if not user.is_active:
        raise UnauthenticatedError("Account has been deactivated")

    user.last_login = utcnow()
    await db.commit()
    await db.refresh(user)

    token = token_for(user)
    return {
        "success": True,
        "access_token": token,
        "token_type": "bearer",
        "data": UserResponse.model_validate(user).model_dump(),
    }


@router.post("/login")
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """OAuth2 password flow; username is the account email"""
    return await _login(form_data.username, form_data.password, db)


@router.post("/login/json")
async def login_json(data: UserLogin, db: AsyncSession = Depends(get_db)):
    return await _login(data.email, data.password, db)


@router.post("/logout")
async def logout():
    """Tokens are stateless; the client discards its copy"""
    return {"success": True, "message": "User logged out successfully"}


@router.get("/me")
async def get_me(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.id == actor.id))
    return envelope(UserResponse.model_validate(result.scalar_one()))


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.id == actor.id))
    user = result.scalar_one()

    for key, value in data.model_dump(exclude_none=True).items():
        setattr(user, key, value)

    await db.commit()
    await db.refresh(user)
    return envelope(UserResponse.model_validate(user), message="Profile updated successfully")
