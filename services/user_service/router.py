from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.config.settings import SIGNIN_RATE_LIMIT
from shared.security import get_current_user, limiter

from .schemas import SigninResponse, TokenRefresh, TokenResponse, UserCreate, UserResponse, UserSignin
from .service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("", response_model=UserResponse, summary="Create a user account")
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return await UserService.register(db, payload)


@router.post("/signin", response_model=SigninResponse, summary="Authenticate and receive a JWT")
@limiter.limit(SIGNIN_RATE_LIMIT)
async def signin(request: Request, payload: UserSignin, db: AsyncSession = Depends(get_db)):
    return await UserService.signin(db, payload)


@router.post("/refresh", response_model=TokenResponse, summary="Exchange a valid token for a fresh one")
async def refresh(payload: TokenRefresh):
    return UserService.refresh(payload.token)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await UserService.get_user_by_id(db, user_id)
