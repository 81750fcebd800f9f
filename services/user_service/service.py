from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from shared.config.settings import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_USERNAME
from shared.errors import AuthError, ConflictError, NotFoundError, ValidationError
from shared.security.jwt_handler import create_access_token, verify_access_token

from .models import User, UserRole
from .repository import UserRepository
from .schemas import SigninResponse, TokenResponse, UserCreate, UserSignin

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

logger = structlog.get_logger(__name__)


class UserService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    def _issue_token(user_id: int, username: str) -> SigninResponse:
        token, exp = create_access_token(data={"id": user_id, "username": username})
        return SigninResponse(id=user_id, username=username, exp=exp, token=token)

    @staticmethod
    async def register(db: AsyncSession, data: UserCreate) -> User:
        if not data.username or not data.email or not data.password:
            raise ValidationError("Please provide all the details")

        existing = await UserRepository.find_by_login(db, username=data.username, email=data.email)
        if existing:
            raise ConflictError("This user already exists")

        role = UserRole.ADMIN if (data.role or "").strip().upper() == UserRole.ADMIN.value else UserRole.USER
        user = User(
            username=data.username,
            email=data.email,
            hashed_password=UserService._hash_password(data.password),
            role=role.value,
        )
        try:
            user = await UserRepository.create(db, user)
        except IntegrityError:
            await db.rollback()
            raise ConflictError("This user already exists")
        logger.info("user_created", id=user.id, role=user.role)
        return user

    @staticmethod
    async def signin(db: AsyncSession, data: UserSignin) -> SigninResponse:
        if (not data.username and not data.email) or not data.password:
            raise ValidationError("Not all data is provided")

        # Only the elevated role can obtain a token
        user = await UserRepository.find_by_login(
            db, username=data.username, email=data.email, role=UserRole.ADMIN.value
        )
        if not user:
            raise NotFoundError("User not found", status_code=400)
        if not UserService._verify_password(data.password, user.hashed_password):
            raise ValidationError("Incorrect password")

        logger.info("user_signed_in", id=user.id)
        return UserService._issue_token(user.id, user.username)

    @staticmethod
    def refresh(token: str) -> TokenResponse:
        if not token:
            raise AuthError("Token not specified")
        payload = verify_access_token(token)
        if not payload or payload.get("id") is None:
            raise AuthError("Invalid token")
        issued = UserService._issue_token(payload["id"], payload.get("username") or "")
        return TokenResponse(token=issued.token)

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
        user = await UserRepository.get_by_id(db, user_id)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user

    @staticmethod
    async def ensure_admin(db: AsyncSession) -> None:
        """Seeds the configured ADMIN account when it does not exist yet."""
        if not (ADMIN_USERNAME and ADMIN_EMAIL and ADMIN_PASSWORD):
            return
        if await UserRepository.find_by_login(db, username=ADMIN_USERNAME, email=ADMIN_EMAIL):
            return
        await UserService.register(
            db,
            UserCreate(
                username=ADMIN_USERNAME,
                email=ADMIN_EMAIL,
                password=ADMIN_PASSWORD,
                role=UserRole.ADMIN.value,
            ),
        )
        logger.info("admin_seeded", username=ADMIN_USERNAME)
