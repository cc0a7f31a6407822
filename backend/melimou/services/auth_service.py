"""AuthService — credentials sign-up/sign-in and session reissue."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.auth import issue_session_token
from melimou.core.exceptions import ConflictError, NotFoundError, UnauthenticatedError, ValidationError
from melimou.core.security import hash_password, verify_password
from melimou.db.models.user import User

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def signup(self, email: str, password: str, name: str | None = None) -> tuple[User, str]:
        """Create a credentials user and return it with a fresh session token.

        Raises:
            ValidationError: If the password is too short
            ConflictError: If the email is already registered
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                fields=["password"],
            )

        email = email.strip().lower()
        async with self.session_factory() as session:
            existing = await session.scalar(select(User.id).where(User.email == email))
            if existing is not None:
                raise ConflictError("An account with this email already exists")

            user = User(
                email=email,
                name=name,
                password_hash=hash_password(password),
                role="student",
                has_completed_onboarding=False,
                subscription_tier="free",
                subscription_status="active",
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                raise ConflictError("An account with this email already exists") from exc

        logger.info("user_signed_up", user_id=user.id)
        return user, issue_session_token(user)

    async def signin(self, email: str, password: str) -> tuple[User, str]:
        """Raises UnauthenticatedError for an unknown email or wrong password."""
        async with self.session_factory() as session:
            user = (
                await session.execute(select(User).where(User.email == email.strip().lower()))
            ).scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            logger.info("signin_failed")
            raise UnauthenticatedError("Invalid email or password")

        logger.info("user_signed_in", user_id=user.id)
        return user, issue_session_token(user)

    async def reissue(self, user_id: str) -> tuple[User, str]:
        """Token built from the current row, so claims catch up with DB changes."""
        async with self.session_factory() as session:
            user = await session.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user, issue_session_token(user)
