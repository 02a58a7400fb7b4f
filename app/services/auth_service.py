from typing import Optional

from app.core.errors import Forbidden, Unauthorized
from app.core.logger import logger
from app.core.security import create_access_token, decode_access_token
from app.models.db_models import Identity, User
from app.services.db_service import DBService


class AuthGate:
    """
    Bearer credential checks and admin gating.
    The role is read from the users table on every call, never cached.
    """

    def __init__(self, db: DBService):
        self.db = db

    @staticmethod
    def verify_credential(raw_header: Optional[str]) -> Identity:
        """
        Validates an `Authorization: Bearer <token>` header.
        Missing header -> Unauthorized, anything unusable -> Forbidden.
        """
        if not raw_header:
            raise Unauthorized()

        scheme, _, token = raw_header.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise Forbidden()

        claims = decode_access_token(token)
        if not claims or not claims.get("email"):
            raise Forbidden()
        return Identity(**claims)

    async def require_admin(self, identity: Identity) -> User:
        row = await self.db.get_user(identity.email)
        user = User(**row) if row else None
        if user is None or not user.is_admin:
            logger.warning(f"🚫 Admin access denied for {identity.email}")
            raise Unauthorized()
        return user

    async def login(self, email: str, name: Optional[str] = None) -> str:
        """Upserts the user and issues a fresh access token for them."""
        await self.db.upsert_user(email)
        claims = {"email": email}
        if name:
            claims["name"] = name
        logger.info(f"🔑 Access token issued for {email}")
        return create_access_token(claims)
