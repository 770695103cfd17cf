import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User
from app.utils.crypto import FieldCipher
from app.utils.security import hash_password, verify_password, dummy_verify
from app.utils.exceptions import DuplicateEntryException, UnauthorizedException

logger = logging.getLogger(__name__)


class UserService:
    """
    Users are stored without plaintext email: `email_encrypted` holds the
    AES-GCM token and `email_hash` the HMAC used for exact-match lookups.
    """

    def __init__(self, cipher: FieldCipher):
        self.cipher = cipher

    def _serialize(self, u: User) -> dict:
        return {
            "id":         u.id,
            "name":       u.name,
            "email":      self.cipher.decrypt(u.email_encrypted, row_id=u.id),
            "role":       u.role,
            "created_at": u.created_at.isoformat() if u.created_at else None,
        }

    def _find_by_email(self, db: Session, email: str) -> User | None:
        email_hash = self.cipher.index(email)
        return db.query(User).filter(User.email_hash == email_hash).first()

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_user(
        self, db: Session, name: str, email: str, password: str | None, role: str,
    ) -> int:
        email = str(email).strip()
        if self._find_by_email(db, email):
            raise DuplicateEntryException("Email already registered", field="email")

        user = User(
            name=name,
            email_encrypted=self.cipher.encrypt(email),
            email_hash=self.cipher.index(email),
            password_hash=hash_password(password) if password else None,
            role=getattr(role, "value", role),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created user id={user.id} role={user.role}")
        return user.id

    # ─── Lookups ──────────────────────────────────────────────────────────────
    def get_user_by_email(self, db: Session, email: str) -> dict | None:
        u = self._find_by_email(db, email)
        return self._serialize(u) if u else None

    def get_user_by_id(self, db: Session, user_id: int) -> dict | None:
        u = db.query(User).filter(User.id == user_id).first()
        return self._serialize(u) if u else None

    def list_users(self, db: Session) -> list[dict]:
        return [self._serialize(u) for u in db.query(User).order_by(User.id).all()]

    # ─── Credentials ──────────────────────────────────────────────────────────
    def authenticate(self, db: Session, email: str, password: str) -> dict:
        """
        Login check. Unknown email and wrong password fail identically.
        """
        u = self._find_by_email(db, email)
        if u is None:
            dummy_verify()
            logger.info("Login failed: unknown account")
            raise UnauthorizedException()
        if not verify_password(password, u.password_hash):
            logger.info(f"Login failed for user id={u.id}")
            raise UnauthorizedException()
        return self._serialize(u)


user_service = UserService(FieldCipher.from_settings(settings))
