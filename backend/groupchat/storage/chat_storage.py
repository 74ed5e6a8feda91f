import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from groupchat.core.security import get_password_hash, verify_password
from groupchat.models.message import Message
from groupchat.models.user import User
from groupchat.schemas import (
    ChatTheme,
    InsertMessage,
    OnlineUserResponse,
    SignInData,
    SignUpData,
    UpdateMessage,
    UpdateProfile,
)
from groupchat.services.presence import PresenceTracker
from groupchat.services.theme_catalog import ThemeCatalog

logger = logging.getLogger(__name__)

# Unique index names (Postgres) and column paths (SQLite) per field
EMAIL_CONSTRAINTS = {"ix_users_email", "users.email"}
USERNAME_CONSTRAINTS = {"ix_users_username", "users.username"}


class UserConflictError(Exception):
    """Sign-up collided with an existing user on a unique field."""

    field = ""
    message = "User already exists"

    def __str__(self) -> str:
        return self.message


class DuplicateEmailError(UserConflictError):
    field = "email"
    message = "User with this email already exists"


class DuplicateUsernameError(UserConflictError):
    field = "username"
    message = "Username already taken"


class UnknownUserError(LookupError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


def normalize_email(email: str) -> str:
    return email.strip().lower()


class ChatStorage:
    """
    Users, messages, themes and presence for the shared room.

    Built per request over a database session. The presence tracker and the
    theme catalog are process-wide and passed in by the caller. Every
    operation touches a single record; ids come from the database.
    """

    def __init__(self, db: Session, presence: PresenceTracker, themes: ThemeCatalog):
        self.db = db
        self.presence = presence
        self.themes = themes

    # Users
    # -----------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_all_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def create_user(self, sign_up: SignUpData) -> User:
        """
        Insert a new user.

        Uniqueness of email and username is enforced by the database, so two
        concurrent sign-ups with the same email cannot both succeed.
        Raises DuplicateEmailError or DuplicateUsernameError.
        """
        db_user = User(
            username=sign_up.username,
            email=normalize_email(sign_up.email),
            hashed_password=get_password_hash(sign_up.password),
            first_name=sign_up.first_name,
            last_name=sign_up.last_name,
            avatar=None,
            last_activity=None,
        )
        self.db.add(db_user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self._conflict_from(exc) from exc
        # Refresh to load database-generated fields (id, created_at)
        self.db.refresh(db_user)
        logger.info(f"User created: {db_user.username} (ID: {db_user.id})")
        return db_user

    @staticmethod
    def _conflict_from(exc: IntegrityError) -> UserConflictError:
        # Postgres reports the violated index name; SQLite only has the
        # message "UNIQUE constraint failed: users.email"
        diag = getattr(exc.orig, "diag", None)
        constraint = getattr(diag, "constraint_name", None)
        if not constraint:
            constraint = str(exc.orig).rsplit(":", 1)[-1].strip()
        if constraint in EMAIL_CONSTRAINTS:
            return DuplicateEmailError()
        if constraint in USERNAME_CONSTRAINTS:
            return DuplicateUsernameError()
        return UserConflictError()

    def authenticate_user(self, credentials: SignInData) -> Optional[User]:
        user = self.get_user_by_email(credentials.email)
        if not user:
            logger.info(f"Sign-in failed, unknown email: {credentials.email}")
            return None
        if not verify_password(credentials.password, user.hashed_password):
            logger.info(f"Sign-in failed, password mismatch for user {user.id}")
            return None
        return user

    def update_user_profile(self, user_id: int, patch: UpdateProfile) -> Optional[User]:
        user = self.get_user(user_id)
        if not user:
            return None
        # Only fields present in the request body are applied
        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    # Messages
    # -----------------------------

    def get_messages(self) -> List[Message]:
        # id breaks ties between messages created within the same clock tick
        return self.db.query(Message).order_by(Message.created_at, Message.id).all()

    def get_message_by_id(self, message_id: int) -> Optional[Message]:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def create_message(self, data: InsertMessage) -> Message:
        """Insert a message. Raises UnknownUserError if user_id names no user."""
        if self.get_user(data.user_id) is None:
            raise UnknownUserError(data.user_id)

        db_message = Message(
            content=data.content,
            username=data.username,
            user_id=data.user_id,
            attachment_url=data.attachment_url or None,
            attachment_type=data.attachment_type or None,
            attachment_name=data.attachment_name or None,
            updated_at=None,
        )
        self.db.add(db_message)
        self.db.commit()
        self.db.refresh(db_message)
        return db_message

    def _owned_message(self, message_id: int, user_id: int) -> Optional[Message]:
        # Missing and not-owned look the same to the caller
        return self.db.query(Message).filter(
            Message.id == message_id,
            Message.user_id == user_id
        ).first()

    def update_message(self, message_id: int, user_id: int, patch: UpdateMessage) -> Optional[Message]:
        message = self._owned_message(message_id, user_id)
        if not message:
            return None
        message.content = patch.content
        message.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(message)
        return message

    def delete_message(self, message_id: int, user_id: int) -> bool:
        message = self._owned_message(message_id, user_id)
        if not message:
            return False
        self.db.delete(message)
        self.db.commit()
        logger.info(f"Message {message_id} deleted by user {user_id}")
        return True

    # Themes
    # -----------------------------

    def get_active_theme(self) -> ChatTheme:
        return self.themes.get_active()

    def set_active_theme(self, theme_id: int) -> ChatTheme:
        """Raises ThemeNotFoundError for ids outside the seeded catalog."""
        theme = self.themes.set_active(theme_id)
        logger.info(f"Active theme changed to {theme.name} (ID: {theme.id})")
        return theme

    def list_themes(self) -> List[ChatTheme]:
        return self.themes.list_themes()

    # Presence
    # -----------------------------

    def get_users_count(self) -> int:
        """Number of registered users with a recent heartbeat."""
        user_ids = [row.id for row in self.db.query(User.id).all()]
        return self.presence.count_active(user_ids)

    def get_total_users_count(self) -> int:
        return self.db.query(User).count()

    def get_online_users(self) -> List[OnlineUserResponse]:
        """
        Every user, annotated with the tracker's last heartbeat and an
        is_online flag. Offline users are included.
        """
        result = []
        for user in self.get_all_users():
            entry = OnlineUserResponse.model_validate(user)
            # The stored timestamp survives pruning and restarts
            result.append(entry.model_copy(update={
                "last_activity": self.presence.last_seen(user.id) or user.last_activity,
                "is_online": self.presence.is_active(user.id),
            }))
        return result

    def update_user_activity(self, user_id: int) -> bool:
        """Record a heartbeat. Returns False if the user does not exist."""
        user = self.get_user(user_id)
        if not user:
            return False
        user.last_activity = self.presence.touch(user_id)
        self.db.commit()
        return True
