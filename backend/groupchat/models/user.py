from sqlalchemy import Column, Integer, String, DateTime, Date, Text
from sqlalchemy.sql import func
from groupchat.core.database import Base


class User(Base):
    """
    Chat participant with login credentials and a public profile.

    Passwords are stored as bcrypt hashes and never serialized.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Unique constraints make sign-up a single atomic insert; duplicates
    # surface as IntegrityError instead of a racy existence check
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    avatar = Column(Text, nullable=True)  # URL or data URI
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    # Written by heartbeats; the in-memory tracker is the source for presence
    last_activity = Column(DateTime(timezone=True), nullable=True)
