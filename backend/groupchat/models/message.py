from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from groupchat.core.database import Base


class Message(Base):
    """
    A post in the shared room.

    The attachment columns are either all null or describe one attachment.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False, default="")
    # Display name at post time, kept even if the profile changes later
    username = Column(String, nullable=False)
    # Owning user - the only id allowed to edit or delete this message
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    attachment_url = Column(Text, nullable=True)
    attachment_type = Column(String, nullable=True)  # image | file | gif
    attachment_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", backref="messages")
