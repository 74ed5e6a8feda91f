"""
Request and response bodies shared by storage and the API routes.

Field names are snake_case in Python and camelCase on the wire; both spellings
are accepted on input.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictInt,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

AttachmentType = Literal["image", "file", "gif"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Users
# -----------------------------

class SignUpData(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("username")
    @classmethod
    def username_has_no_spaces(cls, value: str) -> str:
        if any(ch.isspace() for ch in value):
            raise ValueError("Username must not contain whitespace")
        return value


class SignInData(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateProfile(CamelModel):
    """Partial profile edit - only fields present in the body are applied."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    avatar: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[date] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_cleared(cls, value: Optional[str]) -> Optional[str]:
        # Absent is fine, an explicit null is not - the columns are required
        if value is None:
            raise ValueError("Name cannot be empty")
        return value


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    date_of_birth: Optional[date] = None
    created_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None


class OnlineUserResponse(UserResponse):
    is_online: bool = False


# Messages
# -----------------------------

class InsertMessage(CamelModel):
    content: str = ""
    username: str = Field(..., min_length=1)
    user_id: StrictInt = Field(..., gt=0)
    attachment_url: Optional[str] = None
    attachment_type: Optional[AttachmentType] = None
    attachment_name: Optional[str] = None

    @field_validator("attachment_url", "attachment_type", "attachment_name", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # Empty strings count as "no attachment", same as absent fields
        return value or None

    @model_validator(mode="after")
    def check_body(self):
        has_url = self.attachment_url is not None
        has_type = self.attachment_type is not None
        if has_url != has_type:
            raise ValueError("attachmentUrl and attachmentType must be provided together")
        if not has_url and self.attachment_name:
            raise ValueError("attachmentName requires an attachment")
        if not has_url and not self.content.strip():
            raise ValueError("Message must have content or an attachment")
        return self


class UpdateMessage(CamelModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content must not be blank")
        return value


class MessageEdit(UpdateMessage):
    """PATCH body: the caller's user id plus the content patch."""
    user_id: StrictInt = Field(..., gt=0)


class MessageOwner(CamelModel):
    """DELETE body: the caller's user id."""
    user_id: StrictInt = Field(..., gt=0)


class MessageResponse(CamelModel):
    id: int
    content: str
    username: str
    user_id: int
    attachment_url: Optional[str] = None
    attachment_type: Optional[AttachmentType] = None
    attachment_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer('created_at', 'updated_at')
    def serialize_timestamps(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


# Themes
# -----------------------------

class ChatTheme(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    primary_color: str
    secondary_color: str
    background_color: str
    message_background_self: str
    message_background_other: str
    text_color: str
    is_active: bool = False
    created_at: datetime


class ThemeSelection(CamelModel):
    # Strict so that "2" or 2.0 is rejected like any other non-number
    theme_id: StrictInt = Field(..., gt=0)


class ThemeCatalogResponse(CamelModel):
    active_theme_id: int
    themes: List[ChatTheme]
