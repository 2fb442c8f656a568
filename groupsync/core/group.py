"""
Core group data models.

Documents are stored with camelCase keys; the models use snake_case
attributes with aliases. Optional values are never written as null, they
are left out of the document entirely.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MemberData(BaseModel):
    """
    A member record embedded in a group's `members` array. The name and photo
    are cached copies of the user's profile.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_id: str = Field(alias="userId")
    name: str
    photo_url: str | None = Field(default=None, alias="photoURL")
    bio: str | None = None

    @field_validator("photo_url", "bio")
    @classmethod
    def empty_is_unset(cls, value: str | None) -> str | None:
        return value or None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CreateGroupData(BaseModel):
    """
    The caller-supplied content of a new group. Any additional descriptive
    fields are kept as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    description: str | None = None
    members: list[MemberData] = []

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ModifyGroupContent(BaseModel):
    """
    A partial update to a group. Only fields that were explicitly set (and are
    not None) are written.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = None
    description: str | None = None
    members: list[MemberData] | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class GroupData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    created_by: str = Field(alias="createdBy")
    is_active: bool = Field(alias="isActive")
    members: list[MemberData] = []
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def find_member(self, user_id: str) -> int | None:
        """
        Index of the member record for `user_id`, or None if the user is not
        in this group.
        """
        for index, member in enumerate(self.members):
            if member.user_id == user_id:
                return index

        return None

    def has_member(self, user_id: str) -> bool:
        return self.find_member(user_id) is not None

    def members_document(self) -> list[dict[str, Any]]:
        return [member.to_document() for member in self.members]
