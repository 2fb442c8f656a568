"""
The identity of a signed-in user, as handed over by the authentication
layer.
"""

from pydantic import BaseModel

FALLBACK_DISPLAY_NAME = "User"


class UserIdentity(BaseModel):
    user_id: str
    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = None


def resolve_display_name(identity: UserIdentity) -> str:
    """
    The name shown for a user in group member lists: their display name,
    else the local part of their email address, else "User".
    """
    if identity.display_name:
        return identity.display_name

    if identity.email:
        local_part = identity.email.split("@")[0]
        if local_part:
            return local_part

    return FALLBACK_DISPLAY_NAME
