"""
Tests the display name fallback.
"""

import pytest

from groupsync.core.identity import UserIdentity, resolve_display_name


@pytest.mark.parametrize(
    "display_name,email,expected",
    [
        ("Alice Liddell", "alice@example.com", "Alice Liddell"),
        (None, "alice@example.com", "alice"),
        ("", "alice@example.com", "alice"),
        (None, None, "User"),
        (None, "@example.com", "User"),
        ("", "", "User"),
    ],
)
def test_resolve_display_name(display_name, email, expected):
    identity = UserIdentity(user_id="u", display_name=display_name, email=email)
    assert resolve_display_name(identity) == expected
