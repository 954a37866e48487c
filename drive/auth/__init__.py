"""Auth module - session tokens, content tokens, passwords and accounts."""

from drive.auth.accounts import get_profile, login_user, register_user
from drive.auth.passwords import hash_password, verify_password
from drive.auth.tokens import (
    ContentTokenClaims,
    TokenPurpose,
    create_access_token,
    decode_access_token,
    issue_content_token,
    require_content_claims,
    verify_content_token,
)

__all__ = [
    "ContentTokenClaims",
    "TokenPurpose",
    "create_access_token",
    "decode_access_token",
    "get_profile",
    "hash_password",
    "issue_content_token",
    "login_user",
    "register_user",
    "require_content_claims",
    "verify_content_token",
    "verify_password",
]
