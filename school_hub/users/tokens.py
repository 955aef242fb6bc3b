"""Bearer token issue/verify helpers.

Tokens are simplejwt access tokens signed with the shared ``SIMPLE_JWT``
signing key. Besides the standard ``user_id`` claim they carry the user's
``email`` and ``role`` so any consumer (HTTP views, the socket relay) can
authorise without another lookup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from rest_framework_simplejwt.tokens import AccessToken

if TYPE_CHECKING:  # import for type checking only
    from school_hub.users.models import User


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: str


def issue_access_token(user: User) -> str:
    token = AccessToken.for_user(user)
    token["email"] = user.email
    token["role"] = user.role
    return str(token)


def decode_access_token(raw: str) -> TokenClaims:
    """Verify signature and expiry and return the claims.

    Raises ``rest_framework_simplejwt.exceptions.TokenError`` when the token
    is malformed, tampered with or expired.
    """

    token = AccessToken(raw)
    user_id_claim = settings.SIMPLE_JWT.get("USER_ID_CLAIM", "user_id")
    return TokenClaims(
        user_id=int(token[user_id_claim]),
        email=str(token.get("email", "")),
        role=str(token.get("role", "")),
    )
