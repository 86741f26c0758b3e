# hims/iam/auth.py

from __future__ import annotations

import logging

import jwt
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid token"
TOKEN_EXPIRED = "Token expired"


def _is_expired(raw_token) -> bool:
    """
    True only for a token we signed whose exp has passed. The signature is
    checked first, so a forged token with an old exp stays "Invalid token".
    """
    if isinstance(raw_token, bytes):
        raw_token = raw_token.decode()
    try:
        jwt.decode(
            raw_token,
            api_settings.VERIFYING_KEY or api_settings.SIGNING_KEY,
            algorithms=[api_settings.ALGORITHM],
            audience=api_settings.AUDIENCE,
            issuer=api_settings.ISSUER,
            leeway=api_settings.LEEWAY,
        )
    except jwt.ExpiredSignatureError:
        return True
    except jwt.InvalidTokenError:
        return False
    return False


class BearerJWTAuthentication(JWTAuthentication):
    """
    Authorization: Bearer <access>

    - no header: anonymous (the permission layer answers 401 "Access token required")
    - bad signature, malformed or unknown user: 401 "Invalid token"
    - our signature with a past exp: 401 "Token expired"
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except AuthenticationFailed:
            logger.warning("Token rejected on %s %s", request.method, request.path)
            raise

        return self.get_user(validated_token), validated_token

    def get_validated_token(self, raw_token):
        try:
            return AccessToken(raw_token)
        except TokenError:
            if _is_expired(raw_token):
                raise AuthenticationFailed(TOKEN_EXPIRED, code="token_expired")
            raise AuthenticationFailed(INVALID_TOKEN, code="token_not_valid")

    def get_user(self, validated_token):
        try:
            return super().get_user(validated_token)
        except (AuthenticationFailed, InvalidToken):
            raise AuthenticationFailed(INVALID_TOKEN, code="token_not_valid")
