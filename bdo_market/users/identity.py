# users/identity.py
"""
Identity provider contract: given a bearer credential, return the subject it
vouches for, or None when the credential is not valid. The rest of the
project only ever sees that subject (matched against CustomUser.auth_id).
"""
import logging

from django.utils.module_loading import import_string
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from common.conf import marketplace_setting

logger = logging.getLogger(__name__)


class IdentityProvider:
    def verify(self, credential):
        raise NotImplementedError


class JWTIdentityProvider(IdentityProvider):
    """Verifies access tokens issued by /api/token/ (simplejwt)."""

    def verify(self, credential):
        try:
            token = AccessToken(credential)
        except TokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            return None
        return token.get(api_settings.USER_ID_CLAIM)


def get_identity_provider():
    return import_string(marketplace_setting("IDENTITY_PROVIDER"))()
