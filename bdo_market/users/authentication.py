# users/authentication.py
from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions

from .identity import get_identity_provider

User = get_user_model()


class IdentityProviderAuthentication(authentication.BaseAuthentication):
    """
    `Authorization: Bearer <token>` -> identity provider -> local user.
    Requests without a bearer header stay anonymous; a bad token is a 401.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid authorization header.")

        credential = header[1].decode()
        subject = get_identity_provider().verify(credential)
        if not subject:
            raise exceptions.AuthenticationFailed("Invalid or expired token.")

        try:
            user = User.objects.select_related("supplier_profile").get(auth_id=subject)
        except User.DoesNotExist:
            raise exceptions.AuthenticationFailed("User not found.")
        if not user.is_active:
            raise exceptions.AuthenticationFailed("User is inactive.")
        return user, credential

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
