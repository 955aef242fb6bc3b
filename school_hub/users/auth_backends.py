from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailOrUsernameBackend(ModelBackend):
    """Authenticate with an email address or a username, case-insensitively.

    The login endpoint sends an email, the admin site sends a username. An
    email match wins over a username match.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        user_model = get_user_model()
        identifier = (username or kwargs.get(user_model.EMAIL_FIELD) or "").strip()
        if not identifier or password is None:
            return None

        manager = user_model._default_manager  # noqa: SLF001
        user = (
            manager.filter(email__iexact=identifier).first()
            or manager.filter(username__iexact=identifier).first()
        )
        if user is None:
            # Same hashing cost whether or not the account exists
            user_model().set_password(password)
            return None
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
