"""
Session core errors.

Every error carries a user-facing (already localized) ``message``; the
original provider/store exception is chained as ``__cause__``.
"""


class SessionError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationFailure(SessionError):
    """Identity provider rejected sign-in, sign-up, sign-out or password reset."""


class ProfileFetchFailure(SessionError):
    """Profile store read failed. Never surfaced by the loader, only logged."""


class ProfileWriteFailure(SessionError):
    """Profile store rejected an update."""


class NotAuthenticated(SessionError):
    """Operation needs a signed-in user and there is none."""
