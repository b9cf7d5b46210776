from werkzeug.security import check_password_hash


class CredentialVerifier:
    """Anything able to tell whether a staff secret is valid."""

    def verify(self, secret):
        raise NotImplementedError


class PasswordHashVerifier(CredentialVerifier):
    """Checks the secret against a werkzeug password hash.

    The hash comes from configuration (ADMIN_PASSWORD_HASH); without one every
    secret is refused.
    """

    def __init__(self, password_hash):
        self.password_hash = password_hash

    def verify(self, secret):
        if not self.password_hash or not secret:
            return False
        return check_password_hash(self.password_hash, secret)
