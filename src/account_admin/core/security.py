# account_admin/core/security.py

from passlib.context import CryptContext

# ------------------------------------------------------------------------------
# Credential Hashing
#    - passlib's CryptContext keeps the scheme swappable; hashes created with an
#      older scheme are still verified and flagged for upgrade ("deprecated=auto").
# ------------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifies a plain-text password against a hashed password.

    :param plain_password: The password to verify.
    :param hashed_password: The stored hashed password.
    :return: True if the passwords match, False otherwise.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hashes a plain-text password.

    :param password: The password to hash.
    :return: The hashed password string.
    """
    return pwd_context.hash(password)
