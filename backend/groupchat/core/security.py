from passlib.context import CryptContext

# CryptContext handles password hashing using bcrypt
# 'deprecated="auto"' lets passlib rehash legacy schemes transparently
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    # bcrypt generates a salt per call, so equal passwords hash differently
    return pwd_context.hash(password)
