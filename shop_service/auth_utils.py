# shop_service/auth_utils.py
import hashlib
import hmac
import os

HASH_NAME = "sha256"
ITERATIONS = 100_000
SALT_BYTES = 16


def hash_password(password: str) -> str:
    """Хэширует пароль с солью (PBKDF2-HMAC-SHA256).

    Формат результата: ``iterations$salt_hex$digest_hex``.
    """
    salt = os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(HASH_NAME, password.encode(), salt, ITERATIONS)
    return f"{ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяет пароль, сравнивая с хэшем."""
    try:
        iterations, salt_hex, digest_hex = hashed_password.split("$")
        salt = bytes.fromhex(salt_hex)
        rounds = int(iterations)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac(HASH_NAME, plain_password.encode(), salt, rounds)
    return hmac.compare_digest(digest.hex(), digest_hex)
