# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Credential store and password hashing.

Passwords are stored as "salt:hexDerivedKey":
- salt: 16 random bytes, hex encoded
- derived key: 64 bytes from bcrypt.kdf (bcrypt-pbkdf) over password + salt

Verification recomputes the key from the supplied password and the stored
salt, then compares with hmac.compare_digest so that the comparison time
does not depend on how many bytes match.

The work factor is PASSWORD_KDF_ROUNDS. It is not encoded in the stored
hash, so changing it invalidates existing passwords.
"""

import hmac
import secrets

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import ConstraintViolation, ValidationError
from ..extensions import db
from ..models import User, ROLES, ROLE_ADMIN, ROLE_MANAGER
from ..time_utils import utcnow


MIN_PASSWORD_LENGTH = 6
SALT_BYTES = 16
DERIVED_KEY_BYTES = 64


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long", "password"
        )


def _kdf_rounds() -> int:
    return int(current_app.config.get("PASSWORD_KDF_ROUNDS", 16))


def _derive_key(password: str, salt: str) -> bytes:
    return bcrypt.kdf(
        password=password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        desired_key_bytes=DERIVED_KEY_BYTES,
        rounds=_kdf_rounds(),
        ignore_few_rounds=True,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(SALT_BYTES)
    return f"{salt}:{_derive_key(password, salt).hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if password matches the stored "salt:hexkey" hash."""
    salt, sep, key_hex = (password_hash or "").partition(":")
    if not sep or not salt or not key_hex:
        return False
    try:
        expected = bytes.fromhex(key_hex)
    except ValueError:
        return False
    return hmac.compare_digest(_derive_key(password, salt), expected)


def get_user(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> User | None:
    return db.session.query(User).filter_by(username=username).first()


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.username).all()


def create_user(username: str, password: str, name: str, role: str = ROLE_MANAGER) -> User:
    """
    Create a new user.

    Raises:
        ValidationError: missing or non-string username/name, unknown role, weak password
        ConstraintViolation: username already taken
    """
    for field_name, value in (("username", username), ("name", name), ("role", role)):
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string", field_name)

    username = (username or "").strip()
    name = (name or "").strip()
    role = (role or ROLE_MANAGER).strip().upper()

    if not username:
        raise ValidationError("username is required", "username")
    if len(username) > 64:
        raise ValidationError("username exceeds max length 64", "username")
    if not name:
        raise ValidationError("name is required", "name")
    if role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}", "role")
    validate_password_strength(password)

    # Explicit check first; the unique constraint only backs it up
    if get_user_by_username(username):
        raise ConstraintViolation("Username already exists", "username")

    user = User(
        username=username,
        password_hash=hash_password(password),
        name=name,
        role=role,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConstraintViolation("Username already exists", "username")
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Return the user if the credentials are valid, None otherwise.

    Unknown usernames and wrong passwords are indistinguishable to the caller.
    """
    user = get_user_by_username(username)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def ensure_default_admin() -> User | None:
    """
    Create the bootstrap admin account if it does not exist.

    Returns the new user, or None when it was already present.
    """
    username = current_app.config.get("DEFAULT_ADMIN_USERNAME", "admin")
    if get_user_by_username(username):
        return None

    user = User(
        username=username,
        password_hash=hash_password(current_app.config["DEFAULT_ADMIN_PASSWORD"]),
        name="System Admin",
        role=ROLE_ADMIN,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.warning(
        "Created default admin user '%s'; rotate its password before production use", username
    )
    return user
