"""Small helpers shared by the accounts views, commands and signals."""

from __future__ import annotations

from typing import Any, Iterable

from django.conf import settings
from django_otp.util import random_number_token

CODE_LENGTH = 6
MASK_WIDTH = 8


def generate_digit_code(length: int = CODE_LENGTH) -> str:
    """Return a random numeric one-time code of ``length`` digits."""

    return random_number_token(length)


def mask_email(email: str) -> str:
    """Hide the local part of ``email`` except for its first character.

    The mask has a fixed width so the length of the address is not leaked:
    ``david.smith@example.com`` becomes ``d********@example.com``.
    """

    local, sep, domain = (email or "").rpartition("@")
    if not sep or not local:
        return email or ""
    return f"{local[0]}{'*' * MASK_WIDTH}@{domain}"


def privileged_roles() -> list[str]:
    return list(getattr(settings, "TWO_FACTOR_PRIVILEGED_ROLES", ["Admin", "Super Admin"]))


def has_any_role(user: Any, roles: Iterable[str]) -> bool:
    """Return ``True`` when ``user`` belongs to at least one group in ``roles``."""

    if not user or getattr(user, "pk", None) is None:
        return False
    return user.groups.filter(name__in=list(roles)).exists()


def has_privileged_role(user: Any) -> bool:
    return has_any_role(user, privileged_roles())


__all__ = [
    "CODE_LENGTH",
    "generate_digit_code",
    "has_any_role",
    "has_privileged_role",
    "mask_email",
    "privileged_roles",
]
