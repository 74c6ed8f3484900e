# users/models/__init__.py
from .base import CustomUser, UserType

__all__ = [
    "CustomUser",
    "UserType",
]
