# users/models/__init__.py

from users.models.company import Company
from users.models.user import User

__all__ = ["Company", "User"]
