from .user import User
from .assessment import Assessment
from .session import UserSession

__all__ = [
    "User",
    "Assessment",
    "UserSession",
]
