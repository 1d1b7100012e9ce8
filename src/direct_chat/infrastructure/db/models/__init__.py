"""Import all models so they register on Base.metadata."""
from direct_chat.infrastructure.db.models.message import MessageModel
from direct_chat.infrastructure.db.models.user import UserModel

__all__ = [
    "MessageModel",
    "UserModel",
]
