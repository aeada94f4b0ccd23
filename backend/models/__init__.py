
from models.user import User
from models.post import Post

__all__ = [
    "User",
    "Post",
]
