# Importing the package registers every model on Base.metadata
from todo_miniapp.models.base import Base
from todo_miniapp.models.session import UserSession
from todo_miniapp.models.task import Task
from todo_miniapp.models.user import User

__all__ = ["Base", "Task", "User", "UserSession"]
