from .user import User
from .category import Category
from .task import Task, DEFAULT_PRIORITY
from .attachment import Attachment
from .shared_task import SharedTask

# Export all models for easy importing
__all__ = ["User", "Category", "Task", "DEFAULT_PRIORITY", "Attachment", "SharedTask"]
