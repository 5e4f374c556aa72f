"""
Allowed values for task and option fields.
"""

from enum import Enum


class _Choices(str, Enum):
    @classmethod
    def values(cls):
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, value):
        return value in cls.values()


class TaskStatus(_Choices):
    """Task lifecycle; any state may move to any other."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Language(_Choices):
    SK = "SK"
    EN = "EN"


class Theme(_Choices):
    LIGHT = "light"
    DARK = "dark"


class TaskFilter(_Choices):
    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskSort(_Choices):
    NONE = "none"
    PRIORITY_ASC = "priority_asc"
    PRIORITY_DESC = "priority_desc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    DEADLINE_ASC = "deadline_asc"
    DEADLINE_DESC = "deadline_desc"
