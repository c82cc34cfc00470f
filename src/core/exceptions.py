"""Custom exception classes for the SchoolHub backend.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class SchoolHubError(Exception):
    """Base exception for all SchoolHub errors."""

    pass


class UserNotFoundError(SchoolHubError):
    """Raised when a requested user cannot be found."""

    def __init__(self, user_id: str):
        """Initialize the exception.

        Args:
            user_id: The ID of the user that was not found.
        """
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class UserAlreadyExistsError(SchoolHubError):
    """Raised when registering an email that is already taken."""

    pass


class ClassNotFoundError(SchoolHubError):
    """Raised when a requested class cannot be found."""

    def __init__(self, class_id: str):
        """Initialize the exception.

        Args:
            class_id: The ID of the class that was not found.
        """
        self.class_id = class_id
        super().__init__(f"Class '{class_id}' not found")


class ContentNotFoundError(SchoolHubError):
    """Raised when a lesson, homework, quiz or announcement cannot be found."""

    def __init__(self, kind: str, content_id: str):
        self.kind = kind
        self.content_id = content_id
        super().__init__(f"{kind.capitalize()} '{content_id}' not found")


class MessageNotFoundError(SchoolHubError):
    """Raised when a requested message cannot be found."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Message '{message_id}' not found")


class AlreadyEnrolledError(SchoolHubError):
    """Raised when a student joins a class they are already enrolled in."""

    def __init__(self, student_id: str, class_id: str):
        self.student_id = student_id
        self.class_id = class_id
        super().__init__("Already enrolled in this class")


class AlreadyLinkedError(SchoolHubError):
    """Raised when a parent redeems the code of a child already linked to them."""

    def __init__(self, parent_id: str, student_id: str):
        self.parent_id = parent_id
        self.student_id = student_id
        super().__init__("Child already linked to your account")
