"""Role-based authorization rules.

Every route that touches a class, class content, a parent link or a message
asks ``authorize`` for a decision before doing any work. The function is pure:
all ownership and membership facts are fetched by the caller (see
``utils.relationship_store``) and passed in as a ``ResourceFacts`` value, so the
same rule table applies to every resource type and can be tested without a
database.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from core.identity import Identity


class Action(str, Enum):
    """Operations subject to authorization."""

    CREATE_CLASS = "create_class"
    READ_CLASS = "read_class"
    UPDATE_CLASS = "update_class"
    DELETE_CLASS = "delete_class"
    READ_ROSTER = "read_roster"
    JOIN_CLASS = "join_class"
    CREATE_CONTENT = "create_content"
    READ_CONTENT = "read_content"
    REDEEM_PARENT_CODE = "redeem_parent_code"
    READ_CHILDREN = "read_children"
    READ_CHILD_PROGRESS = "read_child_progress"
    SEND_MESSAGE = "send_message"
    READ_MESSAGE = "read_message"
    MARK_MESSAGE_READ = "mark_message_read"


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    WRONG_ROLE = "wrong_role"
    NOT_OWNER = "not_owner"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class ResourceFacts:
    """Pre-fetched facts about the target resource and the caller's relation to it.

    Attributes:
        exists: The target (class, class code, student behind a parent code,
            message, message receiver) exists.
        is_owner: The caller owns the target (teacher of the class, receiver
            of the message).
        is_enrolled: The caller is enrolled in the target class.
        is_linked: The caller has an approved parent link to the target student.
        is_participant: The caller is sender or receiver of the target message.
        already_related: The relationship the action would create exists.
    """

    exists: bool = True
    is_owner: bool = False
    is_enrolled: bool = False
    is_linked: bool = False
    is_participant: bool = False
    already_related: bool = False


@dataclass(frozen=True)
class Allow:
    allowed = True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    message: str

    allowed = False


Decision = Union[Allow, Deny]

ALLOW = Allow()

# Actions restricted to the teacher who owns the class.
_OWNER_ACTIONS = {
    Action.UPDATE_CLASS: "update classes",
    Action.DELETE_CLASS: "delete classes",
    Action.READ_ROSTER: "view class rosters",
    Action.CREATE_CONTENT: "create class content",
}


def authorize(
    caller: Optional[Identity],
    action: Action,
    facts: ResourceFacts = ResourceFacts(),
) -> Decision:
    """Decide whether ``caller`` may perform ``action``.

    Args:
        caller: Verified identity, or None when the request carried none.
        action: The operation being attempted.
        facts: Relationship facts for the target resource.

    Returns:
        ``ALLOW`` or a ``Deny`` carrying the reason and a user-facing message.
    """
    if caller is None:
        return Deny(DenyReason.UNAUTHENTICATED, "Unauthorized")

    role = caller.role

    if action is Action.CREATE_CLASS:
        if role != "teacher":
            return Deny(DenyReason.WRONG_ROLE, "Only teachers can create classes")
        return ALLOW

    if action in _OWNER_ACTIONS:
        if role != "teacher":
            return Deny(
                DenyReason.WRONG_ROLE,
                f"Only teachers can {_OWNER_ACTIONS[action]}",
            )
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Class not found")
        if not facts.is_owner:
            return Deny(DenyReason.NOT_OWNER, "Class not found or access denied")
        return ALLOW

    if action in (Action.READ_CLASS, Action.READ_CONTENT):
        if role == "parent":
            return Deny(DenyReason.WRONG_ROLE, "Parents cannot access class content")
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Class not found")
        if role == "teacher":
            if facts.is_owner:
                return ALLOW
            return Deny(DenyReason.NOT_OWNER, "Class not found or access denied")
        if facts.is_enrolled:
            return ALLOW
        return Deny(DenyReason.NOT_OWNER, "Not enrolled in this class")

    if action is Action.JOIN_CLASS:
        if role != "student":
            return Deny(DenyReason.WRONG_ROLE, "Only students can join classes")
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Invalid class code")
        if facts.already_related:
            return Deny(DenyReason.CONFLICT, "Already enrolled in this class")
        return ALLOW

    if action is Action.REDEEM_PARENT_CODE:
        if role != "parent":
            return Deny(DenyReason.WRONG_ROLE, "Only parents can add children")
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Invalid parent code")
        if facts.already_related:
            return Deny(DenyReason.CONFLICT, "Child already linked to your account")
        return ALLOW

    if action is Action.READ_CHILDREN:
        if role != "parent":
            return Deny(DenyReason.WRONG_ROLE, "Only parents can access children data")
        return ALLOW

    if action is Action.READ_CHILD_PROGRESS:
        if role != "parent":
            return Deny(DenyReason.WRONG_ROLE, "Only parents can access children data")
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Child not found")
        if not facts.is_linked:
            return Deny(DenyReason.NOT_OWNER, "Child not found or access denied")
        return ALLOW

    if action is Action.SEND_MESSAGE:
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Receiver not found")
        if not facts.is_participant:
            return Deny(DenyReason.NOT_OWNER, "Messages can only be sent as yourself")
        return ALLOW

    if action is Action.READ_MESSAGE:
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Message not found")
        if not facts.is_participant:
            return Deny(DenyReason.NOT_OWNER, "Message not found or access denied")
        return ALLOW

    if action is Action.MARK_MESSAGE_READ:
        if not facts.exists:
            return Deny(DenyReason.NOT_FOUND, "Message not found")
        if not facts.is_owner:
            return Deny(DenyReason.NOT_OWNER, "Message not found or access denied")
        return ALLOW

    raise ValueError(f"Unknown action: {action}")
