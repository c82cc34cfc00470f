"""Parent routes.

A parent links to a student by redeeming the student's parent code, then gets
a read-only view of the child's classes and work.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from core.authorization import Action, ResourceFacts, authorize
from core.dependencies import (
    IdentityDep,
    ParentManagerDep,
    RelationshipStoreDep,
    UserManagerDep,
    enforce,
)
from core.exceptions import AlreadyLinkedError
from schemas.content import Homework, Quiz
from schemas.parent import (
    AddChildRequest,
    AddChildResponse,
    Child,
    ChildClass,
    ChildProgress,
    ChildrenResponse,
)
from schemas.user import UserBrief

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/parent", tags=["Parent"])


def _child_class(model) -> ChildClass:
    return ChildClass(
        class_id=model.class_id,
        name=model.name,
        grade=model.grade,
        teacher=model.teacher.name if model.teacher else "",
    )


@router.post("/add-child", response_model=AddChildResponse, summary="Link a child by parent code")
def add_child(
    req: AddChildRequest,
    parent_manager: ParentManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> AddChildResponse:
    """Redeem a parent code.

    Holding the code is the only proof required: the link is approved
    immediately, without confirmation from the student.

    Raises:
        HTTPException: 403 for non-parents, 400 for a blank code or an
            existing link, 404 if the code does not belong to a student.
    """
    enforce(authorize(identity, Action.REDEEM_PARENT_CODE, ResourceFacts(exists=True)))

    parent_code = req.parent_code.strip()
    if not parent_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Parent code is required",
        )

    student = relationships.find_student_by_parent_code(parent_code)
    facts = ResourceFacts(
        exists=student is not None,
        already_related=(
            student is not None
            and relationships.has_parent_link(identity.user_id, student.user_id)
        ),
    )
    enforce(authorize(identity, Action.REDEEM_PARENT_CODE, facts))

    try:
        parent_manager.add_child(identity.user_id, student.user_id)
    except AlreadyLinkedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AddChildResponse(
        message="Child added successfully",
        child=UserBrief.model_validate(student),
    )


@router.get("/children", response_model=ChildrenResponse, summary="List linked children")
def list_children(
    parent_manager: ParentManagerDep,
    user_manager: UserManagerDep,
    identity: IdentityDep,
) -> ChildrenResponse:
    """List approved children with their classes. Empty when none are linked."""
    enforce(authorize(identity, Action.READ_CHILDREN))

    children = []
    for link, classes in parent_manager.list_children(identity.user_id):
        student = link.student
        children.append(
            Child(
                user_id=student.user_id,
                name=student.name,
                email=student.email,
                grade=classes[0].grade if classes else "Not assigned",
                classes=[_child_class(c) for c in classes],
                linked_at=link.created_at,
            )
        )

    parent = user_manager.get_user_by_id(identity.user_id)
    return ChildrenResponse(children=children, parent=UserBrief.model_validate(parent))


@router.get(
    "/children/{student_id}",
    response_model=ChildProgress,
    summary="Read-only progress of a linked child",
)
def get_child_progress(
    student_id: str,
    parent_manager: ParentManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> ChildProgress:
    facts = relationships.student_facts(identity.user_id, student_id)
    enforce(authorize(identity, Action.READ_CHILD_PROGRESS, facts), conceal="Child")

    student = parent_manager.get_student(student_id)
    progress = parent_manager.child_progress(student_id)
    return ChildProgress(
        child=UserBrief.model_validate(student),
        classes=[_child_class(c) for c in progress["classes"]],
        homework=[Homework.model_validate(h) for h in progress["homework"]],
        quizzes=[Quiz.model_validate(q) for q in progress["quizzes"]],
    )
