"""Class management routes."""

from typing import List

from fastapi import APIRouter, HTTPException, status

from core.authorization import Action, ResourceFacts, authorize
from core.dependencies import (
    ClassManagerDep,
    IdentityDep,
    RelationshipStoreDep,
    enforce,
)
from core.exceptions import AlreadyEnrolledError
from schemas.class_schema import (
    ClassInfo,
    ClassListResponse,
    ClassResponse,
    ClassSummary,
    ContentCounts,
    CreateClassRequest,
    EnrollmentResponse,
    JoinClassRequest,
    RosterEntry,
    UpdateClassRequest,
)
from schemas.user import UserBrief
from utils.class_manager import ClassManager

router = APIRouter(prefix="/api/classes", tags=["Class"])


def _build_class_summary(class_manager: ClassManager, model) -> ClassSummary:
    return ClassSummary(
        **ClassInfo.model_validate(model).model_dump(),
        teacher=UserBrief.model_validate(model.teacher) if model.teacher else None,
        student_count=class_manager.count_students(model.class_id),
        counts=ContentCounts(**class_manager.count_content(model.class_id)),
    )


@router.post("", response_model=ClassResponse, summary="Create a class")
def create_class(
    req: CreateClassRequest,
    class_manager: ClassManagerDep,
    identity: IdentityDep,
) -> ClassResponse:
    enforce(authorize(identity, Action.CREATE_CLASS))

    name = req.name.strip()
    grade = req.grade.strip()
    if not name or not grade:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Class name and grade are required.",
        )
    model = class_manager.create_class(name, grade, identity.user_id)
    return ClassResponse(
        message="Class created successfully",
        class_=ClassInfo.model_validate(model),
    )


@router.get("", response_model=ClassListResponse, summary="List classes")
def list_classes(
    class_manager: ClassManagerDep,
    identity: IdentityDep,
) -> ClassListResponse:
    """List the caller's classes.

    Teachers get the classes they own, students the classes they are enrolled
    in. Parents see classes through their children instead.
    """
    if identity.role == "teacher":
        models = class_manager.list_classes_for_teacher(identity.user_id)
    elif identity.role == "student":
        models = [
            e.class_ for e in class_manager.list_enrollments_for_student(identity.user_id)
        ]
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers and students have classes.",
        )
    return ClassListResponse(
        classes=[_build_class_summary(class_manager, m) for m in models]
    )


@router.post("/join", response_model=EnrollmentResponse, summary="Join a class by code")
def join_class(
    req: JoinClassRequest,
    class_manager: ClassManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> EnrollmentResponse:
    """Join a class using its class code.

    Args:
        req: Join request with the class code.
        class_manager: Injected ClassManager instance.
        relationships: Injected RelationshipStore instance.
        identity: Current caller.

    Returns:
        EnrollmentResponse for the joined class.

    Raises:
        HTTPException: 403 for non-students, 404 for an unknown code, 400 if
            already enrolled or the code is blank.
    """
    enforce(authorize(identity, Action.JOIN_CLASS, ResourceFacts(exists=True)))

    class_code = req.class_code.strip()
    if not class_code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Class code is required",
        )

    class_model = relationships.find_class_by_code(class_code)
    facts = ResourceFacts(
        exists=class_model is not None,
        already_related=(
            class_model is not None
            and relationships.is_enrolled_in_class(identity.user_id, class_model.class_id)
        ),
    )
    enforce(authorize(identity, Action.JOIN_CLASS, facts))

    try:
        enrollment = class_manager.join_class(class_model.class_id, identity.user_id)
    except AlreadyEnrolledError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return EnrollmentResponse(
        message="Successfully joined class",
        class_=_build_class_summary(class_manager, class_model),
        joined_at=enrollment.created_at,
    )


@router.get("/{class_id}", response_model=ClassSummary, summary="Get class details")
def get_class(
    class_id: str,
    class_manager: ClassManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> ClassSummary:
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.READ_CLASS, facts), conceal="Class")
    return _build_class_summary(class_manager, class_manager.get_class(class_id))


@router.patch("/{class_id}", response_model=ClassResponse, summary="Update a class")
def update_class(
    class_id: str,
    req: UpdateClassRequest,
    class_manager: ClassManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> ClassResponse:
    """Rename a class or change its grade. The class code cannot change."""
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.UPDATE_CLASS, facts), conceal="Class")

    model = class_manager.update_class(class_id, name=req.name, grade=req.grade)
    return ClassResponse(
        message="Class updated successfully",
        class_=ClassInfo.model_validate(model),
    )


@router.get(
    "/{class_id}/students",
    response_model=List[RosterEntry],
    summary="List enrolled students",
)
def list_class_students(
    class_id: str,
    class_manager: ClassManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> List[RosterEntry]:
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.READ_ROSTER, facts), conceal="Class")
    return [RosterEntry(**entry) for entry in class_manager.list_roster(class_id)]


@router.delete("/{class_id}", summary="Delete a class")
def delete_class(
    class_id: str,
    class_manager: ClassManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> dict:
    """Delete a class and all related data.

    Only the owning teacher can delete the class. Lessons, homework, quizzes,
    announcements and enrollments of the class go with it.

    Raises:
        HTTPException: 403 for non-teachers, 404 if the class does not exist
            or belongs to another teacher.
    """
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.DELETE_CLASS, facts), conceal="Class")

    class_manager.delete_class(class_id)
    return {"success": True, "message": "Class deleted successfully"}
