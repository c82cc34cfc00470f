"""Class content routes: lessons, homework, quizzes and announcements.

Content is created by the teacher who owns the class and read by that teacher
or by students enrolled in the class.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status

from core.authorization import Action, ResourceFacts, authorize
from core.dependencies import DBSessionDep, IdentityDep, RelationshipStoreDep, enforce
from core.exceptions import ContentNotFoundError
from core.identity import Identity
from schemas.content import (
    Announcement,
    CreateAnnouncementRequest,
    CreateHomeworkRequest,
    CreateLessonRequest,
    CreateQuizRequest,
    Homework,
    Lesson,
    Quiz,
)
from utils.content_manager import (
    ANNOUNCEMENT,
    HOMEWORK,
    LESSON,
    QUIZ,
    ContentKind,
    ContentManager,
)
from utils.relationship_store import RelationshipStore

router = APIRouter(prefix="/api", tags=["Content"])


def _create(
    kind: ContentKind,
    db,
    relationships: RelationshipStore,
    identity: Identity,
    class_id: str,
    fields: Dict[str, Any],
):
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.CREATE_CONTENT, facts), conceal="Class")
    return ContentManager(db, kind).create(class_id, fields)


def _list(
    kind: ContentKind,
    db,
    relationships: RelationshipStore,
    identity: Identity,
    class_id: Optional[str],
) -> List[Any]:
    if not class_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Class ID is required",
        )
    facts = relationships.class_facts(identity.user_id, class_id)
    enforce(authorize(identity, Action.READ_CONTENT, facts), conceal="Class")
    return ContentManager(db, kind).list_for_class(class_id)


def _get(
    kind: ContentKind,
    db,
    relationships: RelationshipStore,
    identity: Identity,
    content_id: str,
):
    try:
        model = ContentManager(db, kind).get(content_id)
    except ContentNotFoundError:
        model = None
        facts = ResourceFacts(exists=False)
    else:
        facts = relationships.class_facts(identity.user_id, model.class_id)
    # A missing row is denied exactly like a row in an inaccessible class
    enforce(authorize(identity, Action.READ_CONTENT, facts), conceal=kind.name.capitalize())
    return model


# --- Lessons ---


@router.post("/lessons", response_model=Lesson, summary="Create a lesson")
def create_lesson(
    req: CreateLessonRequest,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Lesson:
    model = _create(
        LESSON,
        db,
        relationships,
        identity,
        req.class_id,
        req.model_dump(exclude={"class_id"}),
    )
    return Lesson.model_validate(model)


@router.get("/lessons", response_model=List[Lesson], summary="List lessons of a class")
def list_lessons(
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
    class_id: Optional[str] = None,
) -> List[Lesson]:
    models = _list(LESSON, db, relationships, identity, class_id)
    return [Lesson.model_validate(m) for m in models]


@router.get("/lessons/{lesson_id}", response_model=Lesson, summary="Get a lesson")
def get_lesson(
    lesson_id: str,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Lesson:
    return Lesson.model_validate(_get(LESSON, db, relationships, identity, lesson_id))


# --- Homework ---


@router.post("/homework", response_model=Homework, summary="Create homework")
def create_homework(
    req: CreateHomeworkRequest,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Homework:
    model = _create(
        HOMEWORK,
        db,
        relationships,
        identity,
        req.class_id,
        req.model_dump(exclude={"class_id"}),
    )
    return Homework.model_validate(model)


@router.get("/homework", response_model=List[Homework], summary="List homework of a class")
def list_homework(
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
    class_id: Optional[str] = None,
) -> List[Homework]:
    """List homework of a class, earliest deadline first."""
    models = _list(HOMEWORK, db, relationships, identity, class_id)
    return [Homework.model_validate(m) for m in models]


@router.get("/homework/{homework_id}", response_model=Homework, summary="Get homework")
def get_homework(
    homework_id: str,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Homework:
    return Homework.model_validate(_get(HOMEWORK, db, relationships, identity, homework_id))


# --- Quizzes ---


@router.post("/quizzes", response_model=Quiz, summary="Create a quiz")
def create_quiz(
    req: CreateQuizRequest,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Quiz:
    model = _create(
        QUIZ,
        db,
        relationships,
        identity,
        req.class_id,
        req.model_dump(exclude={"class_id"}),
    )
    return Quiz.model_validate(model)


@router.get("/quizzes", response_model=List[Quiz], summary="List quizzes of a class")
def list_quizzes(
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
    class_id: Optional[str] = None,
) -> List[Quiz]:
    models = _list(QUIZ, db, relationships, identity, class_id)
    return [Quiz.model_validate(m) for m in models]


@router.get("/quizzes/{quiz_id}", response_model=Quiz, summary="Get a quiz")
def get_quiz(
    quiz_id: str,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Quiz:
    return Quiz.model_validate(_get(QUIZ, db, relationships, identity, quiz_id))


# --- Announcements ---


@router.post("/announcements", response_model=Announcement, summary="Post an announcement")
def create_announcement(
    req: CreateAnnouncementRequest,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Announcement:
    file_url = req.file_url.strip() if req.file_url else None
    model = _create(
        ANNOUNCEMENT,
        db,
        relationships,
        identity,
        req.class_id,
        {
            "teacher_id": identity.user_id,
            "message": req.message,
            "file_url": file_url or None,
        },
    )
    return Announcement.model_validate(model)


@router.get(
    "/announcements",
    response_model=List[Announcement],
    summary="List announcements of a class",
)
def list_announcements(
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
    class_id: Optional[str] = None,
) -> List[Announcement]:
    models = _list(ANNOUNCEMENT, db, relationships, identity, class_id)
    return [Announcement.model_validate(m) for m in models]


@router.get(
    "/announcements/{announcement_id}",
    response_model=Announcement,
    summary="Get an announcement",
)
def get_announcement(
    announcement_id: str,
    db: DBSessionDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Announcement:
    return Announcement.model_validate(
        _get(ANNOUNCEMENT, db, relationships, identity, announcement_id)
    )
