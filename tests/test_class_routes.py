import re

import pytest
from sqlalchemy.exc import SQLAlchemyError

from models.class_model import ClassModel
from models.content import AnnouncementModel, HomeworkModel, LessonModel, QuizModel
from models.student_class import StudentClassModel
from utils.class_manager import ClassManager

CLASS_SCOPED = (LessonModel, HomeworkModel, QuizModel, AnnouncementModel, StudentClassModel)


def test_create_class(client, teacher):
    resp = client.post(
        "/api/classes",
        json={"name": "  Algebra ", "grade": "Grade 8"},
        headers=teacher["headers"],
    )
    assert resp.status_code == 200
    created = resp.json()["class"]
    assert created["name"] == "Algebra"
    assert created["teacher_id"] == teacher["user"]["user_id"]
    assert re.fullmatch(r"CLASS-[A-Z0-9]{6}", created["class_code"])


def test_only_teachers_create_classes(client, student, parent):
    for caller in (student, parent):
        resp = client.post(
            "/api/classes", json={"name": "X", "grade": "Y"}, headers=caller["headers"]
        )
        assert resp.status_code == 403


def test_blank_class_name_rejected(client, teacher):
    resp = client.post(
        "/api/classes", json={"name": "   ", "grade": "Grade 1"}, headers=teacher["headers"]
    )
    assert resp.status_code == 400


def test_join_class_then_join_again(client, teacher, student, make_class):
    created = make_class(teacher)

    joined = client.post(
        "/api/classes/join",
        json={"class_code": created["class_code"].lower()},
        headers=student["headers"],
    )
    assert joined.status_code == 200
    body = joined.json()
    assert body["message"] == "Successfully joined class"
    assert body["class"]["class_id"] == created["class_id"]
    assert body["class"]["student_count"] == 1

    again = client.post(
        "/api/classes/join",
        json={"class_code": created["class_code"]},
        headers=student["headers"],
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Already enrolled in this class"

    roster = client.get(
        f"/api/classes/{created['class_id']}/students", headers=teacher["headers"]
    )
    assert [s["student_id"] for s in roster.json()] == [student["user"]["user_id"]]


def test_join_class_errors(client, teacher, student):
    blank = client.post("/api/classes/join", json={"class_code": "  "}, headers=student["headers"])
    assert blank.status_code == 400
    assert blank.json()["detail"] == "Class code is required"

    unknown = client.post(
        "/api/classes/join", json={"class_code": "CLASS-NOPE00"}, headers=student["headers"]
    )
    assert unknown.status_code == 404
    assert unknown.json()["detail"] == "Invalid class code"

    wrong_role = client.post(
        "/api/classes/join", json={"class_code": "CLASS-NOPE00"}, headers=teacher["headers"]
    )
    assert wrong_role.status_code == 403


def test_list_classes_by_role(client, register, student, parent, make_class):
    owner = register("teacher")
    other = register("teacher")
    mine = make_class(owner, name="Mine")
    make_class(other, name="Theirs")
    client.post(
        "/api/classes/join", json={"class_code": mine["class_code"]}, headers=student["headers"]
    )

    owned = client.get("/api/classes", headers=owner["headers"]).json()["classes"]
    assert [c["name"] for c in owned] == ["Mine"]
    assert owned[0]["student_count"] == 1
    assert owned[0]["teacher"]["user_id"] == owner["user"]["user_id"]

    enrolled = client.get("/api/classes", headers=student["headers"]).json()["classes"]
    assert [c["class_id"] for c in enrolled] == [mine["class_id"]]

    assert client.get("/api/classes", headers=parent["headers"]).status_code == 403


def test_get_class_access(client, register, student, make_class):
    owner = register("teacher")
    other = register("teacher")
    created = make_class(owner)
    url = f"/api/classes/{created['class_id']}"

    assert client.get(url, headers=owner["headers"]).status_code == 200
    assert client.get(url, headers=other["headers"]).status_code == 404
    assert client.get(url, headers=student["headers"]).status_code == 404

    client.post(
        "/api/classes/join", json={"class_code": created["class_code"]}, headers=student["headers"]
    )
    assert client.get(url, headers=student["headers"]).status_code == 200
    assert client.get("/api/classes/missing", headers=owner["headers"]).status_code == 404


def test_update_class_keeps_code(client, register, make_class):
    owner = register("teacher")
    other = register("teacher")
    created = make_class(owner)
    url = f"/api/classes/{created['class_id']}"

    denied = client.patch(url, json={"name": "Hijacked"}, headers=other["headers"])
    assert denied.status_code == 404

    resp = client.patch(url, json={"name": "Geometry"}, headers=owner["headers"])
    assert resp.status_code == 200
    updated = resp.json()["class"]
    assert updated["name"] == "Geometry"
    assert updated["grade"] == created["grade"]
    assert updated["class_code"] == created["class_code"]


def test_roster_requires_owner(client, register, student, make_class):
    owner = register("teacher")
    other = register("teacher")
    created = make_class(owner)
    url = f"/api/classes/{created['class_id']}/students"

    assert client.get(url, headers=other["headers"]).status_code == 404
    assert client.get(url, headers=student["headers"]).status_code == 403
    assert client.get(url, headers=owner["headers"]).json() == []


def test_non_owner_cannot_delete(client, register, session_factory, make_class):
    owner = register("teacher")
    other = register("teacher")
    created = make_class(owner)

    resp = client.delete(f"/api/classes/{created['class_id']}", headers=other["headers"])
    assert resp.status_code == 404

    with session_factory() as session:
        assert session.get(ClassModel, created["class_id"]) is not None


def _populate(client, teacher, students, created):
    """Enroll ``students`` and add two lessons, homework, a quiz and an announcement."""
    class_id = created["class_id"]
    headers = teacher["headers"]
    for student in students:
        client.post(
            "/api/classes/join",
            json={"class_code": created["class_code"]},
            headers=student["headers"],
        )
    for title in ("One", "Two"):
        client.post(
            "/api/lessons",
            json={"class_id": class_id, "title": title, "content": "..."},
            headers=headers,
        )
    client.post(
        "/api/homework",
        json={
            "class_id": class_id,
            "title": "Worksheet",
            "description": "Pages 1-3",
            "deadline": "2030-01-01T12:00:00Z",
        },
        headers=headers,
    )
    client.post(
        "/api/quizzes",
        json={"class_id": class_id, "title": "Quiz 1", "time_limit": 15},
        headers=headers,
    )
    client.post(
        "/api/announcements",
        json={"class_id": class_id, "message": "Welcome"},
        headers=headers,
    )


def _counts(session, class_id):
    return {
        model.__tablename__: session.query(model).filter_by(class_id=class_id).count()
        for model in CLASS_SCOPED
    }


def test_delete_class_cascades(client, register, teacher, session_factory, make_class):
    students = [register("student") for _ in range(3)]
    created = make_class(teacher)
    kept = make_class(teacher, name="Kept")
    class_id = created["class_id"]
    _populate(client, teacher, students, created)
    client.post(
        "/api/classes/join", json={"class_code": kept["class_code"]}, headers=students[0]["headers"]
    )

    with session_factory() as session:
        assert _counts(session, class_id) == {
            "lessons": 2,
            "homework": 1,
            "quizzes": 1,
            "announcements": 1,
            "student_classes": 3,
        }

    resp = client.delete(f"/api/classes/{class_id}", headers=teacher["headers"])
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    with session_factory() as session:
        assert session.get(ClassModel, class_id) is None
        assert set(_counts(session, class_id).values()) == {0}
        # Other classes are untouched
        assert session.query(StudentClassModel).filter_by(class_id=kept["class_id"]).count() == 1

    assert client.get(f"/api/classes/{class_id}", headers=teacher["headers"]).status_code == 404


def test_failed_delete_leaves_class_intact(
    client, register, teacher, db, session_factory, make_class, monkeypatch
):
    students = [register("student") for _ in range(3)]
    created = make_class(teacher)
    class_id = created["class_id"]
    _populate(client, teacher, students, created)

    with session_factory() as session:
        before = _counts(session, class_id)

    def failing_delete(instance):
        raise SQLAlchemyError("disk full")

    # Child rows are already deleted in the transaction when the class delete fails
    monkeypatch.setattr(db, "delete", failing_delete)
    with pytest.raises(SQLAlchemyError):
        ClassManager(db).delete_class(class_id)

    with session_factory() as session:
        assert session.get(ClassModel, class_id) is not None
        assert _counts(session, class_id) == before


def test_missing_and_foreign_class_look_alike(client, register, make_class):
    owner = register("teacher")
    other = register("teacher")
    class_id = make_class(owner)["class_id"]
    headers = other["headers"]

    for method, suffix, body in (
        ("GET", "", None),
        ("PATCH", "", {"name": "Hijacked"}),
        ("GET", "/students", None),
        ("DELETE", "", None),
    ):
        foreign = client.request(method, f"/api/classes/{class_id}{suffix}", json=body, headers=headers)
        missing = client.request(
            method, f"/api/classes/does-not-exist{suffix}", json=body, headers=headers
        )
        assert foreign.status_code == missing.status_code == 404
        assert foreign.content == missing.content
        assert foreign.json()["detail"] == "Class not found or access denied"
