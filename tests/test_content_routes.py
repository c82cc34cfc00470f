import pytest


@pytest.fixture
def classroom(client, register, make_class):
    """A class with an enrolled student, plus an outsider student and teacher."""
    owner = register("teacher")
    created = make_class(owner)
    enrolled = register("student")
    client.post(
        "/api/classes/join",
        json={"class_code": created["class_code"]},
        headers=enrolled["headers"],
    )
    return {
        "class": created,
        "owner": owner,
        "enrolled": enrolled,
        "outsider": register("student"),
        "other_teacher": register("teacher"),
        "parent": register("parent"),
    }


def _lesson(class_id, title="Intro"):
    return {"class_id": class_id, "title": title, "content": "Read chapter 1"}


def test_owner_creates_and_enrolled_student_reads(client, classroom):
    class_id = classroom["class"]["class_id"]
    created = client.post(
        "/api/lessons", json=_lesson(class_id), headers=classroom["owner"]["headers"]
    )
    assert created.status_code == 200
    lesson = created.json()
    assert lesson["file_type"] == "text"

    listed = client.get(
        f"/api/lessons?class_id={class_id}", headers=classroom["enrolled"]["headers"]
    )
    assert listed.status_code == 200
    assert [item["lesson_id"] for item in listed.json()] == [lesson["lesson_id"]]

    single = client.get(
        f"/api/lessons/{lesson['lesson_id']}", headers=classroom["enrolled"]["headers"]
    )
    assert single.status_code == 200
    assert single.json()["title"] == "Intro"


def test_unenrolled_student_cannot_read(client, classroom):
    class_id = classroom["class"]["class_id"]
    lesson = client.post(
        "/api/lessons", json=_lesson(class_id), headers=classroom["owner"]["headers"]
    ).json()

    listed = client.get(
        f"/api/lessons?class_id={class_id}", headers=classroom["outsider"]["headers"]
    )
    assert listed.status_code == 404
    assert listed.json()["detail"] == "Class not found or access denied"

    single = client.get(
        f"/api/lessons/{lesson['lesson_id']}", headers=classroom["outsider"]["headers"]
    )
    assert single.status_code == 404


def test_parent_cannot_read_class_content(client, classroom):
    class_id = classroom["class"]["class_id"]
    resp = client.get(f"/api/quizzes?class_id={class_id}", headers=classroom["parent"]["headers"])
    assert resp.status_code == 403


def test_only_owner_creates_content(client, classroom):
    class_id = classroom["class"]["class_id"]

    other = client.post(
        "/api/quizzes",
        json={"class_id": class_id, "title": "Pop quiz"},
        headers=classroom["other_teacher"]["headers"],
    )
    assert other.status_code == 404

    enrolled = client.post(
        "/api/quizzes",
        json={"class_id": class_id, "title": "Pop quiz"},
        headers=classroom["enrolled"]["headers"],
    )
    assert enrolled.status_code == 403

    missing = client.post(
        "/api/quizzes",
        json={"class_id": "missing", "title": "Pop quiz"},
        headers=classroom["owner"]["headers"],
    )
    assert missing.status_code == 404


def test_list_requires_class_id(client, classroom):
    resp = client.get("/api/homework", headers=classroom["owner"]["headers"])
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Class ID is required"


def test_homework_ordered_by_deadline(client, classroom):
    class_id = classroom["class"]["class_id"]
    for title, deadline in (
        ("Later", "2030-03-01T00:00:00Z"),
        ("Sooner", "2030-01-01T00:00:00Z"),
    ):
        resp = client.post(
            "/api/homework",
            json={
                "class_id": class_id,
                "title": title,
                "description": "Do it",
                "deadline": deadline,
            },
            headers=classroom["owner"]["headers"],
        )
        assert resp.status_code == 200

    listed = client.get(
        f"/api/homework?class_id={class_id}", headers=classroom["enrolled"]["headers"]
    )
    assert [h["title"] for h in listed.json()] == ["Sooner", "Later"]


def test_homework_rejects_bad_deadline(client, classroom):
    resp = client.post(
        "/api/homework",
        json={
            "class_id": classroom["class"]["class_id"],
            "title": "Essay",
            "description": "500 words",
            "deadline": "next tuesday",
        },
        headers=classroom["owner"]["headers"],
    )
    assert resp.status_code == 400


def test_announcements(client, classroom):
    class_id = classroom["class"]["class_id"]
    blank = client.post(
        "/api/announcements",
        json={"class_id": class_id, "message": "   "},
        headers=classroom["owner"]["headers"],
    )
    assert blank.status_code == 400

    posted = client.post(
        "/api/announcements",
        json={"class_id": class_id, "message": " Field trip Friday ", "file_url": " "},
        headers=classroom["owner"]["headers"],
    )
    assert posted.status_code == 200
    body = posted.json()
    assert body["message"] == "Field trip Friday"
    assert body["file_url"] is None
    assert body["teacher_id"] == classroom["owner"]["user"]["user_id"]

    listed = client.get(
        f"/api/announcements?class_id={class_id}", headers=classroom["enrolled"]["headers"]
    )
    assert len(listed.json()) == 1


def test_class_counts_reflect_content(client, classroom):
    class_id = classroom["class"]["class_id"]
    headers = classroom["owner"]["headers"]
    client.post("/api/lessons", json=_lesson(class_id), headers=headers)
    client.post("/api/quizzes", json={"class_id": class_id, "title": "Q1", "time_limit": 10}, headers=headers)

    summary = client.get(f"/api/classes/{class_id}", headers=headers).json()
    assert summary["counts"] == {"lessons": 1, "homework": 0, "quizzes": 1, "announcements": 0}
    assert summary["student_count"] == 1


def _same_response(first, second):
    assert first.status_code == second.status_code
    assert first.content == second.content


def test_missing_and_inaccessible_content_look_alike(client, classroom):
    class_id = classroom["class"]["class_id"]
    lesson = client.post(
        "/api/lessons", json=_lesson(class_id), headers=classroom["owner"]["headers"]
    ).json()

    for caller in ("outsider", "other_teacher"):
        headers = classroom[caller]["headers"]
        existing = client.get(f"/api/lessons/{lesson['lesson_id']}", headers=headers)
        missing = client.get("/api/lessons/does-not-exist", headers=headers)
        _same_response(existing, missing)
        assert existing.status_code == 404
        assert existing.json()["detail"] == "Lesson not found or access denied"


def test_parent_gets_same_answer_for_any_content_id(client, classroom):
    class_id = classroom["class"]["class_id"]
    lesson = client.post(
        "/api/lessons", json=_lesson(class_id), headers=classroom["owner"]["headers"]
    ).json()
    headers = classroom["parent"]["headers"]

    existing = client.get(f"/api/lessons/{lesson['lesson_id']}", headers=headers)
    missing = client.get("/api/lessons/does-not-exist", headers=headers)
    _same_response(existing, missing)
    assert existing.status_code == 403


def test_listing_missing_and_inaccessible_class_look_alike(client, classroom):
    class_id = classroom["class"]["class_id"]
    for caller in ("outsider", "other_teacher"):
        headers = classroom[caller]["headers"]
        existing = client.get(f"/api/homework?class_id={class_id}", headers=headers)
        missing = client.get("/api/homework?class_id=does-not-exist", headers=headers)
        _same_response(existing, missing)


def test_creating_in_missing_and_foreign_class_look_alike(client, classroom):
    headers = classroom["other_teacher"]["headers"]
    foreign = client.post(
        "/api/quizzes",
        json={"class_id": classroom["class"]["class_id"], "title": "Pop quiz"},
        headers=headers,
    )
    missing = client.post(
        "/api/quizzes", json={"class_id": "does-not-exist", "title": "Pop quiz"}, headers=headers
    )
    _same_response(foreign, missing)
    assert foreign.json()["detail"] == "Class not found or access denied"


def test_homework_deadlines_with_offsets_sort_in_time_order(client, classroom):
    class_id = classroom["class"]["class_id"]
    for title, deadline in (
        # 2030-01-01T07:00Z
        ("Second", "2030-01-01T09:00:00+02:00"),
        # 2030-01-01T06:00Z
        ("First", "2030-01-01T01:00:00-05:00"),
    ):
        client.post(
            "/api/homework",
            json={"class_id": class_id, "title": title, "description": "Do it", "deadline": deadline},
            headers=classroom["owner"]["headers"],
        )

    listed = client.get(
        f"/api/homework?class_id={class_id}", headers=classroom["owner"]["headers"]
    ).json()
    assert [h["title"] for h in listed] == ["First", "Second"]
    assert [h["deadline"] for h in listed] == [
        "2030-01-01T06:00:00+00:00",
        "2030-01-01T07:00:00+00:00",
    ]
