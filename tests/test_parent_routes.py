def _add_child(client, parent, code):
    return client.post(
        "/api/parent/add-child", json={"parent_code": code}, headers=parent["headers"]
    )


def test_add_child_then_conflict(client, student, parent):
    code = student["user"]["parent_code"]

    resp = _add_child(client, parent, code)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Child added successfully"
    assert body["child"]["user_id"] == student["user"]["user_id"]

    again = _add_child(client, parent, code.lower())
    assert again.status_code == 400
    assert again.json()["detail"] == "Child already linked to your account"

    children = client.get("/api/parent/children", headers=parent["headers"]).json()["children"]
    assert len(children) == 1


def test_add_child_errors(client, teacher, student, parent):
    assert _add_child(client, parent, "  ").status_code == 400

    unknown = _add_child(client, parent, "PARENT-NOPE00")
    assert unknown.status_code == 404
    assert unknown.json()["detail"] == "Invalid parent code"

    wrong_role = _add_child(client, teacher, student["user"]["parent_code"])
    assert wrong_role.status_code == 403


def test_two_parents_can_link_same_child(client, register, student):
    code = student["user"]["parent_code"]
    assert _add_child(client, register("parent"), code).status_code == 200
    assert _add_child(client, register("parent"), code).status_code == 200


def test_children_empty_for_new_parent(client, parent):
    resp = client.get("/api/parent/children", headers=parent["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["children"] == []
    assert body["parent"]["user_id"] == parent["user"]["user_id"]


def test_children_only_for_parents(client, student):
    assert client.get("/api/parent/children", headers=student["headers"]).status_code == 403


def test_children_include_classes(client, teacher, student, parent, make_class):
    created = make_class(teacher, name="History", grade="Grade 7")
    client.post(
        "/api/classes/join", json={"class_code": created["class_code"]}, headers=student["headers"]
    )
    _add_child(client, parent, student["user"]["parent_code"])

    child = client.get("/api/parent/children", headers=parent["headers"]).json()["children"][0]
    assert child["grade"] == "Grade 7"
    assert child["classes"][0]["name"] == "History"
    assert child["classes"][0]["teacher"] == teacher["user"]["name"]


def test_unenrolled_child_grade_not_assigned(client, student, parent):
    _add_child(client, parent, student["user"]["parent_code"])
    child = client.get("/api/parent/children", headers=parent["headers"]).json()["children"][0]
    assert child["grade"] == "Not assigned"
    assert child["classes"] == []


def test_child_progress(client, register, teacher, student, parent, make_class):
    created = make_class(teacher)
    client.post(
        "/api/classes/join", json={"class_code": created["class_code"]}, headers=student["headers"]
    )
    client.post(
        "/api/homework",
        json={
            "class_id": created["class_id"],
            "title": "Worksheet",
            "description": "Exercises 1-10",
            "deadline": "2030-01-01",
        },
        headers=teacher["headers"],
    )
    url = f"/api/parent/children/{student['user']['user_id']}"

    # Not linked yet
    assert client.get(url, headers=parent["headers"]).status_code == 404

    _add_child(client, parent, student["user"]["parent_code"])
    resp = client.get(url, headers=parent["headers"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["child"]["user_id"] == student["user"]["user_id"]
    assert [h["title"] for h in body["homework"]] == ["Worksheet"]
    assert body["quizzes"] == []

    stranger = register("parent")
    assert client.get(url, headers=stranger["headers"]).status_code == 404


def test_missing_and_unlinked_child_look_alike(client, student, parent):
    unlinked = client.get(
        f"/api/parent/children/{student['user']['user_id']}", headers=parent["headers"]
    )
    missing = client.get("/api/parent/children/does-not-exist", headers=parent["headers"])

    assert unlinked.status_code == missing.status_code == 404
    assert unlinked.content == missing.content
    assert missing.json()["detail"] == "Child not found or access denied"
