import pytest

from app import dependencies


def test_create_test_sums_marks_and_starts_inactive(client, admin_headers, exam_payload):
    created = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()
    assert created["success"] is True

    test = client.get(f"/api/v1/tests/{created['data']}", headers=admin_headers).json()["data"]
    assert test["totalMarks"] == 10
    assert test["isActive"] is False
    assert [q["orderIndex"] for q in test["questions"]] == [0, 1]
    assert test["questions"][1]["correctAnswers"] == ["1", "2"]


@pytest.mark.parametrize(
    "mutate, message",
    [
        (lambda p: p.update(questions=[]), "Please add at least one question"),
        (lambda p: p["questions"][0].update(questionText="  "), "Question 1: Question text is required"),
        (lambda p: p["questions"][1]["options"][2].update(text=""), "Question 2: All options must have text"),
        (lambda p: p["questions"][1].update(correctAnswers=[]), "Question 2: Please select at least one correct answer"),
        (
            lambda p: p["questions"][0].update(correctAnswers=["1", "2"]),
            "Question 1: A single correct question must have exactly one correct answer",
        ),
        (
            lambda p: p["questions"][0].update(correctAnswers=["7"]),
            "Question 1: Correct answers must be chosen from the options",
        ),
    ],
)
def test_create_test_validation(client, admin_headers, exam_payload, mutate, message):
    mutate(exam_payload)
    body = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()

    assert body["success"] is False
    assert body["error"] == message


def test_toggle_active_controls_student_listing(client, admin_headers, student_headers, exam_payload):
    test_id = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()["data"]
    assert client.get("/api/v1/tests/active", headers=student_headers).json()["data"] == []

    toggled = client.patch(f"/api/v1/tests/toggle-active/{test_id}", headers=admin_headers).json()
    assert toggled["data"]["isActive"] is True

    active = client.get("/api/v1/tests/active", headers=student_headers).json()["data"]
    assert [t["id"] for t in active] == [test_id]
    assert active[0]["attempted"] is False


def test_admin_list_is_paginated(client, admin_headers, exam_payload):
    for _ in range(3):
        client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers)

    body = client.get("/api/v1/tests/list?page=1&limit=2", headers=admin_headers).json()
    assert len(body["data"]["tests"]) == 2
    assert body["data"]["pagination"]["totalPages"] == 2


def test_update_metadata_and_questions(client, admin_headers, exam_payload):
    test_id = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()["data"]
    new_questions = exam_payload["questions"][:1]

    body = client.put(
        f"/api/v1/tests/update/{test_id}",
        json={"title": "Renamed", "durationMinutes": 45, "questions": new_questions},
        headers=admin_headers,
    ).json()
    assert body["success"] is True

    test = client.get(f"/api/v1/tests/{test_id}", headers=admin_headers).json()["data"]
    assert test["title"] == "Renamed"
    assert test["durationMinutes"] == 45
    assert test["totalMarks"] == 3
    assert len(test["questions"]) == 1


def test_questions_are_locked_once_attempted(client, admin_headers, student_headers, active_test_id, exam_payload):
    client.post(f"/api/v1/attempts/start/{active_test_id}", headers=student_headers)

    body = client.put(
        f"/api/v1/tests/update/{active_test_id}",
        json={"questions": exam_payload["questions"]},
        headers=admin_headers,
    ).json()
    assert body["success"] is False

    renamed = client.put(
        f"/api/v1/tests/update/{active_test_id}", json={"title": "Still editable"}, headers=admin_headers
    ).json()
    assert renamed["success"] is True


def test_delete_cascades(client, mongo, admin_headers, student_headers, active_test_id):
    attempt_id = client.post(
        f"/api/v1/attempts/start/{active_test_id}", headers=student_headers
    ).json()["data"]["attempt"]["id"]
    question_id = client.get(f"/api/v1/attempts/{attempt_id}", headers=student_headers).json()["data"]["questions"][0]["id"]
    client.post(
        f"/api/v1/attempts/select/{attempt_id}",
        json={"questionId": question_id, "optionId": "2"},
        headers=student_headers,
    )

    body = client.delete(f"/api/v1/tests/delete/{active_test_id}", headers=admin_headers).json()

    assert body["success"] is True
    assert mongo["Tests"].count_documents({}) == 0
    assert mongo["Questions"].count_documents({}) == 0
    assert mongo["TestAttempts"].count_documents({}) == 0
    assert mongo["AttemptAnswers"].count_documents({}) == 0


def test_unknown_test(client, admin_headers):
    body = client.get("/api/v1/tests/000000000000000000000000", headers=admin_headers).json()
    assert body == {"data": None, "success": False, "error": "Test not found"}


def test_blank_title_is_rejected_on_create(client, admin_headers, exam_payload):
    exam_payload["title"] = "   "
    body = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()
    assert body == {"data": None, "success": False, "error": "Title is required"}


def test_list_rejects_non_positive_paging(client, admin_headers):
    assert client.get("/api/v1/tests/list?limit=0", headers=admin_headers).status_code == 422
    assert client.get("/api/v1/tests/list?page=0", headers=admin_headers).status_code == 422


def test_failed_question_replacement_keeps_old_questions(client, monkeypatch, admin_headers, exam_payload):
    test_id = client.post("/api/v1/tests/create", json=exam_payload, headers=admin_headers).json()["data"]
    collection = dependencies.get_test_service().question_model.collection
    insert_many = collection.insert_many

    def interrupted_insert(documents, *args, **kwargs):
        insert_many(documents[:1])
        raise RuntimeError("insert interrupted")

    monkeypatch.setattr(collection, "insert_many", interrupted_insert)
    replacement = [dict(exam_payload["questions"][0], questionText="3 + 3 = ?")] * 2
    body = client.put(
        f"/api/v1/tests/update/{test_id}", json={"questions": replacement}, headers=admin_headers
    ).json()
    assert body["error"] == "Failed to update test"

    monkeypatch.undo()
    test = client.get(f"/api/v1/tests/{test_id}", headers=admin_headers).json()["data"]
    assert [q["questionText"] for q in test["questions"]] == ["2 + 2 = ?", "Pick the primes"]
    assert test["totalMarks"] == 10
