"""
API Integration Tests for the exam sheet service

Runs the FastAPI application in-process over httpx, against the seeded
SQLite database, covering:
1. Status codes and bodies of the four endpoints
2. Error envelopes for each error kind
3. Authentication failures
"""

import pytest

from examsheet.tests import helpers

API = "/api/v1"


def instructor_headers(user_id: str = helpers.INSTRUCTOR) -> dict:
    return helpers.bearer(user_id, "Instructor")


def submission(seeded_template, *pairs, max_points=21) -> dict:
    body = {
        "mistakes": [
            {"itemId": seeded_template.item_id(description), "count": count}
            for description, count in pairs
        ]
    }
    if max_points is not None:
        body["maxPoints"] = max_points
    return body


class TestSubmit:

    @pytest.mark.asyncio
    async def test_created(self, client, seeded_template):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, (helpers.STARTING, 2), (helpers.TRAFFIC_RULES, 1)),
            headers=instructor_headers(),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["totalPoints"] == 11
        assert body["maxPoints"] == 21
        assert body["result"] == "OK"
        assert isinstance(body["id"], int)

    @pytest.mark.asyncio
    async def test_max_points_may_be_omitted(self, client, seeded_template):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, (helpers.TRAFFIC_RULES, 5), max_points=None),
            headers=instructor_headers(),
        )

        assert response.status_code == 201
        assert response.json()["result"] == "FAILED"

    @pytest.mark.asyncio
    async def test_second_submission_conflicts(self, client, seeded_template):
        url = f"{API}/lessons/{helpers.LESSON}/evaluations"
        first = await client.post(url, json=submission(seeded_template), headers=instructor_headers())
        second = await client.post(url, json=submission(seeded_template), headers=instructor_headers())

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "conflict"

    @pytest.mark.asyncio
    async def test_unknown_item(self, client):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json={"mistakes": [{"itemId": 9999, "count": 1}], "maxPoints": 21},
            headers=instructor_headers(),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["code"] == "invalid_argument"
        assert "9999" in body["message"]

    @pytest.mark.asyncio
    async def test_budget_mismatch(self, client, seeded_template):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, max_points=30),
            headers=instructor_headers(),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mistake", [
        {"itemId": 1, "count": -1},
        {"itemId": 0, "count": 1},
        {"itemId": "abc", "count": 1},
    ])
    async def test_malformed_mistakes(self, client, mistake):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json={"mistakes": [mistake]},
            headers=instructor_headers(),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "invalid_argument"
        assert body["details"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [2.9, True, "2", 10 ** 19, 1001])
    async def test_count_must_be_a_bounded_integer(self, client, seeded_template, count):
        url = f"{API}/lessons/{helpers.LESSON}/evaluations"
        item_id = seeded_template.item_id(helpers.TRAFFIC_RULES)

        response = await client.post(
            url, json={"mistakes": [{"itemId": item_id, "count": count}]}, headers=instructor_headers()
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"

        # nothing was stored for the lesson
        retry = await client.post(url, json=submission(seeded_template), headers=instructor_headers())
        assert retry.status_code == 201

    @pytest.mark.asyncio
    async def test_invalid_resubmission_reports_conflict(self, client, seeded_template):
        url = f"{API}/lessons/{helpers.LESSON}/evaluations"
        first = await client.post(url, json=submission(seeded_template), headers=instructor_headers())
        second = await client.post(
            url,
            json={"mistakes": [{"itemId": 9999, "count": 1}], "maxPoints": 30},
            headers=instructor_headers(),
        )

        assert first.status_code == 201
        assert second.status_code == 409

    @pytest.mark.asyncio
    async def test_duplicate_items(self, client, seeded_template):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, (helpers.PARKING, 1), (helpers.PARKING, 1)),
            headers=instructor_headers(),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_lesson_not_found(self, client):
        response = await client.post(
            f"{API}/lessons/{helpers.MISSING_LESSON}/evaluations",
            json={"mistakes": []},
            headers=instructor_headers(),
        )

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_non_positive_lesson(self, client):
        response = await client.post(
            f"{API}/lessons/0/evaluations", json={"mistakes": []}, headers=instructor_headers()
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_instructor_is_forbidden(self, client):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json={"mistakes": []},
            headers=instructor_headers(helpers.OTHER_INSTRUCTOR),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    @pytest.mark.asyncio
    async def test_unrecognised_role_is_forbidden(self, client):
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json={"mistakes": []},
            headers=helpers.bearer(helpers.INSTRUCTOR, "Accountant"),
        )
        assert response.status_code == 403


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get(f"{API}/evaluations/1")

        assert response.status_code == 401
        assert response.json()["code"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get(
            f"{API}/evaluations/1", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_scheme(self, client):
        response = await client.get(f"{API}/evaluations/1", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401


class TestGet:

    async def _create(self, client, seeded_template) -> int:
        response = await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, (helpers.SIGNALLING, 3), (helpers.STARTING, 1)),
            headers=instructor_headers(),
        )
        assert response.status_code == 201
        return response.json()["id"]

    @pytest.mark.asyncio
    async def test_detail_body(self, client, seeded_template):
        evaluation_id = await self._create(client, seeded_template)

        response = await client.get(
            f"{API}/evaluations/{evaluation_id}",
            headers=helpers.bearer(helpers.STUDENT, "Student"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == evaluation_id
        assert body["lessonId"] == helpers.LESSON
        assert body["lessonDate"] == helpers.LESSON_DATE.isoformat()
        assert body["studentName"] == "Andrei Dumitru"
        assert body["instructorName"] == "Ion Popescu"
        assert body["totalPoints"] == 9
        assert body["maxPoints"] == 21
        assert body["result"] == "OK"
        assert body["createdAt"] and body["finalizedAt"]
        assert [m["description"] for m in body["mistakes"]] == [helpers.STARTING, helpers.SIGNALLING]
        assert body["mistakes"][1] == {
            "itemId": seeded_template.item_id(helpers.SIGNALLING),
            "description": helpers.SIGNALLING,
            "count": 3,
            "penaltyPoints": 2,
        }

    @pytest.mark.asyncio
    async def test_student_of_another_enrollment_is_forbidden(self, client, seeded_template):
        evaluation_id = await self._create(client, seeded_template)

        response = await client.get(
            f"{API}/evaluations/{evaluation_id}",
            headers=helpers.bearer(helpers.OTHER_STUDENT, "Student"),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_of_another_school_is_forbidden(self, client, seeded_template):
        evaluation_id = await self._create(client, seeded_template)

        response = await client.get(
            f"{API}/evaluations/{evaluation_id}",
            headers=helpers.bearer(helpers.FOREIGN_ADMIN, "SchoolAdmin", helpers.FOREIGN_SCHOOL),
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.get(f"{API}/evaluations/777", headers=instructor_headers())

        assert response.status_code == 404
        assert response.json()["message"] == "Evaluation with ID 777 not found."


class TestHistory:

    @pytest.mark.asyncio
    async def test_paged_envelope(self, client, seeded_template):
        await client.post(
            f"{API}/lessons/{helpers.LESSON}/evaluations",
            json=submission(seeded_template, (helpers.PARKING, 1)),
            headers=instructor_headers(),
        )

        response = await client.get(
            f"{API}/students/{helpers.STUDENT}/evaluations",
            params={"from": "2025-03-01", "to": helpers.LESSON_DATE.isoformat(), "page": 1, "pageSize": 10},
            headers=helpers.bearer(helpers.ADMIN, "SchoolAdmin"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["pageSize"] == 10
        assert body["total"] == 1
        assert body["items"][0]["date"] == helpers.LESSON_DATE.isoformat()
        assert body["items"][0]["totalPoints"] == 3
        assert body["items"][0]["maxPoints"] == 21
        assert body["items"][0]["result"] == "OK"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [
        {"from": "14-03-2025"},
        {"to": "yesterday"},
        {"from": "2025-03-10", "to": "2025-03-01"},
        {"page": 0},
        {"pageSize": 101},
    ])
    async def test_bad_query(self, client, params):
        response = await client.get(
            f"{API}/students/{helpers.STUDENT}/evaluations",
            params=params,
            headers=helpers.bearer(helpers.STUDENT, "Student"),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"

    @pytest.mark.asyncio
    async def test_unknown_student(self, client):
        response = await client.get(
            f"{API}/students/nobody/evaluations", headers=helpers.bearer(helpers.STUDENT, "Student")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_other_student_is_forbidden(self, client):
        response = await client.get(
            f"{API}/students/{helpers.STUDENT}/evaluations",
            headers=helpers.bearer(helpers.OTHER_STUDENT, "Student"),
        )
        assert response.status_code == 403


class TestTemplates:

    @pytest.mark.asyncio
    async def test_template_by_license(self, client, seeded_template):
        response = await client.get(
            f"{API}/templates/by-license/{helpers.LICENSE_B}",
            headers=helpers.bearer(helpers.STUDENT, "Student"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["licenseId"] == helpers.LICENSE_B
        assert body["maxPoints"] == 21
        assert [item["orderIndex"] for item in body["items"]] == [1, 2, 3, 4]
        assert body["items"][1]["description"] == helpers.TRAFFIC_RULES
        assert body["items"][1]["penaltyPoints"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("license_id, status_code", [
        (helpers.LICENSE_C, 404),
        (0, 400),
    ])
    async def test_template_errors(self, client, license_id, status_code):
        response = await client.get(
            f"{API}/templates/by-license/{license_id}",
            headers=helpers.bearer(helpers.STUDENT, "Student"),
        )
        assert response.status_code == status_code
