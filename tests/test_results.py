"""Result submission, listing, stats, deletion and the admin dashboard."""

import asyncio
import threading

import pytest

from exam_simulator_api.app.services.result_service import RESULTS, ResultService
from exam_simulator_api.app.services.statistics_service import aggregate_results, round_half_up

from .helpers import json_upload, make_question


def result(user_id="student_1", score=80, timestamp="2025-01-01T10:00:00.000Z", **extra):
    record = {
        "id": f"result_{timestamp}",
        "userId": user_id,
        "userName": "Ada Obi",
        "testName": "Chapter 1",
        "score": score,
        "timestamp": timestamp,
    }
    record.update(extra)
    return record


class TestSubmit:
    def test_submit_stamps_id_and_timestamp(self, client, api, file_store):
        body = {"userName": "Ada", "testName": "Mock 1", "score": 85, "userId": "student_1", "timeTaken": "12:30"}
        response = client.post(api("/results"), json=body)
        assert response.status_code == 200
        result_id = response.json()["resultId"]
        assert result_id.startswith("result_")

        stored = file_store.load(RESULTS)
        assert len(stored) == 1
        assert stored[0]["id"] == result_id
        assert stored[0]["timeTaken"] == "12:30"
        assert stored[0]["timestamp"].endswith("Z")

    def test_client_id_and_timestamp_are_replaced(self, client, api, file_store):
        body = {"userName": "Ada", "testName": "Mock 1", "score": 85, "id": "mine", "timestamp": "yesterday"}
        client.post(api("/results"), json=body)
        stored = file_store.load(RESULTS)[0]
        assert stored["id"] != "mine"
        assert stored["timestamp"] != "yesterday"

    @pytest.mark.parametrize(
        "body",
        [
            {"testName": "Mock 1", "score": 50},
            {"userName": "Ada", "score": 50},
            {"userName": "Ada", "testName": "Mock 1"},
            {"userName": "Ada", "testName": "Mock 1", "score": "50"},
            {"userName": "Ada", "testName": "Mock 1", "score": True},
            {"userName": "", "testName": "Mock 1", "score": 50},
        ],
    )
    def test_missing_or_invalid_fields_are_rejected(self, client, api, file_store, body):
        response = client.post(api("/results"), json=body)
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Missing required fields: userName, testName, score",
        }
        assert not file_store.exists(RESULTS)

    @pytest.mark.parametrize("score", ["NaN", "Infinity", "-Infinity", "1" + "0" * 400])
    def test_non_finite_scores_are_rejected(self, client, api, file_store, score):
        content = '{"userName": "A", "testName": "T", "userId": "u", "score": %s}' % score
        response = client.post(
            api("/results"), content=content.encode("utf-8"), headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert not file_store.exists(RESULTS)
        assert client.get(api("/results/admin/all")).status_code == 200
        assert client.get(api("/admin/stats")).status_code == 200

    def test_zero_score_is_accepted(self, client, api):
        response = client.post(api("/results"), json={"userName": "Ada", "testName": "Mock", "score": 0})
        assert response.status_code == 200

    def test_concurrent_submits_are_all_kept(self, memory_store):
        workers = 25

        def _submit(i):
            asyncio.run(ResultService.submit({"userName": f"user{i}", "testName": "Mock", "score": i}))

        threads = [threading.Thread(target=_submit, args=(i,)) for i in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        stored = memory_store.load(RESULTS)
        assert len(stored) == workers
        assert len({r["id"] for r in stored}) == workers


class TestListing:
    def test_user_results_newest_first(self, client, api, file_store):
        file_store.save(
            RESULTS,
            [
                result(timestamp="2025-01-01T10:00:00.000Z"),
                result(user_id="student_2", timestamp="2025-01-03T10:00:00.000Z"),
                result(timestamp="2025-01-02T10:00:00.000Z"),
            ],
        )
        body = client.get(api("/results/user/student_1")).json()
        assert body["count"] == 2
        assert [r["timestamp"] for r in body["results"]] == [
            "2025-01-02T10:00:00.000Z",
            "2025-01-01T10:00:00.000Z",
        ]

    def test_user_results_empty_without_file(self, client, api):
        assert client.get(api("/results/user/student_1")).json() == {"success": True, "results": [], "count": 0}

    def test_admin_all_includes_stats(self, client, api, file_store):
        file_store.save(
            RESULTS,
            [
                result(user_id="s1", score=80, timestamp="2025-01-01T00:00:00.000Z"),
                result(user_id="s2", score=60, timestamp="2025-01-02T00:00:00.000Z"),
                result(user_id="s1", score=100, timestamp="2025-01-03T00:00:00.000Z"),
            ],
        )
        body = client.get(api("/results/admin/all")).json()
        assert body["count"] == 3
        assert body["results"][0]["score"] == 100
        assert body["stats"] == {"totalTests": 3, "uniqueStudents": 2, "averageScore": 80, "passRate": 67}

    def test_admin_all_without_file(self, client, api):
        body = client.get(api("/results/admin/all")).json()
        assert body["results"] == []
        assert body["stats"] == {"totalTests": 0, "uniqueStudents": 0, "averageScore": 0, "passRate": 0}


class TestAggregate:
    def test_reference_scores(self):
        stats = aggregate_results([{"score": 80}, {"score": 60}, {"score": 100}])
        assert stats["averageScore"] == 80
        assert stats["passRate"] == 67

    def test_threshold_is_inclusive(self):
        stats = aggregate_results([{"score": 70}, {"score": 69.9}])
        assert stats["passRate"] == 50

    def test_custom_threshold(self):
        assert aggregate_results([{"score": 55}], pass_threshold=50)["passRate"] == 100

    def test_unusable_stored_scores_count_as_zero(self):
        stats = aggregate_results([{"score": float("nan")}, {"score": float("inf")}, {"score": 10**400}, {"score": 80}])
        assert stats["totalTests"] == 4
        assert stats["averageScore"] == 20
        assert stats["passRate"] == 25

    def test_rounds_half_up(self):
        assert round_half_up(66.5) == 67
        assert round_half_up(2.5) == 3
        assert aggregate_results([{"score": 70}, {"score": 71}])["averageScore"] == 71


class TestDelete:
    def test_delete_existing_result(self, client, api, file_store):
        file_store.save(RESULTS, [result(timestamp="a"), result(timestamp="b")])
        response = client.delete(api("/results/result_a"))
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Result deleted successfully"}
        assert [r["id"] for r in file_store.load(RESULTS)] == ["result_b"]

    def test_unknown_id_leaves_file_byte_for_byte(self, client, api, file_store):
        file_store.save(RESULTS, [result()])
        path = file_store.path_for(RESULTS)
        before = path.read_bytes()
        response = client.delete(api("/results/result_missing"))
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Result not found"}
        assert path.read_bytes() == before

    def test_no_results_file(self, client, api, file_store):
        response = client.delete(api("/results/result_1"))
        assert response.status_code == 404
        assert response.json()["error"] == "No results found"
        assert not file_store.exists(RESULTS)


class TestDashboard:
    def test_dashboard_stats(self, client, api, file_store):
        client.post(api("/auth/register"), json={"name": "A", "email": "a@example.com", "password": "pw"})
        client.post(api("/auth/register"), json={"name": "B", "email": "b@example.com", "password": "pw"})
        client.post(api("/questions/upload/chapter/1"), files=json_upload([make_question(1), make_question(2)]))
        client.post(api("/questions/upload/mock/1"), files=json_upload([make_question(1)]))
        file_store.save(RESULTS, [result(score=80), result(score=60), result(score=100)])

        body = client.get(api("/admin/stats")).json()
        assert body["success"] is True
        assert body["stats"] == {
            "totalTests": 3,
            "uniqueStudents": 1,
            "averageScore": 80,
            "passRate": 67,
            "totalStudents": 2,
            "totalQuestions": 3,
            "availableTests": 2,
        }

    def test_dashboard_on_empty_store(self, client, api):
        stats = client.get(api("/admin/stats")).json()["stats"]
        assert stats["totalStudents"] == 0
        assert stats["totalTests"] == 0
        assert stats["availableTests"] == 0
