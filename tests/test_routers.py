"""
Tests for the HTTP API
"""

from datetime import datetime, timedelta
from unittest.mock import patch

from weekplanner_api.common.error_handlers import SchedulerBusyError, StorageError
from weekplanner_api.scheduling.slots import calendar_weekday


def create_task(client, **overrides):
    payload = {"title": "Write tests", "duration": 30, "priority": "medium"}
    payload.update(overrides)
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestTasksRouter:
    def test_create_and_list(self, client):
        created = create_task(client, title="Plan sprint", priority="high")

        response = client.get("/api/tasks")

        assert response.status_code == 200
        [task] = response.json()
        assert task["id"] == created["id"]
        assert task["priority"] == "high"
        assert task["status"] == "todo"
        assert task["color"] == "#3B82F6"

    def test_get_unknown_task_returns_error_envelope(self, client):
        response = client.get("/api/tasks/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "RESOURCE_NOT_FOUND"
        assert "not found" in error["message"]

    def test_malformed_id(self, client):
        response = client.get("/api/tasks/not-a-uuid")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_invalid_payload(self, client):
        response = client.post("/api/tasks", json={"title": "", "duration": 2})

        assert response.status_code == 422
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"]

    def test_unknown_priority_rejected(self, client):
        response = client.post("/api/tasks", json={"title": "x", "priority": "urgent"})

        assert response.status_code == 422

    def test_patch_done_clears_schedule(self, client):
        task = create_task(client)
        client.post("/api/auto-schedule")

        response = client.patch(f"/api/tasks/{task['id']}", json={"status": "done"})

        assert response.status_code == 200
        assert response.json()["scheduled_start"] is None
        blocks = client.get(
            "/api/time-blocks",
            params={"start": "2000-01-01T00:00:00", "end": "2100-01-01T00:00:00"},
        ).json()
        assert blocks == []

    def test_delete(self, client):
        task = create_task(client)

        response = client.delete(f"/api/tasks/{task['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/tasks/{task['id']}").status_code == 404


class TestHabitsRouter:
    def test_crud(self, client):
        response = client.post(
            "/api/habits",
            json={"title": "Walk", "duration": 20, "days_of_week": [5, 1, 1]},
        )
        assert response.status_code == 201
        habit = response.json()
        assert habit["days_of_week"] == [1, 5]

        response = client.patch(f"/api/habits/{habit['id']}", json={"active": False})
        assert response.json()["active"] is False

        assert client.delete(f"/api/habits/{habit['id']}").status_code == 204
        assert client.get("/api/habits").json() == []

    def test_invalid_days_rejected(self, client):
        response = client.post("/api/habits", json={"title": "Walk", "days_of_week": [7]})

        assert response.status_code == 422

    def test_materialize_week(self, client):
        client.post(
            "/api/habits",
            json={"title": "Lunch", "duration": 60, "start_time": "12:00"},
        )

        response = client.post("/api/habits/materialize", params={"week_start": "2025-01-05"})

        assert response.status_code == 201
        blocks = response.json()
        assert len(blocks) == 5
        assert blocks[0]["start_time"] == "2025-01-06T12:00:00"
        assert blocks[0]["block_type"] == "habit"


class TestTimeBlocksRouter:
    def test_create_list_delete(self, client):
        payload = {
            "title": "Dentist",
            "start_time": "2025-01-06T15:00:00",
            "end_time": "2025-01-06T16:00:00",
            "block_type": "habit",
        }
        created = client.post("/api/time-blocks", json=payload)
        assert created.status_code == 201

        listed = client.get(
            "/api/time-blocks",
            params={"start": "2025-01-06T00:00:00", "end": "2025-01-07T00:00:00"},
        )
        assert [b["title"] for b in listed.json()] == ["Dentist"]

        block_id = created.json()["id"]
        assert client.delete(f"/api/time-blocks/{block_id}").status_code == 204

    def test_empty_block_rejected(self, client):
        response = client.post(
            "/api/time-blocks",
            json={
                "title": "Nothing",
                "start_time": "2025-01-06T15:00:00",
                "end_time": "2025-01-06T15:00:00",
            },
        )

        assert response.status_code == 422

    def test_inverted_range_rejected(self, client):
        response = client.get(
            "/api/time-blocks",
            params={"start": "2025-01-07T00:00:00", "end": "2025-01-06T00:00:00"},
        )

        assert response.status_code == 422


class TestSettingsRouter:
    def test_get_materialises_defaults(self, client):
        response = client.get("/api/settings")

        assert response.status_code == 200
        body = response.json()
        assert body["work_start"] == "09:00"
        assert body["work_end"] == "17:00"
        assert body["work_days"] == [1, 2, 3, 4, 5]
        assert body["min_block_minutes"] == 15

    def test_patch(self, client):
        response = client.patch("/api/settings", json={"work_start": "08:30"})

        assert response.status_code == 200
        assert response.json()["work_start"] == "08:30"

    def test_inverted_window_rejected(self, client):
        response = client.patch(
            "/api/settings", json={"work_start": "17:00", "work_end": "09:00"}
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_malformed_time_rejected(self, client):
        response = client.patch("/api/settings", json={"work_end": "25:00"})

        assert response.status_code == 422


class TestAutoScheduleRouter:
    def test_places_tasks(self, client):
        create_task(client, title="A", priority="low")
        create_task(client, title="B", priority="critical")
        create_task(client, title="Done", status="done")

        response = client.post("/api/auto-schedule")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["scheduled"] == 2
        assert body["unscheduled"] == 0
        assert [p["title"] for p in body["placements"]] == ["B", "A"]
        for placement in body["placements"]:
            start = datetime.fromisoformat(placement["start"])
            end = datetime.fromisoformat(placement["end"])
            assert end - start == timedelta(minutes=30)
            assert start.minute % 15 == 0
            assert calendar_weekday(start) in {1, 2, 3, 4, 5}

        tasks = {t["title"]: t for t in client.get("/api/tasks").json()}
        assert tasks["A"]["scheduled_start"] is not None
        assert tasks["Done"]["scheduled_start"] is None

    def test_second_run_places_nothing(self, client):
        create_task(client)
        client.post("/api/auto-schedule")

        body = client.post("/api/auto-schedule").json()

        assert body["scheduled"] == 0
        assert body["placements"] == []

    def test_reports_unplaceable_tasks(self, client):
        client.patch("/api/settings", json={"min_block_minutes": 60})
        task = create_task(client, duration=30)

        body = client.post("/api/auto-schedule").json()

        assert body["scheduled"] == 0
        assert body["unscheduled"] == 1
        assert body["skipped"] == [
            {"task_id": task["id"], "title": task["title"], "reason": "below_min_block"}
        ]

    def test_busy_scheduler_returns_conflict(self, client):
        with patch(
            "weekplanner_api.routers.scheduler.run_auto_schedule",
            side_effect=SchedulerBusyError(30),
        ):
            response = client.post("/api/auto-schedule")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SCHEDULER_BUSY"

    def test_storage_failure_returns_error(self, client):
        with patch(
            "weekplanner_api.routers.scheduler.run_auto_schedule",
            side_effect=StorageError("Database operation failed: disk I/O error"),
        ):
            response = client.post("/api/auto-schedule")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "STORAGE_ERROR"
        assert "disk I/O error" in error["message"]


class TestAppEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "version" in response.json()

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] in {"healthy", "degraded"}
