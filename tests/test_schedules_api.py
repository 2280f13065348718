"""
Tests for schedule endpoints
"""
from datetime import date

import pytest
from fastapi import status

from wellness_tracker.validators import sunday_based_weekday


@pytest.fixture
def create_schedule(client, auth_headers):
    def _create(**overrides):
        payload = {
            "activity_name": "Morning run",
            "activity_type": "exercise",
            "start_time": "06:00",
            "end_time": "07:00",
            "days_of_week": [],
        }
        payload.update(overrides)
        response = client.post("/api/schedules", json=payload, headers=auth_headers)
        assert response.status_code == status.HTTP_201_CREATED
        return response.json()
    return _create


class TestScheduleCRUD:

    def test_create_schedule(self, create_schedule):
        schedule = create_schedule(start_time="6:15")
        assert schedule["start_time"] == "06:15"
        assert schedule["activity_type"] == "exercise"

    def test_invalid_activity_type(self, client, auth_headers):
        response = client.post("/api/schedules", json={
            "activity_name": "Nap",
            "activity_type": "napping",
            "start_time": "14:00"
        }, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "activity_type"

    def test_update_and_delete(self, client, auth_headers, other_auth_headers, create_schedule):
        schedule = create_schedule()

        response = client.put(f"/api/schedules/{schedule['id']}", json={"end_time": "07:30"}, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["end_time"] == "07:30"

        assert client.put(f"/api/schedules/{schedule['id']}", json={}, headers=auth_headers).status_code == status.HTTP_400_BAD_REQUEST
        assert client.delete(f"/api/schedules/{schedule['id']}", headers=other_auth_headers).status_code == status.HTTP_404_NOT_FOUND
        assert client.delete(f"/api/schedules/{schedule['id']}", headers=auth_headers).status_code == status.HTTP_200_OK

    def test_update_rejects_null_for_required_fields(self, client, auth_headers, create_schedule):
        schedule = create_schedule()

        for field in ("activity_name", "activity_type", "start_time", "is_active"):
            response = client.put(f"/api/schedules/{schedule['id']}", json={field: None}, headers=auth_headers)
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json()["errors"][0]["field"] == field

        cleared = client.put(f"/api/schedules/{schedule['id']}", json={"end_time": None}, headers=auth_headers)
        assert cleared.status_code == status.HTTP_200_OK
        assert cleared.json()["end_time"] is None

    def test_list_ordered_by_start(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Dinner", activity_type="dinner", start_time="19:00", end_time=None)
        create_schedule(activity_name="Breakfast", activity_type="breakfast", start_time="07:30", end_time=None)

        names = [s["activity_name"] for s in client.get("/api/schedules", headers=auth_headers).json()]
        assert names == ["Breakfast", "Dinner"]


class TestScheduleViews:

    def test_weekly_groups_by_day(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Daily", days_of_week=[])
        create_schedule(activity_name="Weekend", start_time="08:00", end_time="09:00", days_of_week=[0, 6])

        response = client.get("/api/schedules/weekly", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        weekly = response.json()
        assert set(weekly.keys()) == {str(day) for day in range(7)}
        assert [s["activity_name"] for s in weekly["0"]] == ["Daily", "Weekend"]
        assert [s["activity_name"] for s in weekly["3"]] == ["Daily"]

    def test_today(self, client, auth_headers, create_schedule):
        weekday = sunday_based_weekday(date.today())
        create_schedule(activity_name="Today", days_of_week=[weekday])
        create_schedule(activity_name="Tomorrow", days_of_week=[(weekday + 1) % 7])

        response = client.get("/api/schedules/today", headers=auth_headers)
        assert [s["activity_name"] for s in response.json()] == ["Today"]

    def test_timeline(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Work", activity_type="work", start_time="09:00", end_time="12:30")
        create_schedule(activity_name="Lunch", activity_type="lunch", start_time="12:15", end_time=None)

        response = client.get("/api/schedules/timeline", params={"date": "2024-06-12"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["day_of_week"] == 3
        slots = {slot["hour"]: [a["activity_name"] for a in slot["activities"]] for slot in data["timeline"]}
        assert len(slots) == 24
        assert slots[8] == []
        assert slots[9] == ["Work"]
        assert slots[11] == ["Work"]
        assert slots[12] == ["Lunch"]
        assert slots[13] == []
        assert data["timeline"][9]["time"] == "09:00"

    def test_timeline_short_and_overnight_schedules(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Stretch", start_time="07:00", end_time="07:20")
        create_schedule(activity_name="Night shift", activity_type="work", start_time="22:00", end_time="06:00")

        data = client.get("/api/schedules/timeline", params={"date": "2024-06-12"}, headers=auth_headers).json()

        slots = {slot["hour"]: [a["activity_name"] for a in slot["activities"]] for slot in data["timeline"]}
        assert slots[7] == ["Stretch"]
        assert slots[8] == []
        assert all("Night shift" not in names for names in slots.values())

    def test_timeline_skips_other_days(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Monday only", days_of_week=[1])
        # 2024-06-12 is a Wednesday
        data = client.get("/api/schedules/timeline", params={"date": "2024-06-12"}, headers=auth_headers).json()
        assert data["schedules"] == []

    def test_stats(self, client, auth_headers, create_schedule):
        create_schedule(activity_name="Run", days_of_week=[1, 3])
        create_schedule(activity_name="Sleep", activity_type="sleep", start_time="23:00", end_time=None)
        inactive = create_schedule(activity_name="Old", activity_type="work", days_of_week=[1])
        client.put(f"/api/schedules/{inactive['id']}", json={"is_active": False}, headers=auth_headers)

        stats = client.get("/api/schedules/stats", headers=auth_headers).json()

        assert stats["total"] == 3
        assert stats["active"] == 2
        assert stats["by_type"] == {"exercise": 1, "sleep": 1, "work": 1}
        assert stats["by_day"]["1"] == 2
        assert stats["by_day"]["2"] == 1
