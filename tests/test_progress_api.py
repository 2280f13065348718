"""
Tests for progress metric endpoints
"""
from datetime import date, timedelta

from fastapi import status


def record(client, headers, metric_type, value, day, target=None):
    payload = {"metric_type": metric_type, "value": value, "date": day.isoformat()}
    if target is not None:
        payload["target_value"] = target
    return client.post("/api/progress", json=payload, headers=headers)


class TestProgressCRUD:

    def test_record_metric(self, client, auth_headers):
        response = record(client, auth_headers, "water_intake", 6, date(2024, 5, 1), target=8)

        assert response.status_code == status.HTTP_201_CREATED
        metric = response.json()["metric"]
        assert metric["value"] == 6
        assert metric["target_value"] == 8
        assert metric["date"] == "2024-05-01"

    def test_duplicate_metric_rejected(self, client, auth_headers):
        day = date(2024, 5, 1)
        record(client, auth_headers, "sleep_hours", 7, day)

        response = record(client, auth_headers, "sleep_hours", 8, day)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_same_type_other_day_or_user_is_allowed(self, client, auth_headers, other_auth_headers):
        day = date(2024, 5, 1)
        assert record(client, auth_headers, "sleep_hours", 7, day).status_code == status.HTTP_201_CREATED
        assert record(client, auth_headers, "sleep_hours", 7, day + timedelta(days=1)).status_code == status.HTTP_201_CREATED
        assert record(client, other_auth_headers, "sleep_hours", 7, day).status_code == status.HTTP_201_CREATED

    def test_invalid_metric(self, client, auth_headers):
        response = client.post("/api/progress", json={
            "metric_type": "steps",
            "value": -1,
            "date": "2024-05-01"
        }, headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"metric_type", "value"} <= fields

    def test_list_with_filters(self, client, auth_headers):
        record(client, auth_headers, "water_intake", 5, date(2024, 5, 1))
        record(client, auth_headers, "water_intake", 6, date(2024, 5, 3))
        record(client, auth_headers, "sleep_hours", 7, date(2024, 5, 3))

        response = client.get("/api/progress", params={
            "metric_type": "water_intake",
            "start_date": "2024-05-01",
            "end_date": "2024-05-31"
        }, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        items = response.json()["items"]
        assert [item["date"] for item in items] == ["2024-05-03", "2024-05-01"]

    def test_update_and_delete(self, client, auth_headers, other_auth_headers):
        metric_id = record(client, auth_headers, "meditation_minutes", 5, date(2024, 5, 1)).json()["metric"]["id"]

        assert client.put(f"/api/progress/{metric_id}", json={"value": 15}, headers=other_auth_headers).status_code == status.HTTP_404_NOT_FOUND
        assert client.put(f"/api/progress/{metric_id}", json={}, headers=auth_headers).status_code == status.HTTP_400_BAD_REQUEST

        response = client.put(f"/api/progress/{metric_id}", json={"value": 15}, headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["metric"]["value"] == 15

        assert client.delete(f"/api/progress/{metric_id}", headers=other_auth_headers).status_code == status.HTTP_404_NOT_FOUND
        assert client.delete(f"/api/progress/{metric_id}", headers=auth_headers).status_code == status.HTTP_200_OK
        assert client.get("/api/progress", headers=auth_headers).json()["count"] == 0


class TestProgressAnalytics:

    def test_sleep_only_scores_on_sleep(self, client, auth_headers):
        today = date.today()
        record(client, auth_headers, "sleep_hours", 8, today)
        record(client, auth_headers, "sleep_hours", 8, today - timedelta(days=1))

        response = client.get("/api/progress/analytics", params={"period": "week"}, headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["wellness_score"] == 100
        assert data["analytics"]["sleep_hours"]["average"] == 8
        assert data["analytics"]["water_intake"]["count"] == 0

    def test_water_and_exercise_score(self, client, auth_headers):
        today = date.today()
        record(client, auth_headers, "water_intake", 4, today)
        record(client, auth_headers, "exercise_minutes", 30, today)

        data = client.get("/api/progress/analytics", headers=auth_headers).json()
        assert data["period"] == "week"
        assert data["wellness_score"] == 75

    def test_period_window(self, client, auth_headers):
        today = date.today()
        record(client, auth_headers, "water_intake", 8, today - timedelta(days=20))

        week = client.get("/api/progress/analytics", params={"period": "week"}, headers=auth_headers).json()
        month = client.get("/api/progress/analytics", params={"period": "month"}, headers=auth_headers).json()

        assert week["analytics"]["water_intake"]["count"] == 0
        assert week["wellness_score"] == 0
        assert month["analytics"]["water_intake"]["count"] == 1

    def test_unknown_period_falls_back_to_week(self, client, auth_headers):
        data = client.get("/api/progress/analytics", params={"period": "decade"}, headers=auth_headers).json()
        assert data["period"] == "week"

    def test_summary(self, client, auth_headers):
        today = date.today()
        record(client, auth_headers, "water_intake", 6, today)
        record(client, auth_headers, "water_intake", 8, today - timedelta(days=3))
        record(client, auth_headers, "water_intake", 4, today - timedelta(days=20))

        response = client.get("/api/progress/summary", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        summary = response.json()["summary"]
        assert summary["today"]["water_intake"]["count"] == 1
        assert summary["week"]["water_intake"] == {"total": 14, "average": 7, "count": 2}
        assert summary["month"]["water_intake"]["count"] == 3
        assert summary["month"]["sleep_hours"]["count"] == 0
