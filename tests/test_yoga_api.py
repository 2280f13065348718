"""
Tests for yoga catalog and practice session endpoints
"""
from datetime import datetime, timedelta

from fastapi import status

from wellness_tracker.yoga_models import YogaSession


class TestCatalog:
    """Poses and routines are public"""

    def test_list_all_poses(self, client):
        response = client.get("/api/yoga/poses")

        assert response.status_code == status.HTTP_200_OK
        poses = response.json()["poses"]
        assert len(poses) == 8
        assert poses[0]["name"] == "Mountain Pose (Tadasana)"
        assert poses[0]["image"].endswith("/mountain-pose.jpg")

    def test_filter_poses(self, client):
        beginner = client.get("/api/yoga/poses", params={"difficulty": "beginner"}).json()["poses"]
        standing = client.get("/api/yoga/poses", params={"category": "standing"}).json()["poses"]
        both = client.get("/api/yoga/poses", params={"category": "standing", "difficulty": "beginner"}).json()["poses"]

        assert all(pose["difficulty"] == "beginner" for pose in beginner)
        assert len(beginner) == 6
        assert [pose["id"] for pose in standing] == [1, 3]
        assert [pose["id"] for pose in both] == [1]

    def test_limit_poses(self, client):
        assert len(client.get("/api/yoga/poses", params={"limit": 3}).json()["poses"]) == 3
        assert client.get("/api/yoga/poses", params={"limit": 0}).json()["poses"] == []
        assert client.get("/api/yoga/poses", params={"limit": -1}).status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_category_is_empty(self, client):
        assert client.get("/api/yoga/poses", params={"category": "flying"}).json()["poses"] == []

    def test_get_pose(self, client):
        response = client.get("/api/yoga/poses/4")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["pose"]["sanskrit"] == "Vrksasana"

        assert client.get("/api/yoga/poses/99").status_code == status.HTTP_404_NOT_FOUND

    def test_routines(self, client):
        routines = client.get("/api/yoga/routines").json()["routines"]
        assert [routine["name"] for routine in routines] == [
            "Morning Flow", "Strength Builder", "Relaxation Sequence"
        ]

        routine = client.get("/api/yoga/routines/3").json()["routine"]
        assert routine["poses"][0]["pose"]["id"] == 5
        assert routine["poses"][0]["duration"] == 120

        assert client.get("/api/yoga/routines/4").status_code == status.HTTP_404_NOT_FOUND


class TestSessions:

    def test_record_session(self, client, auth_headers):
        response = client.post("/api/yoga/sessions", json={
            "pose_name": "  Tree Pose  ",
            "duration_minutes": 15,
            "notes": "Wobbly"
        }, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        session = response.json()["session"]
        assert session["pose_name"] == "Tree Pose"
        assert session["duration_minutes"] == 15
        assert session["completed_at"] is not None

    def test_duration_bounds(self, client, auth_headers):
        for minutes in (0, 181):
            response = client.post("/api/yoga/sessions", json={
                "pose_name": "Tree Pose",
                "duration_minutes": minutes
            }, headers=auth_headers)
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json()["errors"][0]["field"] == "duration_minutes"

    def test_sessions_require_authentication(self, client):
        assert client.get("/api/yoga/sessions").status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_sessions_filtered_by_day(self, client, auth_headers, db_session, test_user, other_user):
        for pose, day in (("A", 1), ("B", 2), ("C", 3)):
            db_session.add(YogaSession(
                user_id=test_user.id,
                pose_name=pose,
                duration_minutes=10,
                completed_at=datetime(2024, 4, day, 18, 30)
            ))
        db_session.add(YogaSession(
            user_id=other_user.id,
            pose_name="Other",
            duration_minutes=10,
            completed_at=datetime(2024, 4, 2, 9, 0)
        ))
        db_session.commit()

        all_sessions = client.get("/api/yoga/sessions", headers=auth_headers).json()
        filtered = client.get(
            "/api/yoga/sessions",
            params={"start_date": "2024-04-02", "end_date": "2024-04-03"},
            headers=auth_headers
        ).json()

        assert [s["pose_name"] for s in all_sessions] == ["C", "B", "A"]
        assert [s["pose_name"] for s in filtered] == ["C", "B"]


class TestYogaStats:

    def test_empty_stats(self, client, auth_headers):
        stats = client.get("/api/yoga/stats", headers=auth_headers).json()
        assert stats == {
            "total_sessions": 0,
            "total_duration": 0,
            "weekly_sessions": 0,
            "monthly_sessions": 0,
            "average_duration": 0,
            "popular_poses": [],
        }

    def test_stats(self, client, auth_headers, db_session, test_user):
        now = datetime.utcnow()
        rows = [
            ("Tree Pose", 10, now - timedelta(days=1)),
            ("Tree Pose", 15, now - timedelta(days=2)),
            ("Cobra Pose", 20, now - timedelta(days=10)),
            ("Bridge Pose", 30, now - timedelta(days=60)),
        ]
        for pose, minutes, when in rows:
            db_session.add(YogaSession(user_id=test_user.id, pose_name=pose, duration_minutes=minutes, completed_at=when))
        db_session.commit()

        stats = client.get("/api/yoga/stats", headers=auth_headers).json()

        assert stats["total_sessions"] == 4
        assert stats["total_duration"] == 75
        assert stats["weekly_sessions"] == 2
        assert stats["monthly_sessions"] == 3
        assert stats["average_duration"] == 19
        assert stats["popular_poses"][0] == {"pose_name": "Tree Pose", "count": 2}
        assert [p["pose_name"] for p in stats["popular_poses"][1:]] == ["Bridge Pose", "Cobra Pose"]
