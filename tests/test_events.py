"""
Event Router Tests - 이벤트 생성/조회/참가 테스트
"""
from datetime import date, timedelta

import pytest

from database.repository import utc_today

from conftest import MEMBER_EMAIL, auth


def day(offset: int) -> str:
    return (utc_today() + timedelta(days=offset)).isoformat()


@pytest.fixture
def event(store, club):
    return store.seed("events", {
        "clubId": club["id"],
        "clubName": club["name"],
        "title": "Sunrise 5K",
        "date": day(7),
        "createdAt": "2025-03-02T00:00:00+00:00",
    })


class TestCreateEvent:
    """이벤트 생성"""

    def test_create_event(self, client, club):
        response = client.post(
            f"/events/{club['id']}",
            json={"title": "Trail Run", "date": day(10), "eventFee": 5, "maxAttendees": 30},
            headers=auth("manager-token"),
        )
        assert response.status_code == 200
        event = response.json()
        assert event["clubId"] == club["id"]
        assert event["clubName"] == "Riverside Runners"
        assert event["date"] == day(10)
        assert event["maxAttendees"] == 30

    def test_other_manager_forbidden(self, client, club):
        """클럽을 관리하지 않는 매니저는 생성 불가"""
        response = client.post(
            f"/events/{club['id']}",
            json={"title": "Trail Run", "date": day(10)},
            headers=auth("other-manager-token"),
        )
        assert response.status_code == 403

    def test_unknown_club(self, client):
        response = client.post(
            "/events/missing", json={"title": "Trail Run", "date": day(10)}, headers=auth("manager-token")
        )
        assert response.status_code == 404

    def test_club_name_is_snapshot(self, client, store, club):
        """클럽 이름 변경 후에도 이벤트의 clubName 은 생성 시점 값"""
        client.post(
            f"/events/{club['id']}", json={"title": "Trail Run", "date": day(10)}, headers=auth("manager-token")
        )
        client.patch(f"/clubs/{club['id']}", json={"name": "Renamed"}, headers=auth("manager-token"))

        events = client.get(f"/events/{club['id']}").json()
        assert events[0]["clubName"] == "Riverside Runners"

    def test_invalid_date(self, client, club):
        response = client.post(
            f"/events/{club['id']}", json={"title": "Trail Run", "date": "soon"}, headers=auth("manager-token")
        )
        assert response.status_code == 422


class TestListEvents:
    """이벤트 조회"""

    def test_upcoming_excludes_past_and_sorts(self, client, store, club):
        for title, offset in [("far", 30), ("past", -1), ("today", 0), ("near", 2)]:
            store.seed("events", {"clubId": club["id"], "title": title, "date": day(offset)})

        response = client.get("/events/upcoming")
        assert [e["title"] for e in response.json()] == ["today", "near", "far"]

    def test_upcoming_uses_utc_today(self, client, store, club, monkeypatch):
        """오늘 기준은 UTC 날짜"""
        monkeypatch.setattr("app.events.router.utc_today", lambda: date(2030, 1, 10))
        for title, when in [("yesterday", "2030-01-09"), ("today", "2030-01-10")]:
            store.seed("events", {"clubId": club["id"], "title": title, "date": when})

        response = client.get("/events/upcoming")
        assert [e["title"] for e in response.json()] == ["today"]

    def test_all_events_sorted_by_date(self, client, store, club):
        for title, offset in [("b", 5), ("a", -5)]:
            store.seed("events", {"clubId": club["id"], "title": title, "date": day(offset)})
        assert [e["title"] for e in client.get("/events").json()] == ["a", "b"]

    def test_event_details(self, client, event):
        response = client.get(f"/eventDetails/{event['id']}")
        assert response.json()["title"] == "Sunrise 5K"

    def test_event_details_missing(self, client):
        response = client.get("/eventDetails/missing")
        assert response.status_code == 404
        assert response.json() == {"message": "Event not found"}


class TestJoinEvent:
    """이벤트 참가"""

    def test_join(self, client, store, event):
        response = client.post("/events/join", json={"eventId": event["id"]}, headers=auth("member-token"))
        assert response.status_code == 200
        registration = response.json()
        assert registration["userEmail"] == MEMBER_EMAIL
        assert registration["status"] == "registered"

    def test_join_twice_returns_existing(self, client, store, event):
        first = client.post("/events/join", json={"eventId": event["id"]}, headers=auth("member-token"))
        second = client.post("/events/join", json={"eventId": event["id"]}, headers=auth("member-token"))
        assert second.json()["id"] == first.json()["id"]
        assert len(store.all("event_registrations")) == 1

    def test_join_unknown_event(self, client):
        response = client.post("/events/join", json={"eventId": "missing"}, headers=auth("member-token"))
        assert response.status_code == 404

    def test_join_requires_auth(self, client, event):
        response = client.post("/events/join", json={"eventId": event["id"]})
        assert response.status_code == 401

    def test_is_joined(self, client, event):
        params = {"eventId": event["id"]}
        assert client.get("/events/isJoined", params=params, headers=auth("member-token")).json() == "none"

        client.post("/events/join", json={"eventId": event["id"]}, headers=auth("member-token"))
        assert client.get("/events/isJoined", params=params, headers=auth("member-token")).json() == "registered"

    def test_registrations_for_manager(self, client, event):
        client.post("/events/join", json={"eventId": event["id"]}, headers=auth("member-token"))
        response = client.get(f"/eventRegister/{event['id']}", headers=auth("manager-token"))
        assert [r["userEmail"] for r in response.json()] == [MEMBER_EMAIL]


class TestUpdateEvent:
    """이벤트 수정/삭제"""

    def test_patch_keeps_id_and_club(self, client, store, event):
        response = client.patch(
            f"/events/{event['id']}",
            json={"id": "hijacked", "title": "Sunset 5K", "clubId": "other"},
            headers=auth("manager-token"),
        )
        assert response.json() == {"matchedCount": 1, "modifiedCount": 1}

        stored = store.all("events")[0]
        assert stored["id"] == event["id"]
        assert stored["clubId"] == event["clubId"]
        assert stored["title"] == "Sunset 5K"
        assert stored["date"] == event["date"]

    def test_patch_null_title(self, client, store, event):
        response = client.patch(f"/events/{event['id']}", json={"title": None}, headers=auth("manager-token"))
        assert response.status_code == 422
        assert store.all("events")[0]["title"] == "Sunrise 5K"

    def test_other_manager_cannot_change_event(self, client, store, event):
        """다른 클럽의 매니저는 수정/삭제/참가자 조회 불가"""
        headers = auth("other-manager-token")
        assert client.patch(f"/events/{event['id']}", json={"title": "x"}, headers=headers).status_code == 403
        assert client.delete(f"/events/{event['id']}", headers=headers).status_code == 403
        assert client.get(f"/eventRegister/{event['id']}", headers=headers).status_code == 403
        assert store.all("events")[0]["title"] == "Sunrise 5K"

    def test_patch_missing(self, client):
        response = client.patch("/events/missing", json={"title": "x"}, headers=auth("manager-token"))
        assert response.status_code == 404

    def test_delete(self, client, store, event):
        response = client.delete(f"/events/{event['id']}", headers=auth("manager-token"))
        assert response.json() == {"deletedCount": 1}
        assert store.all("events") == []
