"""
HTTP tests for /schedules: status codes, payload shapes and authentication.
"""

from datetime import time, timedelta

import pytest

from app.models import ScheduleStatus
from app.security_utils import create_jwt_token

from conftest import MONDAY


def shift_payload(**overrides):
    payload = {"date": "2025-01-06", "startTime": "09:00", "endTime": "17:00"}
    payload.update(overrides)
    return payload


# ============================================================================
# Authentication
# ============================================================================


def test_missing_token_is_rejected(client, users):
    response = client.get("/schedules")
    # HTTPBearer answers 403 on older FastAPI releases and 401 on newer ones
    assert response.status_code in (401, 403)


@pytest.mark.parametrize("token", ["not-a-jwt", "a.b.c"])
def test_malformed_token_is_rejected(client, users, token):
    response = client.get("/schedules", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_expired_token_is_rejected(client, users):
    token = create_jwt_token({"sub": "U1"}, expires_delta=timedelta(minutes=-5))
    response = client.get("/schedules", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_token_for_unknown_user_is_rejected(client, auth_headers):
    response = client.get("/schedules", headers=auth_headers("ghost"))
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


# ============================================================================
# Create
# ============================================================================


def test_create_returns_201_with_derived_day(client, auth_headers):
    response = client.post("/schedules", json=shift_payload(ownerId="U1"), headers=auth_headers("U1"))

    assert response.status_code == 201
    body = response.json()
    assert body["ownerId"] == "U1"
    assert body["ownerName"] == "u1@example.com"
    assert body["date"] == "2025-01-06"
    assert body["day"] == "Monday"
    assert body["startTime"] == "09:00:00"
    assert body["endTime"] == "17:00:00"
    assert body["status"] == "Submitted"


def test_create_for_someone_else_is_forbidden(client, auth_headers):
    response = client.post("/schedules", json=shift_payload(ownerId="U2"), headers=auth_headers("U1"))
    assert response.status_code == 403
    assert response.json() == {"detail": "Forbidden"}


def test_create_with_end_before_start(client, auth_headers):
    response = client.post(
        "/schedules", json=shift_payload(startTime="5:00 PM", endTime="9:00 AM"), headers=auth_headers("U1")
    )

    assert response.status_code == 422
    error = response.json()["detail"][0]
    assert error["loc"] == ["body", "endTime"]
    assert error["msg"] == "End time must be after start time."


@pytest.mark.parametrize("field, value", [("startTime", "25:99"), ("endTime", "13:00 PM"), ("date", "not-a-date")])
def test_create_with_unreadable_fields(client, auth_headers, field, value):
    response = client.post("/schedules", json=shift_payload(**{field: value}), headers=auth_headers("U1"))
    assert response.status_code == 422
    assert any(field in error["loc"] for error in response.json()["detail"])


def test_create_with_unknown_status(client, auth_headers):
    response = client.post("/schedules", json=shift_payload(status="Pending"), headers=auth_headers("A1"))
    assert response.status_code == 422


@pytest.mark.parametrize(
    "start, end",
    [
        ("09:00+00:00", "17:00"),
        ("09:00", "17:00Z"),
        ("23:00+05:00", "20:00+00:00"),
    ],
)
def test_create_with_utc_offset_times(client, auth_headers, start, end):
    response = client.post(
        "/schedules", json=shift_payload(startTime=start, endTime=end), headers=auth_headers("U1")
    )

    assert response.status_code == 422
    assert client.get("/schedules", headers=auth_headers("A1")).json() == []


def test_update_with_utc_offset_time(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")
    response = client.put(
        f"/schedules/{schedule.id}",
        json=shift_payload(ownerId="U1", startTime="09:00+00:00"),
        headers=auth_headers("U1"),
    )
    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "startTime"]


# ============================================================================
# Read
# ============================================================================


def test_list_filters_and_sorts(client, auth_headers, make_schedule):
    make_schedule(owner_id="U1")
    make_schedule(owner_id="U2", status=ScheduleStatus.APPROVED)
    make_schedule(owner_id="U2")

    response = client.get("/schedules", params={"sort": "user_desc"}, headers=auth_headers("U1"))

    assert response.status_code == 200
    assert [s["ownerId"] for s in response.json()] == ["U2", "U1"]


def test_calendar_week_navigation(client, auth_headers, make_schedule):
    make_schedule(owner_id="U1", day=MONDAY + timedelta(days=9))

    response = client.get(
        "/schedules/calendar", params={"weekStart": "2025-01-06", "nav": "forward"}, headers=auth_headers("U1")
    )

    assert response.status_code == 200
    body = response.json()
    assert body["startOfWeek"] == "2025-01-13"
    assert body["endOfWeek"] == "2025-01-19"
    assert body["previousWeekStart"] == "2025-01-06"
    assert body["nextWeekStart"] == "2025-01-20"
    assert [s["date"] for s in body["days"]["Wednesday"]] == ["2025-01-15"]
    assert body["days"]["Monday"] == []


def test_calendar_rejects_unknown_navigation(client, auth_headers):
    response = client.get("/schedules/calendar", params={"nav": "sideways"}, headers=auth_headers("U1"))
    assert response.status_code == 422


@pytest.mark.parametrize(
    "params",
    [
        {"weekStart": "9999-12-30"},
        {"weekStart": "9999-12-20", "nav": "forward"},
        {"weekStart": "0001-01-01"},
        {"weekStart": "0001-01-05", "nav": "back"},
    ],
)
def test_calendar_week_out_of_range(client, auth_headers, params):
    response = client.get("/schedules/calendar", params=params, headers=auth_headers("U1"))

    assert response.status_code == 422
    assert response.json()["detail"] == [
        {"loc": ["query", "weekStart"], "msg": "Week is out of range.", "type": "value_error"}
    ]


def test_details_include_capabilities(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")

    response = client.get(f"/schedules/{schedule.id}", headers=auth_headers("M1"))

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == schedule.id
    assert body["isOwner"] is False
    assert body["permissions"] == {"canUpdate": False, "canDelete": False, "canApprove": True, "canReject": True}


def test_hidden_details_are_not_found(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")
    response = client.get(f"/schedules/{schedule.id}", headers=auth_headers("U2"))
    assert response.status_code == 404
    assert response.json() == {"detail": "Schedule not found"}


def test_new_form_payload(client, auth_headers):
    response = client.get("/schedules/new", headers=auth_headers("U1"))

    assert response.status_code == 200
    body = response.json()
    assert body["schedule"]["ownerId"] == "U1"
    assert body["schedule"]["startTime"] == "09:00:00"
    assert body["canAssignOwner"] is False
    assert body["users"] is None
    assert body["times"][0] == "12:00 AM"
    assert body["times"][-1] == "11:30 PM"


def test_edit_form_requires_update_rights(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1", status=ScheduleStatus.APPROVED)

    assert client.get(f"/schedules/{schedule.id}/edit", headers=auth_headers("U2")).status_code == 403

    response = client.get(f"/schedules/{schedule.id}/edit", headers=auth_headers("A1"))
    assert response.status_code == 200
    assert response.json()["scheduleId"] == schedule.id
    assert len(response.json()["users"]) == 4


# ============================================================================
# Update / review / delete
# ============================================================================


def test_owner_update(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1", status=ScheduleStatus.APPROVED)

    response = client.put(
        f"/schedules/{schedule.id}",
        json=shift_payload(ownerId="U1", date="2025-01-10", startTime="12:00 PM", endTime="8:00 PM"),
        headers=auth_headers("U1"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["day"] == "Friday"
    assert body["startTime"] == "12:00:00"
    assert body["status"] == "Submitted"


def test_update_requires_owner_field(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")
    response = client.put(f"/schedules/{schedule.id}", json=shift_payload(), headers=auth_headers("U1"))
    assert response.status_code == 422


def test_update_missing_schedule(client, auth_headers):
    response = client.put("/schedules/999", json=shift_payload(ownerId="A1"), headers=auth_headers("A1"))
    assert response.status_code == 404


def test_manager_approves(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")

    response = client.post(f"/schedules/{schedule.id}/approve", headers=auth_headers("M1"))

    assert response.status_code == 200
    assert response.json()["status"] == "Approved"
    # now visible to everyone
    assert client.get(f"/schedules/{schedule.id}", headers=auth_headers("U2")).status_code == 200


def test_owner_cannot_reject(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")
    response = client.post(f"/schedules/{schedule.id}/reject", headers=auth_headers("U1"))
    assert response.status_code == 403


def test_owner_deletes(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1")

    response = client.delete(f"/schedules/{schedule.id}", headers=auth_headers("U1"))

    assert response.status_code == 200
    assert response.json() == {"message": "Schedule deleted"}
    assert client.get(f"/schedules/{schedule.id}", headers=auth_headers("A1")).status_code == 404


def test_stranger_cannot_delete(client, auth_headers, make_schedule):
    schedule = make_schedule(owner_id="U1", status=ScheduleStatus.APPROVED, start=time(6, 0))
    response = client.delete(f"/schedules/{schedule.id}", headers=auth_headers("U2"))
    assert response.status_code == 403
    assert client.get(f"/schedules/{schedule.id}", headers=auth_headers("U2")).status_code == 200


# ============================================================================
# App
# ============================================================================


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_security_headers_on_api_responses(client, auth_headers):
    response = client.get("/schedules", headers=auth_headers("U1"))
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "default-src 'none'" in response.headers["Content-Security-Policy"]
