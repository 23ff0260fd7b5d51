from datetime import datetime
from unittest.mock import patch

import pytest

from app.models import TherapySession

# A Tuesday; the week starts on Sunday 2030-03-10
NOW = datetime(2030, 3, 12, 10, 0)


@pytest.fixture(autouse=True)
def fixed_now():
    with patch("app.domain.recurring.service.local_now", return_value=NOW):
        yield NOW


def create_pattern(client, headers, **fields):
    response = client.post("/recurring-patterns", headers=headers, json=fields)
    assert response.status_code == 201
    return response.json()


def session_starts(db_session):
    return sorted(s.start_time for s in db_session.query(TherapySession).all())


def test_create_and_list_patterns(client, auth_headers, patient):
    create_pattern(client, auth_headers, dayOfWeek=3, time="10:00", clientId=patient.id)
    create_pattern(client, auth_headers, dayOfWeek=1, time="16:30", duration=45)

    patterns = client.get("/recurring-patterns", headers=auth_headers).json()
    assert [(p["dayOfWeek"], p["time"]) for p in patterns] == [(1, "16:30"), (3, "10:00")]
    assert patterns[0]["duration"] == 45
    assert patterns[1]["duration"] == 50
    assert patterns[1]["clientName"] == "דנה ישראלי"
    assert all(p["isActive"] for p in patterns)


@pytest.mark.parametrize("fields", [{"dayOfWeek": 7, "time": "10:00"}, {"dayOfWeek": 1, "time": "9:00"}])
def test_invalid_pattern(client, auth_headers, fields):
    assert client.post("/recurring-patterns", headers=auth_headers, json=fields).status_code == 422


def test_pattern_for_foreign_client(client, other_headers, patient):
    response = client.post(
        "/recurring-patterns", headers=other_headers, json={"dayOfWeek": 1, "time": "10:00", "clientId": patient.id}
    )
    assert response.status_code == 404


def test_apply_without_patterns(client, auth_headers):
    response = client.post("/recurring-patterns/apply", headers=auth_headers)
    assert response.json() == {"message": "No active patterns", "created": 0}


def test_apply_skips_past_days(client, db_session, auth_headers, patient):
    create_pattern(client, auth_headers, dayOfWeek=3, time="10:00", clientId=patient.id)
    create_pattern(client, auth_headers, dayOfWeek=1, time="09:00", clientId=patient.id)

    response = client.post("/recurring-patterns/apply", headers=auth_headers, json={"weeksAhead": 4})
    assert response.json() == {"message": "7 sessions created", "created": 7}

    starts = session_starts(db_session)
    assert starts[0] == datetime(2030, 3, 13, 10, 0)
    assert datetime(2030, 3, 11, 9, 0) not in starts
    assert datetime(2030, 3, 18, 9, 0) in starts
    assert starts[-1] == datetime(2030, 4, 3, 10, 0)

    session = db_session.query(TherapySession).first()
    assert session.status == "SCHEDULED"
    assert session.is_recurring is True
    assert session.price == 300
    assert (session.end_time - session.start_time).seconds == 50 * 60


def test_apply_today_counts_as_past(client, auth_headers, patient):
    create_pattern(client, auth_headers, dayOfWeek=2, time="18:00", clientId=patient.id)
    response = client.post("/recurring-patterns/apply", headers=auth_headers, json={"weeksAhead": 1})
    assert response.json()["created"] == 0


def test_apply_is_idempotent(client, auth_headers, patient):
    create_pattern(client, auth_headers, dayOfWeek=4, time="12:00", clientId=patient.id)

    assert client.post("/recurring-patterns/apply", headers=auth_headers).json()["created"] == 4
    assert client.post("/recurring-patterns/apply", headers=auth_headers).json()["created"] == 0


def test_apply_uses_latest_session_price(client, db_session, auth_headers, user, patient):
    db_session.add(
        TherapySession(
            therapist_id=user.id,
            client_id=patient.id,
            start_time=datetime(2030, 3, 1, 10, 0),
            end_time=datetime(2030, 3, 1, 10, 50),
            price=420,
        )
    )
    db_session.commit()
    create_pattern(client, auth_headers, dayOfWeek=5, time="08:00", clientId=patient.id)

    client.post("/recurring-patterns/apply", headers=auth_headers, json={"weeksAhead": 1})

    created = db_session.query(TherapySession).filter(TherapySession.is_recurring.is_(True)).one()
    assert created.price == 420


def test_patterns_without_client_or_inactive_are_skipped(client, auth_headers, patient):
    create_pattern(client, auth_headers, dayOfWeek=3, time="10:00")
    inactive = create_pattern(client, auth_headers, dayOfWeek=4, time="10:00", clientId=patient.id)
    client.put(f"/recurring-patterns/{inactive['id']}", headers=auth_headers, json={"isActive": False})

    response = client.post("/recurring-patterns/apply", headers=auth_headers, json={"weeksAhead": 2})
    assert response.json()["created"] == 0


def test_update_and_delete_pattern(client, auth_headers, other_headers, patient):
    pattern = create_pattern(client, auth_headers, dayOfWeek=3, time="10:00", clientId=patient.id)

    updated = client.put(
        f"/recurring-patterns/{pattern['id']}",
        headers=auth_headers,
        json={"time": "11:15", "clientId": None},
    ).json()
    assert updated["time"] == "11:15"
    assert updated["clientId"] is None
    assert updated["dayOfWeek"] == 3

    assert client.delete(f"/recurring-patterns/{pattern['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/recurring-patterns/{pattern['id']}", headers=auth_headers).status_code == 200
    assert client.get("/recurring-patterns", headers=auth_headers).json() == []
