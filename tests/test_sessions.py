from datetime import datetime

from app.models import Task, TherapySession


def create_session(client, headers, client_id, start="2030-01-15T10:00:00", end="2030-01-15T10:50:00", **extra):
    payload = {"clientId": client_id, "startTime": start, "endTime": end, "price": 350, **extra}
    return client.post("/sessions", headers=headers, json=payload)


def test_create_session_opens_summary_task(client, db_session, auth_headers, patient):
    response = create_session(client, auth_headers, patient.id, type="ONLINE")
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "SCHEDULED"
    assert body["type"] == "ONLINE"
    assert body["clientName"] == "דנה ישראלי"

    task = db_session.query(Task).one()
    assert task.type == "WRITE_SUMMARY"
    assert task.priority == "MEDIUM"
    assert task.title == "כתיבת סיכום פגישה - דנה ישראלי"
    assert task.related_entity == "TherapySession"
    assert task.related_entity_id == body["id"]
    assert task.due_date == datetime(2030, 1, 15, 10, 50)


def test_create_session_end_before_start(client, auth_headers, patient):
    response = create_session(client, auth_headers, patient.id, start="2030-01-15T11:00:00", end="2030-01-15T10:00:00")
    assert response.status_code == 400
    assert response.json()["detail"] == "End time must be after start time"


def test_create_session_unknown_client(client, auth_headers):
    response = create_session(client, auth_headers, 9999)
    assert response.status_code == 404


def test_overlapping_sessions_conflict(client, auth_headers, patient):
    assert create_session(client, auth_headers, patient.id, "2030-01-15T10:00:00", "2030-01-15T11:00:00").status_code == 201

    overlap = create_session(client, auth_headers, patient.id, "2030-01-15T10:30:00", "2030-01-15T11:30:00")
    assert overlap.status_code == 400
    assert overlap.json()["detail"] == "Time slot conflicts with an existing session at 15.1.2030 10:00"

    containing = create_session(client, auth_headers, patient.id, "2030-01-15T09:00:00", "2030-01-15T12:00:00")
    assert containing.status_code == 400

    inside = create_session(client, auth_headers, patient.id, "2030-01-15T10:10:00", "2030-01-15T10:20:00")
    assert inside.status_code == 400

    back_to_back = create_session(client, auth_headers, patient.id, "2030-01-15T11:00:00", "2030-01-15T11:50:00")
    assert back_to_back.status_code == 201


def test_cancelled_session_does_not_block_slot(client, auth_headers, patient):
    first = create_session(client, auth_headers, patient.id).json()
    client.put(f"/sessions/{first['id']}", headers=auth_headers, json={"status": "CANCELLED"})

    assert create_session(client, auth_headers, patient.id).status_code == 201


def test_update_session_ignores_itself_in_conflicts(client, auth_headers, patient):
    session = create_session(client, auth_headers, patient.id).json()
    response = client.put(
        f"/sessions/{session['id']}",
        headers=auth_headers,
        json={"startTime": "2030-01-15T10:10:00", "endTime": "2030-01-15T11:00:00", "location": "קליניקה"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["startTime"] == "2030-01-15T10:10:00"
    assert body["location"] == "קליניקה"
    assert body["price"] == 350


def test_update_session_conflict_with_other(client, auth_headers, patient):
    create_session(client, auth_headers, patient.id, "2030-01-15T12:00:00", "2030-01-15T12:50:00")
    session = create_session(client, auth_headers, patient.id).json()

    response = client.put(
        f"/sessions/{session['id']}",
        headers=auth_headers,
        json={"startTime": "2030-01-15T12:30:00", "endTime": "2030-01-15T13:20:00"},
    )
    assert response.status_code == 400


def test_list_sessions_filters(client, auth_headers, patient):
    create_session(client, auth_headers, patient.id, "2030-01-15T10:00:00", "2030-01-15T10:50:00")
    create_session(client, auth_headers, patient.id, "2030-01-10T10:00:00", "2030-01-10T10:50:00")
    create_session(client, auth_headers, patient.id, "2030-02-01T10:00:00", "2030-02-01T10:50:00")

    everything = client.get("/sessions", headers=auth_headers).json()
    assert [s["startTime"][:10] for s in everything] == ["2030-01-10", "2030-01-15", "2030-02-01"]

    january = client.get(
        "/sessions",
        headers=auth_headers,
        params={"startDate": "2030-01-01T00:00:00", "endDate": "2030-01-31T23:59:59"},
    ).json()
    assert len(january) == 2

    # A single bound is ignored
    only_start = client.get("/sessions", headers=auth_headers, params={"startDate": "2030-01-12T00:00:00"}).json()
    assert len(only_start) == 3

    by_client = client.get("/sessions", headers=auth_headers, params={"clientId": patient.id + 100}).json()
    assert by_client == []


def test_session_detail_and_isolation(client, auth_headers, other_headers, patient):
    session = create_session(client, auth_headers, patient.id).json()

    detail = client.get(f"/sessions/{session['id']}", headers=auth_headers)
    assert detail.status_code == 200
    body = detail.json()
    assert body["clientEmail"] == "dana@example.com"
    assert body["payment"] is None
    assert body["recordings"] == []

    assert client.get(f"/sessions/{session['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/sessions/{session['id']}", headers=other_headers).status_code == 404


def test_session_note_completes_summary_task(client, db_session, auth_headers, patient):
    session = create_session(client, auth_headers, patient.id).json()

    response = client.post(
        f"/sessions/{session['id']}/note",
        headers=auth_headers,
        json={"content": "המטופלת דיווחה על שיפור בשינה", "isPrivate": True},
    )
    assert response.status_code == 201
    note = response.json()
    assert note["sessionId"] == session["id"]
    assert note["isPrivate"] is True

    db_session.expire_all()
    assert db_session.query(Task).one().status == "COMPLETED"

    duplicate = client.post(f"/sessions/{session['id']}/note", headers=auth_headers, json={"content": "שוב"})
    assert duplicate.status_code == 400

    updated = client.put(f"/sessions/{session['id']}/note", headers=auth_headers, json={"content": "עודכן"})
    assert updated.status_code == 200
    assert updated.json()["content"] == "עודכן"
    assert updated.json()["isPrivate"] is True


def test_update_missing_note(client, auth_headers, patient):
    session = create_session(client, auth_headers, patient.id).json()
    response = client.put(f"/sessions/{session['id']}/note", headers=auth_headers, json={"content": "x"})
    assert response.status_code == 404


def test_delete_session(client, db_session, auth_headers, patient):
    session = create_session(client, auth_headers, patient.id).json()
    assert client.delete(f"/sessions/{session['id']}", headers=auth_headers).status_code == 200
    db_session.expire_all()
    assert db_session.query(TherapySession).count() == 0
