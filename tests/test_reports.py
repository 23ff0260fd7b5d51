from datetime import datetime, timedelta
from unittest.mock import patch

from app.models import Client, Payment, Recording, Task, TherapySession

NOW = datetime(2030, 3, 12, 9, 0)


def add_session(db_session, patient, start, status="SCHEDULED", session_type="IN_PERSON"):
    db_session.add(
        TherapySession(
            therapist_id=patient.therapist_id,
            client_id=patient.id,
            start_time=start,
            end_time=start + timedelta(minutes=50),
            status=status,
            type=session_type,
        )
    )
    db_session.commit()


def test_dashboard_stats(client, db_session, auth_headers, other_headers, user, patient):
    db_session.add(Client(therapist_id=user.id, name="לא פעיל", status="INACTIVE"))
    add_session(db_session, patient, datetime(2030, 3, 12, 15, 0))
    add_session(db_session, patient, datetime(2030, 3, 12, 11, 0), status="CANCELLED")
    add_session(db_session, patient, datetime(2030, 3, 10, 10, 0), status="COMPLETED")
    add_session(db_session, patient, datetime(2030, 3, 2, 10, 0), status="COMPLETED")
    add_session(db_session, patient, datetime(2030, 2, 20, 10, 0), status="COMPLETED")
    db_session.add(Payment(client_id=patient.id, amount=350))
    db_session.add(Payment(client_id=patient.id, amount=350, status="PAID", paid_at=NOW))
    db_session.add(Task(user_id=user.id, title="משימה"))
    db_session.add(Task(user_id=user.id, title="הושלמה", status="COMPLETED"))
    db_session.add(Recording(client_id=patient.id, audio_url="/uploads/recordings/a.webm", duration_seconds=60))
    db_session.commit()

    with patch("app.domain.reports.service.local_now", return_value=NOW):
        response = client.get("/dashboard/stats", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["totalClients"] == 2
    assert stats["activeClients"] == 1
    assert stats["sessionsThisWeek"] == 3
    assert stats["sessionsThisMonth"] == 4
    assert stats["pendingPayments"] == 1
    assert stats["pendingTasks"] == 1
    assert [s["startTime"] for s in stats["todaySessions"]] == ["2030-03-12T11:00:00", "2030-03-12T15:00:00"]
    assert len(stats["recentRecordings"]) == 1
    assert stats["recentRecordings"][0]["transcription"] is None

    with patch("app.domain.reports.service.local_now", return_value=NOW):
        empty = client.get("/dashboard/stats", headers=other_headers).json()
    assert empty["totalClients"] == 0
    assert empty["todaySessions"] == []


def test_yearly_report(client, db_session, auth_headers, patient):
    add_session(db_session, patient, datetime(2030, 1, 5, 10, 0), status="COMPLETED")
    add_session(db_session, patient, datetime(2030, 1, 12, 10, 0), status="COMPLETED", session_type="ONLINE")
    add_session(db_session, patient, datetime(2030, 3, 1, 10, 0), status="CANCELLED")
    add_session(db_session, patient, datetime(2029, 12, 30, 10, 0), status="COMPLETED")
    db_session.add(Payment(client_id=patient.id, amount=350, status="PAID", paid_at=datetime(2030, 1, 6)))
    db_session.add(Payment(client_id=patient.id, amount=400.5, status="PAID", paid_at=datetime(2030, 12, 31, 23)))
    db_session.add(Payment(client_id=patient.id, amount=999, status="PENDING"))
    patient.created_at = datetime(2030, 2, 14)
    db_session.commit()

    response = client.get("/reports", headers=auth_headers, params={"year": 2030})
    assert response.status_code == 200
    report = response.json()

    assert report["year"] == 2030
    months = report["monthlyData"]
    assert len(months) == 12
    assert months[0] == {"month": 1, "label": "ינואר", "sessions": 2, "income": 350.0, "newClients": 0}
    assert months[1]["newClients"] == 1
    assert months[2]["sessions"] == 0
    assert months[11]["income"] == 400.5

    assert report["totals"] == {"clients": 1, "sessions": 2, "income": 750.5, "recordings": 0}

    types = {item["key"]: item for item in report["sessionTypes"]}
    assert types["IN_PERSON"]["count"] == 2
    assert types["IN_PERSON"]["label"] == "פרונטלי"
    assert types["ONLINE"]["count"] == 1
    assert report["clientStatus"] == [{"key": "ACTIVE", "label": "פעילים", "count": 1}]


def test_report_year_bounds(client, auth_headers):
    assert client.get("/reports", headers=auth_headers, params={"year": 1999}).status_code == 422
