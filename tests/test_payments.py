from datetime import datetime

import pytest

from app.domain.payments.service import format_amount
from app.models import Task, TherapySession


@pytest.fixture
def therapy_session(db_session, patient):
    session = TherapySession(
        therapist_id=patient.therapist_id,
        client_id=patient.id,
        start_time=datetime(2030, 1, 15, 10, 0),
        end_time=datetime(2030, 1, 15, 10, 50),
        price=350,
    )
    db_session.add(session)
    db_session.commit()
    db_session.refresh(session)
    return session


@pytest.mark.parametrize(
    "amount,expected",
    [(350, "₪350"), (1200, "₪1,200"), (99.5, "₪99.50")],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_pending_payment_opens_collection_task(client, db_session, auth_headers, patient, therapy_session):
    response = client.post(
        "/payments",
        headers=auth_headers,
        json={"clientId": patient.id, "sessionId": therapy_session.id, "amount": 350},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["method"] == "CASH"
    assert body["paidAt"] is None
    assert body["clientName"] == "דנה ישראלי"

    task = db_session.query(Task).one()
    assert task.type == "COLLECT_PAYMENT"
    assert task.title == "גביית תשלום - דנה ישראלי (₪350)"
    assert task.related_entity == "Payment"
    assert task.related_entity_id == body["id"]


def test_paid_payment_sets_paid_at_without_task(client, db_session, auth_headers, patient):
    response = client.post(
        "/payments",
        headers=auth_headers,
        json={"clientId": patient.id, "amount": 400, "status": "PAID", "method": "BANK_TRANSFER"},
    )
    assert response.status_code == 201
    assert response.json()["paidAt"] is not None
    assert db_session.query(Task).count() == 0


def test_one_payment_per_session(client, auth_headers, patient, therapy_session):
    payload = {"clientId": patient.id, "sessionId": therapy_session.id, "amount": 350}
    assert client.post("/payments", headers=auth_headers, json=payload).status_code == 201

    again = client.post("/payments", headers=auth_headers, json=payload)
    assert again.status_code == 400
    assert again.json()["detail"] == "Session already has a payment"


def test_payment_session_must_belong_to_client(client, db_session, auth_headers, user, therapy_session):
    from app.models import Client

    other_client = Client(therapist_id=user.id, name="אחר")
    db_session.add(other_client)
    db_session.commit()

    response = client.post(
        "/payments",
        headers=auth_headers,
        json={"clientId": other_client.id, "sessionId": therapy_session.id, "amount": 100},
    )
    assert response.status_code == 404


def test_invalid_amount(client, auth_headers, patient):
    response = client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 0})
    assert response.status_code == 422


def test_mark_paid_completes_collection_task(client, db_session, auth_headers, patient):
    payment = client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 350}).json()

    response = client.put(
        f"/payments/{payment['id']}",
        headers=auth_headers,
        json={"status": "PAID", "method": "CREDIT_CARD", "receiptUrl": "https://receipts.example.com/1"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "PAID"
    assert body["method"] == "CREDIT_CARD"
    assert body["paidAt"] is not None
    assert body["receiptUrl"] == "https://receipts.example.com/1"

    db_session.expire_all()
    assert db_session.query(Task).one().status == "COMPLETED"


def test_mark_paid_with_explicit_date(client, auth_headers, patient):
    payment = client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 350}).json()
    response = client.put(
        f"/payments/{payment['id']}",
        headers=auth_headers,
        json={"status": "PAID", "paidAt": "2030-01-20T09:00:00"},
    )
    assert response.json()["paidAt"] == "2030-01-20T09:00:00"


def test_list_payments_filters(client, auth_headers, patient):
    client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 100})
    client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 200, "status": "PAID"})

    assert len(client.get("/payments", headers=auth_headers).json()) == 2
    pending = client.get("/payments", headers=auth_headers, params={"status": "PENDING"}).json()
    assert [p["amount"] for p in pending] == [100]
    by_client = client.get("/payments", headers=auth_headers, params={"clientId": patient.id}).json()
    assert len(by_client) == 2


def test_payments_are_isolated(client, auth_headers, other_headers, patient):
    payment = client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 100}).json()

    assert client.get("/payments", headers=other_headers).json() == []
    assert client.get(f"/payments/{payment['id']}", headers=other_headers).status_code == 404
    assert client.post(
        "/payments", headers=other_headers, json={"clientId": patient.id, "amount": 100}
    ).status_code == 404


def test_delete_payment(client, auth_headers, patient):
    payment = client.post("/payments", headers=auth_headers, json={"clientId": patient.id, "amount": 100}).json()
    assert client.delete(f"/payments/{payment['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/payments/{payment['id']}", headers=auth_headers).status_code == 404
