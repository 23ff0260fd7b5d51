import base64
from unittest.mock import AsyncMock, patch

import pytest

from app.models import Recording, Task
from app.services.ai_service import AIServiceError, AIServiceNotConfigured

AUDIO = b"\x1aE\xdf\xa3fake-webm-audio"


def upload_recording(client, headers, **extra):
    payload = {
        "audioData": "data:audio/webm;base64," + base64.b64encode(AUDIO).decode(),
        "mimeType": "audio/webm;codecs=opus",
        "durationSeconds": 2700,
        **extra,
    }
    return client.post("/recordings", headers=headers, json=payload)


@pytest.fixture
def recording(client, auth_headers, patient):
    response = upload_recording(client, auth_headers, clientId=patient.id)
    assert response.status_code == 201
    return response.json()


def test_create_recording_stores_audio(client, db_session, uploads_dir, auth_headers, patient):
    response = upload_recording(client, auth_headers, clientId=patient.id)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["audioUrl"].startswith("/uploads/recordings/")
    assert body["audioUrl"].endswith(".webm")
    assert body["hasTranscription"] is False

    stored = uploads_dir / body["audioUrl"].removeprefix("/uploads/")
    assert stored.read_bytes() == AUDIO

    task = db_session.query(Task).one()
    assert task.type == "REVIEW_TRANSCRIPTION"
    assert task.title == "סקירת תמלול הקלטה - דנה ישראלי"
    assert task.related_entity_id == body["id"]


def test_create_recording_without_client_has_no_task(client, db_session, auth_headers):
    response = upload_recording(client, auth_headers, mimeType="audio/mpeg")
    assert response.status_code == 201
    assert response.json()["audioUrl"].endswith(".mp3")
    assert db_session.query(Task).count() == 0


def test_create_recording_invalid_base64(client, auth_headers):
    response = upload_recording(client, auth_headers, audioData="!!!not-base64!!!")
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid audio data"


def test_create_recording_foreign_client(client, other_headers, patient):
    assert upload_recording(client, other_headers, clientId=patient.id).status_code == 404


def test_list_and_get_recordings(client, auth_headers, other_headers, recording, patient):
    listed = client.get("/recordings", headers=auth_headers, params={"clientId": patient.id}).json()
    assert [r["id"] for r in listed] == [recording["id"]]
    assert listed[0]["clientName"] == "דנה ישראלי"

    assert client.get(f"/recordings/{recording['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/recordings/{recording['id']}", headers=other_headers).status_code == 404
    assert client.get("/recordings", headers=other_headers).json() == []


def test_delete_recording_removes_file(client, db_session, uploads_dir, auth_headers, recording):
    stored = uploads_dir / recording["audioUrl"].removeprefix("/uploads/")
    assert stored.exists()

    assert client.delete(f"/recordings/{recording['id']}", headers=auth_headers).status_code == 200
    assert not stored.exists()
    assert db_session.query(Recording).count() == 0


def test_transcribe_recording(client, db_session, auth_headers, recording):
    mock = AsyncMock(return_value={"text": "מטפל: שלום\nמטופל: שלום", "confidence": 0.95})
    with patch("app.services.ai_service.transcribe_audio", mock):
        response = client.post("/transcribe", headers=auth_headers, json={"recordingId": recording["id"]})

    assert response.status_code == 201
    body = response.json()
    assert body["recordingId"] == recording["id"]
    assert body["content"].startswith("מטפל:")
    assert body["language"] == "he"
    assert body["confidence"] == 0.95

    audio, mime_type = mock.call_args.args
    assert audio == AUDIO
    assert mime_type == "audio/webm"

    db_session.expire_all()
    assert db_session.get(Recording, recording["id"]).status == "TRANSCRIBED"


def test_transcribe_with_timestamps_replaces_previous(client, db_session, auth_headers, recording):
    segments = [{"start": 0, "end": 4.5, "text": "שלום", "speaker": "מטפל"}]
    with patch("app.services.ai_service.transcribe_audio", AsyncMock(return_value={"text": "ראשון"})):
        client.post("/transcribe", headers=auth_headers, json={"recordingId": recording["id"]})
    with patch(
        "app.services.ai_service.transcribe_audio_with_timestamps",
        AsyncMock(return_value={"text": "שני", "segments": segments}),
    ):
        response = client.post(
            "/transcribe",
            headers=auth_headers,
            json={"recordingId": recording["id"], "withTimestamps": True},
        )

    assert response.status_code == 201
    assert response.json()["content"] == "שני"
    assert response.json()["timestamps"] == segments

    detail = client.get(f"/recordings/{recording['id']}", headers=auth_headers).json()
    assert detail["hasTranscription"] is True
    assert detail["transcription"]["content"] == "שני"


def test_transcribe_failure_sets_error(client, db_session, auth_headers, recording):
    with patch("app.services.ai_service.transcribe_audio", AsyncMock(side_effect=AIServiceError("boom"))):
        response = client.post("/transcribe", headers=auth_headers, json={"recordingId": recording["id"]})

    assert response.status_code == 500
    db_session.expire_all()
    assert db_session.get(Recording, recording["id"]).status == "ERROR"


def test_transcribe_without_api_key(client, db_session, auth_headers, recording):
    with patch(
        "app.services.ai_service.transcribe_audio",
        AsyncMock(side_effect=AIServiceNotConfigured("GOOGLE_AI_API_KEY is not configured")),
    ):
        response = client.post("/transcribe", headers=auth_headers, json={"recordingId": recording["id"]})

    assert response.status_code == 503
    db_session.expire_all()
    assert db_session.get(Recording, recording["id"]).status == "ERROR"


def test_transcribe_foreign_recording(client, other_headers, recording):
    response = client.post("/transcribe", headers=other_headers, json={"recordingId": recording["id"]})
    assert response.status_code == 404


def transcribe(client, headers, recording_id, text="מטפל: מה שלומך?"):
    with patch("app.services.ai_service.transcribe_audio", AsyncMock(return_value={"text": text})):
        return client.post("/transcribe", headers=headers, json={"recordingId": recording_id}).json()


def test_analyze_session(client, db_session, auth_headers, recording):
    transcription = transcribe(client, auth_headers, recording["id"])
    result = {
        "summary": "המטופלת שיתפה על לחץ בעבודה",
        "keyTopics": ["עבודה", "שינה"],
        "emotionalMarkers": [{"emotion": "חרדה", "intensity": 6, "context": "עבודה"}],
        "recommendations": ["תרגול נשימות"],
        "nextSessionNotes": "לבדוק את איכות השינה",
    }
    with patch("app.services.ai_service.analyze_session", AsyncMock(return_value=result)):
        response = client.post("/analyze", headers=auth_headers, json={"transcriptionId": transcription["id"]})

    assert response.status_code == 201
    body = response.json()
    assert body["summary"] == result["summary"]
    assert body["keyTopics"] == ["עבודה", "שינה"]
    assert body["emotionalMarkers"][0]["emotion"] == "חרדה"
    assert body["nextSessionNotes"] == "לבדוק את איכות השינה"

    db_session.expire_all()
    assert db_session.get(Recording, recording["id"]).status == "ANALYZED"
    assert db_session.query(Task).one().status == "COMPLETED"


def test_analyze_intake_maps_profile(client, auth_headers, recording):
    transcription = transcribe(client, auth_headers, recording["id"])
    result = {
        "clientProfile": {
            "background": "בת 34, עובדת בהייטק",
            "presentingIssues": ["חרדה"],
            "goals": ["שיפור שינה"],
            "strengths": ["מודעות עצמית"],
        },
        "riskFactors": ["בידוד חברתי", "עומס"],
        "recommendations": ["טיפול CBT"],
        "suggestedApproach": "CBT",
    }
    with patch("app.services.ai_service.analyze_intake", AsyncMock(return_value=result)):
        response = client.post(
            "/analyze",
            headers=auth_headers,
            json={"transcriptionId": transcription["id"], "type": "INTAKE"},
        )

    assert response.status_code == 201
    body = response.json()
    assert body["summary"] == "בת 34, עובדת בהייטק"
    assert body["keyTopics"] == ["חרדה"]
    assert body["emotionalMarkers"] == []
    assert body["recommendations"] == ["טיפול CBT", "שיפור שינה"]
    assert body["nextSessionNotes"] == "בידוד חברתי, עומס"


def test_analyze_foreign_transcription(client, auth_headers, other_headers, recording):
    transcription = transcribe(client, auth_headers, recording["id"])
    response = client.post("/analyze", headers=other_headers, json={"transcriptionId": transcription["id"]})
    assert response.status_code == 403


def test_analyze_missing_transcription(client, auth_headers):
    response = client.post("/analyze", headers=auth_headers, json={"transcriptionId": 999})
    assert response.status_code == 404


def test_analyze_failure_sets_error(client, db_session, auth_headers, recording):
    transcription = transcribe(client, auth_headers, recording["id"])
    with patch("app.services.ai_service.analyze_session", AsyncMock(side_effect=AIServiceError("no json"))):
        response = client.post("/analyze", headers=auth_headers, json={"transcriptionId": transcription["id"]})

    assert response.status_code == 500
    db_session.expire_all()
    assert db_session.get(Recording, recording["id"]).status == "ERROR"


def test_summary(client, auth_headers):
    with patch("app.services.ai_service.generate_session_summary", AsyncMock(return_value="סיכום קצר")):
        response = client.post("/analyze/summary", headers=auth_headers, json={"transcription": "טקסט"})
    assert response.status_code == 200
    assert response.json() == {"summary": "סיכום קצר"}


def test_summary_without_api_key(client, auth_headers):
    with patch("app.services.ai_service.ANTHROPIC_API_KEY", None):
        response = client.post("/analyze/summary", headers=auth_headers, json={"transcription": "טקסט"})
    assert response.status_code == 503
