"""Recording repository - recordings, transcriptions and analyses"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Analysis, Client, Recording, TherapySession, Transcription


class RecordingRepository:
    """Repository for recording database operations.

    A recording belongs to the therapist who owns its client or its session.
    """

    @staticmethod
    def _owned(db: Session, therapist_id: int):
        return (
            db.query(Recording)
            .outerjoin(Client, Recording.client_id == Client.id)
            .outerjoin(TherapySession, Recording.session_id == TherapySession.id)
            .filter(or_(Client.therapist_id == therapist_id, TherapySession.therapist_id == therapist_id))
        )

    @staticmethod
    def get_recordings(
        db: Session,
        therapist_id: int,
        client_id: Optional[int] = None,
        session_id: Optional[int] = None,
    ) -> list[Recording]:
        query = RecordingRepository._owned(db, therapist_id).options(
            joinedload(Recording.transcription).joinedload(Transcription.analysis)
        )
        if client_id:
            query = query.filter(Recording.client_id == client_id)
        if session_id:
            query = query.filter(Recording.session_id == session_id)
        return query.order_by(Recording.created_at.desc(), Recording.id.desc()).all()

    @staticmethod
    def get_recent_recordings(db: Session, therapist_id: int, limit: int = 5) -> list[Recording]:
        return (
            RecordingRepository._owned(db, therapist_id)
            .order_by(Recording.created_at.desc(), Recording.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def count_recordings(db: Session, therapist_id: int) -> int:
        return RecordingRepository._owned(db, therapist_id).count()

    @staticmethod
    def get_recording_by_id(db: Session, recording_id: int, therapist_id: int) -> Optional[Recording]:
        return RecordingRepository._owned(db, therapist_id).filter(Recording.id == recording_id).first()

    @staticmethod
    def get_recording_by_audio_url(db: Session, audio_url: str, therapist_id: int) -> Optional[Recording]:
        return RecordingRepository._owned(db, therapist_id).filter(Recording.audio_url == audio_url).first()

    @staticmethod
    def get_transcription(db: Session, transcription_id: int) -> Optional[Transcription]:
        return db.query(Transcription).filter(Transcription.id == transcription_id).first()

    @staticmethod
    def create_recording(db: Session, **recording_data) -> Recording:
        recording = Recording(**recording_data)
        db.add(recording)
        return recording

    @staticmethod
    def replace_transcription(db: Session, recording: Recording, **transcription_data) -> Transcription:
        """Drop the recording's previous transcription (and its analysis) and stage a new one"""
        if recording.transcription is not None:
            db.delete(recording.transcription)
            db.flush()
            db.expire(recording, ["transcription"])
        transcription = Transcription(recording_id=recording.id, **transcription_data)
        db.add(transcription)
        return transcription

    @staticmethod
    def replace_analysis(db: Session, transcription: Transcription, **analysis_data) -> Analysis:
        if transcription.analysis is not None:
            db.delete(transcription.analysis)
            db.flush()
            db.expire(transcription, ["analysis"])
        analysis = Analysis(transcription_id=transcription.id, **analysis_data)
        db.add(analysis)
        return analysis

    @staticmethod
    def delete_recording(db: Session, recording: Recording) -> None:
        db.delete(recording)
        db.commit()
