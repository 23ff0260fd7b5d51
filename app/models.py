from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base
from .shared.timeutils import local_now


class User(Base):
    """A therapist - the tenant that owns every other record"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    license = Column(String(100), nullable=True)  # Professional license number
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    clients = relationship("Client", back_populates="therapist", cascade="all, delete-orphan")
    sessions = relationship("TherapySession", back_populates="therapist", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="therapist", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    recurring_patterns = relationship(
        "RecurringPattern", back_populates="user", cascade="all, delete-orphan"
    )
    notification_settings = relationship(
        "NotificationSetting",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="NotificationSetting.id",
    )
    intake_templates = relationship(
        "IntakeTemplate", back_populates="user", cascade="all, delete-orphan"
    )


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    therapist_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    birth_date = Column(DateTime, nullable=True)
    address = Column(String(500), nullable=True)
    status = Column(String(50), default="ACTIVE", nullable=False)  # ACTIVE, INACTIVE, ARCHIVED
    medical_history = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    intake_notes = Column(Text, nullable=True)  # Answers collected with an intake questionnaire
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    therapist = relationship("User", back_populates="clients")
    sessions = relationship("TherapySession", back_populates="client", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="client", cascade="all, delete-orphan")
    recordings = relationship("Recording", back_populates="client", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="client", cascade="all, delete-orphan")


class TherapySession(Base):
    __tablename__ = "therapy_sessions"

    id = Column(Integer, primary_key=True, index=True)
    therapist_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(String(50), default="SCHEDULED", nullable=False)  # SCHEDULED, COMPLETED, CANCELLED, NO_SHOW
    type = Column(String(50), default="IN_PERSON", nullable=False)  # IN_PERSON, ONLINE, PHONE
    price = Column(Float, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    therapist = relationship("User", back_populates="sessions")
    client = relationship("Client", back_populates="sessions")
    note = relationship(
        "SessionNote", back_populates="session", uselist=False, cascade="all, delete-orphan"
    )
    payment = relationship("Payment", back_populates="session", uselist=False)
    recordings = relationship("Recording", back_populates="session", cascade="all, delete-orphan")


class SessionNote(Base):
    __tablename__ = "session_notes"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer, ForeignKey("therapy_sessions.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    content = Column(Text, nullable=False)
    is_private = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    session = relationship("TherapySession", back_populates="note")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(
        Integer, ForeignKey("therapy_sessions.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    amount = Column(Float, nullable=False)
    method = Column(String(50), default="CASH", nullable=False)  # CASH, CREDIT_CARD, BANK_TRANSFER, CHECK, OTHER
    status = Column(String(50), default="PENDING", nullable=False)  # PENDING, PAID, CANCELLED, REFUNDED
    receipt_url = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=local_now, index=True)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    client = relationship("Client", back_populates="payments")
    session = relationship("TherapySession", back_populates="payment")


class Recording(Base):
    __tablename__ = "recordings"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    session_id = Column(
        Integer, ForeignKey("therapy_sessions.id", ondelete="CASCADE"), nullable=True, index=True
    )
    audio_url = Column(String(500), nullable=False)  # /uploads/recordings/<file>
    duration_seconds = Column(Integer, nullable=False)
    type = Column(String(50), default="SESSION", nullable=False)  # INTAKE, SESSION
    status = Column(String(50), default="PENDING", nullable=False)  # PENDING, TRANSCRIBING, TRANSCRIBED, ANALYZED, ERROR
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    client = relationship("Client", back_populates="recordings")
    session = relationship("TherapySession", back_populates="recordings")
    transcription = relationship(
        "Transcription", back_populates="recording", uselist=False, cascade="all, delete-orphan"
    )


class Transcription(Base):
    __tablename__ = "transcriptions"

    id = Column(Integer, primary_key=True, index=True)
    recording_id = Column(
        Integer, ForeignKey("recordings.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    content = Column(Text, nullable=False)
    language = Column(String(10), default="he", nullable=False)
    confidence = Column(Float, nullable=True)
    timestamps = Column(JSON, nullable=True)  # [{start, end, text, speaker}]
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    recording = relationship("Recording", back_populates="transcription")
    analysis = relationship(
        "Analysis", back_populates="transcription", uselist=False, cascade="all, delete-orphan"
    )


class Analysis(Base):
    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True, index=True)
    transcription_id = Column(
        Integer, ForeignKey("transcriptions.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    summary = Column(Text, nullable=False)
    key_topics = Column(JSON, nullable=True)
    emotional_markers = Column(JSON, nullable=True)  # [{emotion, intensity, context}]
    recommendations = Column(JSON, nullable=True)
    next_session_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    transcription = relationship("Transcription", back_populates="analysis")


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    therapist_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), default="OTHER", nullable=False)  # CONSENT_FORM, INTAKE_FORM, TREATMENT_PLAN, REPORT, OTHER
    file_url = Column(String(500), nullable=False)  # /uploads/documents/<file>
    signed = Column(Boolean, default=False, nullable=False)
    signed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    therapist = relationship("User", back_populates="documents")
    client = relationship("Client", back_populates="documents")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), default="CUSTOM", nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), default="PENDING", nullable=False)  # PENDING, IN_PROGRESS, COMPLETED, CANCELLED
    priority = Column(String(20), default="MEDIUM", nullable=False)  # LOW, MEDIUM, HIGH, URGENT
    due_date = Column(DateTime, nullable=True)
    related_entity_id = Column(Integer, nullable=True, index=True)
    related_entity = Column(String(50), nullable=True)  # TherapySession, Payment, Recording
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    user = relationship("User", back_populates="tasks")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(String(50), default="PENDING", nullable=False)  # PENDING, SENT, READ, DISMISSED
    scheduled_for = Column(DateTime, nullable=True)
    sent_at = Column(DateTime, nullable=True)
    read_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=local_now)

    user = relationship("User", back_populates="notifications")


class RecurringPattern(Base):
    __tablename__ = "recurring_patterns"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    time = Column(String(5), nullable=False)  # HH:MM
    duration = Column(Integer, default=50, nullable=False)  # Minutes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    user = relationship("User", back_populates="recurring_patterns")
    client = relationship("Client")


class NotificationSetting(Base):
    __tablename__ = "notification_settings"
    __table_args__ = (UniqueConstraint("user_id", "channel", name="uq_notification_setting_channel"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    channel = Column(String(20), nullable=False)  # email, push
    enabled = Column(Boolean, default=True, nullable=False)
    morning_time = Column(String(5), default="08:00", nullable=False)
    evening_time = Column(String(5), default="20:00", nullable=False)
    debt_threshold_days = Column(Integer, default=30, nullable=False)
    monthly_reminder_day = Column(Integer, nullable=True)  # Day of month for the collection reminder
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    user = relationship("User", back_populates="notification_settings")


class IntakeTemplate(Base):
    __tablename__ = "intake_templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    questions = Column(JSON, nullable=False)  # [{question, type}]
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=local_now)
    updated_at = Column(DateTime, default=local_now, onupdate=local_now)

    user = relationship("User", back_populates="intake_templates")
