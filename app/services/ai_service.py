"""
Generative AI clients for the recording pipeline.

Transcription goes to Google Gemini with the audio sent inline; analysis and summaries
go to Anthropic Claude. Prompts are in Hebrew because sessions are conducted in Hebrew.
"""

import json
import logging
import re
from typing import Any, Optional

import anthropic
from google import genai
from google.genai import types

from ..config import ANALYSIS_MODEL, ANTHROPIC_API_KEY, GOOGLE_AI_API_KEY, TRANSCRIPTION_MODEL

logger = logging.getLogger(__name__)

# Gemini does not report a confidence score; this is the value stored with every transcript
DEFAULT_TRANSCRIPTION_CONFIDENCE = 0.95

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

TRANSCRIBE_PROMPT = """תמלל את ההקלטה הזו לעברית.
אם יש יותר מדובר אחד, סמן אותם כ"מטפל:" ו"מטופל:".
החזר רק את התמלול, בלי הערות נוספות."""

TRANSCRIBE_WITH_TIMESTAMPS_PROMPT = """תמלל את ההקלטה הזו לעברית עם חותמות זמן.
פורמט הפלט צריך להיות JSON עם המבנה הבא:
{
  "text": "הטקסט המלא",
  "segments": [
    { "start": 0, "end": 5, "text": "טקסט הקטע", "speaker": "מטפל" או "מטופל" }
  ]
}
החזר רק את ה-JSON, בלי הסברים נוספים."""

SESSION_ANALYSIS_PROMPT = """אתה פסיכולוג קליני מנוסה. נתח את תמלול הפגישה הטיפולית הבא והחזר ניתוח מובנה.

תמלול הפגישה:
{transcription}

החזר את התשובה בפורמט JSON עם המבנה הבא:
{{
  "summary": "סיכום קצר של הפגישה (2-3 משפטים)",
  "keyTopics": ["נושא 1", "נושא 2"],
  "emotionalMarkers": [
    {{
      "emotion": "שם הרגש",
      "intensity": "low" | "medium" | "high",
      "context": "ההקשר בו הרגש הופיע"
    }}
  ],
  "recommendations": ["המלצה 1", "המלצה 2"],
  "nextSessionNotes": "נקודות לדיון בפגישה הבאה"
}}

החזר רק את ה-JSON, בלי הסברים נוספים."""

INTAKE_ANALYSIS_PROMPT = """אתה פסיכולוג קליני מנוסה. נתח את שיחת הקבלה/פתיחת תיק הבאה ובנה פרופיל ראשוני של המטופל.

תמלול השיחה:
{transcription}

החזר את התשובה בפורמט JSON עם המבנה הבא:
{{
  "clientProfile": {{
    "presentingIssues": ["בעיה 1", "בעיה 2"],
    "background": "רקע קצר על המטופל",
    "goals": ["מטרה 1", "מטרה 2"]
  }},
  "recommendations": ["המלצה לטיפול 1", "המלצה 2"],
  "riskFactors": ["גורם סיכון 1"]
}}
אם אין גורמי סיכון, החזר מערך ריק.

החזר רק את ה-JSON, בלי הסברים נוספים."""

SUMMARY_PROMPT = """אתה פסיכולוג קליני מנוסה. כתוב סיכום מקצועי קצר של הפגישה הטיפולית הבאה.
הסיכום צריך להיות בגוף שלישי, מקצועי, ומתאים לתיעוד רפואי.

תמלול הפגישה:
{transcription}

כתוב סיכום של 3-5 משפטים."""


class AIServiceError(Exception):
    """An external AI call failed or returned an unusable response"""


class AIServiceNotConfigured(AIServiceError):
    """The API key for an AI provider is missing"""


_gemini_client: Optional[genai.Client] = None
_anthropic_client: Optional[anthropic.AsyncAnthropic] = None


def get_gemini_client() -> genai.Client:
    global _gemini_client
    if not GOOGLE_AI_API_KEY:
        raise AIServiceNotConfigured("GOOGLE_AI_API_KEY is not configured")
    if _gemini_client is None:
        _gemini_client = genai.Client(api_key=GOOGLE_AI_API_KEY)
    return _gemini_client


def get_anthropic_client() -> anthropic.AsyncAnthropic:
    global _anthropic_client
    if not ANTHROPIC_API_KEY:
        raise AIServiceNotConfigured("ANTHROPIC_API_KEY is not configured")
    if _anthropic_client is None:
        _anthropic_client = anthropic.AsyncAnthropic(api_key=ANTHROPIC_API_KEY)
    return _anthropic_client


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Parse the outermost {...} block of a model response, ignoring surrounding prose or fences"""
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


async def _generate_from_audio(audio_bytes: bytes, mime_type: str, prompt: str) -> str:
    client = get_gemini_client()
    response = await client.aio.models.generate_content(
        model=TRANSCRIPTION_MODEL,
        contents=[types.Part.from_bytes(data=audio_bytes, mime_type=mime_type), prompt],
    )
    return response.text or ""


async def transcribe_audio(audio_bytes: bytes, mime_type: str) -> dict:
    """Transcribe audio to Hebrew text with speaker labels"""
    logger.info(f"🎙️ Starting transcription ({len(audio_bytes)} bytes, {mime_type})")
    try:
        text = await _generate_from_audio(audio_bytes, mime_type, TRANSCRIBE_PROMPT)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Transcription error: {str(e)}")
        raise AIServiceError(f"Failed to transcribe audio: {str(e)}") from e

    logger.info(f"✅ Transcription successful, text length: {len(text)}")
    return {"text": text, "confidence": DEFAULT_TRANSCRIPTION_CONFIDENCE}


async def transcribe_audio_with_timestamps(audio_bytes: bytes, mime_type: str) -> dict:
    """Transcribe audio and return {text, segments:[{start, end, text, speaker}]}"""
    try:
        raw = await _generate_from_audio(audio_bytes, mime_type, TRANSCRIBE_WITH_TIMESTAMPS_PROMPT)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Transcription with timestamps error: {str(e)}")
        raise AIServiceError("Failed to transcribe audio with timestamps") from e

    parsed = extract_json_object(raw)
    if parsed is None:
        logger.warning("⚠️ No JSON in timestamped transcription, keeping raw text")
        return {"text": raw, "segments": []}

    segments = parsed.get("segments")
    return {
        "text": parsed.get("text") or raw,
        "segments": segments if isinstance(segments, list) else [],
    }


async def _complete(prompt: str, max_tokens: int) -> str:
    client = get_anthropic_client()
    message = await client.messages.create(
        model=ANALYSIS_MODEL,
        max_tokens=max_tokens,
        messages=[{"role": "user", "content": prompt}],
    )
    block = message.content[0] if message.content else None
    if block is None or block.type != "text":
        raise AIServiceError("Unexpected response type")
    return block.text


async def analyze_session(transcription: str) -> dict:
    """Structured analysis of a therapy session transcript"""
    try:
        text = await _complete(SESSION_ANALYSIS_PROMPT.format(transcription=transcription), 2048)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Analysis error: {str(e)}")
        raise AIServiceError("Failed to analyze session") from e

    parsed = extract_json_object(text)
    if parsed is None:
        raise AIServiceError("No valid JSON in response")
    return parsed


async def analyze_intake(transcription: str) -> dict:
    """Initial client profile built from an intake conversation"""
    try:
        text = await _complete(INTAKE_ANALYSIS_PROMPT.format(transcription=transcription), 2048)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Intake analysis error: {str(e)}")
        raise AIServiceError("Failed to analyze intake") from e

    parsed = extract_json_object(text)
    if parsed is None:
        raise AIServiceError("No valid JSON in response")
    return parsed


async def generate_session_summary(transcription: str) -> str:
    """Short third-person professional summary for the clinical record"""
    try:
        return await _complete(SUMMARY_PROMPT.format(transcription=transcription), 1024)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"❌ Summary generation error: {str(e)}")
        raise AIServiceError("Failed to generate summary") from e
