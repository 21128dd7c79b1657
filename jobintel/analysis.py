"""LLM calls: daily market briefing, clarifying questions and full job analysis.

Briefing and questions never raise; they degrade to fixed fallbacks. The full
analysis raises :class:`AnalysisError` on any transport, parse or validation
failure, since a job cannot be created without it.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import TypeAdapter

from jobintel.config import llm_settings, load_profile
from jobintel.log import get_logger
from jobintel.models import AnalysisResult
from jobintel.retry import call_with_retry

log = get_logger(__name__)

QUESTIONS_CHAR_LIMIT = 5000
ANALYSIS_CHAR_LIMIT = 10000

EMPTY_BRIEFING = "No briefing available."
BRIEFING_FALLBACK = "Unable to fetch daily briefing due to API restrictions."
FALLBACK_QUESTIONS: list[str] = [
    "What is your primary motivation for this role?",
    "Do you meet the core technical requirements?",
]
ANALYSIS_FAILED = "Analysis failed. Please try again."

_DEFAULT_PROFILE = "Senior Product Manager, AI & Digital Health specialist, targeting London or remote (UK) roles."

_SYSTEM_PROMPT = """\
You are a job intelligence engine supporting one candidate's job search.

Behaviour:
- Be concise, analytical and metric-driven. Use UK spelling.
- No fluff, no emojis, no em-dashes.
- Do not invent facts. Use the data provided.
- Outputs are bullet-led and structured.

Candidate profile:
{profile}

Analysis framework:
- RICE (Reach, Impact, Confidence, Effort) for scoring.
- MoSCoW (Must, Should, Could, Won't) for priority.
- Extract skills and compare them against the candidate profile.

Return raw JSON when asked for data, clean Markdown for text artefacts.
"""

_BRIEFING_PROMPT = (
    "Summarise the last 24 hours of hiring trends relevant to this candidate's "
    "target market. Focus on funding news and major leadership moves. "
    "Keep it under 5 bullet points."
)

_QUESTIONS_PROMPT = """\
Review the job description (JD) below.
Identify 3-5 critical missing pieces of information needed to assess fit,
priority (RICE) and strategy accurately. Phrase them as direct questions to
the candidate.

Return ONLY a JSON array of question strings.

JD:
{description}
"""

_ANALYSIS_PROMPT = """\
Perform a full job analysis.

JOB DESCRIPTION:
{description}

CANDIDATE CLARIFICATIONS:
{clarifications}

Tasks:
1. Extract skills: required by the role, and missing from the candidate profile.
2. Estimate the salary range for the role's market.
3. Market scan: funding, competitors, office locations, hiring trends.
4. Score: competency match (0-100), RICE, MoSCoW priority.
5. Draft artefacts: CV bullets, cover letter, LinkedIn outreach, interview prep, STAR stories.

Return ONLY valid JSON with exactly this shape:

{{
  "analysis": {{
    "skills_required": ["..."],
    "skills_missing": ["..."],
    "competency_match_score": 0,
    "salary_range": "...",
    "rice_score": 0,
    "moscow_priority": "Must | Should | Could | Won't",
    "summary_bullets": ["..."],
    "red_flags": ["..."]
  }},
  "marketIntel": {{
    "funding_news": ["..."],
    "competitors": ["..."],
    "office_locations": ["..."],
    "hiring_trends_context": "..."
  }},
  "artefacts": {{
    "cv_bullets": ["..."],
    "cover_letter_draft": "...",
    "linkedin_outreach": "...",
    "interview_prep": ["..."],
    "star_stories": ["..."]
  }}
}}
"""

_QUESTION_LIST = TypeAdapter(list[str])


class AnalysisError(Exception):
    """Raised when the full analysis cannot be produced."""


def extract_json(raw: str, opener: str = "{", closer: str = "}") -> Any:
    """Parse the outermost JSON value delimited by *opener*/*closer* in *raw*."""
    start = raw.find(opener)
    end = raw.rfind(closer) + 1
    if start == -1 or end == 0 or end <= start:
        raise ValueError("LLM did not return valid JSON")
    return json.loads(raw[start:end])


def describe_profile(profile: dict[str, Any]) -> str:
    p = profile.get("profile") or {}
    if not any(p.get(k) for k in ("name", "title", "summary", "skills")):
        return _DEFAULT_PROFILE
    lines: list[str] = []
    if p.get("name"):
        lines.append(f"- Name: {p['name']}")
    if p.get("title"):
        lines.append(f"- Level / title: {p['title']}")
    if p.get("summary"):
        lines.append(f"- Summary: {p['summary']}")
    if p.get("skills"):
        lines.append(f"- Key skills: {', '.join(p['skills'][:15])}")
    if profile.get("locations"):
        lines.append(f"- Target locations: {', '.join(profile['locations'])}")
    return "\n".join(lines)


class AnalysisClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        *,
        client: Any = None,
        profile: dict[str, Any] | None = None,
        max_attempts: int | None = None,
    ) -> None:
        settings = llm_settings()
        self.api_key = api_key if api_key is not None else settings["api_key"]
        self.model = model or settings["model"]
        self.base_url = base_url or settings["base_url"]
        self.max_attempts = max_attempts or settings["max_attempts"]
        self.system_prompt = _SYSTEM_PROMPT.format(
            profile=describe_profile(profile if profile is not None else load_profile())
        )
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("GROQ_API_KEY is not set")
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _complete(self, prompt: str, *, max_tokens: int, temperature: float) -> str:
        client = self._get_client()
        resp = call_with_retry(
            client.chat.completions.create,
            max_attempts=self.max_attempts,
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return (resp.choices[0].message.content or "").strip()

    # ── Public calls ─────────────────────────────────────────────────────

    def fetch_daily_briefing(self) -> str:
        try:
            text = self._complete(_BRIEFING_PROMPT, max_tokens=600, temperature=0.3)
        except Exception as exc:
            log.warning("Briefing fetch failed (%s), using fallback", exc)
            return BRIEFING_FALLBACK
        return text or EMPTY_BRIEFING

    def fetch_clarifying_questions(self, description: str) -> list[str]:
        prompt = _QUESTIONS_PROMPT.format(description=description[:QUESTIONS_CHAR_LIMIT])
        try:
            raw = self._complete(prompt, max_tokens=500, temperature=0.2)
            questions = _QUESTION_LIST.validate_python(_parse_questions(raw))
        except Exception as exc:
            log.warning("Clarifying questions failed (%s), using fallback", exc)
            return list(FALLBACK_QUESTIONS)

        questions = [q.strip() for q in questions if q.strip()]
        if not questions:
            log.warning("LLM returned no clarifying questions, using fallback")
            return list(FALLBACK_QUESTIONS)
        log.info("Generated %d clarifying questions", len(questions))
        return questions

    def fetch_full_analysis(self, description: str, clarifications: str) -> AnalysisResult:
        prompt = _ANALYSIS_PROMPT.format(
            description=description[:ANALYSIS_CHAR_LIMIT],
            clarifications=clarifications,
        )
        try:
            raw = self._complete(prompt, max_tokens=4000, temperature=0.2)
            result = AnalysisResult.model_validate(extract_json(raw))
        except Exception as exc:
            log.error("Full analysis failed: %s", exc)
            raise AnalysisError(ANALYSIS_FAILED) from exc

        log.info(
            "Analysis complete: match=%.0f, RICE=%s, MoSCoW=%s",
            result.analysis.competency_match_score,
            result.analysis.rice_score,
            result.analysis.moscow_priority,
        )
        return result


def _parse_questions(raw: str) -> Any:
    """Accept a bare JSON array, or an object wrapping one under ``questions``."""
    try:
        return extract_json(raw, "[", "]")
    except ValueError:
        data = extract_json(raw)
        if isinstance(data, dict):
            return data.get("questions")
        raise
