"""
AI analysis gateway.

Every external model call goes through this module and comes back as an
`AnalysisResult`: either `AnalysisSuccess` or `AnalysisFailure`. Nothing
here raises to the caller; a failure always carries a locally computed
fallback payload the caller can show instead.

Public API
----------
AIAnalysisGateway.safe_request(prompt, default_response)  -> AnalysisResult
AIAnalysisGateway.analyze_blockers(blockers)               -> AnalysisResult
AIAnalysisGateway.summarize_standups(records)              -> AnalysisResult
AIAnalysisGateway.process_query(text, context_records)     -> AnalysisResult
build_gateway(config)                                      -> AIAnalysisGateway
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union, cast

from standupsync.core.config import Settings
from standupsync.services.llm_client import (
    GeminiModelClient,
    ModelClient,
    ModelFactory,
    resolve_model,
)

logger = logging.getLogger(__name__)


GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.2,
    "top_p": 0.95,
    "top_k": 40,
    "max_output_tokens": 1024,
}

NOT_CONFIGURED_MESSAGE = "Gemini API is not properly configured"
MISSING_KEY_ERROR = "GEMINI_API_KEY environment variable is missing"
NO_MODEL_ERROR = "Failed to initialize Gemini model"

QUERY_FALLBACK = {
    "insight": (
        "I couldn't analyze your standups with AI at the moment. You can still "
        "use the standard features of StandupSync to view your standups and summaries."
    ),
}


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisSuccess:
    data: Any
    message: Optional[str] = None
    raw_response: Optional[str] = None

    success = True

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"success": True}
        if self.message is not None:
            envelope["message"] = self.message
        envelope["data"] = self.data
        if self.raw_response is not None:
            envelope["raw_response"] = self.raw_response
        return envelope


@dataclass(frozen=True)
class AnalysisFailure:
    message: str
    error: str
    fallback: Any
    # "data" for structured analyses, "fallback" for free-text queries
    fallback_key: str = field(default="data")

    success = False

    def to_envelope(self) -> dict[str, Any]:
        return {
            "success": False,
            "message": self.message,
            "error": self.error,
            self.fallback_key: self.fallback,
        }


AnalysisResult = Union[AnalysisSuccess, AnalysisFailure]


@dataclass(frozen=True)
class GatewayConfig:
    candidate_models: tuple[str, ...]
    credential: Optional[str]
    timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, s: Settings) -> "GatewayConfig":
        return cls(
            candidate_models=tuple(s.gemini_models_list),
            credential=s.GEMINI_API_KEY,
            timeout_seconds=s.AI_TIMEOUT_SECONDS,
        )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

_JSON_FENCE_RE = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)


def _first_balanced_object(text: str) -> Optional[str]:
    """Return the first `{...}` span with balanced braces, ignoring braces in strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        start = text.find("{", start + 1)
    return None


def extract_json(text: str, allow_bare: bool = True) -> Optional[Any]:
    """
    Pull a JSON payload out of a model response.

    A ```json fenced block wins; otherwise (when `allow_bare`) the first
    balanced object. Returns None when nothing parses.
    """
    match = _JSON_FENCE_RE.search(text)
    candidate = match.group(1) if match else None
    if candidate is None and allow_bare:
        candidate = _first_balanced_object(text)
    if candidate is None:
        return None
    try:
        return json.loads(candidate)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class AIAnalysisGateway:
    """Builds prompts, calls the model, and always returns an AnalysisResult."""

    def __init__(self, config: GatewayConfig, model: Optional[ModelClient]) -> None:
        self.config = config
        self._model = model

    @property
    def model_name(self) -> Optional[str]:
        return self._model.model_name if self._model is not None else None

    def _precondition_error(self) -> Optional[str]:
        if not self.config.credential:
            return MISSING_KEY_ERROR
        if self._model is None:
            return NO_MODEL_ERROR
        return None

    def _generate(self, prompt: str) -> str:
        # only reached once _precondition_error() has confirmed a model
        model = cast(ModelClient, self._model)
        return model.generate(prompt, dict(GENERATION_CONFIG))

    # -- generic ------------------------------------------------------------

    def safe_request(self, prompt: str, default_response: Any) -> AnalysisResult:
        """Call the model; on any failure hand back `default_response` as data."""
        reason = self._precondition_error()
        if reason:
            return AnalysisFailure(
                message=NOT_CONFIGURED_MESSAGE, error=reason, fallback=default_response,
            )

        try:
            text = self._generate(prompt)
        except Exception as e:
            logger.error("Error with Gemini API request: %s", e)
            return AnalysisFailure(
                message="Failed to process request with Gemini API",
                error=str(e),
                fallback=default_response,
            )

        parsed = extract_json(text)
        if parsed is not None:
            return AnalysisSuccess(data=parsed)
        return AnalysisSuccess(data={"insight": text}, message=text)

    # -- blockers -----------------------------------------------------------

    def analyze_blockers(self, blockers: list[str]) -> AnalysisResult:
        if not blockers:
            return AnalysisSuccess(data={
                "patterns": [],
                "suggestions": [],
                "analysis": "No blockers to analyze",
            })

        default_response = {
            "patterns": [],
            "suggestions": [
                "Try grouping similar blockers together",
                "Consider discussing recurring issues in team meetings",
            ],
            "categories": [],
            "summary": "Basic analysis without AI assistance.",
        }
        return self.safe_request(build_blocker_prompt(blockers), default_response)

    # -- standups -----------------------------------------------------------

    def summarize_standups(self, records: list[dict[str, Any]]) -> AnalysisResult:
        if not records:
            return AnalysisSuccess(data={
                "insights": [],
                "trends": [],
                "summary": "No standups to analyze",
            })

        topics = list(dict.fromkeys(tag for r in records for tag in (r.get("tags") or [])))
        default_response = {
            "insights": [],
            "accomplishments": [
                f"{r.get('date')}: {r.get('yesterday') or 'No data'}" for r in records[:3]
            ],
            "trends": {
                "mood": "Data available in standard reports",
                "productivity": "Data available in standard reports",
                "topics": topics,
            },
            "focus_suggestions": ["Review your recent standups for patterns"],
            "summary": "Basic summary without AI assistance.",
        }
        return self.safe_request(build_summary_prompt(records), default_response)

    # -- free text ----------------------------------------------------------

    def process_query(
        self,
        text: str,
        context_records: Optional[list[dict[str, Any]]] = None,
    ) -> AnalysisResult:
        """Answer a free-text question; failures carry a user-facing fallback hint."""
        reason = self._precondition_error()
        if reason:
            return AnalysisFailure(
                message=NOT_CONFIGURED_MESSAGE,
                error=reason,
                fallback=QUERY_FALLBACK,
                fallback_key="fallback",
            )

        try:
            response = self._generate(build_query_prompt(text, context_records))
        except Exception as e:
            logger.error("Error processing query with Gemini API: %s", e)
            return AnalysisFailure(
                message="Failed to process query with Gemini API",
                error=str(e),
                fallback=QUERY_FALLBACK,
                fallback_key="fallback",
            )

        parsed = extract_json(response, allow_bare=False)
        if parsed is not None:
            return AnalysisSuccess(data=parsed, raw_response=response)
        return AnalysisSuccess(data={"insight": response}, message=response)


def build_gateway(config: GatewayConfig, factory: ModelFactory = GeminiModelClient) -> AIAnalysisGateway:
    """Resolve the model once and wrap it in a gateway."""
    model = resolve_model(
        config.candidate_models, config.credential, config.timeout_seconds, factory=factory,
    )
    return AIAnalysisGateway(config, model)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

_PREAMBLE = "You are an AI assistant for StandupSync, a daily standup tracking application."


def build_query_prompt(text: str, context_records: Optional[list[dict[str, Any]]] = None) -> str:
    prompt = (
        f"{_PREAMBLE}\n"
        f'Help analyze and provide insights for the following query: "{text}"'
    )
    if context_records:
        prompt += (
            "\n\nHere is the relevant standup data to consider:\n"
            + json.dumps(context_records, indent=2, default=str)
        )
    return prompt


def build_blocker_prompt(blockers: list[str]) -> str:
    listed = "\n".join(f"- {b}" for b in blockers)
    return f"""{_PREAMBLE}
Analyze the following blockers from standup entries and:
1. Identify common patterns or themes
2. Suggest potential solutions or approaches
3. Categorize the blockers by type (e.g., technical, process, communication)

Blockers:
{listed}

Provide the analysis in JSON format with the following structure:
{{
  "patterns": [{{"theme": "theme name", "count": number, "examples": ["example1", "example2"]}}],
  "suggestions": ["suggestion1", "suggestion2"],
  "categories": [{{"name": "category name", "blockers": ["blocker1", "blocker2"]}}],
  "summary": "brief summary text"
}}"""


def build_summary_prompt(records: list[dict[str, Any]]) -> str:
    return f"""{_PREAMBLE}
Analyze the following standup entries and provide insights:
1. Identify key accomplishments
2. Detect patterns in productivity and mood
3. Extract the most frequent topics or areas of work
4. Suggest areas of focus based on the data

Standup Data:
{json.dumps(records, indent=2, default=str)}

Provide the analysis in JSON format with the following structure:
{{
  "insights": ["insight1", "insight2"],
  "accomplishments": ["major accomplishment1", "major accomplishment2"],
  "trends": {{"mood": "trend description", "productivity": "trend description", "topics": ["topic1", "topic2"]}},
  "focus_suggestions": ["suggestion1", "suggestion2"],
  "summary": "brief summary text"
}}"""
