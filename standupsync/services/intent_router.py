"""
Intent router: classifies a free-text query against an ordered rule table
and dispatches it to the matching analysis path.

Rules are evaluated top to bottom and the first match wins, so the order
of INTENT_RULES is part of the contract: analysis keywords beat weekly /
monthly phrasing, which beat blocker words, which beat #tags. The last
rule always matches.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from standupsync.services import query as q
from standupsync.services.ai_gateway import AIAnalysisGateway
from standupsync.services.date_ranges import month_token_from_text

logger = logging.getLogger(__name__)


class Intent:
    ANALYZE_BLOCKERS = "analyze_blockers"
    ANALYZE_STANDUPS = "analyze_standups"
    ANALYZE_QUERY    = "analyze_query"
    WEEKLY           = "weekly"
    MONTHLY          = "monthly"
    BLOCKERS         = "blockers"
    TAG              = "tag"
    FALLBACK         = "fallback"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

_ANALYSIS_WORDS = ("analyze", "insights", "summarize", "trends", "patterns")
_STANDUP_WORDS = ("standup", "summary", "progress")
_BLOCKER_WORDS = ("blocker", "blockers", "blocking", "blocked", "stuck")

_FULL_MONTH_RE = re.compile(
    r"\bin (january|february|march|april|may|june|july|august|september|october"
    r"|november|december)\b"
)
_SHORT_MONTH_RE = re.compile(r"what.+\bin (jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\b")
_TAG_RE = re.compile(r"#[a-z0-9_]+")


def normalize_query(text: str) -> str:
    return text.lower().strip()


def _has_any(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def _is_analysis(text: str) -> bool:
    return _has_any(text, _ANALYSIS_WORDS)


def _is_weekly(text: str) -> bool:
    return (
        "this week" in text
        or "did this week" in text
        or ("week" in text and "do" in text)
    )


def _is_monthly(text: str) -> bool:
    return (
        "this month" in text
        or _FULL_MONTH_RE.search(text) is not None
        or _SHORT_MONTH_RE.search(text) is not None
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

@dataclass
class QueryContext:
    db: Session
    gateway: AIAnalysisGateway
    text: str                       # original query text
    normalized: str
    user_id: Optional[str] = None


HELP_EXAMPLES = [
    "What did I do this week?",
    "What was my focus in April?",
    "Any recurring blockers?",
    "Show me entries tagged with #frontend",
    "Analyze my recent standups",
    "Identify patterns in my blockers",
    "Summarize my progress this month",
]


def help_payload() -> dict[str, Any]:
    return {
        "success": True,
        "message": "I can help you with the following queries:",
        "examples": list(HELP_EXAMPLES),
    }


def _analyze_blockers(ctx: QueryContext) -> dict[str, Any]:
    blockers = q.blocker_texts(ctx.db, ctx.user_id)
    return ctx.gateway.analyze_blockers(blockers).to_envelope()


def _analyze_standups(ctx: QueryContext) -> dict[str, Any]:
    records = q.recent_standups(ctx.db, ctx.user_id)
    return ctx.gateway.summarize_standups(records).to_envelope()


def _analyze_query(ctx: QueryContext) -> dict[str, Any]:
    return ctx.gateway.process_query(ctx.text).to_envelope()


def _weekly(ctx: QueryContext) -> dict[str, Any]:
    return q.get_weekly_summary(ctx.db, ctx.user_id)


def _monthly(ctx: QueryContext) -> dict[str, Any]:
    return q.get_monthly_summary(ctx.db, month_token_from_text(ctx.normalized), ctx.user_id)


def _blockers(ctx: QueryContext) -> dict[str, Any]:
    return q.get_blockers(ctx.db, ctx.user_id)


def extract_tag(normalized: str) -> Optional[str]:
    match = _TAG_RE.search(normalized)
    return match.group(0)[1:] if match else None


def _tagged(ctx: QueryContext) -> dict[str, Any]:
    return q.list_standups(ctx.db, ctx.user_id, tag=extract_tag(ctx.normalized))


def _fallback(ctx: QueryContext) -> dict[str, Any]:
    context = q.recent_standups(ctx.db, ctx.user_id, limit=5)
    result = ctx.gateway.process_query(ctx.text, context)
    if result.success:
        return result.to_envelope()
    return help_payload()


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IntentRule:
    name: str
    predicate: Callable[[str], bool]
    handler: Callable[[QueryContext], dict[str, Any]]


INTENT_RULES: list[IntentRule] = [
    IntentRule(Intent.ANALYZE_BLOCKERS,
               lambda t: _is_analysis(t) and "blocker" in t, _analyze_blockers),
    IntentRule(Intent.ANALYZE_STANDUPS,
               lambda t: _is_analysis(t) and _has_any(t, _STANDUP_WORDS), _analyze_standups),
    IntentRule(Intent.ANALYZE_QUERY, _is_analysis, _analyze_query),
    IntentRule(Intent.WEEKLY, _is_weekly, _weekly),
    IntentRule(Intent.MONTHLY, _is_monthly, _monthly),
    IntentRule(Intent.BLOCKERS, lambda t: _has_any(t, _BLOCKER_WORDS), _blockers),
    IntentRule(Intent.TAG, lambda t: _TAG_RE.search(t) is not None, _tagged),
    IntentRule(Intent.FALLBACK, lambda t: True, _fallback),
]


@dataclass
class ClassifiedQuery:
    rule: IntentRule
    normalized: str
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def intent(self) -> str:
        return self.rule.name


def classify_query(text: str, rules: Optional[list[IntentRule]] = None) -> ClassifiedQuery:
    """Return the first rule whose predicate matches the normalized text."""
    normalized = normalize_query(text)
    table = INTENT_RULES if rules is None else rules
    rule = next((r for r in table if r.predicate(normalized)), INTENT_RULES[-1])

    params: dict[str, Any] = {}
    if rule.name == Intent.MONTHLY:
        params["month"] = month_token_from_text(normalized)
    elif rule.name == Intent.TAG:
        params["tag"] = extract_tag(normalized)
    return ClassifiedQuery(rule=rule, normalized=normalized, params=params)


def dispatch_query(
    db: Session,
    gateway: AIAnalysisGateway,
    text: str,
    user_id: Optional[str] = None,
) -> dict[str, Any]:
    """Classify `text` and run the matching handler. Returns a response envelope."""
    cq = classify_query(text)
    logger.info("Query routed to %s %s", cq.intent, cq.params or "")
    ctx = QueryContext(
        db=db, gateway=gateway, text=text, normalized=cq.normalized, user_id=user_id,
    )
    return cq.rule.handler(ctx)
