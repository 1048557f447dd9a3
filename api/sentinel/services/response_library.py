"""Intent-keyed composition templates with illustrative operations data.

Templates are keyed by intent only; the analyzer's urgency is accepted but each
template's own reasoning.urgency is what gets surfaced. Layout per intent and
confidence ceilings per intent are closed tables.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from sentinel.models.composition import (
    CompositionDocument,
    IntentType,
    LayoutType,
    UrgencyLevel,
    validate_document,
)

log = logging.getLogger(__name__)

FALLBACK_INTENT = IntentType.EXPLORATION

TEMPLATE_LAYOUTS: dict[IntentType, LayoutType] = {
    IntentType.INCIDENT: LayoutType.GRID,
    IntentType.OVERVIEW: LayoutType.GRID,
    IntentType.INVESTIGATION: LayoutType.SPLIT,
    IntentType.ESCALATION: LayoutType.STACK,
    IntentType.EXPLORATION: LayoutType.GRID,
}

# Intents without an entry pass confidence through unchanged.
CONFIDENCE_CEILINGS: dict[IntentType, float] = {
    IntentType.INVESTIGATION: 0.54,
    IntentType.EXPLORATION: 0.65,
}


def _entry(entry_id: str, component_type: str, priority: int, props: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": entry_id,
        "type": component_type,
        "priority": priority,
        "visibility": "visible",
        "props": props,
    }


def _metric(entry_id: str, priority: int, title: str, value: str, **extra: Any) -> dict[str, Any]:
    props: dict[str, Any] = {"title": title, "value": value}
    props.update(extra)
    return _entry(entry_id, "MetricCard", priority, props)


def _rows(keys: tuple[str, ...], *rows: tuple[Any, ...]) -> list[dict[str, Any]]:
    return [dict(zip(keys, row)) for row in rows]


_ALERT_KEYS = ("id", "severity", "message", "timestamp", "source")
_EVENT_KEYS = ("id", "timestamp", "title", "description", "severity")
_LOG_KEYS = ("id", "timestamp", "level", "source", "message")
_CHECK_KEYS = ("id", "label", "completed", "priority")
_INSIGHT_KEYS = ("id", "text", "confidence", "category")
_REC_KEYS = ("id", "title", "description", "urgency", "action")
_POINT_KEYS = ("id", "label", "x", "y", "status")
_DATA_KEYS = ("label", "value")


# ─── Templates ────────────────────────────────────────────────────

_INCIDENT: dict[str, Any] = {
    "explanation": (
        "Incident detected. Displaying critical alerts, affected metrics, timeline of events, "
        "system logs, and an action checklist. Grid layout maximizes information density for rapid triage."
    ),
    "reasoning": {
        "intent": "incident",
        "urgency": "high",
        "uncertaintyAreas": [
            "Root cause not yet confirmed",
            "Full blast radius unknown",
        ],
        "hiddenComponents": [
            {"type": "GeoMap", "reason": "No geographic correlation detected yet"},
            {"type": "InsightSummary", "reason": "Not enough data for hypotheses while the incident is active"},
        ],
    },
    "components": [
        _entry("banner-1", "StatusBanner", 1, {
            "status": "critical",
            "title": "ACTIVE INCIDENT: Authentication Service Degradation",
            "message": (
                "Multiple users reporting login failures across web and mobile. "
                "Auth service error rate elevated since 14:23 UTC."
            ),
            "timestamp": "14:23 UTC",
        }),
        _entry("alert-1", "AlertPanel", 2, {
            "title": "Active Alerts",
            "alerts": _rows(
                _ALERT_KEYS,
                ("a1", "critical", "Auth service: 47% request failure rate (threshold: 5%)", "14:23 UTC", "auth-service"),
                ("a2", "critical", "Session token generation failing: Redis connection pool exhausted", "14:25 UTC", "session-mgr"),
                ("a3", "warning", "Client retry storm detected: 3.2x normal request volume", "14:27 UTC", "api-gateway"),
                ("a4", "info", "Status page auto-updated: Auth service degraded", "14:30 UTC", "statuspage"),
            ),
        }),
        _metric("metric-1", 3, "Login Failure Rate", "47%", change=340, changeDirection="up", status="critical"),
        _metric("metric-2", 3, "Affected Users", "2,847", change=89, changeDirection="up", status="critical"),
        _metric("metric-3", 4, "Avg Response Time", "12.3", unit="s", change=780, changeDirection="up", status="warning"),
        _metric("metric-4", 4, "Healthy Endpoints", "23/31", status="warning"),
        _entry("timeline-1", "TimelineView", 5, {
            "title": "Incident Timeline",
            "events": _rows(
                _EVENT_KEYS,
                ("e1", "14:18 UTC", "Redis latency spike detected", "Redis cluster node-3 latency exceeded 500ms threshold", "warning"),
                ("e2", "14:23 UTC", "Auth service errors surge", "Error rate jumped from 0.3% to 47% in 90 seconds", "critical"),
                ("e3", "14:25 UTC", "Connection pool exhausted", "Redis connection pool at 100% capacity, new connections rejected", "critical"),
                ("e4", "14:27 UTC", "Retry storm begins", "Client-side retries amplifying load by 3.2x", "warning"),
                ("e5", "14:30 UTC", "Automated alert triggered", "PagerDuty incident created, on-call team notified", "info"),
            ),
        }),
        _entry("logs-1", "LogViewer", 6, {
            "title": "Auth Service Logs",
            "logs": _rows(
                _LOG_KEYS,
                ("l1", "14:23:01", "error", "auth-svc", "ETIMEDOUT: Redis connection timed out after 3000ms"),
                ("l2", "14:23:02", "error", "auth-svc", "Failed to generate session token: pool exhausted (128/128)"),
                ("l3", "14:23:03", "warn", "api-gw", "Upstream auth-svc returned 503, circuit breaker OPEN"),
                ("l4", "14:23:05", "error", "auth-svc", "Token validation failed: cannot reach Redis cluster"),
                ("l5", "14:23:08", "info", "monitor", "Error rate threshold exceeded, triggering PagerDuty alert"),
                ("l6", "14:23:12", "error", "auth-svc", "Connection retry 3/3 failed for redis-node-3:6379"),
            ),
        }),
        _entry("actions-1", "ActionChecklist", 7, {
            "title": "Incident Response Actions",
            "items": _rows(
                _CHECK_KEYS,
                ("c1", "Acknowledge incident in PagerDuty", True, "critical"),
                ("c2", "Open incident Slack channel #inc-auth-20260207", True, "critical"),
                ("c3", "Check Redis cluster node health", False, "critical"),
                ("c4", "Enable circuit breaker bypass for VIP users", False, "high"),
                ("c5", "Scale up Redis connection pool limit", False, "high"),
                ("c6", "Notify affected enterprise customers", False, "medium"),
                ("c7", "Prepare status page update", False, "medium"),
            ),
        }),
        _entry("recs-1", "RecommendationStrip", 8, {
            "recommendations": _rows(
                _REC_KEYS,
                ("r1", "Restart Redis node-3", "Primary suspect based on timeline correlation", "critical", "Execute Restart"),
                ("r2", "Enable rate limiting", "Suppress retry storm at API gateway level", "high", "Apply Config"),
                ("r3", "Failover to backup cluster", "Switch to redis-backup if restart fails", "high", "Initiate Failover"),
            ),
        }),
    ],
}

_OVERVIEW: dict[str, Any] = {
    "explanation": (
        "Overview requested. Showing system health banner, key performance metrics, traffic trend, "
        "error distribution, and a summary of observations. Grid layout for at-a-glance comprehension."
    ),
    "reasoning": {
        "intent": "overview",
        "urgency": "low",
        "uncertaintyAreas": [],
        "hiddenComponents": [
            {"type": "AlertPanel", "reason": "No active alerts, system is healthy"},
            {"type": "LogViewer", "reason": "Not relevant for high-level overview"},
            {"type": "ActionChecklist", "reason": "No active incidents requiring action"},
            {"type": "GeoMap", "reason": "Geographic view not requested"},
        ],
    },
    "components": [
        _entry("banner-1", "StatusBanner", 1, {
            "status": "healthy",
            "title": "System Overview: February 7, 2026",
            "message": "All services operational. No active incidents. Last deployment: 2 hours ago (v3.14.2).",
            "timestamp": "Updated 30s ago",
        }),
        _metric("metric-1", 2, "Active Users", "12,847", change=12, changeDirection="up", status="normal"),
        _metric("metric-2", 2, "Requests/sec", "3,421", change=5, changeDirection="up", status="normal"),
        _metric("metric-3", 2, "Avg Latency", "45", unit="ms", change=3, changeDirection="down", status="normal"),
        _metric("metric-4", 2, "Uptime", "99.97", unit="%", status="normal"),
        _entry("chart-1", "ChartView", 3, {
            "title": "Traffic (Last 12 Hours)",
            "chartType": "area",
            "color": "#3b82f6",
            "data": _rows(
                _DATA_KEYS,
                ("6AM", 1200), ("7AM", 1800), ("8AM", 2900), ("9AM", 3400),
                ("10AM", 3200), ("11AM", 3100), ("12PM", 2800), ("1PM", 3000),
                ("2PM", 3421), ("3PM", 3300), ("4PM", 3100), ("5PM", 2500),
            ),
        }),
        _entry("chart-2", "ChartView", 4, {
            "title": "Error Rate by Service",
            "chartType": "bar",
            "color": "#f59e0b",
            "data": _rows(
                _DATA_KEYS,
                ("API", 0.3), ("Auth", 0.1), ("Payment", 0.2), ("Search", 0.5), ("CDN", 0.05),
            ),
        }),
        _entry("insights-1", "InsightSummary", 5, {
            "title": "Today's Observations",
            "insights": _rows(
                _INSIGHT_KEYS,
                ("i1", "Traffic is 12% above weekly average, possibly driven by marketing campaign launch", 0.85, "Traffic"),
                ("i2", "Search service error rate (0.5%) is slightly elevated but within SLA bounds", 0.72, "Health"),
                ("i3", "Deployment v3.14.2 has been stable for 2 hours with zero rollback signals", 0.93, "Deployment"),
                ("i4", "User session duration increased 8% after last feature release", 0.68, "Product"),
            ),
        }),
        _entry("recs-1", "RecommendationStrip", 6, {
            "recommendations": _rows(
                _REC_KEYS,
                ("r1", "Monitor Search Service", "Error rate is at upper bound of normal range", "low", "View Details"),
                ("r2", "Review Traffic Spike", "Confirm correlation with marketing campaign", "low", "View Analytics"),
            ),
        }),
    ],
}

_INVESTIGATION: dict[str, Any] = {
    "explanation": (
        "Investigation mode activated. Low confidence, so hypotheses are presented rather than conclusions. "
        "Split layout: left side shows anomaly analysis, right side shows evidence (logs, timeline, map). "
        "UI is intentionally exploratory to avoid premature conclusions."
    ),
    "reasoning": {
        "intent": "investigation",
        "urgency": "medium",
        "uncertaintyAreas": [
            "Anomaly pattern not yet conclusive",
            "Correlation is not causation: multiple hypotheses active",
            "Geographic correlation needs more data points",
            "Temporal pattern may be coincidental",
        ],
        "hiddenComponents": [
            {"type": "ActionChecklist", "reason": "No confirmed incident yet, premature for action items"},
            {"type": "RecommendationStrip", "reason": "Confidence too low for directive recommendations"},
            {"type": "AlertPanel", "reason": "No triggered alerts, anomalies are sub-threshold"},
        ],
    },
    "components": [
        _entry("banner-1", "StatusBanner", 1, {
            "status": "investigating",
            "title": "Investigation Mode: Anomaly Analysis",
            "message": "Analyzing system behavior patterns. Multiple hypotheses under evaluation. No confirmed incident.",
            "timestamp": "Started just now",
        }),
        _entry("insights-1", "InsightSummary", 2, {
            "title": "Hypotheses Under Investigation",
            "insights": _rows(
                _INSIGHT_KEYS,
                ("h1", "Memory leak in payment-service: RSS growing 2.1% per hour, correlates with p99 latency increase", 0.62, "Memory"),
                ("h2", "Unusual API call pattern from IP block 203.0.113.x: 4x normal rate, possible scraping", 0.41, "Security"),
                ("h3", "Database query planner regression after last migration: slow queries up 18%", 0.55, "Database"),
                ("h4", "CDN cache hit ratio dropped from 94% to 87%: possible cache poisoning or config drift", 0.38, "Infrastructure"),
            ),
        }),
        _entry("chart-1", "ChartView", 3, {
            "title": "Anomaly Score (Last 6 Hours)",
            "chartType": "line",
            "color": "#8b5cf6",
            "data": _rows(
                _DATA_KEYS,
                ("12PM", 12), ("1PM", 15), ("2PM", 14), ("3PM", 23), ("4PM", 31), ("5PM", 45), ("Now", 52),
            ),
        }),
        _entry("timeline-1", "TimelineView", 4, {
            "title": "Suspicious Events",
            "events": _rows(
                _EVENT_KEYS,
                ("e1", "12:45 UTC", "Payment service memory spike", "RSS jumped 150MB in 10 minutes, triggering GC pressure", "warning"),
                ("e2", "13:12 UTC", "Unusual API traffic pattern", "Burst of 2,400 req/s from single IP block, mostly /api/products", "warning"),
                ("e3", "14:01 UTC", "DB slow query spike", "18% increase in queries exceeding 500ms threshold", "warning"),
                ("e4", "14:30 UTC", "CDN cache miss increase", "Cache hit ratio dropped 7 points, checking for config changes", "info"),
            ),
        }),
        _entry("logs-1", "LogViewer", 5, {
            "title": "Correlated Logs",
            "logs": _rows(
                _LOG_KEYS,
                ("l1", "14:30:12", "warn", "payment-svc", "GC pause 340ms, heap at 89% capacity"),
                ("l2", "14:30:15", "warn", "api-gw", "Rate limit approaching for 203.0.113.0/24 (2,100/2,500 rpm)"),
                ("l3", "14:30:18", "info", "db-monitor", "Query plan changed for products_search: sequential scan detected"),
                ("l4", "14:30:22", "warn", "cdn", "Cache MISS rate above threshold: 13.2% (threshold: 10%)"),
                ("l5", "14:30:30", "info", "anomaly-det", "Anomaly score 52/100, elevated but below alert threshold (70)"),
            ),
        }),
        _entry("geo-1", "GeoMap", 6, {
            "title": "Geographic Anomaly Distribution",
            "points": _rows(
                _POINT_KEYS,
                ("g1", "US-East", 28, 38, "normal"),
                ("g2", "US-West", 15, 40, "normal"),
                ("g3", "EU-West", 48, 30, "warning"),
                ("g4", "AP-South", 72, 55, "warning"),
                ("g5", "AP-East", 82, 40, "critical"),
                ("g6", "SA-East", 33, 72, "normal"),
            ),
        }),
    ],
}

_ESCALATION: dict[str, Any] = {
    "explanation": (
        "ESCALATION detected. Switching to directive stack layout that prioritizes actionable information. "
        "AlertPanel and ActionChecklist are top priority. Every component is ordered by urgency. "
        "Stack layout ensures nothing is missed during rapid response."
    ),
    "reasoning": {
        "intent": "escalation",
        "urgency": "critical",
        "uncertaintyAreas": [
            "Full impact scope still being assessed",
            "Customer-facing impact duration unknown",
        ],
        "hiddenComponents": [
            {"type": "GeoMap", "reason": "Geographic data not actionable during escalation"},
            {"type": "LogViewer", "reason": "Deprioritized: action items are more critical right now"},
            {"type": "ChartView", "reason": "Trend data less important than immediate actions"},
        ],
    },
    "components": [
        _entry("banner-1", "StatusBanner", 1, {
            "status": "critical",
            "title": "ESCALATION: Multiple Systems Affected, Immediate Action Required",
            "message": (
                "Situation is spreading beyond initial scope. Payment processing now impacted. "
                "Customer-facing degradation confirmed."
            ),
            "timestamp": "15:02 UTC (escalated)",
        }),
        _entry("alert-1", "AlertPanel", 2, {
            "title": "Critical Alerts: Cascading Failure",
            "alerts": _rows(
                _ALERT_KEYS,
                ("a1", "critical", "Payment gateway: Transaction success rate dropped to 62%", "15:00 UTC", "payment-gw"),
                ("a2", "critical", "Auth service still degraded, retry storm intensifying", "14:58 UTC", "auth-svc"),
                ("a3", "critical", "Customer support queue: 340 tickets in last 15 minutes (10x normal)", "15:01 UTC", "support"),
                ("a4", "warning", "CDN edge nodes in EU-West reporting 504 timeouts", "14:59 UTC", "cdn"),
                ("a5", "warning", "Database connection pool at 91% capacity", "15:02 UTC", "db-primary"),
            ),
        }),
        _entry("actions-1", "ActionChecklist", 3, {
            "title": "IMMEDIATE ACTIONS: Escalation Protocol",
            "items": _rows(
                _CHECK_KEYS,
                ("c1", "Page VP of Engineering: P1 escalation", False, "critical"),
                ("c2", "Activate war room: Zoom bridge #incident-war-room", False, "critical"),
                ("c3", "Enable emergency rate limiting across all services", False, "critical"),
                ("c4", "Switch payment processing to fallback provider", False, "critical"),
                ("c5", "Draft customer communication (use template: P1-cascade)", False, "high"),
                ("c6", "Disable non-essential background jobs", False, "high"),
                ("c7", "Scale up all services to max capacity", False, "high"),
                ("c8", "Engage database team for connection pool tuning", False, "medium"),
            ),
        }),
        _metric("metric-1", 4, "Revenue Impact", "$142K", change=38, changeDirection="up", unit="/hr", status="critical"),
        _metric("metric-2", 4, "Affected Services", "4/12", status="critical"),
        _metric("metric-3", 4, "Customer Tickets", "340", change=900, changeDirection="up", status="critical"),
        _metric("metric-4", 4, "MTTR Estimate", "45", unit="min", status="warning"),
        _entry("recs-1", "RecommendationStrip", 5, {
            "recommendations": _rows(
                _REC_KEYS,
                ("r1", "Activate Fallback Payment", "Switch to Stripe fallback to restore payment processing immediately", "critical", "Execute Failover"),
                ("r2", "Global Rate Limit", "Apply 50% rate limit to stop cascade. Will affect all users but stabilize systems", "critical", "Apply Limit"),
                ("r3", "Rollback v3.14.2", "Deployment correlates with timeline; rollback to v3.14.1 as precaution", "high", "Start Rollback"),
                ("r4", "Customer Comms", "Send proactive email to enterprise customers within 10 minutes", "high", "Draft Message"),
            ),
        }),
        _entry("timeline-1", "TimelineView", 6, {
            "title": "Escalation Timeline",
            "events": _rows(
                _EVENT_KEYS,
                ("e1", "14:23 UTC", "Initial incident: Auth service errors", "Login failure rate spiked to 47%", "critical"),
                ("e2", "14:45 UTC", "Retry storm detected", "API gateway under 3.2x load from client retries", "warning"),
                ("e3", "14:55 UTC", "Cascade begins", "Payment service starts experiencing upstream timeouts", "critical"),
                ("e4", "15:00 UTC", "Payment degradation confirmed", "Transaction success rate dropped to 62%", "critical"),
                ("e5", "15:02 UTC", "P1 Escalation triggered", "Multiple systems affected, escalation protocol activated", "critical"),
            ),
        }),
    ],
}

_EXPLORATION: dict[str, Any] = {
    "explanation": (
        "Exploration mode. Broad overview with charts, metrics, and insights to help guide further inquiry. "
        "Grid layout provides multiple entry points for deeper investigation."
    ),
    "reasoning": {
        "intent": "exploration",
        "urgency": "low",
        "uncertaintyAreas": [
            "User intent is general, showing broad surface area",
            "May need follow-up questions to narrow focus",
        ],
        "hiddenComponents": [
            {"type": "ActionChecklist", "reason": "No specific actions identified yet"},
            {"type": "AlertPanel", "reason": "No triggered alerts to display"},
        ],
    },
    "components": [
        _entry("banner-1", "StatusBanner", 1, {
            "status": "healthy",
            "title": "Exploration Mode",
            "message": "Showing broad system overview. Describe your concern more specifically for a focused analysis.",
            "timestamp": "Now",
        }),
        _metric("metric-1", 2, "Total Requests", "1.2M", change=8, changeDirection="up", status="normal"),
        _metric("metric-2", 2, "Error Rate", "0.32", unit="%", status="normal"),
        _metric("metric-3", 2, "P99 Latency", "230", unit="ms", change=5, changeDirection="up", status="normal"),
        _metric("metric-4", 2, "Active Services", "31/31", status="normal"),
        _entry("chart-1", "ChartView", 3, {
            "title": "Request Volume by Service",
            "chartType": "bar",
            "color": "#3b82f6",
            "data": _rows(
                _DATA_KEYS,
                ("API", 420), ("Auth", 280), ("Payment", 190), ("Search", 310), ("CDN", 580),
            ),
        }),
        _entry("insights-1", "InsightSummary", 4, {
            "title": "System Observations",
            "insights": _rows(
                _INSIGHT_KEYS,
                ("i1", "All services within normal operating parameters", 0.91, "Health"),
                ("i2", "CDN serving highest volume, expected for current time of day", 0.88, "Traffic"),
                ("i3", "No anomalies detected in the last 4 hours", 0.85, "Anomaly"),
            ),
        }),
        _entry("geo-1", "GeoMap", 5, {
            "title": "Regional Status",
            "points": _rows(
                _POINT_KEYS,
                ("g1", "US-East", 28, 38, "normal"),
                ("g2", "US-West", 15, 40, "normal"),
                ("g3", "EU-West", 48, 30, "normal"),
                ("g4", "AP-South", 72, 55, "normal"),
                ("g5", "AP-East", 82, 40, "normal"),
            ),
        }),
    ],
}

TEMPLATES: dict[IntentType, dict[str, Any]] = {
    IntentType.INCIDENT: _INCIDENT,
    IntentType.OVERVIEW: _OVERVIEW,
    IntentType.INVESTIGATION: _INVESTIGATION,
    IntentType.ESCALATION: _ESCALATION,
    IntentType.EXPLORATION: _EXPLORATION,
}


# ─── Public API ───────────────────────────────────────────────────


def resolve_intent(intent: object) -> IntentType:
    """Map any value to a known intent; unknown values fall back to exploration."""
    if isinstance(intent, IntentType):
        return intent
    if isinstance(intent, str):
        try:
            return IntentType(intent.strip().lower())
        except ValueError:
            pass
    log.warning("response_library_unknown_intent intent=%r fallback=%s", intent, FALLBACK_INTENT.value)
    return FALLBACK_INTENT


def clamp_confidence(intent: IntentType, confidence: float) -> float:
    try:
        value = float(confidence)
    except (TypeError, ValueError):
        value = 0.0
    if value != value:  # NaN
        value = 0.0
    value = max(0.0, min(1.0, value))
    ceiling = CONFIDENCE_CEILINGS.get(intent)
    return min(value, ceiling) if ceiling is not None else value


def template_layouts() -> dict[IntentType, LayoutType]:
    return dict(TEMPLATE_LAYOUTS)


def synthesize(
    intent: object,
    urgency: Optional[UrgencyLevel | str] = None,
    confidence: float = 0.0,
) -> CompositionDocument:
    """Build a fresh composition document for intent.

    urgency is informational; the template's reasoning.urgency is authoritative.
    """
    resolved = resolve_intent(intent)
    template = copy.deepcopy(TEMPLATES[resolved])
    payload = {
        "layout": TEMPLATE_LAYOUTS[resolved].value,
        "confidence": clamp_confidence(resolved, confidence),
        **template,
    }
    document = validate_document(payload)
    log.debug(
        "response_synthesized intent=%s analyzer_urgency=%s template_urgency=%s confidence=%.3f components=%s",
        resolved.value,
        getattr(urgency, "value", urgency),
        document.reasoning.urgency.value,
        document.confidence,
        len(document.components),
    )
    return document
