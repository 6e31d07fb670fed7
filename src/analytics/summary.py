"""
src/analytics/summary.py
────────────────────────
Report helpers: overall status sentence and the prose summary.

summarize() is an external collaborator (a generative-language REST API);
callers go through safe_summarize(), which never raises and substitutes a
fixed fallback string on any failure.
"""
from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Awaitable, Callable, Sequence

import httpx

from config.alerts import AlertKind
from config.settings import settings
from src.data.models import Alert, SensorReading
from src.i18n.translator import t

logger = logging.getLogger(__name__)

SUMMARY_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

Summarizer = Callable[[Sequence[Alert], Sequence[SensorReading]], Awaitable[str]]


def fallback_summary(lang: str | None = None) -> str:
    return t("report.summary_fallback", lang)


def system_status(alerts: Sequence[Alert], lang: str | None = None) -> str:
    """Overall status sentence for the report header."""
    if any(a.kind == AlertKind.CRITICAL for a in alerts):
        return t("report.status_critical", lang)
    if alerts:
        return t("report.status_alerts", lang)
    return t("report.status_ok", lang)


def build_prompt(
    alerts: Sequence[Alert],
    history: Sequence[SensorReading],
    lang: str | None = None,
) -> str:
    """Prompt with alert counts per category, the latest reading, and alert descriptions."""
    latest = history[-1].model_dump(mode="json") if history else {}
    by_category = Counter(t(f"alerts.category.{a.category.value}", lang) for a in alerts)
    category_lines = "\n".join(f"- {name}: {count}" for name, count in by_category.items())
    descriptions = "\n".join(
        f"• {t(f'metrics.{a.sensor.value}', lang)}: {t(f'alerts.desc.{a.description}', lang)}"
        for a in alerts
    )
    language = t("report.prompt_language", lang)

    return (
        "You are a technical assistant writing professional environmental monitoring reports.\n\n"
        f"Write an executive summary in {language} covering:\n"
        f"- Total alerts detected: {len(alerts)}\n"
        f"- Alerts by type:\n{category_lines}\n"
        f"- Latest recorded reading: {json.dumps(latest, indent=2)}\n\n"
        "Then give 3-4 practical recommendations based on these alerts:\n"
        f"{descriptions}\n\n"
        "Keep the summary under 5 lines, clear and technical. No tables, no title."
    )


async def summarize(
    alerts: Sequence[Alert],
    history: Sequence[SensorReading],
    api_key: str = settings.SUMMARY_API_KEY,
    model: str = settings.SUMMARY_MODEL,
    timeout: float = settings.SUMMARY_TIMEOUT_S,
    lang: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """
    Ask the generative-language API for a prose summary.

    Raises:
        RuntimeError: no API key configured or the response has no text
        httpx.HTTPError: transport failure or non-2xx response
    """
    if not api_key:
        raise RuntimeError("SUMMARY_API_KEY is not configured")

    body = {"contents": [{"role": "user", "parts": [{"text": build_prompt(alerts, history, lang)}]}]}
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.post(
            SUMMARY_ENDPOINT.format(model=model),
            params={"key": api_key},
            json=body,
        )
        response.raise_for_status()
        data = response.json()

    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(p.get("text", "") for p in parts).strip()
    except (KeyError, IndexError, TypeError) as e:
        raise RuntimeError("Summary response has no candidates") from e
    if not text:
        raise RuntimeError("Summary response is empty")
    return text


async def safe_summarize(
    alerts: Sequence[Alert],
    history: Sequence[SensorReading],
    summarizer: Summarizer | None = None,
    lang: str | None = None,
) -> str:
    """summarize() with failures converted to the fallback string."""
    try:
        if summarizer is None:
            return await summarize(alerts, history, lang=lang)
        return await summarizer(alerts, history)
    except Exception as e:
        logger.warning(f"Summary generation failed: {e.__class__.__name__}: {e}")
        return fallback_summary(lang)
