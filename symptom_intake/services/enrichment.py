"""Best-effort text analysis through the Hugging Face inference API.

The result is informational only. Callers schedule it with
``schedule_analysis`` and never wait for it.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional, Set

import httpx

logger = logging.getLogger("symptom_intake")

HF_API_URL = os.getenv("HF_API_URL", "https://api-inference.huggingface.co/models/")
HF_MODEL = os.getenv("HF_MODEL", "microsoft/BiomedNLP-PubMedBERT-base-uncased-abstract-fulltext")
ENRICHMENT_TIMEOUT_S = float(os.getenv("ENRICHMENT_TIMEOUT_S", "30"))

# tasks still in flight
_pending: Set["asyncio.Task[Any]"] = set()


def _api_key() -> str:
    return (os.getenv("HUGGING_FACE_API_KEY") or "").strip()


def is_enabled() -> bool:
    return bool(_api_key())


async def analyze(text: str, timeout_s: Optional[float] = None) -> Optional[Any]:
    """POST the text to the configured model; None when disabled or on any failure."""
    key = _api_key()
    if not key:
        logger.info({"function": "analyze", "status": "skipped", "reason": "no api key"})
        return None

    timeout = timeout_s if timeout_s is not None else ENRICHMENT_TIMEOUT_S
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            r = await client.post(
                f"{HF_API_URL}{HF_MODEL}",
                headers={"Authorization": f"Bearer {key}", "Content-Type": "application/json"},
                json={"inputs": text},
            )
            r.raise_for_status()
            data = r.json()
    except httpx.TimeoutException:
        logger.warning({"function": "analyze", "status": "timeout", "timeout_s": timeout})
        return None
    except Exception as exc:
        logger.warning({"function": "analyze", "status": "error", "error": str(exc)})
        return None

    logger.info({"function": "analyze", "status": "ok", "model": HF_MODEL})
    return data


def _on_done(task: "asyncio.Task[Any]") -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning({"function": "analyze", "status": "error", "error": str(exc)})


def schedule_analysis(text: str) -> "asyncio.Task[Optional[Any]]":
    """Start ``analyze`` as an independent task on the running loop."""
    task = asyncio.get_running_loop().create_task(analyze(text))
    _pending.add(task)
    task.add_done_callback(_on_done)
    return task


__all__ = ["analyze", "is_enabled", "schedule_analysis"]
