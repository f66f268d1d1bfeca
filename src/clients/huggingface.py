# src/clients/huggingface.py
"""Zero-shot news classification through the hosted inference API."""
from __future__ import annotations

from typing import Any, Sequence

from src import config
from src.http_client import http_post_json


class ClassificationError(Exception):
    """Classifier not configured, or it answered with something other than labels."""


async def classify(text: str, labels: Sequence[str]) -> dict[str, Any]:
    """Score `text` against candidate `labels`. Returns {"labels": [...], "scores": [...]}."""
    if not config.HUGGINGFACE_API_TOKEN:
        raise ClassificationError("HUGGINGFACE_API_TOKEN not set")

    resp = await http_post_json(
        config.HUGGINGFACE_CLASSIFY_URL,
        {"inputs": text, "parameters": {"candidate_labels": list(labels)}},
        headers={
            "Authorization": f"Bearer {config.HUGGINGFACE_API_TOKEN}",
            "Content-Type": "application/json",
        },
        timeout_s=config.HUGGINGFACE_TIMEOUT_S,
    )
    body = resp.json()
    if not isinstance(body, dict) or not body.get("labels"):
        raise ClassificationError("classifier response has no labels")
    return body
