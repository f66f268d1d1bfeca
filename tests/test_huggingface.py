import asyncio
import json

import httpx
import pytest

from src.clients.huggingface import ClassificationError, classify
from tests.conftest import use_mock_transport


def test_classify_without_token(monkeypatch):
    monkeypatch.setattr("src.config.HUGGINGFACE_API_TOKEN", None)

    with pytest.raises(ClassificationError, match="not set"):
        asyncio.run(classify("text", ["a", "b"]))


def test_classify_posts_labels_with_bearer_token(monkeypatch):
    monkeypatch.setattr("src.config.HUGGINGFACE_API_TOKEN", "hf-token")
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"labels": ["technology", "other"], "scores": [0.9, 0.1]})

    use_mock_transport(monkeypatch, handler)

    out = asyncio.run(classify("AI in hospitals", ["technology", "other"]))

    assert out["labels"][0] == "technology"
    assert seen["auth"] == "Bearer hf-token"
    assert seen["body"] == {"inputs": "AI in hospitals", "parameters": {"candidate_labels": ["technology", "other"]}}


def test_classify_model_loading_body_is_an_error(monkeypatch):
    monkeypatch.setattr("src.config.HUGGINGFACE_API_TOKEN", "hf-token")
    use_mock_transport(monkeypatch, lambda request: httpx.Response(200, json={"error": "Model is loading"}))

    with pytest.raises(ClassificationError):
        asyncio.run(classify("text", ["a"]))
