# src/config.py
"""Runtime configuration read from the environment.

Values are read once at import time. main.py loads .env before importing this
module; tests patch the module attributes directly.
"""
from __future__ import annotations

import os


def _float_env(name: str, default: float) -> float:
    return float(os.environ.get(name, str(default)))


def _int_env(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


# --- Provider credentials + endpoints ---
NEWS_API_KEY = os.environ.get("NEWS_API_KEY")
NEWS_API_BASE_URL = os.environ.get("NEWS_API_BASE_URL", "https://newsapi.org/v2")

GUARDIAN_API_KEY = os.environ.get("GUARDIAN_API_KEY")
GUARDIAN_BASE_URL = os.environ.get("GUARDIAN_BASE_URL", "https://content.guardianapis.com")

NYTIMES_API_KEY = os.environ.get("NYTIMES_API_KEY")
NYTIMES_BASE_URL = os.environ.get("NYTIMES_BASE_URL", "https://api.nytimes.com/svc")

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY")
OPENAI_URL = os.environ.get("OPENAI_URL", "https://api.openai.com/v1/chat/completions")

GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET")
GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"
GOOGLE_TRANSLATE_API_KEY = os.environ.get("GOOGLE_TRANSLATE_API_KEY")
GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"

HUGGINGFACE_API_TOKEN = os.environ.get("HUGGINGFACE_API_TOKEN")
HUGGINGFACE_CLASSIFY_URL = os.environ.get(
    "HUGGINGFACE_CLASSIFY_URL", "https://api-inference.huggingface.co/models/facebook/bart-large-mnli"
)

# --- Timeouts (seconds) ---
NEWS_API_TIMEOUT_S = _float_env("NEWS_API_TIMEOUT_S", 10.0)
FEED_TIMEOUT_S = _float_env("FEED_TIMEOUT_S", 10.0)
LLM_TIMEOUT_S = _float_env("LLM_TIMEOUT_S", 30.0)
GOOGLE_TIMEOUT_S = _float_env("GOOGLE_TIMEOUT_S", 10.0)
HUGGINGFACE_TIMEOUT_S = _float_env("HUGGINGFACE_TIMEOUT_S", 10.0)
DB_PING_TIMEOUT_S = _float_env("DB_PING_TIMEOUT_S", 5.0)
# Upper bound for a single probe, covers the RSS fan-out with identity rotation
PROBE_TIMEOUT_S = _float_env("PROBE_TIMEOUT_S", 90.0)

# --- Feed fetching ---
FEED_MAX_REDIRECTS = _int_env("FEED_MAX_REDIRECTS", 5)
FEED_RETRY_DELAY_S = _float_env("FEED_RETRY_DELAY_S", 1.0)
FEED_FETCH_CONCURRENCY = _int_env("FEED_FETCH_CONCURRENCY", 16)

# Tried in order when a feed blocks or errors
USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "PulsePress/1.0 (+https://pulsepress.app)",
]

# --- Generative AI ---
# Ranked; the first entry is the primary summarization model
AI_SUMMARIZATION_MODELS = ["gpt-4o-mini", "gpt-4.1-mini", "gpt-3.5-turbo"]
AI_TAG_GENERATION_MODELS = ["gpt-4o-mini", "gpt-3.5-turbo"]
AI_SENTIMENT_ANALYSIS_MODELS = ["gpt-4o-mini", "gpt-3.5-turbo"]
AI_KEY_POINTS_MODELS = ["gpt-4o-mini", "gpt-4.1-mini"]
AI_COMPLEXITY_METER_MODELS = ["gpt-4o-mini", "gpt-3.5-turbo"]
AI_GEOGRAPHIC_EXTRACTION_MODELS = ["gpt-4o-mini", "gpt-3.5-turbo"]
AI_SOCIAL_CAPTION_MODELS = ["gpt-4o-mini", "gpt-3.5-turbo"]
AI_NEWS_INSIGHTS_MODELS = ["gpt-4.1-mini", "gpt-4o-mini"]
AI_ENHANCEMENT_MODELS = ["gpt-4.1-mini", "gpt-4o-mini"]
QUESTION_ANSWER_MODELS = ["gpt-4o-mini", "gpt-4.1-mini", "gpt-3.5-turbo"]

# route slug -> (display name, ranked models, test prompt)
AI_SERVICES = {
    "summarization": (
        "AI Summarization Service",
        AI_SUMMARIZATION_MODELS,
        "Summarize this text: This is a test article for health checking",
    ),
    "tag-generation": (
        "AI Tag Generation Service",
        AI_TAG_GENERATION_MODELS,
        "Generate relevant tags for this text: This is a test article about technology and artificial intelligence for health checking",
    ),
    "sentiment-analysis": (
        "AI Sentiment Analysis Service",
        AI_SENTIMENT_ANALYSIS_MODELS,
        "Analyze the sentiment of this text: This is a wonderful and positive test article for health checking",
    ),
    "key-points-extraction": (
        "AI Key Points Extraction Service",
        AI_KEY_POINTS_MODELS,
        "Extract key points from this text: This is a test article about machine learning algorithms and automated systems for health checking",
    ),
    "complexity-meter": (
        "AI Complexity Meter Service",
        AI_COMPLEXITY_METER_MODELS,
        "Analyze the complexity of this text: This is a test article for health checking",
    ),
    "geographic-extraction": (
        "AI Geographic Extraction Service",
        AI_GEOGRAPHIC_EXTRACTION_MODELS,
        "Extract geographic locations from this text: This is a test article from New York about events in London for health checking",
    ),
    "social-media-caption": (
        "AI Social Media Caption Service",
        AI_SOCIAL_CAPTION_MODELS,
        "Generate an engaging social media caption for this news: Doctors are using new tools to diagnose diseases faster",
    ),
    "news-insights": (
        "AI News Insights Service",
        AI_NEWS_INSIGHTS_MODELS,
        "Generate insightful analysis for this news article: New diagnostic tools can detect early signs of disease in medical imaging",
    ),
    "article-enhancement": (
        "AI Article Enhancement Service",
        AI_ENHANCEMENT_MODELS,
        "Enhance and provide analysis for this article: More efficient solar panels could change the global energy industry",
    ),
}
