"""Stable failure codes for fetch, fallback and probe operations.

Used by: rss_fetch, fallback, probes, health, logging, /health and /feeds endpoints.
"""

FETCH_TIMEOUT = "FETCH_TIMEOUT"
FETCH_TRANSIENT = "FETCH_TRANSIENT"
FETCH_BLOCKED = "FETCH_BLOCKED"          # HTML anti-bot page served where a feed was expected
FEED_UNAVAILABLE = "FEED_UNAVAILABLE"    # every client identity failed
PARSE_ERROR = "PARSE_ERROR"

# Fallback codes
ALL_CANDIDATES_EXHAUSTED = "ALL_CANDIDATES_EXHAUSTED"
NO_WORKING_MODEL = "NO_WORKING_MODEL"

# LLM codes
LLM_API_FAIL = "LLM_API_FAIL"          # Timeout, 429, network error
LLM_DISABLED = "LLM_DISABLED"          # No API key configured

# Probe codes
TRANSIENT_PROBE_FAILURE = "TRANSIENT_PROBE_FAILURE"  # network error, timeout, non-2xx
PROBE_EXCEPTION = "PROBE_EXCEPTION"                  # probe raised something unexpected
AGGREGATION_INPUT_ERROR = "AGGREGATION_INPUT_ERROR"  # probe returned something that is not a ProbeResult
PROBE_TIMEOUT = "PROBE_TIMEOUT"
NOT_CONFIGURED = "NOT_CONFIGURED"
DB_DISCONNECTED = "DB_DISCONNECTED"
