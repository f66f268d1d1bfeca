import json
import logging
from datetime import datetime, timezone


logging.basicConfig(level=logging.INFO)

logger = logging.getLogger("pulsepress")


def log_event(event: str, *, level: str = "info", **fields):
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **fields,
    }

    # default=str keeps exceptions and datetimes from breaking the log line
    logger.log(logging.getLevelName(level.upper()), json.dumps(payload, default=str))
