import json, time, logging
from typing import Dict, Any, Optional, Sequence, Tuple

from config import LOGGER_NAME, LOG_FORMAT, ERROR_MESSAGES


def configure_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Attach a file (or stderr) handler to the parser logger. The library adds none by itself."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


class ParseLogger:
    """Handles form parse logging."""

    def __init__(self, name: str = LOGGER_NAME):
        self.logger = logging.getLogger(name)

    def log_extracted(self, widget_count: int, field_count: int):
        self.logger.info(f"Created {field_count} logical fields from {widget_count} PDF fields")

    def log_widgets_read(self, widget_count: int, backend: str):
        self.logger.info(f"Extracted {widget_count} fields from PDF (backend: {backend})")

    def log_skipped_widget(self, name: str, reason: str):
        self.logger.debug(f"Skipped non-data widget {name!r} ({reason})")

    def log_collision(self, key: Tuple[str, ...]):
        self.logger.warning(f"Duplicate unstructured field key {'_'.join(key)!r}; last widget wins")

    def log_fallback(self, reason: str, detail: str = ""):
        """Empty forms warn; load and structural failures are errors."""
        message = f"{ERROR_MESSAGES.get(reason, reason)}. Using fallback form template"
        if detail:
            message += f" ({detail})"
        if reason == "no_fields":
            self.logger.warning(message)
        else:
            self.logger.error(message)

    def log_parse_summary(self, result: Any, started_ts: float, extra: Optional[Dict[str, Any]] = None):
        rec = {
            "ts": time.time(),
            "duration_ms": round((time.time() - started_ts) * 1000, 2),
            "widget_count": result.widget_count,
            "total_fields": result.total_fields,
            "section_titles": [s.title for s in result.sections],
            "used_fallback": result.used_fallback,
            "fallback_reason": result.fallback_reason,
            "collision_count": len(result.collisions),
            **(extra or {}),
        }
        self.logger.info(json.dumps(rec, ensure_ascii=False))


def collision_summary(collisions: Sequence[Tuple[str, ...]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for key in collisions:
        name = "_".join(key)
        counts[name] = counts.get(name, 0) + 1
    return counts
