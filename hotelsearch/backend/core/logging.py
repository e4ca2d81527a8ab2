"""Logging configuration with actor email redaction."""
import logging
import re
import sys


class RedactionFilter(logging.Filter):
    """Log filter that redacts email addresses from log messages."""

    EMAIL_PATTERN = re.compile(
        r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'
    )

    def redact_text(self, text: str) -> str:
        """Replace email addresses with a placeholder."""
        return self.EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact emails from log record."""
        if hasattr(record, "msg") and record.msg:
            record.msg = self.redact_text(str(record.msg))
        if hasattr(record, "args") and record.args:
            record.args = tuple(
                self.redact_text(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Add redaction filter to all handlers
    redaction_filter = RedactionFilter()
    for handler in logging.root.handlers:
        handler.addFilter(redaction_filter)
