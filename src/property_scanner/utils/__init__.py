from .logging import setup_logging
from .retry import call_with_retry

__all__ = ["setup_logging", "call_with_retry"]
