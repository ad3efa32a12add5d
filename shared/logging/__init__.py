from .safe_logging import header_presence, mask_email, token_presence
from .structured import JSONFormatter, setup_structured_logging

__all__ = [
    "JSONFormatter",
    "setup_structured_logging",
    "header_presence",
    "mask_email",
    "token_presence",
]
