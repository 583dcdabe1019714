"""Core configuration, constants and error types.

Import what you need from `globe_digest.core.config`,
`globe_digest.core.constants` and `globe_digest.core.errors` to avoid heavy
side effects at import time.
"""

__all__ = ["config", "constants", "errors"]
