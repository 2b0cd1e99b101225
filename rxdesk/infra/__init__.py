"""Infrastructure modules for rxdesk.

This package contains low-level transport concerns:
- Env-driven runtime settings
- Retry/backoff helpers
- Outbound HTTP with retries
"""
