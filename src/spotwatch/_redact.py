"""Helpers for safe debug logging.

IMDSv2 tokens grant read access to the instance metadata (including role
credentials), so they must never reach the logs verbatim.
"""

from __future__ import annotations


def mask_token(token: str, *, visible: int = 4) -> str:
    """Show only the first *visible* characters of an opaque token."""
    if len(token) <= visible:
        return "<redacted>"
    return f"{token[:visible]}…<{len(token)} chars>"
