"""Shared Pydantic models for imgcache."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# ── Request models ──


class CacheRequest(BaseModel):
    """One logical image-processing request.

    ``request_path`` is either a local file path (plain or ``file://``) or a
    remote URL. ``full_path`` is the resolved path including any processing
    instructions; ``querystring`` holds those instructions on their own.
    """

    model_config = ConfigDict(frozen=True)

    request_path: str
    full_path: str
    querystring: str = ""


class RequestContext(BaseModel):
    """Outward-facing routing state that a cache rewrites to serve its artifact."""

    path: str
    rewritten: bool = False
    content_type: str | None = None
    items: dict[str, str] = Field(default_factory=dict)
