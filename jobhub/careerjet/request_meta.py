from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from jobhub.config import Settings


@dataclass(frozen=True)
class RequestMeta: # caller context the remote API asks for with every query
    ip: str
    user_agent: str

    @classmethod
    def fallback(cls, settings: Settings) -> "RequestMeta":
        return cls(ip=settings.fallback_ip, user_agent=settings.fallback_user_agent)

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        settings: Settings,
        client_host: str | None = None,
    ) -> "RequestMeta":
        forwarded_for = headers.get("x-forwarded-for") or ""
        first_hop = forwarded_for.split(",")[0].strip()
        ip = first_hop or client_host or settings.fallback_ip
        user_agent = headers.get("user-agent") or settings.fallback_user_agent
        return cls(ip=ip, user_agent=user_agent)
