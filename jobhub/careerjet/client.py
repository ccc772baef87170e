from __future__ import annotations

import logging
import time
from typing import Any, Mapping
from urllib.parse import urlencode

import requests
from pydantic import ValidationError
from requests.auth import HTTPBasicAuth

from jobhub.careerjet.job_cache import Clock, JobCache, ResponseCache
from jobhub.careerjet.request_meta import RequestMeta
from jobhub.careerjet.slugs import make_job_slug
from jobhub.config import Settings
from jobhub.schemas import Job, SearchCriteria, SearchResponse, empty_response

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Job Opening"


class UpstreamError(RuntimeError): # non-2xx answer from the remote search API
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Careerjet API error ({status_code}): {message}")
        self.status_code = status_code


def normalize_job(raw: Mapping[str, Any]) -> Job: # Raw API job into a Job with its slug derived once
    title = raw.get("title") or DEFAULT_TITLE
    url = raw.get("url") or ""

    return Job(
        title=title,
        company=raw.get("company") or "",
        date=raw.get("date") or "",
        description=raw.get("description") or "",
        locations=raw.get("locations") or "",
        salary=raw.get("salary"),
        salary_currency_code=raw.get("salary_currency_code"),
        salary_max=raw.get("salary_max"),
        salary_min=raw.get("salary_min"),
        salary_type=raw.get("salary_type") or None,
        site=raw.get("site") or "",
        url=url,
        apply_url=url,
        slug=make_job_slug(title, url),
    )


class CareerjetClient: # Cached, normalizing client for the Careerjet job search API

    def __init__(
        self,
        settings: Settings,
        job_cache: JobCache,
        session: requests.Session | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._settings = settings
        self._job_cache = job_cache
        self._session = session or requests.Session()
        self._responses: ResponseCache[SearchResponse] = ResponseCache(
            settings.search_cache_ttl, clock
        )

    def build_query_string(self, criteria: SearchCriteria, meta: RequestMeta) -> str:
        params: list[tuple[str, str]] = [
            ("locale_code", self._settings.careerjet_locale),
            ("page_size", str(
                criteria.page_size if criteria.page_size is not None
                else self._settings.careerjet_page_size
            )),
            ("page", str(criteria.page if criteria.page is not None else 1)),
            ("user_ip", meta.ip),
            ("user_agent", meta.user_agent),
        ]

        if criteria.radius:
            params.append(("radius", str(criteria.radius)))
        if criteria.keywords:
            params.append(("keywords", criteria.keywords))
        if criteria.location:
            params.append(("location", criteria.location))
        if criteria.contract_type:
            params.append(("contract_type", criteria.contract_type.value))
        if criteria.work_hours:
            params.append(("work_hours", criteria.work_hours.value))

        return urlencode(params)

    def search(
        self,
        criteria: SearchCriteria | None = None,
        meta: RequestMeta | None = None,
    ) -> SearchResponse:
        """
        Run one search against the remote API.

        Upstream failures come back as an ERROR response instead of an exception.
        A missing API key raises ConfigurationError before any request is made.
        """
        api_key = self._settings.require_api_key()
        criteria = criteria or SearchCriteria()
        meta = meta or RequestMeta.fallback(self._settings)
        query_string = self.build_query_string(criteria, meta)

        cached = self._responses.get(query_string)
        if cached is not None:
            logger.debug("Search cache hit: %s", query_string)
            return cached

        try:
            response = self._fetch(query_string, api_key)
        except (requests.RequestException, UpstreamError, ValueError) as exc:
            logger.warning("Careerjet search failed: %s", exc)
            logger.debug("Careerjet search failure details", exc_info=True)
            return empty_response(str(exc) or "Careerjet API unavailable")

        self._responses.set(query_string, response)
        return response

    def _fetch(self, query_string: str, api_key: str) -> SearchResponse:
        url = f"{self._settings.careerjet_endpoint}?{query_string}"
        resp = self._session.get(
            url,
            auth=HTTPBasicAuth(api_key, ""),
            headers={"Referer": self._settings.careerjet_referer},
            timeout=self._settings.careerjet_timeout,
        )

        if not resp.ok:
            raise UpstreamError(resp.status_code, resp.text or resp.reason or "")

        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError("Careerjet response must be a JSON object.")

        return self._parse(data)

    def _parse(self, data: dict[str, Any]) -> SearchResponse:
        raw_jobs = data.get("jobs")
        jobs: list[Job] | None = None

        if isinstance(raw_jobs, list):
            jobs = []
            for raw in raw_jobs:
                if not isinstance(raw, dict):
                    continue
                try:
                    jobs.append(normalize_job(raw))
                except ValidationError as exc:
                    logger.warning("Skipping malformed Careerjet job %r: %s", raw.get("url"), exc)

        try:
            response = SearchResponse.model_validate({**data, "jobs": jobs})
        except ValidationError as exc:
            raise ValueError(f"Unexpected Careerjet response: {exc}") from exc

        if jobs is not None:
            self._job_cache.remember(jobs)

        return response
