from __future__ import annotations

import logging

from jobhub.careerjet.client import CareerjetClient
from jobhub.careerjet.job_cache import JobCache
from jobhub.careerjet.request_meta import RequestMeta
from jobhub.careerjet.slugs import extract_hash_from_slug, keywords_from_slug
from jobhub.schemas import Job, SearchCriteria

logger = logging.getLogger(__name__)


class SlugResolver: # Map a detail-page slug back to a job

    def __init__(self, client: CareerjetClient, job_cache: JobCache) -> None:
        self._client = client
        self._job_cache = job_cache

    def resolve(
        self,
        slug: str,
        fallback_criteria: SearchCriteria | None = None,
        meta: RequestMeta | None = None,
    ) -> Job | None:
        """
        Return the job for ``slug`` from the job cache, or from one fresh search.

        On a cache miss the search uses the fallback criteria, with keywords rebuilt
        from the slug's title part when none were given. Only the first page of
        results is scanned.
        """
        wanted = extract_hash_from_slug(slug)

        cached = self._job_cache.get(wanted)
        if cached is not None:
            return cached

        criteria = (fallback_criteria or SearchCriteria()).model_copy()
        if not criteria.keywords:
            criteria.keywords = keywords_from_slug(slug) or None

        logger.debug("Job cache miss for %s, searching with %r", slug, criteria.keywords)
        response = self._client.search(criteria, meta)

        for job in response.jobs or []:
            if extract_hash_from_slug(job.slug) == wanted:
                return job

        return None
