from __future__ import annotations

import logging
import sys
from pathlib import Path
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates

from jobhub.careerjet.client import CareerjetClient
from jobhub.careerjet.job_cache import JobCache
from jobhub.careerjet.request_meta import RequestMeta
from jobhub.careerjet.resolver import SlugResolver
from jobhub.config import ConfigurationError, Settings, get_settings
from jobhub.schemas import (
    ContractType,
    SearchCriteria,
    SearchResponse,
    WorkHours,
)
from jobhub.seo import (
    format_posted_date,
    home_page_metadata,
    job_page_metadata,
    job_posting_structured_data,
    render_sitemap,
    robots_txt,
    sitemap_entries,
)

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Shared per process; the job cache is read by detail pages and the sitemap
_job_cache = JobCache(_settings.job_cache_ttl)
_client = CareerjetClient(_settings, _job_cache)
_resolver = SlugResolver(_client, _job_cache)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["posted_date"] = format_posted_date

CATEGORIES = [
    {"id": "", "label": "All categories", "keyword": ""},
    {"id": "software-engineering", "label": "Software Engineering", "keyword": "software engineer"},
    {"id": "product", "label": "Product Management", "keyword": "product manager"},
    {"id": "design", "label": "Design & UX", "keyword": "product designer"},
    {"id": "data", "label": "Data & Analytics", "keyword": "data analyst"},
    {"id": "marketing", "label": "Marketing", "keyword": "marketing specialist"},
]

CONTRACT_OPTIONS = [
    ("", "All contracts"),
    ("p", "Permanent"),
    ("c", "Contract"),
    ("t", "Temporary"),
    ("i", "Internship"),
    ("v", "Volunteering"),
]

HOURS_OPTIONS = [
    ("", "Any hours"),
    ("f", "Full-time"),
    ("p", "Part-time"),
]

app = FastAPI(
    title="JobHub",
    version="0.1.0",
    description="Server-rendered job listings powered by the Careerjet search API.",
)


def get_app_settings() -> Settings:
    return _settings


def get_client() -> CareerjetClient:
    return _client


def get_resolver() -> SlugResolver:
    return _resolver


def get_job_cache() -> JobCache:
    return _job_cache


def request_meta(request: Request, settings: Settings = Depends(get_app_settings)) -> RequestMeta:
    client_host = request.client.host if request.client else None
    return RequestMeta.from_headers(request.headers, settings, client_host)


def _parse_page(value: str | None) -> int:
    try:
        page = int(value or "1")
    except ValueError:
        return 1
    return page if page > 0 else 1


def _enum_or_none(enum_cls, value: str | None):
    try:
        return enum_cls(value) if value else None
    except ValueError:
        return None


def _search(client: CareerjetClient, criteria: SearchCriteria, meta: RequestMeta) -> SearchResponse:
    try:
        return client.search(criteria, meta)
    except ConfigurationError as exc:
        logger.error("Search is not configured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _listing_criteria(
    q: str | None,
    location: str | None,
    category: str | None,
    contract_type: str | None,
    hours: str | None,
    page: str | None,
    page_size: int,
) -> tuple[SearchCriteria, str]: # criteria plus the keywords actually sent upstream
    selected = next((c for c in CATEGORIES if c["id"] == (category or "")), CATEGORIES[0])
    keywords = " ".join(part for part in (q, selected["keyword"]) if part).strip()

    criteria = SearchCriteria(
        keywords=keywords or None,
        location=location or None,
        contract_type=_enum_or_none(ContractType, contract_type),
        work_hours=_enum_or_none(WorkHours, hours),
        page=_parse_page(page),
        page_size=page_size,
    )
    return criteria, keywords


@app.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    q: str | None = None,
    location: str | None = None,
    category: str | None = None,
    contract_type: str | None = Query(None, alias="type"),
    hours: str | None = None,
    page: str | None = None,
    settings: Settings = Depends(get_app_settings),
    client: CareerjetClient = Depends(get_client),
    meta: RequestMeta = Depends(request_meta),
):
    criteria, keywords = _listing_criteria(
        q, location, category, contract_type, hours, page, settings.careerjet_page_size
    )
    response = _search(client, criteria, meta)

    base_params = {
        key: value
        for key, value in (
            ("q", q),
            ("location", location),
            ("category", category),
            ("type", contract_type),
            ("hours", hours),
        )
        if value
    }

    def page_href(target: int) -> str:
        return "/?" + urlencode({**base_params, "page": target})

    detail_params = {
        key: value for key, value in (("keywords", keywords), ("location", location)) if value
    }
    detail_query = f"?{urlencode(detail_params)}" if detail_params else ""

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "settings": settings,
            "metadata": home_page_metadata(settings),
            "response": response,
            "jobs": response.jobs or [],
            "page": criteria.page,
            "total_pages": response.pages or 1,
            "page_href": page_href,
            "detail_query": detail_query,
            "form": {
                "q": q or "",
                "location": location or "",
                "category": category or "",
                "type": contract_type or "",
                "hours": hours or "",
            },
            "categories": CATEGORIES,
            "contract_options": CONTRACT_OPTIONS,
            "hours_options": HOURS_OPTIONS,
        },
    )


@app.get("/jobs/{slug}", response_class=HTMLResponse)
def job_detail(
    request: Request,
    slug: str,
    keywords: str | None = None,
    location: str | None = None,
    settings: Settings = Depends(get_app_settings),
    resolver: SlugResolver = Depends(get_resolver),
    meta: RequestMeta = Depends(request_meta),
):
    fallback = SearchCriteria(keywords=keywords or None, location=location or None)

    try:
        job = resolver.resolve(slug, fallback, meta)
    except ConfigurationError as exc:
        logger.error("Search is not configured: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    metadata = job_page_metadata(job, slug, settings)

    if job is None:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"settings": settings, "metadata": metadata},
            status_code=404,
        )

    return templates.TemplateResponse(
        request,
        "job_detail.html",
        {
            "settings": settings,
            "metadata": metadata,
            "job": job,
            "apply_link": job.apply_url or job.url,
            "structured_data": job_posting_structured_data(job, slug, settings),
        },
    )


@app.get("/api/jobs", response_model=SearchResponse)
def api_jobs(
    q: str | None = None,
    location: str | None = None,
    category: str | None = None,
    contract_type: str | None = Query(None, alias="type"),
    hours: str | None = None,
    page: str | None = None,
    settings: Settings = Depends(get_app_settings),
    client: CareerjetClient = Depends(get_client),
    meta: RequestMeta = Depends(request_meta),
) -> SearchResponse:
    criteria, _ = _listing_criteria(
        q, location, category, contract_type, hours, page, settings.careerjet_page_size
    )
    return _search(client, criteria, meta)


@app.get("/sitemap.xml")
def sitemap(
    settings: Settings = Depends(get_app_settings),
    client: CareerjetClient = Depends(get_client),
    job_cache: JobCache = Depends(get_job_cache),
) -> Response:
    jobs = job_cache.snapshot()
    if not jobs:
        try:
            response = client.search(SearchCriteria(page_size=20), RequestMeta.fallback(settings))
            jobs = response.jobs or []
        except ConfigurationError as exc:
            logger.error("Failed to fetch jobs for sitemap: %s", exc)

    body = render_sitemap(sitemap_entries(jobs, settings))
    return Response(content=body, media_type="application/xml")


@app.get("/robots.txt", response_class=PlainTextResponse)
def robots(settings: Settings = Depends(get_app_settings)) -> str:
    return robots_txt(settings)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
