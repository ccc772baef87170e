from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterable

from bs4 import BeautifulSoup

from jobhub.config import Settings
from jobhub.schemas import Job

SITE_NAME = "JobHub"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

_WHITESPACE_RE = re.compile(r"\s+")

_SALARY_UNITS = {
    "H": "HOUR",
    "D": "DAY",
    "W": "WEEK",
    "M": "MONTH",
}


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str
    canonical: str
    og_title: str | None = None
    og_type: str = "website"
    twitter_card: str = "summary_large_image"
    robots: str | None = None


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: datetime
    change_frequency: str
    priority: float


def normalize_whitespace(text: str) -> str: #repeated whitespaces into single spaces
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def plain_text_from_html(html: str) -> str: #html to plain text
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")

    for node in soup(["script", "style"]):
        node.decompose()

    text = soup.get_text(separator=" ", strip=True)
    return normalize_whitespace(text)


def parse_job_date(value: str | None) -> datetime | None: # ISO-8601 or RFC 2822, None when unparseable
    if not value:
        return None

    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(raw)
        except (TypeError, ValueError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_posted_date(value: str | None) -> str:
    parsed = parse_job_date(value)
    if parsed is None:
        return "Recently posted"
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def job_url(settings: Settings, slug: str) -> str:
    return f"{settings.site_url}/jobs/{slug}"


def home_page_metadata(settings: Settings) -> PageMetadata:
    return PageMetadata(
        title=f"{SITE_NAME} – Discover Your Next Opportunity",
        description=(
            "Browse the latest job openings across industries. Filter by location, "
            "category, and keywords to find the perfect role."
        ),
        canonical=settings.site_url,
        og_title=f"{SITE_NAME} – Discover Your Next Opportunity",
    )


def job_page_metadata(job: Job | None, slug: str, settings: Settings) -> PageMetadata:
    if job is None:
        return PageMetadata(
            title=f"Job not found | {SITE_NAME}",
            description=(
                f"The job you are looking for is no longer available. "
                f"Explore more roles on {SITE_NAME}."
            ),
            canonical=f"/jobs/{slug}",
            robots="noindex",
        )

    description = plain_text_from_html(job.description)[:200]
    return PageMetadata(
        title=f"{job.title} at {job.company or 'Unknown company'} | {SITE_NAME}",
        description=description,
        canonical=job_url(settings, slug),
        og_title=f"{job.title} – {job.company or 'Hiring now'}",
        og_type="article",
    )


def _base_salary(job: Job) -> dict[str, Any] | None:
    if not (job.salary_min and job.salary_max):
        return None

    salary_type = job.salary_type.value if job.salary_type else ""
    return {
        "@type": "MonetaryAmount",
        "currency": job.salary_currency_code or "USD",
        "value": {
            "@type": "QuantitativeValue",
            "minValue": job.salary_min,
            "maxValue": job.salary_max,
            "unitText": _SALARY_UNITS.get(salary_type, "YEAR"),
        },
    }


def job_posting_structured_data(job: Job, slug: str, settings: Settings) -> dict[str, Any]:
    """
    schema.org JobPosting for a detail page.

    Keys whose value is unknown (posting date, salary, organisation site) are left
    out rather than emitted as null.
    """
    posted = parse_job_date(job.date)
    apply_link = job.apply_url or job.url

    organization: dict[str, Any] = {
        "@type": "Organization",
        "name": job.company or "Confidential",
    }
    if job.site:
        organization["sameAs"] = f"https://{job.site}"

    data: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "JobPosting",
        "title": job.title,
        "description": job.description,
        "employmentType": "OTHER",
        "hiringOrganization": organization,
        "jobLocation": {
            "@type": "Place",
            "address": {
                "@type": "PostalAddress",
                "addressLocality": job.locations or "Remote",
                "addressCountry": "US",
            },
        },
        "jobLocationType": "TELECOMMUTE" if "remote" in job.locations.lower() else "ONSITE",
        "directApply": True,
        "identifier": {
            "@type": "PropertyValue",
            "name": SITE_NAME,
            "value": slug,
        },
        "applicantLocationRequirements": job.locations,
        "industry": job.site,
        "url": job_url(settings, slug),
        "sameAs": job.url,
        "applicationContact": {
            "@type": "ContactPoint",
            "url": apply_link,
        },
    }

    if posted is not None:
        data["datePosted"] = posted.isoformat()

    salary = _base_salary(job)
    if salary is not None:
        data["baseSalary"] = salary

    return data


def sitemap_entries(
    jobs: Iterable[Job],
    settings: Settings,
    now: datetime | None = None,
) -> list[SitemapEntry]:
    now = now or datetime.now(timezone.utc)

    entries = [
        SitemapEntry(
            url=f"{settings.site_url}/",
            last_modified=now,
            change_frequency="hourly",
            priority=1.0,
        )
    ]
    for job in jobs:
        entries.append(
            SitemapEntry(
                url=job_url(settings, job.slug),
                last_modified=parse_job_date(job.date) or now,
                change_frequency="daily",
                priority=0.6,
            )
        )
    return entries


def render_sitemap(entries: Iterable[SitemapEntry]) -> str:
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        node = ET.SubElement(urlset, "url")
        ET.SubElement(node, "loc").text = entry.url
        ET.SubElement(node, "lastmod").text = entry.last_modified.isoformat()
        ET.SubElement(node, "changefreq").text = entry.change_frequency
        ET.SubElement(node, "priority").text = f"{entry.priority:.1f}"

    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def robots_txt(settings: Settings) -> str:
    lines = [
        "User-agent: *",
        "Allow: /",
        "",
        f"Sitemap: {settings.site_url}/sitemap.xml",
    ]
    return "\n".join(lines) + "\n"
