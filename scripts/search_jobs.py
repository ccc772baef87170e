from __future__ import annotations

import argparse
import logging

from jobhub.careerjet.client import CareerjetClient
from jobhub.careerjet.job_cache import JobCache
from jobhub.config import ConfigurationError, get_settings
from jobhub.schemas import ContractType, SearchCriteria, WorkHours
from jobhub.seo import format_posted_date


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one Careerjet search and print the jobs.")
    parser.add_argument("keywords", nargs="?", default=None)
    parser.add_argument("--location", default=None)
    parser.add_argument("--type", dest="contract_type", choices=[c.value for c in ContractType])
    parser.add_argument("--hours", dest="work_hours", choices=[h.value for h in WorkHours])
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument("--radius", type=int, default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    client = CareerjetClient(settings, JobCache(settings.job_cache_ttl))
    criteria = SearchCriteria(
        keywords=args.keywords,
        location=args.location,
        contract_type=args.contract_type,
        work_hours=args.work_hours,
        page=args.page,
        page_size=args.page_size,
        radius=args.radius,
    )

    print(f"Searching Careerjet for {criteria.keywords or 'all jobs'!r}...")
    try:
        response = client.search(criteria)
    except ConfigurationError as exc:
        print(f"Search is not configured: {exc}")
        raise SystemExit(1) from exc

    if response.is_error:
        print(f"Search failed: {response.message}")
        raise SystemExit(1)

    if response.is_locations:
        print("Ambiguous location. Suggestions:")
        for suggestion in response.locations or []:
            print(f"  - {suggestion}")
        return

    jobs = response.jobs or []
    print(f"Hits: {response.hits} | Pages: {response.pages} | Showing: {len(jobs)}")
    for job in jobs:
        print(f"- {job.title} — {job.company or 'Unknown company'} ({job.locations or 'n/a'})")
        print(f"  {format_posted_date(job.date)} | /jobs/{job.slug}")


if __name__ == "__main__":
    main()
