from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ContractType(str, Enum):
    PERMANENT = "p"
    CONTRACT = "c"
    TEMPORARY = "t"
    INTERNSHIP = "i"
    VOLUNTEERING = "v"


class WorkHours(str, Enum):
    FULL_TIME = "f"
    PART_TIME = "p"


class SalaryType(str, Enum):
    YEARLY = "Y"
    MONTHLY = "M"
    WEEKLY = "W"
    DAILY = "D"
    HOURLY = "H"


class Job(BaseModel): # A normalized job posting; the slug is its public identity
    model_config = ConfigDict(frozen=True)

    title: str
    company: str = ""
    date: str = ""
    description: str = ""
    locations: str = ""
    salary: str | None = None
    salary_currency_code: str | None = None
    salary_max: int | float | None = None
    salary_min: int | float | None = None
    salary_type: SalaryType | None = None
    site: str = ""
    url: str = ""
    apply_url: str | None = None
    slug: str


class SearchCriteria(BaseModel): # Filters forwarded to the remote search
    keywords: str | None = None
    location: str | None = None
    contract_type: ContractType | None = None
    work_hours: WorkHours | None = None
    page: int | None = None
    page_size: int | None = None
    radius: int | None = None


class SearchResponse(BaseModel): # Search result as returned by the remote API, jobs normalized
    type: str = Field(..., description="JOBS, LOCATIONS, ERROR or another upstream type")
    hits: int = 0
    pages: int = 1
    message: str | None = None
    response_time: float | None = None
    jobs: list[Job] | None = None
    locations: list[str] | None = None

    @property
    def is_error(self) -> bool:
        return self.type == "ERROR"

    @property
    def is_locations(self) -> bool:
        return self.type == "LOCATIONS"


def empty_response(message: str | None = None) -> SearchResponse:
    return SearchResponse(type="ERROR", message=message, hits=0, pages=1, jobs=[])
