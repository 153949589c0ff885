"""Job posting collector backed by the JSearch API on RapidAPI."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from config import settings
from schemas.brief import JobSignal
from services.simulation import CollectorResult, SimulationMode

logger = structlog.get_logger()

DESCRIPTION_LIMIT = 200


def format_salary(minimum: Any, maximum: Any) -> Optional[str]:
    """Render "$min - $max" with thousands separators, or None unless both bounds exist."""
    if minimum is None or maximum is None:
        return None

    def _money(value: Any) -> str:
        number = float(value)
        if number.is_integer():
            return f"${int(number):,}"
        return f"${number:,}"

    return f"{_money(minimum)} - {_money(maximum)}"


class JobsCollector:
    """Fetches open roles at a company, falling back to a simulated role list."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.jsearch_api_key
        self.host = settings.jsearch_host
        self.max_results = settings.job_max_results
        self.timeout = settings.collector_timeout
        self.transport = transport

    @property
    def is_available(self) -> bool:
        """True when a JSearch RapidAPI key is configured."""
        return bool(self.api_key)

    async def collect(self, company_name: str, simulation: SimulationMode) -> CollectorResult[List[JobSignal]]:
        if not self.is_available:
            logger.info("JSearch API key not configured, using simulated jobs", company=company_name)
            return CollectorResult(simulation.jobs(company_name), is_simulated=True)

        try:
            jobs = await self._fetch(company_name)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Job fetch failed, using simulated jobs", company=company_name, error=str(e))
            return CollectorResult(simulation.jobs(company_name), is_simulated=True)

        if jobs is None:
            logger.warning("JSearch response had no data, using simulated jobs", company=company_name)
            return CollectorResult(simulation.jobs(company_name), is_simulated=True)

        logger.info("Job signals collected", company=company_name, jobs=len(jobs))
        return CollectorResult(jobs, is_simulated=False)

    async def _fetch(self, company_name: str) -> Optional[List[JobSignal]]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(
                f"https://{self.host}/search",
                params={"query": company_name, "page": 1, "num_pages": 1},
                headers={
                    "X-RapidAPI-Key": self.api_key,
                    "X-RapidAPI-Host": self.host,
                },
            )
            response.raise_for_status()
            data = response.json()

        postings = data.get("data")
        if not isinstance(postings, list):
            return None
        return [self._to_job_signal(job) for job in postings[:self.max_results]]

    @staticmethod
    def _to_job_signal(job: Dict[str, Any]) -> JobSignal:
        location = ", ".join(part for part in (job.get("job_city"), job.get("job_state")) if part)
        description = job.get("job_description") or ""
        return JobSignal(
            title=job.get("job_title") or "",
            company=job.get("employer_name") or "",
            location=location or "Unspecified",
            posted_date=job.get("job_posted_at_datetime_utc") or "",
            description=description[:DESCRIPTION_LIMIT] + "...",
            salary=format_salary(job.get("job_min_salary"), job.get("job_max_salary")),
        )


# Global collector instance
jobs_collector = JobsCollector()
