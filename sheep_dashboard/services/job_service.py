# services/job_service.py

import logging

import requests
from pydantic import ValidationError

from sheep_dashboard import config
from sheep_dashboard.models.job_models import Job, JobsPage

logger = logging.getLogger(__name__)


# =========================
# Errors
# =========================
class JobServiceError(Exception):
    """Any failure talking to the job backend."""


class NetworkError(JobServiceError):
    """The backend could not be reached at all."""


class JobNotFoundError(JobServiceError):
    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class MalformedResponseError(JobServiceError):
    """The backend answered with something that is not a valid job payload."""


# =========================
# Client
# =========================
class JobServiceClient:
    """
    Thin wrapper over the job backend's three endpoints.

    Every call is a single request/response pair: no retry, no caching.
    The session carries cookies between calls, so credentialed backends work.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None, session=None):
        self.base_url = (base_url or config.BACKEND_URL).rstrip("/")
        self.timeout = config.REQUEST_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session or requests.Session()

    def submit_job(self, file_name: str, content: bytes, content_type: str | None = None) -> Job:
        resp = self._request(
            "POST",
            "/job",
            files={
                "file": (
                    file_name,
                    content,
                    content_type or "application/octet-stream"
                )
            }
        )
        self._raise_for_status(resp)
        job = self._parse(Job, resp)
        logger.info("Submitted %s as job %s (%s)", file_name, job.id, job.status)
        return job

    def get_job(self, job_id: str) -> Job:
        resp = self._request("GET", "/job", params={"id": job_id})
        if resp.status_code == 404:
            logger.warning("Job %s not found", job_id)
            raise JobNotFoundError(job_id)
        self._raise_for_status(resp)
        return self._parse(Job, resp)

    def list_jobs(self, limit: int = 10, offset: int = 0) -> JobsPage:
        resp = self._request("GET", "/jobs", params={"limit": limit, "offset": offset})
        self._raise_for_status(resp)
        page = self._parse(JobsPage, resp)
        # Server order is not trusted; newest first
        return page.model_copy(update={"items": page.sorted_items()})

    def asset_url(self, path: str) -> str:
        """Absolute URL for a result image or report served by the backend."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    # -------------------------
    # Internals
    # -------------------------
    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method,
                f"{self.base_url}{path}",
                timeout=self.timeout,
                **kwargs
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(
                "Network error on %s %s: check that the backend is running at %s and reachable",
                method, path, self.base_url,
            )
            raise NetworkError(str(e)) from e

    @staticmethod
    def _raise_for_status(resp: requests.Response):
        if not resp.ok:
            logger.error("Backend returned HTTP %s: %s", resp.status_code, resp.text[:200])
            raise JobServiceError(f"HTTP {resp.status_code}: {resp.text[:200]}")

    @staticmethod
    def _parse(model, resp: requests.Response):
        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Backend returned a non-JSON body: %s", resp.text[:200])
            raise MalformedResponseError("response body is not JSON") from e

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("Backend returned a malformed %s: %s", model.__name__, e)
            raise MalformedResponseError(str(e)) from e


def get_client() -> JobServiceClient:
    return JobServiceClient()
