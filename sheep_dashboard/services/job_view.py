"""State machine behind the job page.

The controller owns the selected job, a page of recent jobs and the poll
timer. It has no UI dependency: the Streamlit page calls into it and renders
whatever `state` says.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from sheep_dashboard import config
from sheep_dashboard.models.job_models import Job, JobsPage, sort_jobs
from sheep_dashboard.services.job_service import JobNotFoundError, JobServiceClient, JobServiceError
from sheep_dashboard.services.poll_timer import PollTimer

logger = logging.getLogger(__name__)

# Shared by every controller in the process
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="job-view")


# =========================
# View States
# =========================
@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class NotFound:
    job_id: str


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Viewing:
    job: Job


ViewState = Union[Loading, NotFound, Empty, Viewing]


def is_image_type(content_type: str | None) -> bool:
    return bool(content_type) and content_type.strip().lower().startswith("image/")


# =========================
# Controller
# =========================
class JobViewController:
    def __init__(
        self,
        client: JobServiceClient,
        page_size: int | None = None,
        poll_interval: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.page_size = page_size or config.RECENT_JOBS_PAGE_SIZE
        self.timer = PollTimer(poll_interval or config.POLL_INTERVAL_SECONDS, clock=clock)
        self.uploading = False

        self._state: ViewState = Loading()
        self._job_id: Optional[str] = None
        self._recent_jobs: List[Job] = []
        self._last_page: Optional[JobsPage] = None
        self._mounted = False
        # Bumped on every load and teardown; results from an older generation are dropped
        self._generation = 0

    # -------------------------
    # Read-only view
    # -------------------------
    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def job_id(self) -> Optional[str]:
        return self._job_id

    @property
    def current_job(self) -> Optional[Job]:
        if isinstance(self._state, Viewing):
            return self._state.job
        return None

    @property
    def recent_jobs(self) -> List[Job]:
        return list(self._recent_jobs)

    @property
    def total(self) -> int:
        return self._last_page.total if self._last_page is not None else 0

    @property
    def total_pages(self) -> int:
        return self._last_page.total_pages if self._last_page is not None else 0

    @property
    def page(self) -> int:
        return self._last_page.page_index if self._last_page is not None else 0

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def polling(self) -> bool:
        return self._mounted and self.timer.armed

    # -------------------------
    # Lifecycle
    # -------------------------
    def mount(self, job_id: str | None = None) -> ViewState:
        """Load the selected job and the current page of recent jobs together."""
        self.timer.disarm()
        self._generation += 1
        generation = self._generation
        self._mounted = True
        self._job_id = job_id or None
        self._state = Loading()

        job_future = _executor.submit(self._fetch_job, self._job_id) if self._job_id else None
        page_future = _executor.submit(self._fetch_page, self.page)

        job = job_future.result() if job_future else None
        page = page_future.result()

        if generation != self._generation:
            logger.debug("Discarding stale load for job %s", job_id)
            return self._state

        if page is not None:
            self._apply_page(page)

        if self._job_id is None:
            self._state = Empty()
        elif job is None:
            self._state = NotFound(self._job_id)
        else:
            self._state = Viewing(job)
            self._patch_recent(job)
            if not job.is_final:
                self.timer.arm()
                logger.info("Polling job %s every %.1fs", job.id, self.timer.interval)

        return self._state

    def select_job(self, job_id: str | None) -> ViewState:
        job_id = job_id or None
        if self._mounted and job_id == self._job_id:
            return self._state
        self.timer.disarm()
        return self.mount(job_id)

    def unmount(self):
        self.timer.disarm()
        self._mounted = False
        self._generation += 1

    # -------------------------
    # Polling
    # -------------------------
    def run_pending(self) -> bool:
        if not self._mounted:
            return False
        return self.timer.run_pending(self.tick)

    def tick(self):
        """One poll tick: re-fetch the viewed job and patch it into the page."""
        if not isinstance(self._state, Viewing):
            self.timer.disarm()
            return

        job_id = self._state.job.id
        generation = self._generation
        try:
            job = self.client.get_job(job_id)
        except JobServiceError as e:
            # Stale data stays on screen
            logger.error("Poll tick for job %s failed, polling stopped: %s", job_id, e)
            if generation == self._generation:
                self.timer.disarm()
            return

        if generation != self._generation or not self._mounted:
            logger.debug("Discarding stale poll result for job %s", job_id)
            return

        self._state = Viewing(job)
        self._patch_recent(job)

        if job.is_final:
            logger.info("Job %s reached final status %s", job.id, job.status)
            self.timer.disarm()

    # -------------------------
    # Pagination
    # -------------------------
    def set_page(self, page: int) -> List[Job]:
        """Re-fetch only the recent-jobs list; the viewed job is untouched."""
        page = max(0, int(page))
        if self.total_pages and page >= self.total_pages:
            page = self.total_pages - 1

        generation = self._generation
        result = self._fetch_page(page)
        if result is not None and generation == self._generation:
            self._apply_page(result)
        return self.recent_jobs

    # -------------------------
    # Upload
    # -------------------------
    def upload(self, file_name: str, content: bytes, content_type: str | None) -> Optional[Job]:
        if not is_image_type(content_type):
            logger.warning("Rejected %s: %s is not an image", file_name, content_type)
            return None

        self.uploading = True
        try:
            job = self.client.submit_job(file_name, content, content_type)
        except JobServiceError as e:
            logger.error("Error uploading file %s: %s", file_name, e)
            return None
        finally:
            self.uploading = False

        self.select_job(job.id)
        return job

    # -------------------------
    # Internals
    # -------------------------
    def _fetch_job(self, job_id: str) -> Optional[Job]:
        try:
            return self.client.get_job(job_id)
        except JobNotFoundError:
            return None
        except JobServiceError as e:
            logger.error("Error fetching job %s: %s", job_id, e)
            return None

    def _fetch_page(self, page: int) -> Optional[JobsPage]:
        try:
            return self.client.list_jobs(limit=self.page_size, offset=page * self.page_size)
        except JobServiceError as e:
            logger.error("Error fetching recent jobs (page %d): %s", page, e)
            return None

    def _apply_page(self, page: JobsPage):
        self._recent_jobs = page.sorted_items()
        self._last_page = page

    def _patch_recent(self, job: Job):
        patched = [job if existing.id == job.id else existing for existing in self._recent_jobs]
        self._recent_jobs = sort_jobs(patched)
