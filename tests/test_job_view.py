import threading

import pytest

from sheep_dashboard.services.job_service import MalformedResponseError, NetworkError
from sheep_dashboard.services.job_view import Empty, JobViewController, Loading, NotFound, Viewing, is_image_type
from tests.fakes import FakeJobClient, detection_payload, make_job


@pytest.fixture
def controllers():
    created = []
    yield created
    for view in created:
        view.unmount()


@pytest.fixture
def make_view(clock, controllers):
    def _make(client, page_size=10):
        view = JobViewController(client, page_size=page_size, poll_interval=2.0, clock=clock)
        controllers.append(view)
        return view

    return _make


def poll(view, clock, times=1):
    for _ in range(times):
        clock.advance(view.timer.interval)
        view.run_pending()


# =========================
# Mount
# =========================
def test_starts_loading(make_view):
    view = make_view(FakeJobClient())

    assert isinstance(view.state, Loading)
    assert not view.mounted


def test_no_job_selected_shows_upload_prompt(make_view):
    client = FakeJobClient(jobs=[make_job(id="a", status="done")])
    view = make_view(client)

    state = view.mount(None)

    assert isinstance(state, Empty)
    assert [j.id for j in view.recent_jobs] == ["a"]
    assert not view.polling
    assert ("get_job", None) not in client.calls


def test_missing_job_is_not_found_without_polling(make_view, clock):
    client = FakeJobClient()
    view = make_view(client)

    state = view.mount("missing")

    assert state == NotFound("missing")
    assert not view.polling
    poll(view, clock, times=3)
    assert client.get_job_calls("missing") == [("get_job", "missing")]


def test_failed_fetch_is_not_found(make_view):
    client = FakeJobClient(scripts={"abc": [NetworkError("down")]})
    view = make_view(client)

    assert view.mount("abc") == NotFound("abc")


def test_finished_job_is_viewed_without_polling(make_view):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="done")]})
    view = make_view(client)

    state = view.mount("abc")

    assert isinstance(state, Viewing)
    assert state.job.detection.sheep_count == 7
    assert not view.polling


def test_recent_jobs_failure_still_renders_job(make_view):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="done")]}, jobs=NetworkError("down"))
    view = make_view(client)

    assert isinstance(view.mount("abc"), Viewing)
    assert view.recent_jobs == []


def test_mount_fetches_job_and_page(make_view):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="queued")]})
    view = make_view(client, page_size=5)

    view.mount("abc")

    assert ("get_job", "abc") in client.calls
    assert ("list_jobs", 5, 0) in client.calls


# =========================
# Polling
# =========================
def test_polls_until_done_then_stops(make_view, clock):
    client = FakeJobClient(
        scripts={
            "abc": [
                make_job(id="abc", status="processing"),
                make_job(id="abc", status="processing"),
                make_job(id="abc", status="done"),
            ]
        }
    )
    view = make_view(client)

    view.mount("abc")
    assert view.polling

    poll(view, clock)
    assert view.current_job.status == "processing"
    assert view.polling

    poll(view, clock)
    assert view.current_job.status == "done"
    assert not view.polling

    poll(view, clock, times=5)
    assert len(client.get_job_calls("abc")) == 3


def test_polls_until_error_then_stops(make_view, clock):
    client = FakeJobClient(
        scripts={"abc": [make_job(id="abc", status="queued"), make_job(id="abc", status="error")]}
    )
    view = make_view(client)

    view.mount("abc")
    poll(view, clock, times=4)

    assert view.current_job.failure.error == "detector crashed"
    assert len(client.get_job_calls("abc")) == 2


def test_no_tick_before_interval(make_view, clock):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="queued")]})
    view = make_view(client)
    view.mount("abc")

    clock.advance(1.9)
    assert not view.run_pending()
    assert len(client.get_job_calls("abc")) == 1


def test_poll_tick_patches_recent_jobs(make_view, clock):
    processing = make_job(id="abc", status="processing", created_at="2024-05-01T10:00:00Z")
    done = make_job(id="abc", status="done", created_at="2024-05-01T10:00:00Z")
    other = make_job(id="zzz", status="done", created_at="2024-05-01T09:00:00Z")
    client = FakeJobClient(scripts={"abc": [processing, done]}, jobs=[other, processing])
    view = make_view(client)

    view.mount("abc")
    poll(view, clock)

    assert [j.id for j in view.recent_jobs] == ["abc", "zzz"]
    assert view.recent_jobs[0].status == "done"


def test_failed_tick_keeps_stale_job_and_stops(make_view, clock):
    client = FakeJobClient(
        scripts={"abc": [make_job(id="abc", status="processing"), MalformedResponseError("bad body")]}
    )
    view = make_view(client)

    view.mount("abc")
    poll(view, clock)

    assert view.current_job.status == "processing"
    assert not view.polling
    poll(view, clock, times=3)
    assert len(client.get_job_calls("abc")) == 2


def test_changing_job_cancels_previous_timer(make_view, clock):
    client = FakeJobClient(
        scripts={
            "abc": [make_job(id="abc", status="processing")],
            "def": [make_job(id="def", status="queued")],
        }
    )
    view = make_view(client)
    view.mount("abc")
    assert view.polling

    view.select_job("def")
    poll(view, clock, times=3)

    assert len(client.get_job_calls("abc")) == 1
    assert len(client.get_job_calls("def")) == 4
    assert view.current_job.id == "def"


def test_changing_to_finished_job_leaves_no_timer(make_view, clock):
    client = FakeJobClient(
        scripts={
            "abc": [make_job(id="abc", status="processing")],
            "def": [make_job(id="def", status="done")],
        }
    )
    view = make_view(client)
    view.mount("abc")

    view.select_job("def")

    assert not view.polling


def test_selecting_same_job_is_noop(make_view):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="processing")]})
    view = make_view(client)
    view.mount("abc")

    view.select_job("abc")

    assert len(client.get_job_calls("abc")) == 1


def test_unmount_stops_polling(make_view, clock):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="processing")]})
    view = make_view(client)
    view.mount("abc")

    view.unmount()
    poll(view, clock, times=3)

    assert not view.polling
    assert len(client.get_job_calls("abc")) == 1


def test_controllers_share_fetch_threads(make_view):
    before = threading.active_count()

    for _ in range(20):
        view = make_view(FakeJobClient(scripts={"abc": [make_job(id="abc", status="done")]}))
        view.mount("abc")
        view.unmount()

    assert threading.active_count() - before <= 2


def test_result_arriving_after_unmount_is_ignored(make_view, clock):
    client = FakeJobClient(
        scripts={"abc": [make_job(id="abc", status="processing"), make_job(id="abc", status="done")]}
    )
    view = make_view(client)
    view.mount("abc")

    client.on_get_job = lambda job_id: view.unmount()
    view.tick()

    assert view.current_job.status == "processing"


def test_load_superseded_during_fetch_is_ignored(make_view):
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="processing")]})
    view = make_view(client)
    client.on_get_job = lambda job_id: view.unmount()

    state = view.mount("abc")

    assert isinstance(state, Loading)
    assert not view.polling


# =========================
# Pagination
# =========================
def test_page_count_from_total(make_view):
    jobs = [make_job(id=f"j{i}", created_at=f"2024-05-01T10:{i:02d}:00Z") for i in range(12)]
    view = make_view(FakeJobClient(jobs=jobs), page_size=5)

    view.mount(None)

    assert view.total == 12
    assert view.total_pages == 3
    assert len(view.recent_jobs) == 5


def test_set_page_refetches_only_recent_jobs(make_view, clock):
    jobs = [make_job(id=f"j{i}", created_at=f"2024-05-01T10:{i:02d}:00Z") for i in range(12)]
    client = FakeJobClient(scripts={"abc": [make_job(id="abc", status="processing")]}, jobs=jobs)
    view = make_view(client, page_size=5)
    view.mount("abc")

    view.set_page(2)

    assert view.page == 2
    assert ("list_jobs", 5, 10) in client.calls
    assert len(client.get_job_calls("abc")) == 1
    assert view.current_job.id == "abc"
    assert view.polling


def test_set_page_clamps_to_range(make_view):
    jobs = [make_job(id=f"j{i}") for i in range(12)]
    view = make_view(FakeJobClient(jobs=jobs), page_size=5)
    view.mount(None)

    view.set_page(-3)
    assert view.page == 0

    view.set_page(9)
    assert view.page == 2


def test_failed_page_fetch_keeps_current_page(make_view):
    jobs = [make_job(id=f"j{i}") for i in range(12)]
    client = FakeJobClient(jobs=jobs)
    view = make_view(client, page_size=5)
    view.mount(None)
    view.set_page(1)

    client.jobs = NetworkError("down")
    view.set_page(2)

    assert view.page == 1
    assert view.total_pages == 3
    assert [j.id for j in view.recent_jobs] == ["j5", "j6", "j7", "j8", "j9"]


def test_no_pages_before_first_fetch(make_view):
    view = make_view(FakeJobClient())

    assert view.page == 0
    assert view.total_pages == 0


def test_recent_jobs_sorted_after_every_fetch(make_view):
    jobs = [
        make_job(id="b", created_at="2024-05-01T09:00:00Z"),
        make_job(id="c", created_at="2024-05-01T11:00:00Z"),
        make_job(id="a", created_at="2024-05-01T10:00:00Z"),
    ]
    view = make_view(FakeJobClient(jobs=jobs))

    view.mount(None)
    assert [j.id for j in view.recent_jobs] == ["c", "a", "b"]

    view.set_page(0)
    assert [j.id for j in view.recent_jobs] == ["c", "a", "b"]


# =========================
# Upload
# =========================
def test_upload_navigates_to_new_job(make_view):
    created = make_job(id="abc", status="queued")
    client = FakeJobClient(scripts={"abc": [created]}, submit_result=created)
    view = make_view(client)
    view.mount(None)

    job = view.upload("sheep.jpg", b"jpeg", "image/jpeg")

    assert job.id == "abc"
    assert view.job_id == "abc"
    assert isinstance(view.state, Viewing)
    assert view.current_job.id == "abc"
    assert not view.uploading


def test_upload_failure_reenables_upload(make_view):
    client = FakeJobClient(submit_result=NetworkError("down"))
    view = make_view(client)
    view.mount(None)

    assert view.upload("sheep.jpg", b"jpeg", "image/jpeg") is None
    assert not view.uploading
    assert isinstance(view.state, Empty)


def test_non_image_upload_is_rejected_without_request(make_view):
    client = FakeJobClient(submit_result=make_job())
    view = make_view(client)
    view.mount(None)

    assert view.upload("notes.txt", b"hello", "text/plain") is None
    assert not any(c[0] == "submit_job" for c in client.calls)


@pytest.mark.parametrize(
    "content_type, expected",
    [("image/png", True), ("IMAGE/JPEG", True), ("text/plain", False), ("", False), (None, False)],
)
def test_is_image_type(content_type, expected):
    assert is_image_type(content_type) is expected


# =========================
# End-to-end scenario
# =========================
def test_sheep_scenario_renders_count_once_polling_concludes(make_view, clock):
    client = FakeJobClient(
        scripts={
            "abc": [
                make_job(id="abc", status="processing"),
                make_job(id="abc", status="done", result=detection_payload(sheep_count=7)),
            ]
        },
        submit_result=make_job(id="abc", status="queued"),
    )
    view = make_view(client)
    view.mount(None)

    view.upload("sheep.jpg", b"jpeg", "image/jpeg")
    assert view.current_job.status == "processing"
    assert view.current_job.detection is None

    poll(view, clock)
    assert view.current_job.detection.sheep_count == 7
    calls_after_done = len(client.calls)

    poll(view, clock, times=5)
    assert len(client.calls) == calls_after_done
