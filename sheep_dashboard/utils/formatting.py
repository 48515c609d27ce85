# utils/formatting.py

from datetime import datetime, timezone

from sheep_dashboard.utils.constants import STATUS_BADGES, STATUS_MESSAGES


def status_message(status: str) -> str:
    return STATUS_MESSAGES.get(status, status)


def status_badge(status: str) -> str:
    return STATUS_BADGES.get(status, status)


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.2f} s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)} min {rest:.0f} s"


def format_created_at(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def page_label(page: int, total_pages: int) -> str:
    if total_pages == 0:
        return "No jobs yet"
    return f"Page {page + 1} of {total_pages}"
