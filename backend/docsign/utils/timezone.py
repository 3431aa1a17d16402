from datetime import date, datetime
from typing import Union
from zoneinfo import ZoneInfo

from docsign.utils.exceptions import InputValidationError

DateLike = Union[date, datetime, str]


def get_local_datetime(dt: datetime, tz_name: str) -> datetime:
    """Convert an aware datetime to the given IANA zone; naive values are kept as-is."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(ZoneInfo(tz_name))


def parse_signed_date(value: DateLike, tz_name: str) -> date:
    """Calendar day a signature was captured on, in the signing time zone."""
    if isinstance(value, datetime):
        return get_local_datetime(value, tz_name).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise InputValidationError("Signed date is required", field="signed_date")
        try:
            if "T" in raw or " " in raw:
                return get_local_datetime(datetime.fromisoformat(raw.replace("Z", "+00:00")), tz_name).date()
            return date.fromisoformat(raw[:10])
        except ValueError as e:
            raise InputValidationError(
                f"Signed date is not an ISO-8601 date: {value}",
                field="signed_date",
            ) from e
    raise InputValidationError("Signed date must be a date or an ISO-8601 string", field="signed_date")


def format_signed_date(value: DateLike, tz_name: str) -> str:
    """DD/MM/YYYY, the day/month/year order used on signed documents."""
    return parse_signed_date(value, tz_name).strftime("%d/%m/%Y")
