"""Data models for the binary .job format."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cursor import ByteCursor
from .exceptions import FieldValueError, JobParseError, TruncatedDataError
from .tables import (
    FLAGS,
    MONTHS,
    PRIORITIES,
    WEEKDAYS,
    matching_bits,
    product_name,
    status_text,
)

logger = logging.getLogger(__name__)

UUID_SIZE = 16
# The run date occupies a 16-byte slot; the scheduled date reads 14 bytes
DATE_SIZE = 16
DATE_SIZE_NO_WEEKDAY = 14

RUN_DATE_OFFSET = 52
SCHEDULED_DATE_OFFSET = 68
SCHEDULED_DATE_WINDOW = 20
HEADER_SIZE = SCHEDULED_DATE_OFFSET + SCHEDULED_DATE_WINDOW
# The first count prefix sits inside the scheduled date window
TRAILER_OFFSET = 70

TRAILER_FIELDS = ("name", "parameters", "working_directory", "user", "comment")


def _trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """divmod rounding toward zero, so negative values keep their sign."""
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def format_duration(ms: int) -> str:
    """Render milliseconds as HH:MM:SS.ms using truncating division."""
    hours, rest = _trunc_divmod(ms, 3_600_000)
    minutes, rest = _trunc_divmod(rest, 60_000)
    seconds, millis = _trunc_divmod(rest, 1_000)
    return f"{hours:02}:{minutes:02}:{seconds:02}.{millis}"


@dataclass(frozen=True, slots=True)
class JobDate:
    """Timestamp embedded in the job header.

    Attributes:
        year: Four-digit year
        month: 1-12
        weekday: 0 (Sunday) to 6 (Saturday), None for the no-weekday layout
        day: Day of month
        hour: 0-23
        minute: 0-59
        second: 0-59
    """

    year: int
    month: int
    weekday: int | None
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_bytes(cls, data: bytes, has_weekday: bool = True) -> JobDate:
        """Decode a date record.

        With `has_weekday` the record is year, month, weekday, day, hour,
        minute, second. Without it the weekday word is skipped and left
        undecoded; day, hour, minute and second keep their offsets.

        Raises:
            TruncatedDataError: If `data` is shorter than the record
        """
        span = DATE_SIZE if has_weekday else DATE_SIZE_NO_WEEKDAY
        if len(data) < span:
            raise TruncatedDataError(0, span, len(data))

        cursor = ByteCursor(data)
        year = cursor.read_u16()
        month = cursor.read_u16()
        if has_weekday:
            weekday = cursor.read_u16()
        else:
            cursor.read(2)
            weekday = None
        return cls(
            year=year,
            month=month,
            weekday=weekday,
            day=cursor.read_u16(),
            hour=cursor.read_u16(),
            minute=cursor.read_u16(),
            second=cursor.read_u16(),
        )

    def render(self) -> str:
        """Render as e.g. 'Tuesday Aug 6 14:05:09 2024'.

        Raises:
            FieldValueError: If month or weekday is outside its name table
        """
        if not 1 <= self.month <= len(MONTHS):
            raise FieldValueError("month", self.month)
        text = (
            f"{MONTHS[self.month - 1]} {self.day} "
            f"{self.hour:02}:{self.minute:02}:{self.second:02} {self.year}"
        )
        if self.weekday is None:
            return text
        if self.weekday >= len(WEEKDAYS):
            raise FieldValueError("weekday", self.weekday)
        return f"{WEEKDAYS[self.weekday]} {text}"


@dataclass(frozen=True, slots=True)
class JobUuid:
    """Mixed-endian GUID: three little-endian groups, four big-endian."""

    data1: int
    data2: int
    data3: int
    data4: int
    data5: int
    data6: int
    data7: int

    @classmethod
    def from_bytes(cls, data: bytes) -> JobUuid:
        """Decode exactly 16 bytes.

        Raises:
            TruncatedDataError: If fewer than 16 bytes are given
            JobParseError: If more than 16 bytes are given
        """
        if len(data) > UUID_SIZE:
            raise JobParseError(f"UUID must be {UUID_SIZE} bytes, got {len(data)}")
        cursor = ByteCursor(data)
        return cls(
            data1=cursor.read_u32(),
            data2=cursor.read_u16(),
            data3=cursor.read_u16(),
            data4=cursor.read_u16_be(),
            data5=cursor.read_u16_be(),
            data6=cursor.read_u16_be(),
            data7=cursor.read_u16_be(),
        )

    def render(self) -> str:
        # The last three groups are only padded to 2 digits each
        return (
            f"{{{self.data1:08X}-{self.data2:04X}-{self.data3:04X}-"
            f"{self.data4:04X}-{self.data5:02X}{self.data6:02X}{self.data7:02X}}}"
        )


@dataclass(frozen=True, slots=True)
class Job:
    """A decoded Task Scheduler .job file.

    Attributes:
        product_info: Code of the Windows release that wrote the file
        file_version: Format version word
        uuid: Job identifier
        app_name_offset: Offset of the application name length word
        trigger_offset: Offset of the trigger section
        error_retry_count: Retries after a failed run
        error_retry_interval: Minutes between retries
        idle_deadline: Minutes to wait for an idle period
        idle_wait: Minutes the machine must be idle
        priority: Priority class bitmask
        max_run_time: Maximum run time in milliseconds (signed)
        exit_code: Exit code of the last run
        status: Task status code
        flags: TASK_FLAG_* bitmask
        run_date: When the task last ran
        scheduled_date: When the task is scheduled to run
        name: Application name
        parameters: Command-line parameters
        working_directory: Working directory
        user: Author of the task
        comment: Free-form comment
    """

    product_info: int
    file_version: int
    uuid: JobUuid
    app_name_offset: int
    trigger_offset: int
    error_retry_count: int
    error_retry_interval: int
    idle_deadline: int
    idle_wait: int
    priority: int
    max_run_time: int
    exit_code: int
    status: int
    flags: int
    run_date: JobDate
    scheduled_date: JobDate
    name: str
    parameters: str
    working_directory: str
    user: str
    comment: str

    @classmethod
    def from_bytes(cls, data: bytes) -> Job:
        """Decode a whole .job file.

        Raises:
            TruncatedDataError: If the header or any trailer string is cut short
            StringDecodeError: If a trailer string is not valid UTF-16
        """
        cursor = ByteCursor(data)
        header = dict(
            product_info=cursor.read_u16(),
            file_version=cursor.read_u16(),
            uuid=JobUuid.from_bytes(cursor.read(UUID_SIZE)),
            app_name_offset=cursor.read_u16(),
            trigger_offset=cursor.read_u16(),
            error_retry_count=cursor.read_u16(),
            error_retry_interval=cursor.read_u16(),
            idle_deadline=cursor.read_u16(),
            idle_wait=cursor.read_u16(),
            priority=cursor.read_u32(),
            max_run_time=cursor.read_i32(),
            exit_code=cursor.read_i32(),
            status=cursor.read_i32(),
            flags=cursor.read_u32(),
        )
        header["run_date"] = JobDate.from_bytes(cursor.read(DATE_SIZE), has_weekday=True)
        header["scheduled_date"] = JobDate.from_bytes(
            cursor.read(SCHEDULED_DATE_WINDOW), has_weekday=False
        )

        cursor.seek(TRAILER_OFFSET)
        trailer = {}
        for field in TRAILER_FIELDS:
            logger.debug("Reading %s at offset %d", field, cursor.offset)
            trailer[field] = cursor.read_utf16_string(field)

        return cls(**header, **trailer)

    def render(self) -> str:
        """Render the multi-line text report.

        Raises:
            FieldValueError: If a date holds an unrenderable month or weekday
        """
        lines = [
            f"Product Info: {product_name(self.product_info)}",
            f"File Version: {self.file_version}",
            f"UUID: {self.uuid.render()}",
        ]
        priorities = matching_bits(self.priority, PRIORITIES)
        if priorities:
            lines.append(f"Priorities: {', '.join(priorities)}")
        lines += [
            f"Maximum Run Time: {format_duration(self.max_run_time)} (HH:MM:SS.MS)",
            f"Exit Code: {self.exit_code}",
            f"Status: {status_text(self.status)}",
            f"Flags: {', '.join(matching_bits(self.flags, FLAGS))}",
            f"Date Run: {self.run_date.render()}",
            f"Scheduled Date: {self.scheduled_date.render()}",
            f"Application: {self.name}",
            f"Parameters: {self.parameters}",
            f"Working Directory: {self.working_directory}",
            f"User: {self.user}",
            f"Comment: {self.comment}",
        ]
        return "\n".join(lines) + "\n"
