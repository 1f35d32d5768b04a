"""Custom exceptions for jobparser."""

from pathlib import Path


class JobParseError(Exception):
    """Base class for decode errors.

    Everything that can go wrong while turning file contents into a job or
    task definition inherits from this, so callers can catch all decode
    failures with a single except.
    """


class TruncatedDataError(JobParseError):
    """A read ran past the end of the buffer.

    Attributes:
        offset: Byte offset the read started at
        length: Number of bytes requested
        available: Total size of the buffer
    """

    def __init__(self, offset: int, length: int, available: int) -> None:
        self.offset = offset
        self.length = length
        self.available = available
        super().__init__(
            f"Truncated data: need {length} bytes at offset {offset}, "
            f"buffer holds {available} bytes"
        )


class StringDecodeError(JobParseError):
    """A length-prefixed string is not valid UTF-16.

    Attributes:
        field: Name of the trailer field being decoded
        offset: Byte offset of the string payload
    """

    def __init__(self, field: str, offset: int, reason: str) -> None:
        self.field = field
        self.offset = offset
        super().__init__(f"Invalid UTF-16 in {field} at offset {offset}: {reason}")


class FieldValueError(JobParseError):
    """A decoded value has no textual representation.

    Raised at render time, e.g. for a month of 0 or a weekday above 6.

    Attributes:
        field: Name of the offending field
        value: The decoded value
    """

    def __init__(self, field: str, value: int) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Cannot render {field} value {value}")


class TaskXmlError(JobParseError):
    """XML task definition is malformed or missing a required element."""


class FileProcessingError(Exception):
    """A single file could not be decoded or rendered.

    Wraps the underlying cause together with the file it came from.

    Attributes:
        file_path: Path of the file that failed
        reason: The underlying exception
    """

    def __init__(self, file_path: Path | str, reason: Exception) -> None:
        self.file_path = Path(file_path)
        self.reason = reason
        super().__init__(f"Unable to process file {self.file_path}: {reason}")
