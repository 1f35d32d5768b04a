"""jobparser: decode Windows Task Scheduler .job files and Task XML.

Example:
    >>> from pathlib import Path
    >>> from jobparser import Job
    >>> job = Job.from_bytes(Path("backup.job").read_bytes())
    >>> print(job.render())
    >>>
    >>> # Task Scheduler 2.0 XML definitions
    >>> from jobparser import load_task_xml
    >>> print(load_task_xml("backup.xml").render())
    >>>
    >>> # Whole directories, one report per file
    >>> from jobparser import iter_task_files, process_file
    >>> for path in iter_task_files("C:/Windows/Tasks"):
    ...     print(process_file(path))
"""

from .cursor import ByteCursor
from .exceptions import (
    FieldValueError,
    FileProcessingError,
    JobParseError,
    StringDecodeError,
    TaskXmlError,
    TruncatedDataError,
)
from .models import Job, JobDate, JobUuid
from .processor import iter_task_files, process_file
from .task_xml import CalendarTrigger, ExecAction, TaskDefinition, load_task_xml, parse_task_xml

__version__ = "0.1.0"
__all__ = [
    # Binary jobs
    "Job",
    "JobDate",
    "JobUuid",
    "ByteCursor",
    # Task XML
    "TaskDefinition",
    "CalendarTrigger",
    "ExecAction",
    "load_task_xml",
    "parse_task_xml",
    # Files
    "process_file",
    "iter_task_files",
    # Exceptions
    "JobParseError",
    "TruncatedDataError",
    "StringDecodeError",
    "FieldValueError",
    "TaskXmlError",
    "FileProcessingError",
]
