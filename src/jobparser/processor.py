"""Per-file dispatch and directory scanning."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Union

from .exceptions import FileProcessingError, JobParseError
from .models import Job
from .task_xml import load_task_xml

logger = logging.getLogger(__name__)

TASK_EXTENSIONS = (".job", ".xml")
BANNER = "*" * 72


def format_job_output(file_path: Union[str, Path], job: Job) -> str:
    """Frame a job report between banner lines."""
    return f"{BANNER}\nFile: {file_path}\n{job.render()}\n{BANNER}\n"


def process_file(file_path: Union[str, Path]) -> str:
    """Decode one file and return its printable report.

    Files ending in .xml are read as Task XML; anything else is decoded as a
    binary .job file.

    Raises:
        FileProcessingError: If the file cannot be read, decoded or rendered
    """
    path = Path(file_path)
    try:
        if path.suffix == ".xml":
            logger.debug("Decoding %s as Task XML", path)
            return load_task_xml(path).render()

        logger.debug("Decoding %s as binary job", path)
        data = path.read_bytes()
        return format_job_output(file_path, Job.from_bytes(data))
    except (JobParseError, OSError) as e:
        raise FileProcessingError(path, e) from e


def iter_task_files(directory: Union[str, Path]) -> Iterator[Path]:
    """Yield .job and .xml files in a directory, in listing order.

    Raises:
        NotADirectoryError: If `directory` is not a directory
    """
    root = Path(directory)
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    for entry in root.iterdir():
        if entry.is_file() and entry.suffix in TASK_EXTENSIONS:
            yield entry
        else:
            logger.debug("Skipping %s", entry)
