"""XML task definitions (the Task Scheduler 2.0 format)."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .exceptions import TaskXmlError

logger = logging.getLogger(__name__)

# Upper bound on the transcoded document handed to the XML parser
MAX_XML_BYTES = 1 << 16
# Every UTF-16 code unit yields at least one UTF-8 byte
MAX_READ_BYTES = 2 * MAX_XML_BYTES + 2

_UTF16_LE_BOM = b"\xff\xfe"
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")
_BOOLEANS = {"true": True, "1": True, "false": False, "0": False}


@dataclass(frozen=True)
class CalendarTrigger:
    start_boundary: str
    end_boundary: str | None = None
    enabled: bool | None = None


@dataclass(frozen=True)
class ExecAction:
    command: str | None = None
    arguments: str | None = None


@dataclass(frozen=True)
class TaskDefinition:
    """The parts of a Task XML document that get reported.

    Attributes:
        author: RegistrationInfo/Author
        date: RegistrationInfo/Date
        description: RegistrationInfo/Description
        calendar_trigger: First Triggers/CalendarTrigger, if any
        enabled: Settings/Enabled
        allow_start_if_on_batteries: Settings/AllowStartIfOnBatteries
        exec_action: First Actions/Exec, if any
    """

    author: str | None = None
    date: str | None = None
    description: str | None = None
    calendar_trigger: CalendarTrigger | None = None
    enabled: bool | None = None
    allow_start_if_on_batteries: bool | None = None
    exec_action: ExecAction | None = None

    def render(self) -> str:
        """Render as 'Key: value' lines; absent values show as None."""
        lines = [
            f"Author: {self.author}",
            f"Date: {self.date}",
            f"Description: {self.description}",
        ]
        if self.calendar_trigger is not None:
            lines += [
                f"StartBoundary: {self.calendar_trigger.start_boundary}",
                f"EndBoundary: {self.calendar_trigger.end_boundary}",
                f"Enabled: {self.calendar_trigger.enabled}",
            ]
        lines += [
            "Settings:",
            f"  Enabled: {self.enabled}",
            f"  AllowStartIfOnBatteries: {self.allow_start_if_on_batteries}",
        ]
        if self.exec_action is not None:
            lines += [
                f"Command: {self.exec_action.command}",
                f"Arguments: {self.exec_action.arguments}",
            ]
        return "\n".join(lines) + "\n"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(parent: ET.Element | None, name: str) -> ET.Element | None:
    """First direct child with the given local name, ignoring namespaces."""
    if parent is None:
        return None
    for elem in parent:
        if _local_name(elem.tag) == name:
            return elem
    return None


def _text(parent: ET.Element | None, name: str) -> str | None:
    elem = _child(parent, name)
    if elem is None:
        return None
    return elem.text or ""


def _bool(parent: ET.Element | None, name: str) -> bool | None:
    value = _text(parent, name)
    if value is None:
        return None
    try:
        return _BOOLEANS[value.strip()]
    except KeyError:
        raise TaskXmlError(f"{name} is not a boolean: {value!r}") from None


def _calendar_trigger(triggers: ET.Element | None) -> CalendarTrigger | None:
    trigger = _child(triggers, "CalendarTrigger")
    if trigger is None:
        return None
    start = _text(trigger, "StartBoundary")
    if start is None:
        raise TaskXmlError("CalendarTrigger is missing StartBoundary")
    return CalendarTrigger(
        start_boundary=start,
        end_boundary=_text(trigger, "EndBoundary"),
        enabled=_bool(trigger, "Enabled"),
    )


def _exec_action(actions: ET.Element | None) -> ExecAction | None:
    action = _child(actions, "Exec")
    if action is None:
        return None
    return ExecAction(
        command=_text(action, "Command"),
        arguments=_text(action, "Arguments"),
    )


def parse_task_xml(text: str) -> TaskDefinition:
    """Parse an already-decoded Task XML document.

    Raises:
        TaskXmlError: If the markup is malformed, the root is not <Task>, or
            a required element is missing
    """
    # The declaration names the on-disk encoding, which no longer applies
    text = _XML_DECLARATION.sub("", text, count=1)
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise TaskXmlError(f"Malformed XML: {e}") from e

    if _local_name(root.tag) != "Task":
        raise TaskXmlError(f"Expected <Task> root element, got <{_local_name(root.tag)}>")

    registration = _child(root, "RegistrationInfo")
    settings = _child(root, "Settings")
    return TaskDefinition(
        author=_text(registration, "Author"),
        date=_text(registration, "Date"),
        description=_text(registration, "Description"),
        calendar_trigger=_calendar_trigger(_child(root, "Triggers")),
        enabled=_bool(settings, "Enabled"),
        allow_start_if_on_batteries=_bool(settings, "AllowStartIfOnBatteries"),
        exec_action=_exec_action(_child(root, "Actions")),
    )


def decode_task_bytes(data: bytes) -> str:
    """Transcode UTF-16 LE file contents to text, bounded to MAX_XML_BYTES.

    A leading byte order mark is dropped. Malformed code units become
    U+FFFD. The bound applies to the UTF-8 form; a character split by the
    cut is discarded.
    """
    if data.startswith(_UTF16_LE_BOM):
        data = data[len(_UTF16_LE_BOM):]
    text = data.decode("utf-16-le", errors="replace")

    encoded = text.encode("utf-8")
    if len(encoded) > MAX_XML_BYTES:
        logger.warning("Task XML truncated to %d bytes", MAX_XML_BYTES)
        text = encoded[:MAX_XML_BYTES].decode("utf-8", errors="ignore")
    return text


def read_task_bytes(file_path: Union[str, Path]) -> bytes:
    """Read at most MAX_READ_BYTES from the start of a Task XML file."""
    with open(file_path, "rb") as f:
        return f.read(MAX_READ_BYTES)


def load_task_xml(file_path: Union[str, Path]) -> TaskDefinition:
    """Read and parse a Task XML file.

    Raises:
        OSError: If the file cannot be read
        TaskXmlError: If the contents are not a usable task definition
    """
    return parse_task_xml(decode_task_bytes(read_task_bytes(file_path)))
