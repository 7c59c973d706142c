"""Extra span fields persisted in the buildevents sidecar file.

buildevents reads the file named by ``BUILDEVENT_FILE`` and attaches every
``key=value`` pair in it to the spans it sends, so fields written here
travel with the root build span.
"""

import os
import re
from collections.abc import Mapping

from .. import runner

BUILDEVENT_FILE = "BUILDEVENT_FILE"
DEFAULT_FIELDS_PATH = os.path.join("..", "buildevents.txt")

_TOKEN = re.compile(
    r"""
    (?P<key>[^\s="]+)              # key
    (?:=
        (?:"(?P<quoted>(?:\\.|[^"\\])*)"   # quoted value with escapes
        |(?P<bare>[^\s"]*))                # bare value
    )?
    """,
    re.VERBOSE,
)


def parse_logfmt(text: str) -> dict[str, str]:
    """Parse logfmt text into a field map.

    A key without ``=`` is read as ``"true"``. Later duplicates win.

    Parameters
    ----------
    text : str
        Space or newline separated ``key=value`` pairs.

    Returns
    -------
    dict[str, str]
        Parsed fields.

    """
    fields: dict[str, str] = {}
    for match in _TOKEN.finditer(text):
        key = match.group("key")
        if match.group("quoted") is not None:
            value = re.sub(r"\\(.)", r"\1", match.group("quoted"))
        elif match.group("bare") is not None:
            value = match.group("bare")
        else:
            value = "true"
        fields[key] = value
    return fields


def _format_value(value: str) -> str:
    needs_escaping = '"' in value or "\\" in value
    needs_quoting = value == "" or "=" in value or any(c.isspace() for c in value)
    if needs_escaping:
        value = re.sub(r'(["\\])', r"\\\1", value)
    if needs_quoting or needs_escaping:
        return f'"{value}"'
    return value


def format_logfmt(fields: Mapping[str, str]) -> str:
    """Serialize a field map as a single logfmt line, keys in insertion order."""
    return " ".join(
        f"{key}={_format_value(str(value))}" for key, value in fields.items()
    )


class FieldStore:
    """Append-only field map kept in the buildevents sidecar file.

    Values already in the file win over newly added ones, so fields set by
    the workflow itself are never replaced by the defaults written here.
    No locking is done; only one process writes the file at a time.

    Parameters
    ----------
    path : str or None, optional
        Sidecar file location. When None, uses ``BUILDEVENT_FILE`` or falls
        back to ``../buildevents.txt`` and exports the chosen path.

    """

    def __init__(self, path: str | None = None):
        self._path = path

    @property
    def path(self) -> str:
        """Resolved sidecar file path, exported on first resolution."""
        if self._path is None:
            path = os.environ.get(BUILDEVENT_FILE, "")
            if not path:
                path = os.path.abspath(DEFAULT_FIELDS_PATH)
                runner.export_variable(BUILDEVENT_FILE, path)
            self._path = path
        return self._path

    def read(self) -> dict[str, str]:
        """Return the fields currently stored, empty if the file is missing."""
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return parse_logfmt(f.read())

    def add_fields(self, new_fields: Mapping[str, str]) -> None:
        """Merge fields into the sidecar file, keeping existing values.

        Parameters
        ----------
        new_fields : Mapping[str, str]
            Fields to add. Keys already stored are left untouched.

        Raises
        ------
        OSError
            If the file cannot be read or written.

        """
        merged = dict(new_fields)
        merged.update(self.read())
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(format_logfmt(merged))
