# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
Splunk compatible log output.

Every record is rendered as a single line JSON document. Log entries given as
`SplunkExtendedLogEntry` models additionally contribute their fields as
top level keys, so they can be filtered on in Splunk.
"""

import datetime
import json
import logging
from enum import Enum

from pydantic import BaseModel


class SplunkExtendedLogEntry(BaseModel):
    """Structured log message. Pass an instance directly to the logger."""

    message: str

    def extended_fields(self) -> dict:
        return self.model_dump(mode="json", exclude={"message"}, exclude_none=True)

    def __str__(self) -> str:
        details = " ".join(f"{k}={v}" for k, v in self.extended_fields().items())
        return f"{self.message} {details}" if details else self.message


class SplunkFormatter(logging.Formatter):
    def __init__(self, defaults: dict | None = None) -> None:
        super().__init__()
        self.defaults = defaults or {}

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "@timestamp": datetime.datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "hash": getattr(record, "correlation_id", None) or self.defaults.get("correlation_id"),
            "app": self.defaults.get("app_name"),
        }
        if isinstance(record.msg, SplunkExtendedLogEntry):
            data.update(record.msg.extended_fields())
        if record.exc_info:
            data["stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(data, default=_json_default)


def _json_default(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    return str(value)
