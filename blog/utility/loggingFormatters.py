# Copyright (c) 2025 Damien Boisvert (AlphaGameDeveloper)
# 
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

import logging
from os import getenv, getpid
from flask import has_request_context, request

class MultiLineFormatter(logging.Formatter):
    """Logging formatter that repeats the record prefix on every line of a multi-line message.

    Tracebacks and multi-line warnings otherwise lose the timestamp, level and
    logger name on every line but the first, which makes them hard to grep.
    """
    def format(self, record):
        message = super().format(record)
        if "\n" not in message:
            return message

        first_line, *rest = message.split("\n")
        # everything before the message text on the first line is the prefix
        first_message_line = record.getMessage().split("\n", 1)[0]
        cut = first_line.rfind(first_message_line) if first_message_line else -1
        prefix = first_line[:cut] if cut > 0 else ""
        return "\n".join([first_line] + [prefix + line for line in rest])

class GunicornWorkerFilter(logging.Filter):
    """Filter to add the Gunicorn worker ID (or the process ID) to log records."""

    def filter(self, record):
        worker_id = getenv("GUNICORN_WORKER_ID")
        record.worker_id = f"worker{worker_id}" if worker_id else f"PID {getpid()}"
        return True

class HealthcheckProbeFilter(logging.Filter):
    """Drops request log lines produced by automated health probes."""

    def filter(self, record):
        if not has_request_context():
            return True
        return not (request.args.get("reason") == "DockerAutomatedHealthcheck" and "health" in request.path)

def configure_logging(level: int) -> logging.Handler:
    """Install one stream handler on the root logger and route every ``blog.*`` logger through it."""
    formatter = MultiLineFormatter('[%(worker_id)s] %(asctime)-21s %(levelname)-8s %(name)-12s | %(message)s', datefmt="%Y-%m-%d %H:%M:%S")
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(GunicornWorkerFilter())
    logging.basicConfig(level=level, handlers=[handler])

    logging.getLogger("blog").setLevel(level)
    logging.getLogger("blog.request").addFilter(HealthcheckProbeFilter())
    return handler
