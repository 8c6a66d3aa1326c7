from __future__ import annotations

import logging
import sys
from typing import TextIO

from .protocol import Notification, ProtocolError, Request, parse_message
from .server import McpServer

logger = logging.getLogger(__name__)


def serve(server: McpServer, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    """Run the line loop until EOF.

    One message per line. Requests get exactly one response line, flushed
    before the next read; notifications and unparseable lines get nothing.
    Returns the number of requests answered.
    """
    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout
    answered = 0
    # readline instead of iteration: no read-ahead while a request is running
    for line in iter(stdin.readline, ""):
        line = line.strip()
        if not line:
            continue
        try:
            msg = parse_message(line)
        except ProtocolError as e:
            logger.error("discarding malformed message: %s", e)
            continue

        if isinstance(msg, Notification):
            server.handle_notification(msg)
            continue

        assert isinstance(msg, Request)
        resp = server.handle_request(msg)
        stdout.write(resp.to_line())
        stdout.flush()
        answered += 1

    logger.info("stdin closed, %d request(s) answered", answered)
    return answered
