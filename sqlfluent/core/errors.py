"""Error sinks that surface statement failures.

A handle never decides on its own how a failure is presented. It records the
driver message and hands it to a sink, which either raises a catchable
:class:`~sqlfluent.exceptions.QueryError` or renders a diagnostic and stops.
"""

import html
import sys
from typing import IO, TYPE_CHECKING, Literal, NoReturn, Optional

from rich.console import Console
from rich.text import Text

from sqlfluent.exceptions import ImproperConfigurationError, QueryError
from sqlfluent.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlfluent.protocols import ErrorSinkProtocol

__all__ = ("DebugErrorSink", "ErrorFormat", "RaisingErrorSink", "create_error_sink")

logger = get_logger("core.errors")

ErrorFormat = Literal["text", "html"]

_HTML_TEMPLATE = (
    '<div class="sqlfluent-error" style="font-family: monospace; padding: 1em; border: 1px solid #c00;">'
    "<p><strong>Query:</strong> {query}</p>"
    "<p><strong>Error:</strong> {error}</p>"
    "</div>\n"
)


class RaisingErrorSink:
    """Raise :class:`QueryError` carrying the driver message and the SQL.

    When called from an ``except`` block the original driver error is kept as the
    exception context.
    """

    __slots__ = ()

    def report(self, message: str, sql: Optional[str]) -> NoReturn:
        logger.debug("Statement failed: %s", message)
        raise QueryError(message, sql)


class DebugErrorSink:
    """Render the failing statement and stop the unit of work.

    Text diagnostics are printed with ``rich`` to standard error. HTML diagnostics
    are written, escaped, to ``stream`` (standard output by default). Either way the
    sink then raises ``SystemExit``.

    Args:
        error_format: ``"text"`` or ``"html"``.
        stream: Destination for the rendered diagnostic.
        exit_code: Status passed to ``SystemExit``.
    """

    __slots__ = ("_console", "_stream", "error_format", "exit_code")

    def __init__(self, error_format: ErrorFormat = "text", stream: "Optional[IO[str]]" = None, exit_code: int = 1) -> None:
        if error_format not in {"text", "html"}:
            msg = f"Unknown error format {error_format!r}; expected 'text' or 'html'"
            raise ImproperConfigurationError(msg)
        self.error_format = error_format
        self.exit_code = exit_code
        self._stream = stream
        self._console = Console(file=stream, stderr=stream is None, highlight=False, soft_wrap=True)

    def render(self, message: str, sql: Optional[str]) -> None:
        if self.error_format == "html":
            stream = self._stream or sys.stdout
            stream.write(_HTML_TEMPLATE.format(query=html.escape(sql or ""), error=html.escape(message)))
            stream.flush()
            return
        self._console.print(Text.assemble(("Query: ", "bold red"), sql or ""))
        self._console.print(Text.assemble(("Error: ", "bold red"), message))

    def report(self, message: str, sql: Optional[str]) -> NoReturn:
        logger.error("Statement failed: %s (%s)", message, sql)
        self.render(message, sql)
        raise SystemExit(self.exit_code)


def create_error_sink(debug: bool, error_format: ErrorFormat = "text") -> "ErrorSinkProtocol":
    """Pick the sink matching the ``debug`` flag."""
    if debug:
        return DebugErrorSink(error_format)
    return RaisingErrorSink()
