"""Translation of core error kinds into transport codes, at the command line boundary."""

import sys
from typing import NoReturn

from fabricmap_core.errors import ErrorKind, TopologyError
from rich.console import Console
from rich.markup import escape

HTTP_STATUS = {
    ErrorKind.REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
    ErrorKind.UPSTREAM: 502,
}

EXIT_CODES = {
    ErrorKind.REQUEST: 1,
    ErrorKind.NOT_FOUND: 2,
    ErrorKind.INTERNAL: 3,
    ErrorKind.UPSTREAM: 4,
}

err_console = Console(stderr=True)


def http_status(kind: ErrorKind) -> int:
    return HTTP_STATUS[kind]


def fail(error: TopologyError) -> NoReturn:
    err_console.print(f"[red]Error ({http_status(error.kind)}):[/red] {escape(error.message)}", highlight=False)
    sys.exit(EXIT_CODES[error.kind])
