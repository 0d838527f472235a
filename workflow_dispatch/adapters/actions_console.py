"""Runner console surface: status lines, workflow commands and step outputs."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import TextIO


class ActionsConsoleReporter:
    """Write human-readable status and GitHub Actions workflow commands.

    Workflow commands (`::debug::`, `::error::`) are only understood by the
    runner on stdout. Step outputs are appended to the `$GITHUB_OUTPUT` file
    when a path is configured.
    """

    def __init__(self, stream: TextIO | None = None, output_path: str | None = None):
        self._stream = stream or sys.stdout
        self._output_path = Path(output_path) if output_path else None

    def reporter_info(self, message: str) -> None:
        """Write one plain status line."""

        print(message, file=self._stream, flush=True)

    def reporter_debug(self, message: str) -> None:
        """Write one debug line, shown by the runner only when step debugging is enabled."""

        for line in message.splitlines() or [""]:
            print(f"::debug::{self._reporter_escape_data(line)}", file=self._stream, flush=True)

    def reporter_set_failed(self, message: str) -> None:
        """Write one error annotation for the failed step."""

        print(f"::error::{self._reporter_escape_data(message)}", file=self._stream, flush=True)

    def reporter_set_output(self, name: str, value: str) -> None:
        """Append one step output, skipped when `$GITHUB_OUTPUT` is not configured.

        Raises:
            OSError: Raised when the output file cannot be written.
        """

        if self._output_path is None:
            return
        with self._output_path.open("a", encoding="utf-8") as output_file:
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                output_file.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                output_file.write(f"{name}={value}\n")

    def _reporter_escape_data(self, value: str) -> str:
        return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
