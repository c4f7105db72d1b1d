"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The report lines come fully decided from the Core; this module only styles them.
"""

from __future__ import annotations

from typing import Sequence

from rich.console import Console
from rich.text import Text

from core.domain.errors import user_facing_error
from core.domain.models import ReportLine

SPAWNED_HEADING = "Backend spawned!"


def build_report_text(lines: Sequence[ReportLine]) -> Text:
    """Bold labels, blue values; one line per `ReportLine`, order preserved."""

    text = Text()
    for index, line in enumerate(lines):
        if index:
            text.append("\n")
        text.append(line.padded_label, style="bold")
        text.append(line.value, style="blue")
    return text


def print_report(console: Console, lines: Sequence[ReportLine]) -> None:
    console.print(Text(SPAWNED_HEADING, style="bright_blue"), soft_wrap=True)
    console.print(build_report_text(lines), soft_wrap=True)


def print_error(console: Console, message: str) -> None:
    """Single-line error on the given (stderr) console."""

    console.print(Text(user_facing_error(message), style="red"), soft_wrap=True)
