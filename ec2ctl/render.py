"""Rendering of instance and elastic IP listings.

Lines are built as :class:`rich.text.Text` so colours reach a terminal while
``Text.plain`` stays available for pipes and tests.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.text import Text

from ec2ctl.constants import MISSING_VALUE, InstanceState
from ec2ctl.models import AddressRecord, ResourceRecord
from ec2ctl.utils import format_age

console = Console(highlight=False, soft_wrap=True, emoji=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)

STATE_STYLES = {
    InstanceState.PENDING.value: "blue",
    InstanceState.RUNNING.value: "green",
    InstanceState.SHUTTING_DOWN.value: "yellow",
    InstanceState.STOPPING.value: "yellow",
    InstanceState.STOPPED.value: "dark_orange",
    InstanceState.TERMINATED.value: "red",
}
FALLBACK_STATE_STYLE = "red"

INSTANCE_QUIET_FIELDS = {
    "name": "name",
    "id": "id",
    "public_ip": "public_ip",
    "private_ip": "private_ip",
}
ADDRESS_QUIET_FIELDS = {
    "public_ip": "public_ip",
    "private_ip": "private_ip",
    "name": "name",
}


def state_style(state: str | None) -> str:
    """Return the display style for a lifecycle state; unknown states fall back."""
    return STATE_STYLES.get(state or "", FALLBACK_STATE_STYLE)


def pad(width: int, text: str | None, left: bool = False) -> str:
    """Pad ``text`` to ``width`` characters.

    Parameters
    ----------
    width : int
        Target width
    text : str | None
        Text to pad; None is treated as empty
    left : bool
        Pad on the left (right-align) instead of on the right

    Returns
    -------
    str
        Padded text; text longer than ``width`` is returned unchanged
    """
    text = text or ""
    return text.rjust(width) if left else text.ljust(width)


def max_width(values: Sequence[str | None]) -> int:
    return max((len(value) for value in values if value), default=0)


def render_instance_line(
    record: ResourceRecord,
    now: datetime,
    extended: bool = False,
    public_width: int = 0,
    private_width: int = 0,
) -> Text:
    """Render one instance as a single styled line."""
    state = record.state or "unknown"
    age = format_age(record.launch_time, now) if record.launch_time else MISSING_VALUE

    line = Text()
    line.append("[")
    line.append(state, style=state_style(record.state))
    line.append("] ")

    if extended:
        line.append(pad(public_width, record.public_ip), style="blue")
        line.append(" => ")
        line.append(pad(private_width, record.private_ip), style="magenta")
        line.append(" => ")

    line.append(record.az or MISSING_VALUE, style="green")
    line.append(":")
    line.append(record.id, style="yellow")
    line.append(":")
    line.append(record.name or MISSING_VALUE, style="blue")
    line.append(" (")
    line.append(record.ssh_key or MISSING_VALUE, style="bold white")
    line.append(" | ")
    line.append(record.instance_type or MISSING_VALUE, style="yellow")
    line.append(" | ")
    line.append(age, style="dark_orange")

    if extended:
        line.append(" | ")
        line.append(record.image or MISSING_VALUE, style="white")

    line.append(")")
    return line


def render_instance_lines(
    records: Sequence[ResourceRecord],
    now: datetime | None = None,
    extended: bool = False,
) -> list[Text]:
    """Render instances with address columns aligned across the result set.

    Parameters
    ----------
    records : Sequence[ResourceRecord]
        Records to render, already filtered and ordered
    now : datetime | None
        Reference instant for ages, captured once per listing
    extended : bool
        Include addresses and image id

    Returns
    -------
    list[Text]
        One styled line per record
    """
    if now is None:
        now = datetime.now(timezone.utc)

    public_width = max_width([record.public_ip for record in records])
    private_width = max_width([record.private_ip for record in records])

    return [
        render_instance_line(record, now, extended, public_width, private_width)
        for record in records
    ]


def render_address_line(record: AddressRecord) -> Text:
    """Render one elastic IP as ``nic | public [name] (private)``."""
    line = Text()
    line.append(
        record.nic_id or MISSING_VALUE,
        style="yellow" if record.nic_id else "grey50",
    )
    line.append(" | ")
    line.append(
        record.public_ip or MISSING_VALUE,
        style="bold white" if record.public_ip else "grey50",
    )
    line.append(" [")
    line.append(
        record.name or MISSING_VALUE,
        style="dark_orange" if record.name else "grey50",
    )
    line.append("]")

    if record.private_ip:
        line.append(" (")
        line.append(record.private_ip, style="magenta")
        line.append(")")

    return line


def render_address_lines(records: Sequence[AddressRecord]) -> list[Text]:
    return [render_address_line(record) for record in records]


def quiet_values(records: Sequence[Any], field: str) -> list[str]:
    """Return the bare value of ``field`` for every record that has one."""
    values = []

    for record in records:
        value = getattr(record, field)
        if value:
            values.append(str(value))

    return values


def to_json(documents: Any, compact: bool = False) -> str:
    """Serialize documents to JSON (compact for quiet mode)."""
    if compact:
        return json.dumps(documents, separators=(",", ":"), default=str)

    return json.dumps(documents, indent=2, default=str)


class Report(ABC):
    """Prints one listing in plain, quiet or JSON mode.

    Parameters
    ----------
    json_output : bool
        Emit the full record set as one JSON document
    quiet : bool
        Suppress framing and summary; emit one bare field per record
    out : Console | None
        Console used for output (module console by default)
    """

    noun = "records"
    verb = "Listed"

    def __init__(
        self, json_output: bool = False, quiet: bool = False, out: Console | None = None
    ) -> None:
        self.json_output = json_output
        self.quiet = quiet
        self.out = out or console

    def documents(self, records: Sequence[Any]) -> Any:
        return [record.to_dict() for record in records]

    @abstractmethod
    def lines(self, records: Sequence[Any]) -> list[Text]:
        """Return the plain-mode lines for ``records``."""

    @abstractmethod
    def quiet_lines(self, records: Sequence[Any]) -> list[str]:
        """Return the quiet-mode values for ``records``."""

    def emit(self, records: Sequence[Any], region: str) -> None:
        """Print ``records`` followed by a summary when not quiet.

        Parameters
        ----------
        records : Sequence[Any]
            Records to print
        region : str
            Effective region shown in the summary
        """
        if self.json_output:
            if self.quiet:
                self.out.print(
                    to_json(self.documents(records), compact=True), markup=False
                )
            else:
                self.out.print_json(to_json(self.documents(records)))
        elif self.quiet:
            for value in self.quiet_lines(records):
                self.out.print(value, markup=False)
        else:
            for line in self.lines(records):
                self.out.print(line)

        if not self.quiet:
            summary = Text(f"{self.verb} ", style="green")
            summary.append(str(len(records)), style="dark_orange")
            summary.append(f" {self.noun} for region ", style="green")
            summary.append(region, style="yellow")
            self.out.print(summary)


class InstanceReport(Report):
    """Report for ``list``.

    ``now`` is captured when the report is created so every age in one
    listing is measured from the same instant.
    """

    noun = "instances"
    verb = "Listed"

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        extended: bool = False,
        quiet_field: str = "name",
        now: datetime | None = None,
        out: Console | None = None,
    ) -> None:
        super().__init__(json_output=json_output, quiet=quiet, out=out)

        self.extended = extended
        self.quiet_field = validate_quiet_field(quiet_field, INSTANCE_QUIET_FIELDS)
        self.now = now or datetime.now(timezone.utc)

    def lines(self, records: Sequence[ResourceRecord]) -> list[Text]:
        return render_instance_lines(records, now=self.now, extended=self.extended)

    def quiet_lines(self, records: Sequence[ResourceRecord]) -> list[str]:
        return quiet_values(records, self.quiet_field)


class AddressReport(Report):
    """Report for ``ips``; JSON mode emits the raw address documents."""

    noun = "elastic IPs"
    verb = "Found"

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        quiet_field: str = "public_ip",
        raw: Sequence[dict[str, Any]] | None = None,
        out: Console | None = None,
    ) -> None:
        super().__init__(json_output=json_output, quiet=quiet, out=out)
        self.quiet_field = validate_quiet_field(quiet_field, ADDRESS_QUIET_FIELDS)
        self.raw = raw

    def documents(self, records: Sequence[AddressRecord]) -> Any:
        if self.raw is not None:
            return list(self.raw)

        return super().documents(records)

    def lines(self, records: Sequence[AddressRecord]) -> list[Text]:
        return render_address_lines(records)

    def quiet_lines(self, records: Sequence[AddressRecord]) -> list[str]:
        return quiet_values(records, self.quiet_field)


def validate_quiet_field(quiet_field: str, choices: dict[str, str]) -> str:
    """Return the record attribute for a quiet field name.

    Raises
    ------
    ValueError
        If ``quiet_field`` is not one of ``choices``
    """
    if quiet_field not in choices:
        raise ValueError(
            f"quiet_field must be one of {', '.join(sorted(choices))}, "
            f"got '{quiet_field}'"
        )

    return choices[quiet_field]
