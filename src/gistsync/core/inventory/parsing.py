"""Parsing of winget's tabular console output.

winget has no machine-readable list output, so `winget list` and
`winget pin list` tables are parsed by column position:

    Name      Id        Version  Available Source
    ----------------------------------------------
    Git       Git.Git   2.43.0   2.44.0    winget

Column boundaries come from the header line directly above the dashed
separator. Progress spinner frames that precede the table (written with
carriage returns) and ANSI escapes are discarded.
"""

import re

from gistsync.core.packages import LocalPackage, PinRecord, normalize_id

LIST_COLUMNS = ("Name", "Id", "Version", "Available", "Source")
PIN_LIST_COLUMNS = ("Name", "Id", "Version", "Source", "Pin type", "Pinned version")

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_SEPARATOR = re.compile(r"^-{3,}$")
_TRUNCATION_MARK = "…"


def _clean_line(line: str) -> str:
    line = _ANSI_ESCAPE.sub("", line)
    if "\r" in line:
        line = line.rsplit("\r", 1)[-1]
    return line.rstrip()


def _column_starts(header: str, columns: tuple[str, ...]) -> list[tuple[str, int]]:
    """Find where each known column title starts in the header line.

    Titles missing from the header (e.g. "Available" when nothing is
    upgradable) are skipped.
    """
    starts: list[tuple[str, int]] = []
    position = 0
    for title in columns:
        match = re.compile(rf"(?<!\S){re.escape(title)}(?!\S)").search(header, position)
        if match is None:
            continue
        starts.append((title, match.start()))
        position = match.end()
    return starts


def parse_table(output: str, columns: tuple[str, ...]) -> list[dict[str, str]]:
    """Parse a winget table into one dict per row keyed by column title.

    Returns an empty list when the output contains no table (for example
    "No installed package found matching input criteria.").
    """
    lines = [_clean_line(line) for line in output.splitlines()]

    rows: list[dict[str, str]] = []
    starts: list[tuple[str, int]] = []
    for index, line in enumerate(lines):
        if not line.strip() or _SEPARATOR.match(line.strip()):
            continue
        next_line = lines[index + 1].strip() if index + 1 < len(lines) else ""
        if _SEPARATOR.match(next_line):
            # Header of a (possibly second) table
            starts = _column_starts(line, columns)
            continue
        if not starts:
            continue
        row: dict[str, str] = {}
        for position, (title, start) in enumerate(starts):
            end = starts[position + 1][1] if position + 1 < len(starts) else None
            row[title] = line[start:end].strip()
        rows.append(row)
    return rows


def _optional(value: str) -> str | None:
    return value or None


def parse_list_output(output: str) -> list[LocalPackage]:
    """Parse `winget list` output into installed packages."""
    packages: list[LocalPackage] = []
    for row in parse_table(output, LIST_COLUMNS):
        package_id = row.get("Id", "")
        # Trailing summary lines ("2 upgrades available.") have no id or version
        if not package_id or not row.get("Version"):
            continue
        packages.append(
            LocalPackage(
                id=package_id,
                name=row.get("Name", ""),
                version=row.get("Version", ""),
                available_version=_optional(row.get("Available", "")),
                source=_optional(row.get("Source", "")),
            )
        )
    return packages


def parse_pin_list_output(output: str) -> list[PinRecord]:
    """Parse `winget pin list` output into pin records."""
    pins: list[PinRecord] = []
    for row in parse_table(output, PIN_LIST_COLUMNS):
        package_id = row.get("Id", "")
        # Skip trailing notes that carry no id or installed version
        if not package_id or not row.get("Version"):
            continue
        pins.append(
            PinRecord(
                id=package_id,
                pin_type=row.get("Pin type", ""),
                pinned_version=_optional(row.get("Pinned version", "")),
            )
        )
    return pins


def id_matches(reported_id: str, package_id: str) -> bool:
    """Compare an id from winget output with a requested id.

    winget truncates long ids with an ellipsis when the console is narrow;
    a truncated id matches when the visible prefix does.
    """
    if normalize_id(reported_id) == normalize_id(package_id):
        return True
    if reported_id.endswith(_TRUNCATION_MARK):
        prefix = reported_id[: -len(_TRUNCATION_MARK)]
        return bool(prefix) and normalize_id(package_id).startswith(normalize_id(prefix))
    return False
