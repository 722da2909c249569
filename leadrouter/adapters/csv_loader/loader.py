"""CSV loader — reads and normalizes the agent roster."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from leadrouter.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_number,
    parse_set,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab) of spreadsheet exports."""
    first_line = sample.splitlines()[0] if sample else ""
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect
    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def _first(row: dict[str, str | None], *keys: str) -> str | None:
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return None


def load_agents(file_path: Path) -> list[dict]:
    """Load and normalize the agent roster CSV.

    Expected columns (after normalization; aliases in brackets):
        name, contact [whatsapp, whatsapp_number, phone], email, status,
        min_amount, max_amount, purposes [loan_types], regions [service_states],
        languages, priority, max_leads
    Rows without a name or contact are skipped.
    """
    rows = _read_csv(file_path)
    agents = []
    for line_no, row in enumerate(rows, start=2):
        name = _first(row, "name", "agent", "agent_name")
        contact = _first(row, "contact", "whatsapp", "whatsapp_number", "phone")
        if not name or not contact:
            logger.warning("Row %d: missing name or contact, skipping", line_no)
            continue

        priority = parse_number(row.get("priority"))
        max_leads = parse_number(_first(row, "max_leads", "max_leads_per_day"))
        agents.append(
            {
                "name": name,
                "contact": contact,
                "email": (row.get("email") or "").lower() or None,
                "status": (row.get("status") or "active").lower(),
                "min_amount": parse_number(row.get("min_amount")) or 0.0,
                "max_amount": parse_number(row.get("max_amount")),
                "purposes": parse_set(_first(row, "purposes", "loan_types"), str.lower),
                "regions": parse_set(_first(row, "regions", "service_states")),
                "languages": parse_set(row.get("languages"), str.title),
                "priority": int(priority) if priority is not None else None,
                "max_leads": int(max_leads) if max_leads is not None else None,
            }
        )
    logger.info("Parsed %d agents", len(agents))
    return agents
