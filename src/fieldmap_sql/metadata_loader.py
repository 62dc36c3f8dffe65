"""Load field-mapping metadata from a CSV source."""

from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import CatalogLoadError

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "column_name",
    "table_name",
    "system_a_fieldmap",
    "system_b_fieldmap",
    "field_description",
    "field_type",
    "join_key",
    "foreign_table",
    "foreign_key",
)

# Alias columns in CSV order, keyed by the system they belong to
SYSTEM_ALIAS_COLUMNS = (("system_a", 2), ("system_b", 3))

DEFAULT_SYSTEM = "default"


def normalize_system(system: Optional[str]) -> str:
    """Collapse spelling variants so "SystemA", "system_a" and "system-a" compare equal."""
    return re.sub(r"[^a-z0-9]", "", (system or "").lower())


@dataclass(frozen=True)
class FieldDefinition:
    """One row of the field-mapping table."""

    column_name: str
    table_name: str
    description: str
    field_type: str = ""
    aliases: Dict[str, str] = field(default_factory=dict)
    join_key: Optional[str] = None
    foreign_table: Optional[str] = None
    foreign_key: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.table_name}.{self.column_name}"

    @property
    def has_relationship(self) -> bool:
        return bool(self.foreign_table) and bool(self.foreign_key)

    def alias_for(self, system: Optional[str]) -> Optional[str]:
        """Return the alias this field carries in ``system``, if any."""
        wanted = normalize_system(system)
        if not wanted or wanted == DEFAULT_SYSTEM:
            return None
        for name, alias in self.aliases.items():
            if normalize_system(name) == wanted and alias:
                return alias
        return None


class FieldCatalog:
    """Read-only, ordered collection of field definitions."""

    def __init__(self, fields: Iterable[FieldDefinition], source: Optional[Path] = None):
        self._fields: Tuple[FieldDefinition, ...] = tuple(fields)
        self.source = source
        self._index: Dict[Tuple[str, str], FieldDefinition] = {}
        for definition in self._fields:
            self._index.setdefault((definition.table_name, definition.column_name), definition)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    @property
    def fields(self) -> Tuple[FieldDefinition, ...]:
        return self._fields

    @property
    def tables(self) -> List[str]:
        """Table names in the order they first appear in the source."""
        seen: Dict[str, None] = {}
        for definition in self._fields:
            seen.setdefault(definition.table_name, None)
        return list(seen)

    def get_field(self, table_name: str, column_name: str) -> Optional[FieldDefinition]:
        return self._index.get((table_name, column_name))

    def resolve_alias(self, table_name: str, column_name: str, system: Optional[str]) -> Optional[str]:
        """Name a field by the alias it carries in ``system``."""
        definition = self.get_field(table_name, column_name)
        if definition is None:
            return None
        return definition.alias_for(system)

    def get_all_fields(self, system: Optional[str] = None) -> List[FieldDefinition]:
        """All definitions, or only those with a non-empty alias for ``system``."""
        if not system or normalize_system(system) == DEFAULT_SYSTEM:
            return list(self._fields)
        return [definition for definition in self._fields if definition.alias_for(system)]


def parse_field_row(row: Sequence[str]) -> Optional[FieldDefinition]:
    """Turn a CSV record into a FieldDefinition, or None when it is too short."""

    if len(row) < len(CSV_COLUMNS):
        return None

    cells = [cell.strip() for cell in row]
    aliases = {system: cells[idx] for system, idx in SYSTEM_ALIAS_COLUMNS}
    return FieldDefinition(
        column_name=cells[0],
        table_name=cells[1],
        aliases=aliases,
        description=cells[4],
        field_type=cells[5],
        join_key=cells[6] or None,
        foreign_table=cells[7] or None,
        foreign_key=cells[8] or None,
    )


def load_field_catalog(csv_path: Path) -> FieldCatalog:
    """Load the field-mapping CSV into a catalog.

    The first row is treated as a header. Rows with fewer than nine cells are
    logged and skipped; only an unreadable file is fatal.
    """

    csv_path = Path(csv_path)
    try:
        with csv_path.open("r", encoding="utf-8", newline="") as f:
            records = list(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise CatalogLoadError(f"failed to load field mappings from {csv_path}: {exc}") from exc

    definitions: List[FieldDefinition] = []
    for line_no, row in enumerate(records[1:], start=2):
        definition = parse_field_row(row)
        if definition is None:
            logger.warning(f"Skipping invalid CSV row {line_no}: {row}")
            continue
        definitions.append(definition)

    logger.info(f"Loaded {len(definitions)} fields from {csv_path}")
    return FieldCatalog(definitions, source=csv_path)
