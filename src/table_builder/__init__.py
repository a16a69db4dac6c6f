"""Table builder: reader, derived-column engine and the county election join pipeline."""

from src.table_builder.reader import read, read_many, list_tables
from src.table_builder.derive import safe_ratio, derive_columns, validate_steps
from src.table_builder.builder import (
    prepare_right_table,
    join_county_tables,
    build_county_election_table,
    build_from_sources,
)

__all__ = [
    "read",
    "read_many",
    "list_tables",
    "safe_ratio",
    "derive_columns",
    "validate_steps",
    "prepare_right_table",
    "join_county_tables",
    "build_county_election_table",
    "build_from_sources",
]
