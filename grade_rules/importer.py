"""
Spreadsheet import pipeline.

Reads a roster (or grade/evaluation/course sheet) into a DataFrame, maps its
headers onto schema fields, turns each row into a raw record and validates it.
Rows that pass are handed back with their accepted data; every failing cell
is reported with its spreadsheet row number so the user can fix the file.

Uniqueness of student codes is checked here, not by the validator: the
caller passes the codes that already exist in storage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable
import datetime
import numbers
import unicodedata
import zipfile

import pandas as pd
import structlog
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError

from .config_schema import get_default_config
from .messages import ERROR_MESSAGES, ImportFormatError
from .rules import FieldRule
from .schemas import Schema, get_schema
from .validator import Rejected, validate

logger = structlog.get_logger(__name__)

# header row is spreadsheet row 1
FIRST_DATA_ROW = 2

TRUE_WORDS = {"oui", "o", "vrai", "true", "yes", "x", "1"}
FALSE_WORDS = {"non", "n", "faux", "false", "no", "0"}


@dataclass
class ImportReport:
    """Outcome of validating every row of an imported sheet."""

    entity: str
    total_rows: int = 0
    accepted: list[dict[str, Any]] = field(default_factory=list)
    issues: list[dict[str, Any]] = field(default_factory=list)

    @property
    def rejected_rows(self) -> list[int]:
        return sorted({issue["row"] for issue in self.issues})

    @property
    def valid_count(self) -> int:
        return len(self.accepted)

    @property
    def invalid_count(self) -> int:
        return len(self.rejected_rows)

    @property
    def records(self) -> list[dict[str, Any]]:
        """Accepted data, ready to be turned into persistence requests."""
        return [row["data"] for row in self.accepted]


def normalize_header(header: Any) -> str:
    """Lowercase, trim, fold accents and collapse inner whitespace."""
    text = unicodedata.normalize("NFKD", str(header))
    text = "".join(c for c in text if not unicodedata.combining(c))
    return " ".join(text.lower().split())


def map_columns(headers: Iterable[Any], aliases: dict[str, list[str]]) -> dict[str, Any]:
    """
    Match sheet headers to schema fields.

    Returns:
        Dict mapping field name to the original header it was found under.
        Each header is used for at most one field.
    """
    normalized = [(normalize_header(h), h) for h in headers]
    mapping: dict[str, Any] = {}
    used: set[str] = set()

    for field_name, names in aliases.items():
        wanted = {normalize_header(n) for n in names}
        for norm, original in normalized:
            if norm in wanted and norm not in used:
                mapping[field_name] = original
                used.add(norm)
                break

    return mapping


def load_sheet(path: str | Path, sheet_name: str | int = 0) -> pd.DataFrame:
    """
    Read an .xlsx, .xls or .csv file into a DataFrame of raw cell values.

    Raises:
        ImportFormatError: If the file type is unsupported, the file cannot
            be read, or it has no data rows.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".csv":
            df = pd.read_csv(path, dtype=object, keep_default_na=False)
        elif suffix in (".xlsx", ".xlsm"):
            df = pd.read_excel(
                path, sheet_name=sheet_name, dtype=object, keep_default_na=False, engine="openpyxl"
            )
        elif suffix == ".xls":
            df = pd.read_excel(
                path, sheet_name=sheet_name, dtype=object, keep_default_na=False, engine="xlrd"
            )
        else:
            raise ImportFormatError(
                f"Format de fichier invalide: {path.name} (attendu .xlsx, .xls ou .csv)"
            )
    except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException, XLRDError) as exc:
        raise ImportFormatError(f"Impossible de lire le fichier {path.name}: {exc}") from exc

    if df.empty:
        raise ImportFormatError(f"Le fichier {path.name} ne contient pas de données")

    return df


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if pd.api.types.is_scalar(value):
        return bool(pd.isna(value))
    return False


def _to_string(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real) and float(value).is_integer():
        # codes typed as numbers come back from Excel as floats
        return str(int(value))
    return str(value)


def _to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return value
        return int(number) if number.is_integer() and "." not in text else number
    return value


def _to_date(value: Any) -> Any:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.datetime.strptime(text, "%d/%m/%Y").date()
        except ValueError:
            return value
    return value


def _to_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral) and int(value) in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
    return value


_CONVERTERS = {
    "string": _to_string,
    "enum": _to_string,
    "number": _to_number,
    "date": _to_date,
    "boolean": _to_boolean,
}


def row_to_record(row: pd.Series, mapping: dict[str, Any], schema: Schema) -> dict[str, Any]:
    """
    Turn one sheet row into a raw record for the validator.

    Blank cells are left out so the validator treats them as absent. Cells
    that cannot be converted are passed through unchanged and rejected
    downstream.
    """
    record: dict[str, Any] = {}
    for field_name, header in mapping.items():
        value = row.get(header)
        if _is_blank(value):
            continue
        node = schema.fields.get(field_name)
        if isinstance(node, FieldRule):
            value = _CONVERTERS[node.kind](value)
        record[field_name] = value
    return record


def validate_rows(
    df: pd.DataFrame,
    schema: Schema,
    mapping: dict[str, Any],
    existing_codes: Iterable[str] = (),
) -> ImportReport:
    """
    Validate every non-blank row of a sheet.

    Args:
        df: Sheet contents, one record per row
        schema: Entity schema the rows must satisfy
        mapping: Field name to header, as returned by map_columns
        existing_codes: Student codes already stored; a row reusing one, or
            repeating a code from an earlier row, is rejected

    Returns:
        ImportReport with accepted rows and per-cell issues.
    """
    report = ImportReport(entity=schema.name)
    seen_codes = set(existing_codes)
    checks_codes = "codeEtudiant" in schema.fields

    for row_number, (_, row) in enumerate(df.iterrows(), start=FIRST_DATA_ROW):
        record = row_to_record(row, mapping, schema)
        if not record:
            continue

        report.total_rows += 1
        row_issues = []
        result = validate(schema, record)

        if isinstance(result, Rejected):
            for path, message in result.errors.items():
                row_issues.append({
                    "row": row_number,
                    "column": mapping.get(path, path),
                    "value": record.get(path, ""),
                    "message": message,
                })

        code = record.get("codeEtudiant") if checks_codes else None
        if isinstance(code, str) and code:
            if code in seen_codes and not any(i["column"] == mapping["codeEtudiant"] for i in row_issues):
                row_issues.append({
                    "row": row_number,
                    "column": mapping["codeEtudiant"],
                    "value": code,
                    "message": ERROR_MESSAGES["duplicateCode"],
                })
            seen_codes.add(code)

        if row_issues:
            report.issues.extend(row_issues)
        else:
            report.accepted.append({"row": row_number, "data": result.data})

    logger.info(
        "rows_validated",
        entity=schema.name,
        rows=report.total_rows,
        accepted=report.valid_count,
        rejected=report.invalid_count,
    )
    return report


def import_roster(
    path: str | Path,
    config: dict[str, Any] | None = None,
    existing_codes: Iterable[str] = (),
) -> ImportReport:
    """
    Load a sheet and validate it against the configured entity schema.

    Raises:
        ImportFormatError: If the file cannot be read or lacks a required column.
    """
    config = config or get_default_config()
    entity = config["entity"]
    schema = get_schema(entity)

    df = load_sheet(path, config.get("sheet_name", 0))
    mapping = map_columns(df.columns, config["columns"].get(entity, {}))

    required = config["required_columns"].get(entity, [])
    missing = [name for name in required if name not in mapping]
    if missing:
        logger.warning("missing_columns", path=str(path), entity=entity, missing=missing)
        raise ImportFormatError(
            f"Colonnes manquantes: {', '.join(missing)}"
        )

    logger.debug("columns_mapped", path=str(path), mapping={k: str(v) for k, v in mapping.items()})
    return validate_rows(df, schema, mapping, existing_codes)
