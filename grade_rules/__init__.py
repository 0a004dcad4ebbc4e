"""Entity validation engine for the grade-management application."""

from .messages import ERROR_MESSAGES, ErrorKind, ImportFormatError, SchemaDefinitionError
from .rules import RULES, FieldRule, get_rule, optional, with_default
from .schemas import SCHEMAS, Schema, compose_schema, get_schema
from .validator import Accepted, Rejected, validate, validate_entity, validate_field
from .config_schema import DEFAULT_CONFIG, get_default_config, load_config, merge_config
from .importer import ImportReport, import_roster
from .report_writer import build_error_report

__all__ = [
    "ERROR_MESSAGES",
    "ErrorKind",
    "ImportFormatError",
    "SchemaDefinitionError",
    "RULES",
    "FieldRule",
    "get_rule",
    "optional",
    "with_default",
    "SCHEMAS",
    "Schema",
    "compose_schema",
    "get_schema",
    "Accepted",
    "Rejected",
    "validate",
    "validate_entity",
    "validate_field",
    "DEFAULT_CONFIG",
    "get_default_config",
    "load_config",
    "merge_config",
    "ImportReport",
    "import_roster",
    "build_error_report",
]
