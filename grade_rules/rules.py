"""
Rule catalog: named, entity-agnostic field constraints.

A rule is plain data: a semantic kind (number, string, date, boolean, enum)
plus an ordered tuple of checks. Each check pairs a predicate with an error
kind and a fixed message. Checks run in order and the first failure wins.

Rules are never subclassed. Variants are derived with `optional()` and
`with_default()`, which return new frozen records.
"""

import dataclasses
import datetime
import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, NamedTuple
from urllib.parse import urlparse

from .messages import (
    ERROR_MESSAGES,
    TYPE_MESSAGES,
    ErrorKind,
    SchemaDefinitionError,
    enum_message,
)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# marks "no default declared"; None is a legitimate default
MISSING: Any = _Missing()


class Issue(NamedTuple):
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Check:
    kind: ErrorKind
    test: Callable[[Any], bool]
    message: str


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: str
    checks: tuple[Check, ...] = ()
    optional: bool = False
    default: Any = MISSING
    choices: tuple = ()

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def check(self, value: Any) -> Issue | None:
        """Return the first failing issue for a present value, or None."""
        if self.kind == "enum":
            if not isinstance(value, str) or value not in self.choices:
                return Issue(ErrorKind.INVALID_ENUM_VALUE, enum_message(self.choices))
            return None

        if not _TYPE_TESTS[self.kind](value):
            return Issue(ErrorKind.MALFORMED_SHAPE, TYPE_MESSAGES[self.kind])

        for check in self.checks:
            if not check.test(value):
                return Issue(check.kind, check.message)
        return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


_TYPE_TESTS: dict[str, Callable[[Any], bool]] = {
    "number": _is_number,
    "string": lambda v: isinstance(v, str),
    "date": lambda v: isinstance(v, datetime.date),
    "boolean": lambda v: isinstance(v, bool),
}


def _as_date(value: datetime.date) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


# --- check constructors ---

def at_least(minimum: float, message: str) -> Check:
    return Check(ErrorKind.OUT_OF_RANGE, lambda v: v >= minimum, message)


def at_most(maximum: float, message: str) -> Check:
    return Check(ErrorKind.OUT_OF_RANGE, lambda v: v <= maximum, message)


def whole_number(message: str = TYPE_MESSAGES["integer"]) -> Check:
    return Check(ErrorKind.MALFORMED_SHAPE, lambda v: isinstance(v, int) or v.is_integer(), message)


def min_length(length: int, message: str) -> Check:
    return Check(ErrorKind.LENGTH_VIOLATION, lambda v: len(v) >= length, message)


def max_length(length: int, message: str) -> Check:
    return Check(ErrorKind.LENGTH_VIOLATION, lambda v: len(v) <= length, message)


def matches(pattern: re.Pattern, message: str, whole: bool = True) -> Check:
    """Pattern check; `whole=False` only requires a match at the start."""
    if whole:
        return Check(ErrorKind.PATTERN_MISMATCH, lambda v: pattern.fullmatch(v) is not None, message)
    return Check(ErrorKind.PATTERN_MISMATCH, lambda v: pattern.match(v) is not None, message)


def not_before(earliest: datetime.date, message: str) -> Check:
    return Check(ErrorKind.OUT_OF_RANGE, lambda v: _as_date(v) >= earliest, message)


def not_in_future(message: str) -> Check:
    # today is read on every call, not frozen at import
    return Check(ErrorKind.OUT_OF_RANGE, lambda v: _as_date(v) <= datetime.date.today(), message)


def _is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def url_shape(message: str) -> Check:
    return Check(ErrorKind.PATTERN_MISMATCH, _is_url, message)


# --- rule constructors ---

def number(name: str, *checks: Check) -> FieldRule:
    return FieldRule(name, "number", tuple(checks))


def string(name: str, *checks: Check) -> FieldRule:
    return FieldRule(name, "string", tuple(checks))


def date(name: str, *checks: Check) -> FieldRule:
    return FieldRule(name, "date", tuple(checks))


def boolean(name: str) -> FieldRule:
    return FieldRule(name, "boolean")


def enum(name: str, values: tuple[str, ...] | list[str]) -> FieldRule:
    return FieldRule(name, "enum", choices=tuple(values))


def optional(rule: FieldRule) -> FieldRule:
    return dataclasses.replace(rule, optional=True)


def with_default(rule: FieldRule, value: Any) -> FieldRule:
    """An optional rule whose absent value is replaced by `value`."""
    return dataclasses.replace(rule, optional=True, default=value)


NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÿ\s\-']+$")
STUDENT_CODE_PATTERN = re.compile(r"^[A-Za-z0-9\-_]+$")
EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Z0-9_'+\-.]*)[A-Z0-9_+\-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE | re.ASCII,
)
PHONE_PATTERN = re.compile(r"^(\+33|0)[1-9]\d{8}$", re.ASCII)
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)", re.ASCII)

EARLIEST_BIRTH_DATE = datetime.date(1900, 1, 1)


RULES: MappingProxyType = MappingProxyType({
    "note": number(
        "note",
        at_least(0, "La note ne peut pas être négative"),
        at_most(20, "La note ne peut pas dépasser 20"),
    ),
    "nom": string(
        "nom",
        min_length(2, "Le nom doit contenir au moins 2 caractères"),
        max_length(50, "Le nom ne peut pas dépasser 50 caractères"),
        matches(NAME_PATTERN, "Le nom contient des caractères invalides"),
    ),
    "email": string(
        "email",
        matches(EMAIL_PATTERN, ERROR_MESSAGES["invalidEmail"]),
        max_length(100, "L'email ne peut pas dépasser 100 caractères"),
    ),
    "codeEtudiant": string(
        "codeEtudiant",
        min_length(3, "Le code étudiant doit contenir au moins 3 caractères"),
        max_length(20, "Le code étudiant ne peut pas dépasser 20 caractères"),
        matches(
            STUDENT_CODE_PATTERN,
            "Le code étudiant ne peut contenir que des lettres, chiffres, tirets et underscores",
        ),
    ),
    "coefficient": number(
        "coefficient",
        at_least(0.1, "Le coefficient doit être au moins 0.1"),
        at_most(10, "Le coefficient ne peut pas dépasser 10"),
    ),
    "dateNaissance": date(
        "dateNaissance",
        not_before(EARLIEST_BIRTH_DATE, "Date de naissance invalide"),
        not_in_future("La date de naissance ne peut pas être dans le futur"),
    ),
    "telephone": optional(string(
        "telephone",
        matches(PHONE_PATTERN, "Format de téléphone invalide"),
    )),
    "motDePasse": string(
        "motDePasse",
        min_length(8, ERROR_MESSAGES["passwordTooShort"]),
        matches(PASSWORD_PATTERN, ERROR_MESSAGES["passwordWeak"], whole=False),
    ),
    "url": optional(string(
        "url",
        url_shape("Format d'URL invalide"),
    )),
})


def get_rule(name: str) -> FieldRule:
    """Resolve a catalog rule by name."""
    try:
        return RULES[name]
    except KeyError:
        raise SchemaDefinitionError(f"Unknown rule '{name}'") from None
