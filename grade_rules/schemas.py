"""
Entity schema registry.

Each schema maps field names to a catalog rule (referenced by name), an
inline rule, or a nested schema. Names are resolved when the module is
imported, so a reference to a rule that does not exist fails at startup
instead of during validation.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Union

from .messages import SchemaDefinitionError
from .rules import (
    FieldRule,
    at_least,
    at_most,
    boolean,
    date,
    enum,
    get_rule,
    max_length,
    min_length,
    number,
    optional,
    string,
    whole_number,
    with_default,
)


@dataclass(frozen=True)
class Schema:
    name: str
    fields: Mapping[str, Union[FieldRule, "Schema"]]


STUDENT_STATUSES = ("actif", "inactif", "diplome")
SEMESTERS = ("S1", "S2", "S3", "S4", "S5", "S6")
EVALUATION_TYPES = ("controle", "examen", "tp", "oral")


def compose_schema(name: str, fields: dict[str, Any]) -> Schema:
    """
    Build an immutable schema from field declarations.

    A declaration is either the name of a catalog rule, a FieldRule, or a
    nested Schema.

    Raises:
        SchemaDefinitionError: If a declaration names an unknown rule or is
            of an unsupported type.
    """
    resolved: dict[str, FieldRule | Schema] = {}
    for field_name, declaration in fields.items():
        if isinstance(declaration, str):
            resolved[field_name] = get_rule(declaration)
        elif isinstance(declaration, (FieldRule, Schema)):
            resolved[field_name] = declaration
        else:
            raise SchemaDefinitionError(
                f"Field '{name}.{field_name}' has an unsupported declaration: {declaration!r}"
            )
    return Schema(name, MappingProxyType(resolved))


STUDENT = compose_schema("etudiant", {
    "nom": "nom",
    "prenom": "nom",
    "email": "email",
    "codeEtudiant": "codeEtudiant",
    "dateNaissance": optional(get_rule("dateNaissance")),
    "telephone": "telephone",
    "statut": with_default(enum("statut", STUDENT_STATUSES), "actif"),
})

COURSE = compose_schema("cours", {
    "nom": string("nom", min_length(2, "Le nom du cours doit contenir au moins 2 caractères")),
    "code": string("code", min_length(2, "Le code du cours doit contenir au moins 2 caractères")),
    "description": optional(string("description")),
    "credits": number(
        "credits",
        whole_number("Le nombre de crédits doit être un entier"),
        at_least(1, "Le nombre de crédits doit être au moins 1"),
        at_most(10, "Maximum 10 crédits"),
    ),
    "semestre": enum("semestre", SEMESTERS),
})

EVALUATION = compose_schema("evaluation", {
    "nom": string("nom", min_length(2, "Le nom de l'évaluation doit contenir au moins 2 caractères")),
    "type": enum("type", EVALUATION_TYPES),
    "coefficient": "coefficient",
    "date": date("date"),
    "duree": optional(number(
        "duree",
        at_least(15, "Durée minimum 15 minutes"),
        at_most(480, "Durée maximum 8 heures"),
    )),
})

GRADE = compose_schema("note", {
    "valeur": "note",
    "commentaire": optional(string(
        "commentaire",
        max_length(500, "Le commentaire ne peut pas dépasser 500 caractères"),
    )),
    "absent": with_default(boolean("absent"), False),
})


def _bounded_grade(name: str) -> FieldRule:
    return number(
        name,
        at_least(0, "La valeur doit être comprise entre 0 et 20"),
        at_most(20, "La valeur doit être comprise entre 0 et 20"),
    )


INSTITUTION_CONFIGURATION = compose_schema("configuration_etablissement", {
    "noteMin": _bounded_grade("noteMin"),
    "noteMax": _bounded_grade("noteMax"),
    "coefficients": compose_schema(
        "coefficients",
        {evaluation_type: "coefficient" for evaluation_type in EVALUATION_TYPES},
    ),
})

INSTITUTION = compose_schema("etablissement", {
    "nom": string("nom", min_length(2, "Le nom de l'établissement doit contenir au moins 2 caractères")),
    "configuration": INSTITUTION_CONFIGURATION,
})


SCHEMAS: MappingProxyType = MappingProxyType({
    schema.name: schema
    for schema in (STUDENT, COURSE, EVALUATION, GRADE, INSTITUTION, INSTITUTION_CONFIGURATION)
})


def get_schema(name: str) -> Schema:
    """Look up a registered entity schema by name."""
    try:
        return SCHEMAS[name]
    except KeyError:
        available = ", ".join(SCHEMAS)
        raise SchemaDefinitionError(
            f"Unknown schema '{name}' (available: {available})"
        ) from None
