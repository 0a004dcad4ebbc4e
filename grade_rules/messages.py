"""Error kinds, fixed messages and exceptions used by the validation engine."""

from enum import Enum


class ErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"
    LENGTH_VIOLATION = "LENGTH_VIOLATION"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    # wrong structural type for a field or a nested object
    MALFORMED_SHAPE = "MALFORMED_SHAPE"


ERROR_MESSAGES: dict[str, str] = {
    "required": "Ce champ est obligatoire",
    "invalidEmail": "Format d'email invalide",
    "passwordTooShort": "Le mot de passe doit contenir au moins 8 caractères",
    "passwordWeak": "Le mot de passe doit contenir au moins une minuscule, une majuscule et un chiffre",
    "invalidDate": "Date invalide",
    "noteBounds": "La note doit être comprise entre 0 et 20",
    "duplicateCode": "Ce code existe déjà",
    "networkError": "Erreur de connexion. Veuillez réessayer.",
    "unknownError": "Une erreur inattendue s'est produite",
}

TYPE_MESSAGES: dict[str, str] = {
    "number": "Un nombre est attendu",
    "integer": "Un nombre entier est attendu",
    "string": "Une chaîne de caractères est attendue",
    "date": ERROR_MESSAGES["invalidDate"],
    "boolean": "Une valeur vrai/faux est attendue",
    "object": "Un objet est attendu",
}


def enum_message(choices: tuple) -> str:
    """Message for a value outside a closed set of choices."""
    expected = " | ".join(f"'{c}'" for c in choices)
    return f"Valeur invalide. Valeurs attendues : {expected}"


class SchemaDefinitionError(Exception):
    """A schema references a rule or schema that does not exist."""


class ImportFormatError(Exception):
    """A roster file cannot be read or lacks required columns."""
