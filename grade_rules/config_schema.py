"""Configuration schema and defaults for roster imports."""

from typing import Any
import copy
import json

DEFAULT_CONFIG: dict[str, Any] = {
    "entity": "etudiant",
    "sheet_name": 0,
    "columns": {
        "etudiant": {
            "nom": ["nom", "nom de famille"],
            "prenom": ["prenom"],
            "codeEtudiant": ["numero", "matricule", "code etudiant", "codeetudiant", "code"],
            "email": ["email", "mail", "e-mail", "courriel"],
            "telephone": ["telephone", "tel", "portable"],
            "dateNaissance": ["date de naissance", "datenaissance", "naissance"],
            "statut": ["statut"]
        },
        "note": {
            "valeur": ["note", "valeur"],
            "commentaire": ["commentaire", "remarque"],
            "absent": ["absent"]
        },
        "evaluation": {
            "nom": ["nom", "evaluation"],
            "type": ["type"],
            "coefficient": ["coefficient", "coef"],
            "date": ["date"],
            "duree": ["duree", "duree (min)"]
        },
        "cours": {
            "nom": ["nom", "intitule"],
            "code": ["code"],
            "description": ["description"],
            "credits": ["credits", "ects"],
            "semestre": ["semestre"]
        }
    },
    "required_columns": {
        "etudiant": ["nom", "prenom", "codeEtudiant"],
        "note": ["valeur"],
        "evaluation": ["nom", "type", "coefficient", "date"],
        "cours": ["nom", "code", "credits", "semestre"]
    },
    "report_file": "rapport_import.xlsx",
    "log_format": "console"
}


def get_default_config() -> dict[str, Any]:
    """Return a deep copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(user_config: dict[str, Any]) -> dict[str, Any]:
    """
    Merge user configuration with defaults.

    User config values override defaults. Column aliases and required
    columns are merged per entity; missing keys use default values.
    """
    result = get_default_config()

    for entity, aliases in user_config.get("columns", {}).items():
        result["columns"].setdefault(entity, {}).update(aliases)

    if "required_columns" in user_config:
        result["required_columns"].update(user_config["required_columns"])

    for key in ("entity", "sheet_name", "report_file", "log_format"):
        if key in user_config:
            result[key] = user_config[key]

    return result


def load_config(config_path: str) -> dict[str, Any]:
    """Load a JSON configuration file and merge it with defaults."""
    with open(config_path, "r", encoding="utf-8") as f:
        return merge_config(json.load(f))
