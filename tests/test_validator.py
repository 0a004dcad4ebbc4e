# tests/test_validator.py

import datetime

import pytest

from grade_rules.messages import ErrorKind, SchemaDefinitionError
from grade_rules.rules import RULES
from grade_rules.schemas import (
    COURSE,
    EVALUATION,
    GRADE,
    INSTITUTION,
    INSTITUTION_CONFIGURATION,
    STUDENT,
)
from grade_rules.validator import (
    Accepted,
    Rejected,
    validate,
    validate_entity,
    validate_field,
)


def test_valid_student_gets_default_status(valid_student):
    result = validate(STUDENT, valid_student)

    assert isinstance(result, Accepted)
    assert result.success
    assert result.data == {**valid_student, "statut": "actif"}


def test_student_with_several_invalid_fields():
    result = validate(STUDENT, {
        "nom": "D",
        "prenom": "Jean",
        "email": "bad",
        "codeEtudiant": "ab",
    })

    assert isinstance(result, Rejected)
    assert not result.success
    assert set(result.errors) == {"nom", "email", "codeEtudiant"}


def test_grade_above_twenty_is_rejected():
    result = validate(GRADE, {"valeur": 25})

    assert result.errors == {"valeur": "La note ne peut pas dépasser 20"}


def test_valid_grade():
    result = validate(GRADE, {"valeur": 15, "absent": False})

    assert result == Accepted({"valeur": 15, "absent": False})


def test_grade_absent_defaults_to_false():
    result = validate(GRADE, {"valeur": 0})

    assert result.data == {"valeur": 0, "absent": False}


def test_nested_coefficient_error_path():
    result = validate(INSTITUTION_CONFIGURATION, {
        "noteMin": 0,
        "noteMax": 20,
        "coefficients": {"controle": 1, "examen": 2, "tp": 1, "oral": 0.05},
    })

    assert result.errors == {"coefficients.oral": "Le coefficient doit être au moins 0.1"}


def test_institution_error_paths_are_prefixed(valid_institution):
    valid_institution["configuration"]["coefficients"]["oral"] = 0.05
    valid_institution["configuration"]["noteMax"] = 21

    result = validate(INSTITUTION, valid_institution)

    assert set(result.errors) == {
        "configuration.coefficients.oral",
        "configuration.noteMax",
    }


def test_unknown_evaluation_type(valid_evaluation):
    valid_evaluation["type"] = "unknown"

    result = validate(EVALUATION, valid_evaluation)

    assert list(result.errors) == ["type"]
    assert result.kinds["type"] == ErrorKind.INVALID_ENUM_VALUE


def test_enum_values_are_not_coerced(valid_student):
    valid_student["statut"] = "ACTIF"

    result = validate(STUDENT, valid_student)

    assert set(result.errors) == {"statut"}


def test_explicit_status_is_not_overridden(valid_student):
    valid_student["statut"] = "diplome"

    assert validate(STUDENT, valid_student).data["statut"] == "diplome"


def test_missing_required_field(valid_student):
    del valid_student["email"]

    result = validate(STUDENT, valid_student)

    assert result.errors == {"email": "Ce champ est obligatoire"}
    assert result.kinds["email"] == ErrorKind.MISSING_REQUIRED_FIELD


def test_none_counts_as_missing(valid_student):
    valid_student["email"] = None
    valid_student["telephone"] = None

    result = validate(STUDENT, valid_student)

    assert set(result.errors) == {"email"}


def test_optional_omission_never_errors(valid_evaluation):
    result = validate(EVALUATION, valid_evaluation)

    assert isinstance(result, Accepted)
    assert "duree" not in result.data


def test_empty_optional_string_is_validated(valid_student):
    valid_student["telephone"] = ""

    result = validate(STUDENT, valid_student)

    assert result.errors == {"telephone": "Format de téléphone invalide"}


def test_every_invalid_field_is_reported():
    result = validate(EVALUATION, {
        "nom": "D",
        "type": "quiz",
        "coefficient": 11,
        "date": "2024-10-15",
        "duree": 10,
    })

    assert set(result.errors) == {"nom", "type", "coefficient", "date", "duree"}


def test_course_credits_must_be_whole(valid_course):
    valid_course["credits"] = 2.5
    assert validate(COURSE, valid_course).errors == {
        "credits": "Le nombre de crédits doit être un entier"
    }

    valid_course["credits"] = 11
    assert validate(COURSE, valid_course).errors == {"credits": "Maximum 10 crédits"}


def test_unknown_fields_are_ignored_and_dropped(valid_course):
    valid_course["couleur"] = "bleu"

    result = validate(COURSE, valid_course)

    assert isinstance(result, Accepted)
    assert "couleur" not in result.data


@pytest.mark.parametrize("data", ["etudiant", 42, None, ["Dupont"]])
def test_malformed_root_is_rejected_not_raised(data):
    result = validate(STUDENT, data)

    assert result.errors == {"": "Un objet est attendu"}
    assert result.kinds[""] == ErrorKind.MALFORMED_SHAPE


def test_malformed_nested_object(valid_institution):
    valid_institution["configuration"] = "standard"

    result = validate(INSTITUTION, valid_institution)

    assert result.errors == {"configuration": "Un objet est attendu"}


def test_missing_nested_object():
    result = validate(INSTITUTION, {"nom": "Lycée Voltaire"})

    assert result.errors == {"configuration": "Ce champ est obligatoire"}


def test_accepted_data_validates_again(valid_student, valid_institution, valid_evaluation):
    valid_student["dateNaissance"] = datetime.date(2004, 2, 29)
    for schema, data in (
        (STUDENT, valid_student),
        (INSTITUTION, valid_institution),
        (EVALUATION, valid_evaluation),
        (GRADE, {"valeur": 20, "commentaire": "Très bien"}),
    ):
        first = validate(schema, data)
        second = validate(schema, first.data)

        assert second == first


def test_input_is_not_mutated(valid_student):
    original = dict(valid_student)

    validate(STUDENT, valid_student)

    assert valid_student == original


def test_validate_entity_by_name():
    assert validate_entity("note", {"valeur": 12}).success

    with pytest.raises(SchemaDefinitionError):
        validate_entity("professeur", {})


def test_result_to_dict():
    assert validate(GRADE, {"valeur": 12}).to_dict() == {
        "success": True,
        "data": {"valeur": 12, "absent": False},
    }
    assert validate(GRADE, {"valeur": -1}).to_dict() == {
        "success": False,
        "errors": {"valeur": "La note ne peut pas être négative"},
    }


def test_rejected_issues():
    issues = validate(GRADE, {}).issues()

    assert issues == [{
        "field": "valeur",
        "kind": "MISSING_REQUIRED_FIELD",
        "message": "Ce champ est obligatoire",
    }]


def test_validate_field():
    assert validate_field(RULES["nom"], "Dupont") is None
    assert validate_field(RULES["nom"], "D") == "Le nom doit contenir au moins 2 caractères"
    assert validate_field(RULES["nom"], None) == "Ce champ est obligatoire"
    assert validate_field(RULES["telephone"], None) is None


def test_huge_integers_are_rejected(valid_course):
    grade = validate(GRADE, {"valeur": 10 ** 400})
    assert grade.errors == {"valeur": "La note ne peut pas dépasser 20"}

    valid_course["credits"] = 10 ** 400
    course = validate(COURSE, valid_course)
    assert course.errors == {"credits": "Maximum 10 crédits"}
