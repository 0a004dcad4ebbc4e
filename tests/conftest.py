# tests/conftest.py

import datetime

import pandas as pd
import pytest
from openpyxl import Workbook


@pytest.fixture
def valid_student():
    return {
        "nom": "Dupont",
        "prenom": "Jean",
        "email": "jean@x.fr",
        "codeEtudiant": "20241001",
    }


@pytest.fixture
def valid_evaluation():
    return {
        "nom": "DS1",
        "type": "controle",
        "coefficient": 1,
        "date": datetime.date(2024, 10, 15),
    }


@pytest.fixture
def valid_course():
    return {
        "nom": "Mathématiques",
        "code": "MATH101",
        "credits": 6,
        "semestre": "S1",
    }


@pytest.fixture
def valid_configuration():
    return {
        "noteMin": 0,
        "noteMax": 20,
        "coefficients": {"controle": 1, "examen": 2, "tp": 1, "oral": 0.5},
    }


@pytest.fixture
def valid_institution(valid_configuration):
    return {"nom": "Lycée Voltaire", "configuration": valid_configuration}


@pytest.fixture
def roster_df():
    return pd.DataFrame({
        "Nom": ["Dupont", "Martin", None, "Durand"],
        "Prénom": ["Jean", "Claire", None, "Paul"],
        "Numéro": ["20241001", "20241002", None, "20241001"],
        "Email": ["jean@x.fr", "bad", None, "paul@x.fr"],
    })


@pytest.fixture
def roster_xlsx(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.append(["Nom", "Prénom", "Numéro", "Email", "Date de naissance"])
    ws.append(["Dupont", "Jean", 20241001, "jean@x.fr", datetime.date(2003, 5, 12)])
    ws.append(["Martin", "Claire", 20241002, "claire@x.fr", None])
    ws.append(["D", "Luc", "ab", "luc@x.fr", None])
    path = tmp_path / "roster.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def roster_csv(tmp_path):
    path = tmp_path / "roster.csv"
    path.write_text(
        "Nom,Prénom,Numéro,Email\n"
        "Dupont,Jean,20241001,jean@x.fr\n"
        "Martin,Claire,20241002,claire@x.fr\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def invalid_roster_csv(tmp_path):
    path = tmp_path / "roster_errors.csv"
    path.write_text(
        "Nom,Prénom,Numéro,Email\n"
        "Dupont,Jean,20241001,jean@x.fr\n"
        "Martin,Claire,ab,bad\n",
        encoding="utf-8",
    )
    return path
