#!/usr/bin/env python3
"""
Roster Import Checker

Validates a spreadsheet of students (or grades, evaluations, courses) row by
row before it is imported, and writes an Excel report listing every rejected
cell.

Usage:
    1. Export the roster as .xlsx or .csv with a header row (Nom, Prénom, Numéro, ...)
    2. Run: check-import roster.xlsx
    3. Fix the rows listed in the report and run again
"""

import json
import sys
from pathlib import Path

import click

from grade_rules import ImportFormatError, build_error_report, import_roster
from grade_rules.config_schema import DEFAULT_CONFIG, get_default_config, load_config
from grade_rules.log_setup import configure_logging


def load_existing_codes(codes_path: str) -> list[str]:
    """Load known student codes from a text file, ignoring comments and empty lines."""
    codes = []
    with open(codes_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                codes.append(line)
    return codes


@click.command()
@click.argument("roster", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Fichier de configuration JSON")
@click.option("--entity", type=click.Choice(sorted(DEFAULT_CONFIG["columns"])), help="Entité décrite par les lignes (défaut : etudiant)")
@click.option("--report", "report_path", help="Chemin du rapport d'erreurs (.xlsx)")
@click.option("--existing-codes", type=click.Path(exists=True, dir_okay=False), help="Fichier des codes étudiants déjà enregistrés, un par ligne")
@click.option("--json", "as_json", is_flag=True, help="Affiche les lignes acceptées et les erreurs en JSON")
def main(roster, config_path, entity, report_path, existing_codes, as_json):
    """Vérifie ROSTER avant son import."""
    config = load_config(config_path) if config_path else get_default_config()
    if entity:
        config["entity"] = entity

    configure_logging(config["log_format"])

    codes = load_existing_codes(existing_codes) if existing_codes else []

    try:
        report = import_roster(roster, config, existing_codes=codes)
    except ImportFormatError as exc:
        click.echo(f"❌ Erreur : {exc}", err=True)
        sys.exit(1)

    if as_json:
        payload = {
            "entity": report.entity,
            "accepted": report.accepted,
            "issues": report.issues,
        }
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
    else:
        click.echo("📋 Résumé :")
        click.echo(f"   Lignes lues : {report.total_rows}")
        click.echo(f"   Lignes valides : {report.valid_count}")
        click.echo(f"   Lignes rejetées : {report.invalid_count}")
        for issue in report.issues:
            click.echo(f"   Ligne {issue['row']} [{issue['column']}] : {issue['message']}")

    if not report.issues:
        if not as_json:
            click.echo("\n🎉 Toutes les lignes sont valides, le fichier peut être importé.")
        return

    output_file = report_path or config.get("report_file", "rapport_import.xlsx")
    wb = build_error_report(report, Path(roster).name)
    wb.save(output_file)
    click.echo(f"✓ Rapport d'erreurs enregistré dans {output_file}", err=as_json)
    sys.exit(1)


if __name__ == "__main__":
    main()
