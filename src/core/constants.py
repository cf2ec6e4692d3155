"""Core constants used across Circo modules.

This module centralizes vocabularies, table names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".circo")
TABLES_DIR_NAME = "tables"
ARCHIVES_DIR_NAME = "archives"
ARCHIVE_FILE_SUFFIX = ".json"

SOURCE_ENCODING = "cp1252"
DECODE_PLACEHOLDER = "\ufffd"
SUPPORTED_DOCUMENT_EXTENSIONS = (".htm", ".html")

UAI_PATTERN = r"\d{7}[A-Z]"
LEVEL_CODES = ("TPS", "PS", "MS", "GS", "CP", "CE1", "CE2", "CM1", "CM2")
MATERNELLE_LEVELS = ("PS", "MS", "GS")
ELEMENTAIRE_LEVELS = ("CP", "CE1", "CE2", "CM1", "CM2")
TOTAL_LABEL = "Total"

DISPOSITIF_MARKERS = (
    ("RASED", "RASED"),
    ("ULIS", "ULIS ECOLE"),
    ("UPE2A", "UPE2A"),
    ("SEGPA", "SEGPA"),
)
BROAD_DISPOSITIF_MARKERS = ("DISPOSITIF", "UNITE D'ENSEIGNEMENT", "UNITE LOCALISEE")
DEFAULT_DISPOSITIF_TYPE = "AUTRE"
SPLIT_CLASS_TERMS = ("dedouble",)

MAX_IDENTITY_TABLES = 8
COLLEGE_TABLE_START = 2
STRUCTURE_TABLE_INDEX = 1
EFFECTIFS_TABLE_INDEX = 1
REPARTITIONS_TABLE_INDEX = 3
EFFECTIFS_HEADING = "les effectifs"
REPARTITIONS_HEADING = "les repartitions"

IDENTITY_TABLE = "ecoles_identite"
STRUCTURE_TABLE = "ecoles_structure"
STATISTICS_TABLE = "statistiques_ecoles"
TEACHERS_TABLE = "enseignants"
SCHOOL_CONFLICT_KEY = "uai"
TEACHER_CONFLICT_KEY = "id"

IDENTITY_BATCH_SIZE = 100
STRUCTURE_BATCH_SIZE = 50
STATISTICS_BATCH_SIZE = 50
TEACHER_BATCH_SIZE = 100

RAW_KIND = "brutes"
COMPUTED_KIND = "calculees"
ALL_SECTIONS = "all"
CURRENT_RAW_FIELD = "donnees_brutes"
CURRENT_COMPUTED_FIELD = "donnees_calculees"
LEGACY_DATA_FIELD = "data"
LEGACY_TYPE_SYNONYMS = {
    "enseignants": "enseignants",
    "ecoles": "ecoles_structure",
    "ecoles_identite": "ecoles_identite",
    "evaluations": "evaluations",
    "statistiques_ecoles": "statistiques_ecoles",
    "stagiaires_sopa": "stagiaires_m2",
    "stagiaires_m2": "stagiaires_m2",
    "evenements": "evenements",
}
SCHOOL_YEAR_START_MONTH = 9
