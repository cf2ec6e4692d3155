"""Label-to-attribute normalization.

Export documents label the same field in several ways. A normalizer
holds an ordered rule list, matched by case-sensitive substring with
the first matching rule winning, and a synonym table consulted on
accent-folded text when no rule matched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from core.text_utils import fold_text


@dataclass(frozen=True)
class LabelRule:
    """One ordered label-matching rule.

    Attributes:
        attribute: Canonical attribute populated on match.
        contains: Substrings, any of which selects the rule.
        excludes: Substrings that veto the rule.
        ignore_case: Compare lowercase label and substrings.
    """

    attribute: str
    contains: tuple[str, ...]
    excludes: tuple[str, ...] = ()
    ignore_case: bool = False

    def matches(self, label: str) -> bool:
        """Return whether this rule applies to ``label``."""
        subject = label.lower() if self.ignore_case else label
        if any(self._prepare(term) in subject for term in self.excludes):
            return False
        return any(self._prepare(term) in subject for term in self.contains)

    def _prepare(self, term: str) -> str:
        return term.lower() if self.ignore_case else term


@dataclass(frozen=True)
class FieldNormalizer:
    """Ordered label rules with folded synonym fallback."""

    rules: tuple[LabelRule, ...]
    synonyms: Mapping[str, str] = field(default_factory=dict)

    def resolve(self, label: str) -> str | None:
        """Map a raw label to its canonical attribute.

        Args:
            label: Raw label cell text.

        Returns:
            Canonical attribute name, or ``None`` when nothing matches.
        """
        for rule in self.rules:
            if rule.matches(label):
                return rule.attribute
        folded = fold_text(label)
        for term, attribute in self.synonyms.items():
            if re.search(rf"\b{re.escape(term)}\b", folded):
                return attribute
        return None

    def normalize(self, pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
        """Map label/value pairs to canonical attributes.

        The first non-empty value seen for an attribute is kept.

        Args:
            pairs: Label and value cell texts in document order.

        Returns:
            Canonical attribute to value mapping.
        """
        fields: dict[str, str] = {}
        for label, value in pairs:
            attribute = self.resolve(label)
            if attribute is None or not value or fields.get(attribute):
                continue
            fields[attribute] = value
        return fields


IDENTITY_NORMALIZER = FieldNormalizer(
    rules=(
        LabelRule("uai", ("UAI",)),
        LabelRule("secteur", ("Secteur",)),
        LabelRule("siret", ("SIRET",)),
        LabelRule("civilite", ("Civilité", "Civilite")),
        LabelRule("directeur", ("Directeur", "Directrice")),
        LabelRule("date_ouverture", ("ouverture",), ignore_case=True),
        LabelRule("commune", ("Commune",)),
        LabelRule("adresse", ("Adresse",)),
        LabelRule("ville", ("Ville",)),
        LabelRule("telephone", ("Téléphone", "Telephone", "phone")),
        LabelRule("email", ("Courriel", "Mél", "Email", "Mel")),
        LabelRule("college", ("Collège", "College")),
        LabelRule("etat", ("État", "Etat")),
        LabelRule("nom", ("Libellé", "Libelle", "Nom")),
        LabelRule("type", ("Type", "École", "Ecole")),
    ),
    synonyms={
        "identifiant": "uai",
        "code etablissement": "uai",
        "statut": "secteur",
        "denomination": "nom",
        "appellation": "nom",
        "nature": "type",
        "date de creation": "date_ouverture",
        "localite": "commune",
        "code postal": "ville",
        "tel": "telephone",
        "mail": "email",
    },
)

EFFECTIF_NORMALIZER = FieldNormalizer(
    rules=(
        LabelRule("en attente d'INE", ("attente d'INE",)),
        LabelRule("Admis définitifs", ("Admis définitifs", "Admis definitifs")),
        LabelRule("Admis accepté", ("Admis accepté", "Admis accepte")),
        LabelRule("Admissible", ("Admissible",)),
        LabelRule("Admis", ("Admis",)),
        LabelRule("Inscrits", ("Inscrit",), excludes=("non",)),
        LabelRule("Radiés", ("Radiés", "Radies")),
        LabelRule("répartis", ("répartis", "repartis"), excludes=("non",)),
        LabelRule("bloqué", ("bloqué", "bloque")),
    ),
)
