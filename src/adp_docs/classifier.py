"""
Klassifizierung der ADP-Dokumente anhand des extrahierten Textes.

Erkannte Dokumentarten (in dieser Prioritaet):
1. Lohnsteuerbescheinigung (Jahr)
2. Meldebescheinigung zur Sozialversicherung (Abrechnungsmonat)
3. Verdienstabrechnung (Abrechnungsmonat, ggf. Rueckrechnung)

Die erste passende Regel entscheidet. Monatsnamen werden unveraendert aus
dem Text uebernommen.
"""

import logging
import re
from typing import Callable, Optional, Tuple

from .models import ClassificationResult, DocumentCategory, Period

logger = logging.getLogger(__name__)

TAX_CERTIFICATE_LABEL = "Lohnsteuerbescheinigung"
SOCIAL_INSURANCE_LABEL = "Meldebescheinigung zur Sozialversicherung"
PAYSLIP_LABEL = "Verdienstabrechnung"
CORRECTION_LABEL = "Rückrechnung"

FILE_EXTENSION = ".pdf"

_MONTH_YEAR = r":?\s*([A-Za-zäöüÄÖÜß]+)\s+([0-9]{4})"

PATTERNS = {
    # "Ausdruck der elektronischen Lohnsteuerbescheinigung für 2022"
    "tax_certificate": re.compile(
        r"Ausdruck der elektronischen Lohnsteuerbescheinigung für ([0-9]{4})"
    ),
    "social_insurance": re.compile(re.escape(SOCIAL_INSURANCE_LABEL)),
    "payslip": re.compile(re.escape(PAYSLIP_LABEL)),
    # "Abrechnungsmonat: März 2023"
    "billing_month": re.compile(r"Abrechnungsmonat" + _MONTH_YEAR),
    # "Rückrechnung: Dezember 2023"
    "correction": re.compile(CORRECTION_LABEL + _MONTH_YEAR),
}


def _month_year(pattern_name: str, text: str) -> Optional[Period]:
    match = PATTERNS[pattern_name].search(text)
    if not match:
        return None
    return Period(month=match.group(1), year=match.group(2))


def classify_tax_certificate(text: str) -> Optional[ClassificationResult]:
    match = PATTERNS["tax_certificate"].search(text)
    if not match:
        return None
    year = match.group(1)
    return ClassificationResult(
        category=DocumentCategory.TAX_CERTIFICATE,
        period=Period(year=year),
        proposed_name=f"{TAX_CERTIFICATE_LABEL} - {year}{FILE_EXTENSION}",
    )


def classify_social_insurance(text: str) -> Optional[ClassificationResult]:
    if not PATTERNS["social_insurance"].search(text):
        return None

    period = _month_year("billing_month", text)
    if period is None:
        return ClassificationResult(category=DocumentCategory.SOCIAL_INSURANCE_CERTIFICATE)

    return ClassificationResult(
        category=DocumentCategory.SOCIAL_INSURANCE_CERTIFICATE,
        period=period,
        proposed_name=f"{SOCIAL_INSURANCE_LABEL} - {period}{FILE_EXTENSION}",
    )


def classify_payslip(text: str) -> Optional[ClassificationResult]:
    if not PATTERNS["payslip"].search(text):
        return None

    period = _month_year("billing_month", text)
    if period is None:
        return ClassificationResult(category=DocumentCategory.PAYSLIP)

    correction = _month_year("correction", text)
    if correction is not None:
        # Rueckrechnung: benannt nach dem korrigierten Monat
        return ClassificationResult(
            category=DocumentCategory.PAYSLIP,
            period=period,
            is_correction=True,
            correction_period=correction,
            proposed_name=f"{PAYSLIP_LABEL} - {correction} - {CORRECTION_LABEL}{FILE_EXTENSION}",
        )

    return ClassificationResult(
        category=DocumentCategory.PAYSLIP,
        period=period,
        proposed_name=f"{PAYSLIP_LABEL} - {period}{FILE_EXTENSION}",
    )


Rule = Callable[[str], Optional[ClassificationResult]]

RULES: Tuple[Rule, ...] = (
    classify_tax_certificate,
    classify_social_insurance,
    classify_payslip,
)

UNRECOGNIZED = ClassificationResult(category=DocumentCategory.UNRECOGNIZED)


class DocumentClassifier:
    """Ordnet extrahierten Text einer Dokumentart zu."""

    def __init__(self, rules: Tuple[Rule, ...] = RULES) -> None:
        self.rules = rules

    def classify(self, text: str) -> ClassificationResult:
        """
        Klassifiziert einen Dokumenttext.

        Args:
            text: Vollstaendiger Klartext des Dokuments

        Returns:
            ClassificationResult der ersten passenden Regel,
            sonst Kategorie Unrecognized
        """
        text = text or ""
        for rule in self.rules:
            result = rule(text)
            if result is not None:
                logger.debug(f"Klassifiziert als {result.category.value} ({rule.__name__})")
                return result
        return UNRECOGNIZED
