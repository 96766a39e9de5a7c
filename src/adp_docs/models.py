"""
Datenmodelle fuer Download und Klassifizierung der ADP-Dokumente.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple


class DocumentCategory(str, Enum):
    """Erkannte Dokumentarten."""
    TAX_CERTIFICATE = "TaxCertificate"  # Lohnsteuerbescheinigung
    SOCIAL_INSURANCE_CERTIFICATE = "SocialInsuranceCertificate"  # Meldebescheinigung
    PAYSLIP = "Payslip"  # Verdienstabrechnung
    UNRECOGNIZED = "Unrecognized"


@dataclass(frozen=True)
class Period:
    """Abrechnungszeitraum. Monat fehlt bei Jahresdokumenten."""
    year: str
    month: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.month} {self.year}" if self.month else self.year


@dataclass(frozen=True)
class SessionCookie:
    """Ein Cookie aus der Browser-Session."""
    name: str
    value: str
    domain: str = ""
    path: str = "/"


@dataclass(frozen=True)
class CookieSet:
    """Gefilterte Session-Cookies, nach dem Login einmalig erzeugt."""
    cookies: Tuple[SessionCookie, ...] = ()

    def __len__(self) -> int:
        return len(self.cookies)

    def __iter__(self) -> Iterator[SessionCookie]:
        return iter(self.cookies)

    def as_mapping(self) -> Dict[str, Tuple[str, str]]:
        """name -> (value, domain)"""
        return {c.name: (c.value, c.domain) for c in self.cookies}

    def names(self) -> List[str]:
        return [c.name for c in self.cookies]


@dataclass
class PageState:
    """Zustand der Paginierung waehrend des Link-Sammelns."""
    page_number: int = 1
    has_next: bool = True


@dataclass(frozen=True)
class ExtractedDocument:
    """Extrahierter Klartext einer PDF-Datei."""
    source_path: Path
    text: str


@dataclass(frozen=True)
class ClassificationResult:
    """Ergebnis der Klassifizierung eines Dokuments."""
    category: DocumentCategory
    period: Optional[Period] = None
    is_correction: bool = False
    correction_period: Optional[Period] = None
    proposed_name: Optional[str] = None

    @property
    def is_recognized(self) -> bool:
        return self.category is not DocumentCategory.UNRECOGNIZED


@dataclass
class DownloadResult:
    """Ergebnis eines Download-Laufs."""
    success: bool
    files: List[Path] = field(default_factory=list)
    link_count: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class FileDecision:
    """Entscheidung fuer eine einzelne Datei im Verarbeitungslauf."""
    source: Path
    outcome: str  # 'renamed', 'already_named', 'unrecognized', ...
    target: Optional[Path] = None
    classification: Optional[ClassificationResult] = None


@dataclass
class ProcessingSummary:
    """Statistik eines Verarbeitungslaufs."""
    dry_run: bool = False
    decisions: List[FileDecision] = field(default_factory=list)

    def count(self, outcome: str) -> int:
        return sum(1 for d in self.decisions if d.outcome == outcome)

    @property
    def renamed(self) -> int:
        return self.count("renamed")

    @property
    def already_named(self) -> int:
        return self.count("already_named")

    @property
    def unrecognized(self) -> int:
        return self.count("unrecognized")

    @property
    def incomplete(self) -> int:
        return self.count("incomplete")

    @property
    def extraction_failed(self) -> int:
        return self.count("extraction_failed")

    @property
    def rename_failed(self) -> int:
        return self.count("rename_failed")
