"""
Verarbeitung heruntergeladener ADP-PDFs: klassifizieren und umbenennen.

Workflow pro Datei:
1. Text extrahieren (Fehler -> Warnung, Datei wird uebersprungen)
2. Dokumentart bestimmen
3. Kollisionsfreien Zielnamen vergeben
4. Umbenennen (oder im Dry-Run nur protokollieren)
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from tqdm import tqdm

from .classifier import DocumentClassifier
from .errors import ExtractionFailed
from .filenames import FilenameAllocator
from .models import (
    ClassificationResult,
    DocumentCategory,
    ExtractedDocument,
    FileDecision,
    ProcessingSummary,
)
from .pdf_text import extract_text

logger = logging.getLogger(__name__)

RENAMED = "renamed"
ALREADY_NAMED = "already_named"
UNRECOGNIZED = "unrecognized"
INCOMPLETE = "incomplete"
EXTRACTION_FAILED = "extraction_failed"
RENAME_FAILED = "rename_failed"

CATEGORY_LABELS = {
    DocumentCategory.TAX_CERTIFICATE: "tax certificate",
    DocumentCategory.SOCIAL_INSURANCE_CERTIFICATE: "social insurance certificate",
    DocumentCategory.PAYSLIP: "payslip",
}


class DocumentProcessor:
    """
    Benennt die PDFs eines Verzeichnisses nach ihrem Inhalt um.

    Dry-Run trifft dieselben Entscheidungen wie ein echter Lauf, veraendert
    aber nichts im Dateisystem.
    """

    def __init__(
        self,
        classifier: Optional[DocumentClassifier] = None,
        extractor: Callable[[Path], ExtractedDocument] = extract_text,
    ) -> None:
        self.classifier = classifier or DocumentClassifier()
        self.extractor = extractor

    def list_pdfs(self, directory: Path) -> List[Path]:
        return sorted(p for p in Path(directory).glob("*.pdf") if p.is_file())

    def process(self, directory: Path, dry_run: bool = False) -> ProcessingSummary:
        """
        Verarbeitet alle PDFs in *directory*.

        Args:
            directory: Verzeichnis mit den heruntergeladenen PDFs
            dry_run: Nur protokollieren, nicht umbenennen

        Returns:
            ProcessingSummary mit einer Entscheidung pro Datei

        Raises:
            FileNotFoundError: Verzeichnis existiert nicht
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Directory does not exist: {directory}")

        pdf_files = self.list_pdfs(directory)
        logger.info(f"Found {len(pdf_files)} PDF files in {directory}")

        allocator = FilenameAllocator()
        summary = ProcessingSummary(dry_run=dry_run)

        with tqdm(pdf_files, desc="Processing", unit="PDF") as pbar:
            for pdf_file in pbar:
                pbar.set_postfix_str(f"{pdf_file.name[:30]}")
                decision = self._process_file(pdf_file, allocator, dry_run)
                summary.decisions.append(decision)

        logger.info(
            f"Processing finished: {summary.renamed} renamed, "
            f"{summary.already_named} already named, "
            f"{summary.unrecognized} unrecognized, {summary.incomplete} incomplete, "
            f"{summary.extraction_failed + summary.rename_failed} errors"
        )
        return summary

    def _process_file(
        self, pdf_file: Path, allocator: FilenameAllocator, dry_run: bool
    ) -> FileDecision:
        filename = pdf_file.name

        try:
            document = self.extractor(pdf_file)
        except ExtractionFailed as e:
            logger.warning(f"Failed to extract text from {filename}: {e.cause}")
            return FileDecision(source=pdf_file, outcome=EXTRACTION_FAILED)

        result = self.classifier.classify(document.text)

        if not result.is_recognized:
            logger.info(f"Not a recognized certificate type: {filename}")
            return FileDecision(source=pdf_file, outcome=UNRECOGNIZED, classification=result)

        label = CATEGORY_LABELS[result.category]
        if result.proposed_name is None:
            logger.warning(f"Found {label} but couldn't extract month/year: {filename}")
            return FileDecision(source=pdf_file, outcome=INCOMPLETE, classification=result)

        proposed = pdf_file.with_name(result.proposed_name)
        if proposed == pdf_file:
            logger.info(f"Already named correctly: {filename}")
            return FileDecision(
                source=pdf_file, outcome=ALREADY_NAMED, target=pdf_file, classification=result
            )

        target = allocator.allocate(proposed)
        if allocator.is_taken(target):
            # nur eine Stufe _2; belegtes Ziel wird nie ueberschrieben
            logger.error(f"Target already exists, not renaming {filename}: {target.name}")
            return FileDecision(
                source=pdf_file, outcome=RENAME_FAILED, target=target, classification=result
            )

        logger.info(
            f"Found {label}: {filename} ({self._describe(result)}) -> {target.name}"
        )

        if dry_run:
            logger.info(f"Would rename {filename} -> {target.name}")
        else:
            try:
                pdf_file.rename(target)
            except OSError as e:
                logger.error(f"Failed to rename {filename}: {e}")
                return FileDecision(
                    source=pdf_file, outcome=RENAME_FAILED, target=target, classification=result
                )
            logger.info(f"Renamed file successfully: {filename} -> {target.name}")

        allocator.record_move(pdf_file, target)
        return FileDecision(source=pdf_file, outcome=RENAMED, target=target, classification=result)

    @staticmethod
    def _describe(result: ClassificationResult) -> str:
        parts = [f"period={result.period}"]
        if result.is_correction:
            parts.append(f"correction={result.correction_period}")
        return ", ".join(parts)
