"""
Textextraktion aus den heruntergeladenen PDFs (pdfplumber).
"""

import logging
from pathlib import Path

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError

from .errors import ExtractionFailed
from .models import ExtractedDocument

logger = logging.getLogger(__name__)


def extract_text(pdf_path: Path) -> ExtractedDocument:
    """
    Extrahiert den Klartext aller Seiten einer PDF-Datei.

    Args:
        pdf_path: Pfad zur PDF-Datei

    Returns:
        ExtractedDocument mit dem zusammengefuegten Seitentext

    Raises:
        ExtractionFailed: Datei fehlt, ist kein gueltiges PDF oder nicht lesbar
    """
    pdf_path = Path(pdf_path)

    try:
        with pdfplumber.open(pdf_path) as pdf:
            text = "\n".join(page.extract_text() or "" for page in pdf.pages)
    except PDFSyntaxError as e:
        raise ExtractionFailed(pdf_path, f"PDF-Syntax: {e}") from e
    except OSError as e:
        raise ExtractionFailed(pdf_path, f"Datei: {type(e).__name__}: {e}") from e
    except Exception as e:
        # pdfminer wirft je nach Defekt unterschiedliche Fehlertypen
        raise ExtractionFailed(pdf_path, f"{type(e).__name__}: {e}") from e

    logger.debug(f"Text extrahiert aus {pdf_path.name}: {len(text)} Zeichen")
    return ExtractedDocument(source_path=pdf_path, text=text)
