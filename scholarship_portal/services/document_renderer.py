import logging
from io import BytesIO
from typing import List, Mapping, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import UnrecognizedImageError
from docx.image.image import Image
from docx.shared import Inches, Pt

from scholarship_portal.schemas.application_schema import DocumentRef
from scholarship_portal.services.sanitizer import humanize_details

logger = logging.getLogger(__name__)

FONT_NAME = "Arial"
# 100x100 px thumbnail at 96 dpi
PHOTO_SIZE = Pt(75)
FIELD_COLUMN_WIDTH = Inches(1.9)
VALUE_COLUMN_WIDTH = Inches(4.4)


class DocumentRenderer:
    """Builds the application summary (.docx) attached to notification emails."""

    def __init__(self, portal_name: str):
        self.portal_name = portal_name

    def _add_text(self, doc, text: str, size: int, bold: bool = False, space_before: int = 0, space_after: int = 10):
        paragraph = doc.add_paragraph()
        run = paragraph.add_run(text)
        run.bold = bold
        run.font.size = Pt(size)
        run.font.name = FONT_NAME
        paragraph.paragraph_format.space_before = Pt(space_before)
        paragraph.paragraph_format.space_after = Pt(space_after)
        return paragraph

    def _add_details_table(self, doc, details: Mapping[str, str]):
        table = doc.add_table(rows=1, cols=2)
        table.style = "Table Grid"

        header = table.rows[0].cells
        for cell, label, width in ((header[0], "Field", FIELD_COLUMN_WIDTH), (header[1], "Value", VALUE_COLUMN_WIDTH)):
            cell.width = width
            cell.paragraphs[0].add_run(label).bold = True

        for key, value in humanize_details(details).items():
            row = table.add_row().cells
            row[0].width = FIELD_COLUMN_WIDTH
            row[1].width = VALUE_COLUMN_WIDTH
            row[0].text = key
            row[1].text = str(value)
        return table

    def _add_photo(self, doc, tracking_id: str, image: bytes) -> bool:
        try:
            Image.from_blob(image)
        except UnrecognizedImageError:
            logger.warning(f"Portrait for {tracking_id} is not a supported image, rendering without it")
            return False

        photo = doc.add_paragraph()
        photo.alignment = WD_ALIGN_PARAGRAPH.CENTER
        photo.add_run().add_picture(BytesIO(image), width=PHOTO_SIZE, height=PHOTO_SIZE)
        photo.paragraph_format.space_after = Pt(10)
        return True

    def render(
        self,
        tracking_id: str,
        details: Mapping[str, str],
        documents: List[DocumentRef],
        image: Optional[bytes] = None
    ) -> bytes:
        """
        Render the application summary.

        Args:
            tracking_id: Public tracking ID shown under the title
            details: Sanitized applicant fields in submission order
            documents: Uploaded documents, listed with their storage locators
            image: Passport photo bytes; the photo section is omitted when None
                or when the bytes are not a JPEG/PNG image (e.g. a PDF upload)

        Returns:
            bytes: The .docx file content
        """
        doc = Document()

        self._add_text(doc, f"{self.portal_name} Scholarship Application", size=14, bold=True)
        self._add_text(doc, f"Tracking ID: {tracking_id}", size=10)

        has_photo = bool(image) and self._add_photo(doc, tracking_id, image)

        self._add_text(doc, "Applicant Details:", size=11, bold=True, space_after=5)
        self._add_details_table(doc, details)

        self._add_text(doc, "Documents:", size=11, bold=True, space_before=10, space_after=5)
        for document in documents:
            doc.add_paragraph(f"{document.name}: {document.path}").paragraph_format.space_after = Pt(5)

        buffer = BytesIO()
        doc.save(buffer)
        content = buffer.getvalue()
        logger.info(f"Rendered application document for {tracking_id} ({len(content)} bytes, photo: {'yes' if has_photo else 'no'})")
        return content
