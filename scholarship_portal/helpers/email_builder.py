from html import escape
from typing import List, Mapping

from scholarship_portal.schemas.application_schema import DocumentRef
from scholarship_portal.services.sanitizer import humanize_details


def _details_rows(details: Mapping[str, str]) -> str:
    # Values are sanitized on the way in, labels come straight from form field names
    return "".join(
        f"<tr><td>{escape(key)}</td><td>{value}</td></tr>"
        for key, value in humanize_details(details).items()
    )


def build_applicant_email_html(
    tracking_id: str,
    details: Mapping[str, str],
    submitted_on: str,
    track_url: str
) -> str:
    return f"""
    <html>
      <body>
        <h2>Thank you for applying! Your Tracking ID: {tracking_id}</h2>
        <p>Submitted on: {escape(submitted_on)}</p>
        <table border="1">
          {_details_rows(details)}
        </table>
        <p>Track status: <a href="{escape(track_url)}">{escape(track_url)}</a></p>
      </body>
    </html>
    """


def build_operations_email_html(
    tracking_id: str,
    details: Mapping[str, str],
    documents: List[DocumentRef],
    submitted_on: str
) -> str:
    document_items = "".join(
        f"<li>{escape(doc.name)}: {escape(doc.path)}</li>" for doc in documents
    )
    return f"""
    <html>
      <body>
        <h2>New Scholarship Application - ID: {tracking_id}</h2>
        <p>Submitted on: {escape(submitted_on)}</p>
        <table border="1">
          {_details_rows(details)}
        </table>
        <h3>Documents:</h3>
        <ul>{document_items}</ul>
      </body>
    </html>
    """
