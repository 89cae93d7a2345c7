"""Export path: report record -> static HTML document -> PDF download.

The document is self-contained (inline styles, logo embedded as a data URL)
so the rendering backend never has to fetch anything from this server.
"""
import base64
import logging
import mimetypes
from datetime import date
from pathlib import Path
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.http import content_disposition_header

from .builder import build_view
from .defaults import ReportDefaults, get_defaults
from .records import ReportRecord
from .rendering import PdfBackend, ReportDocument, get_backend

logger = logging.getLogger(__name__)

DEFAULT_APP_LOGO = Path(__file__).resolve().parent / 'static' / 'roi' / 'kodus_light.png'


class ExportError(Exception):
    """Raised when a report cannot be exported; wraps the underlying cause."""
    pass


def app_logo_path() -> Path:
    return Path(getattr(settings, 'ROI_APP_LOGO_PATH', None) or DEFAULT_APP_LOGO)


def load_app_logo(path: Optional[Path] = None) -> str:
    """Read the application logo and return it as a data URL."""
    path = Path(path or app_logo_path())
    content_type = mimetypes.guess_type(path.name)[0] or 'image/png'
    try:
        encoded = base64.b64encode(path.read_bytes()).decode('ascii')
    except OSError as e:
        raise ExportError(f'Could not read application logo {path}: {e}') from e
    return f'data:{content_type};base64,{encoded}'


def compose_document(record: ReportRecord, defaults: Optional[ReportDefaults] = None) -> ReportDocument:
    view = build_view(record, defaults)
    html = render_to_string('roi/export.html', {
        'view': view,
        'record': record,
        'app_logo': load_app_logo(),
    })
    return ReportDocument(title=f'{view.title} - {record.company_name}', html=html, view=view)


def export_filename(record: ReportRecord, today: Optional[date] = None,
                    defaults: Optional[ReportDefaults] = None) -> str:
    """'Kodus-Impacto-<company>-<YYYY-MM-DD>.pdf', dated in UTC."""
    defaults = defaults or get_defaults()
    today = today or timezone.now().date()
    return f'{defaults.filename_prefix}-{record.company_name}-{today.isoformat()}.pdf'


async def export_pdf(record: ReportRecord, backend: Optional[PdfBackend] = None) -> bytes:
    """Render ``record`` to PDF bytes. Every failure surfaces as ExportError."""
    try:
        # template rendering and the logo read are blocking
        document = await sync_to_async(compose_document)(record)
        backend = backend or get_backend()
        return await backend.render(document)
    except ExportError:
        raise
    except Exception as e:
        raise ExportError(f'PDF export failed for {record.company_name!r}: {e}') from e


def pdf_response(pdf_bytes: bytes, filename: str) -> HttpResponse:
    response = HttpResponse(pdf_bytes, content_type='application/pdf')
    response['Content-Disposition'] = content_disposition_header(True, filename)
    return response
