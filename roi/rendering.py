"""Backends turning a composed report document into PDF bytes.

Report composition never talks to a rendering engine directly; it hands a
``ReportDocument`` to whichever ``PdfBackend`` the ``ROI_PDF_BACKEND``
setting names.
"""
import io
import logging
from dataclasses import dataclass
from typing import Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.utils.module_loading import import_string
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .builder import DerivedView
from .templatetags.roi_formatters import format_metric, format_percentage

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = 'roi.rendering.PlaywrightBackend'


class RenderError(Exception):
    """Raised when a backend cannot produce the PDF."""
    pass


@dataclass(frozen=True)
class ReportDocument:
    title: str
    html: str
    view: DerivedView


class PdfBackend:
    """Base class for PDF backends"""
    name = 'base'

    async def render(self, document: ReportDocument) -> bytes:
        raise NotImplementedError("Subclasses must implement render()")


class PlaywrightBackend(PdfBackend):
    """Print the report HTML with headless Chromium."""
    name = 'playwright'
    launch_args = ['--no-sandbox', '--disable-setuid-sandbox']
    margin = {'top': '1.5cm', 'right': '1.5cm', 'bottom': '1.5cm', 'left': '1.5cm'}

    async def render(self, document: ReportDocument) -> bytes:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=self.launch_args)
                try:
                    page = await browser.new_page()
                    await page.set_content(document.html, wait_until='networkidle')
                    pdf_bytes = await page.pdf(
                        format='A4',
                        margin=self.margin,
                        print_background=True,
                        prefer_css_page_size=True,
                    )
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise RenderError(f'Chromium failed to render {document.title!r}: {e}') from e

        if not pdf_bytes:
            raise RenderError(f'Chromium returned an empty PDF for {document.title!r}')
        return pdf_bytes


class ReportLabBackend(PdfBackend):
    """Draw the derived view with ReportLab, without a browser.

    Layout is simpler than the HTML version and user logos are not drawn;
    the initials placeholder stands in for them.
    """
    name = 'reportlab'
    margin = 1.5 * cm
    line_height = 14

    async def render(self, document: ReportDocument) -> bytes:
        return await sync_to_async(self._draw)(document)

    def _draw(self, document: ReportDocument) -> bytes:
        view = document.view
        record = view.record
        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        c.setTitle(document.title)
        width, height = A4
        left = self.margin
        text_width = width - 2 * self.margin
        y = height - self.margin

        c.setFillGray(0.9)
        c.rect(left, y - 48, 48, 48, stroke=0, fill=1)
        c.setFillGray(0.3)
        c.setFont('Helvetica-Bold', 18)
        c.drawCentredString(left + 24, y - 30, view.initials)
        c.setFillGray(0)

        c.setFont('Helvetica-Bold', 16)
        c.drawString(left + 60, y - 16, view.title)
        c.setFont('Helvetica', 10)
        c.drawString(left + 60, y - 32, f'Based on real usage • {record.report_period_label}')
        meta = record.company_name
        if record.generated_by:
            meta += f' • Generated by {record.generated_by}'
        c.drawString(left + 60, y - 46, meta)
        y -= 70

        metrics = [
            ('Implemented suggestions', format_metric(record.implemented_suggestions_count)),
            ('Implementation rate', format_percentage(record.implementation_rate_pct)),
            ('PRs analyzed', format_metric(record.prs_analyzed)),
            ('PRs with Kodus action', format_metric(record.prs_with_implemented_suggestions)),
        ]
        column = text_width / len(metrics)
        for i, (label, value) in enumerate(metrics):
            x = left + i * column
            c.setFont('Helvetica', 8)
            c.drawString(x, y, label.upper())
            c.setFont('Helvetica-Bold', 18)
            c.drawString(x, y - 22, value)
        y -= 50

        if view.categories:
            y = self._heading(c, 'Impact by Category', left, y)
            c.setFont('Helvetica', 10)
            for category in view.categories:
                c.drawString(left, y, category.label)
                c.drawRightString(left + text_width, y, str(category.count))
                y -= self.line_height
            y -= 10

        for heading, bullet, entries in (
            ('Quick Read', '•', view.highlights),
            ('Next Level of Impact', '->', view.next_steps),
        ):
            if not entries:
                continue
            y = self._heading(c, heading, left, y)
            c.setFont('Helvetica', 10)
            for entry in entries:
                y = self._paragraph(c, f'{bullet} {entry}', left, y, text_width)
            y -= 10

        y = self._heading(c, 'We want to hear from you:', left, y)
        c.setFont('Helvetica', 10)
        self._paragraph(c, record.cta_question, left, y, text_width)

        c.showPage()
        c.save()
        return buf.getvalue()

    def _heading(self, c, text, x, y):
        c.setFont('Helvetica-Bold', 12)
        c.drawString(x, y, text)
        return y - 18

    def _paragraph(self, c, text, x, y, width):
        for line in simpleSplit(text, 'Helvetica', 10, width):
            c.drawString(x, y, line)
            y -= self.line_height
        return y


def get_backend(path: Optional[str] = None) -> PdfBackend:
    """Instantiate the backend class named by ``path`` or ROI_PDF_BACKEND."""
    path = path or getattr(settings, 'ROI_PDF_BACKEND', DEFAULT_BACKEND)
    backend = import_string(path)()
    logger.debug('Using PDF backend %s', backend.name)
    return backend
