import logging

from django.http import HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.template.loader import render_to_string
from django.views.decorators.http import require_http_methods, require_POST

from .builder import build_view
from .export import ExportError, export_filename, export_pdf, pdf_response
from .forms import CATEGORY_PREFIX, ImpactCategoryFormSet, ReportRecordForm
from .records import RecordError, ReportRecord

logger = logging.getLogger(__name__)

SCALES = ('normal', 'compact', 'tiny')
EXPORT_ERROR_MESSAGE = 'Failed to generate PDF'
PREVIEW_ERROR_MESSAGE = 'Invalid report data'


def _scale(value):
    return value if value in SCALES else 'normal'


def _report_context(record, scale='normal'):
    return {
        'view': build_view(record),
        'record': record,
        'record_json': record.to_json(),
        'scale': _scale(scale),
        'scales': SCALES,
        'filename': export_filename(record),
    }


def _bind_forms(request):
    form = ReportRecordForm(request.POST, request.FILES)
    categories = ImpactCategoryFormSet(request.POST, prefix=CATEGORY_PREFIX)
    return form, categories


def _request_record(request):
    """Read a serialized record from a JSON body or from the 'record' form field."""
    if request.content_type == 'application/json':
        return ReportRecord.from_json(request.body)
    return ReportRecord.from_json(request.POST.get('record'))


@require_http_methods(['GET', 'POST'])
def report_form(request):
    """Form page. A valid submission moves on to the preview page."""
    if request.method == 'POST' and request.POST.get('action') == 'back':
        try:
            record = ReportRecord.from_json(request.POST.get('record'))
        except RecordError as e:
            logger.warning(f'Could not restore form from preview: {e}')
            return redirect('report_form')
        form = ReportRecordForm(initial=ReportRecordForm.initial_from_record(record))
        categories = ImpactCategoryFormSet(
            initial=ImpactCategoryFormSet.initial_from_record(record),
            prefix=CATEGORY_PREFIX,
        )
    elif request.method == 'POST':
        form, categories = _bind_forms(request)
        # validate both so every error is shown at once
        if all([form.is_valid(), categories.is_valid()]):
            record = form.to_record(categories.categories())
            return render(request, 'roi/preview.html', _report_context(record))
    else:
        form = ReportRecordForm()
        categories = ImpactCategoryFormSet(prefix=CATEGORY_PREFIX)

    return render(request, 'roi/form.html', {'form': form, 'categories': categories})


@require_POST
def preview(request):
    """Re-render the preview page, e.g. at another zoom preset."""
    try:
        record = _request_record(request)
    except RecordError as e:
        logger.warning(f'Invalid record posted to preview: {e}')
        return redirect('report_form')
    return render(request, 'roi/preview.html', _report_context(record, request.POST.get('scale')))


@require_POST
def api_preview(request):
    """Return the rendered report fragment for live updates while editing.

    Accepts a serialized record (JSON body or 'record' field) or the fields
    of the form page itself, as posted by form.js on every edit.
    """
    if request.content_type == 'application/json' or 'record' in request.POST:
        try:
            record = _request_record(request)
        except RecordError as e:
            logger.warning(f'Rejected preview request: {e}')
            return JsonResponse({'error': PREVIEW_ERROR_MESSAGE}, status=400)
    else:
        form, categories = _bind_forms(request)
        # expected while the user is still typing, so not logged
        if not all([form.is_valid(), categories.is_valid()]):
            return JsonResponse({'error': PREVIEW_ERROR_MESSAGE}, status=400)
        record = form.to_record(categories.categories())
    scale = request.GET.get('scale') or request.POST.get('scale')
    html = render_to_string('roi/_report.html', _report_context(record, scale), request=request)
    return HttpResponse(html)


@require_POST
async def api_pdf(request):
    """Render the posted record to PDF and return it as a download."""
    try:
        record = _request_record(request)
    except RecordError as e:
        logger.warning(f'Rejected PDF export request: {e}')
        return JsonResponse({'error': EXPORT_ERROR_MESSAGE}, status=400)

    try:
        pdf_bytes = await export_pdf(record)
    except ExportError as e:
        logger.error(f'Error generating PDF: {e}', exc_info=True)
        return JsonResponse({'error': EXPORT_ERROR_MESSAGE}, status=500)

    filename = export_filename(record)
    logger.info(f'Generated {filename} ({len(pdf_bytes)} bytes)')
    return pdf_response(pdf_bytes, filename)
