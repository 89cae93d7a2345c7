"""System checks for the settings the export path depends on."""
from django.conf import settings
from django.core.checks import Error, Tags, Warning, register
from django.utils.module_loading import import_string

from .export import app_logo_path
from .rendering import DEFAULT_BACKEND, PdfBackend


@register(Tags.files)
def check_app_logo(app_configs, **kwargs):
    path = app_logo_path()
    if path.is_file():
        return []
    return [Warning(
        f'Application logo not found at {path}; PDF exports will fail.',
        hint='Set ROI_APP_LOGO_PATH to an existing image file.',
        id='roi.W001',
    )]


@register()
def check_pdf_backend(app_configs, **kwargs):
    path = getattr(settings, 'ROI_PDF_BACKEND', DEFAULT_BACKEND)
    try:
        backend_class = import_string(path)
    except ImportError as e:
        return [Error(f'Cannot import ROI_PDF_BACKEND {path!r}: {e}', id='roi.E001')]
    if not (isinstance(backend_class, type) and issubclass(backend_class, PdfBackend)):
        return [Error(f'ROI_PDF_BACKEND {path!r} is not a PdfBackend subclass.', id='roi.E001')]
    return []
