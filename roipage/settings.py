import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

from django.core.management.utils import get_random_secret_key
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', get_random_secret_key())
DEBUG = os.getenv('DJANGO_DEBUG', 'true').lower() in ('1', 'true', 'yes')
ALLOWED_HOSTS = os.getenv('DJANGO_ALLOWED_HOSTS', '*').split(',')
CSRF_TRUSTED_ORIGINS = ['http://127.0.0.1:8000', 'http://localhost:8000']

X_FRAME_OPTIONS = 'SAMEORIGIN'

# Nothing is persisted: no auth, sessions or database
INSTALLED_APPS = [
    'django.contrib.staticfiles',
    'roi.apps.RoiConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'roipage.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'roipage.wsgi.application'
ASGI_APPLICATION = 'roipage.asgi.application'

DATABASES = {}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')

# Uploaded logos travel inside the record as data URLs
DATA_UPLOAD_MAX_MEMORY_SIZE = 5 * 1024 * 1024

# ROI page export
ROI_PDF_BACKEND = os.getenv('ROI_PDF_BACKEND', 'roi.rendering.PlaywrightBackend')
ROI_APP_LOGO_PATH = os.getenv(
    'ROI_APP_LOGO_PATH',
    os.path.join(BASE_DIR, 'roi', 'static', 'roi', 'kodus_light.png'),
)
# Overrides for roi.defaults.ReportDefaults, e.g. {'report_period_label': 'Last 30 days'}
ROI_REPORT_DEFAULTS = {}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'roi': {
            'handlers': ['console'],
            'level': os.getenv('ROI_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
