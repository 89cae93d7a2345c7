import os

from django.core.asgi import get_asgi_application

# PDF export is an async view; serve with an ASGI server to keep it off a thread
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'roipage.settings')

application = get_asgi_application()
