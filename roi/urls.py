from django.urls import path
from . import views

urlpatterns = [
    path('', views.report_form, name='report_form'),
    path('preview/', views.preview, name='preview'),

    # endpoints called from form.js and preview.js
    path('api/preview/', views.api_preview, name='api_preview'),
    path('api/pdf/', views.api_pdf, name='api_pdf'),
]
