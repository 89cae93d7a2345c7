from django.apps import AppConfig

class RoiConfig(AppConfig):
    name = 'roi'
    verbose_name = 'ROI page generator'

    def ready(self):
        # Register system checks for the export assets and backend
        import roi.checks  # noqa: F401
