from django.apps import AppConfig


class MatchingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.matching'
    verbose_name = 'Relationships'

    def ready(self):
        # Keeps profile counters in step with matches and views
        import apps.matching.signals  # noqa: F401
