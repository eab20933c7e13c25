from django.apps import AppConfig
from django.conf import settings


class PublishingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "publishing"
    verbose_name = "Publishing"

    def ready(self):
        from .stores import Store

        self.store = Store(settings.PUBLISHING_DATABASE)
