from django.apps import apps
from django.conf import settings
from django.test.runner import DiscoverRunner


class InstalledAppsOnlyDiscoverRunner(DiscoverRunner):
    """
    Run the test modules of the project's own apps.

    Without labels, Django would walk the whole base directory, including any
    virtualenv kept there; only ``apps.*`` packages under BASE_DIR are used.
    """

    def build_suite(self, test_labels=None, **kwargs):
        if not test_labels:
            base_dir = str(settings.BASE_DIR)
            test_labels = [
                app_config.name
                for app_config in apps.get_app_configs()
                if app_config.name.startswith('apps.') and str(app_config.path).startswith(base_dir)
            ]
        return super().build_suite(test_labels=test_labels, **kwargs)
