from django.apps import AppConfig


class NavmenuConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "navmenu"
    verbose_name = "Navigation menus"
