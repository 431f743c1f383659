"""
Management command to print a configured menu as it would be activated for a
given URL path.

Active items are marked with ``*``, headers are shown in brackets and
separators as a dashed line.
"""

from django.core.management.base import BaseCommand, CommandError
from django.http import QueryDict
from django.urls import Resolver404, resolve

from navmenu.conf import get_menu_configuration
from navmenu.exceptions import NavmenuError
from navmenu.menu import Menu
from navmenu.request import ActionRequest


class Command(BaseCommand):
    help = "Print the menu tree for a URL path, marking active items"

    def add_arguments(self, parser):
        parser.add_argument("name", help="Name of the configured menu")
        parser.add_argument("path", help="URL path to activate the menu for, e.g. /assets/")
        parser.add_argument(
            "--query",
            default="",
            help="Query string added to the request arguments, e.g. 'page=2&sort=name'",
        )

    def write_items(self, items, depth=0):
        indent = "  " * depth
        for item in items:
            if item.is_separator():
                self.stdout.write(f"{indent}  ----")
            elif item.is_header():
                self.stdout.write(f"{indent}  [{item.label}]")
            else:
                marker = "*" if item.is_active() else " "
                line = f"{indent}{marker} {item.label}"
                if item.view_name:
                    line += f" ({item.view_name})"
                if item.is_active():
                    line = self.style.SUCCESS(line)
                self.stdout.write(line)
            if item.has_sub_menu_items():
                self.write_items(item.sub_menu_items, depth + 1)

    def handle(self, *args, **options):
        name = options["name"]
        path = options["path"]

        try:
            match = resolve(path)
        except Resolver404:
            raise CommandError(f"No route matches '{path}'")

        action_request = ActionRequest.from_resolver_match(match, QueryDict(options["query"]))
        self.stdout.write(
            f"Request: {action_request.controller_package_key}:"
            f"{action_request.controller_name}/{action_request.controller_action_name} "
            f"{action_request.arguments}"
        )

        try:
            menu = Menu(action_request, get_menu_configuration(name))
        except NavmenuError as e:
            raise CommandError(str(e))

        if not len(menu):
            self.stdout.write(self.style.WARNING(f"Menu '{name}' has no items"))
            return
        self.write_items(menu)
