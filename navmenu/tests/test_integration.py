"""
Tests for the template-facing surface of navmenu.

Covers:
- menus context processor (lazy, per-request menus)
- {% build_menu %} tag and |menu_item_class filter
- MenuItem.href reversing
- Demo pages rendering activated menus end to end
- show_menu management command
"""

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.template import Context, Template
from django.test import Client, RequestFactory, SimpleTestCase, override_settings

from navmenu.conf import clear_config_cache
from navmenu.context_processors import menus
from navmenu.menu import Menu, MenuItem
from navmenu.request import ActionRequest
from navmenu.templatetags.menu_tags import menu_item_class

MENUS = {
    "main": {
        "menuItems": [
            {"label": "Dashboard", "package": "demo", "controller": "dashboard"},
            {"label": ""},
            {"label": "Inventory"},
            {
                "label": "Assets",
                "package": "demo",
                "controller": "assets",
                "action": "list",
                "menuItems": [
                    {"label": "All assets", "package": "demo", "controller": "assets", "action": "list"},
                    {"label": "Asset 5", "package": "demo", "controller": "assets", "action": "show",
                     "arguments": {"pk": 5}},
                ],
            },
        ],
    },
    "footer": {"menuItems": [{"label": "Users", "package": "demo", "controller": "users", "action": "list"}]},
}


@override_settings(NAVMENU_MENUS=MENUS, NAVMENU_CONFIG_FILE="/nonexistent/menus.toml")
class NavmenuIntegrationTestCase(SimpleTestCase):

    def setUp(self):
        super().setUp()
        clear_config_cache()
        self.factory = RequestFactory()

    def tearDown(self):
        clear_config_cache()
        super().tearDown()


# ======================================================================
# Context processor
# ======================================================================


class ContextProcessorTests(NavmenuIntegrationTestCase):

    def test_exposes_every_configured_menu(self):
        context = menus(self.factory.get("/demo/assets/"))
        self.assertEqual(sorted(context["menus"]), ["footer", "main"])

    def test_menus_are_activated_for_request(self):
        main = menus(self.factory.get("/demo/assets/5/"))["menus"]["main"]
        dashboard, separator, header, assets = main
        self.assertFalse(dashboard.is_active())
        self.assertTrue(assets.is_active())
        all_assets, asset_5 = assets.sub_menu_items
        self.assertFalse(all_assets.is_active())
        self.assertTrue(asset_5.is_active())

    def test_menus_are_built_once_per_request(self):
        lazy = menus(self.factory.get("/demo/"))["menus"]
        self.assertIs(lazy["main"], lazy["main"])

    def test_unknown_menu_raises_key_error(self):
        with self.assertRaises(KeyError):
            menus(self.factory.get("/demo/"))["menus"]["sidebar"]


# ======================================================================
# Template tags
# ======================================================================


class TemplateTagTests(NavmenuIntegrationTestCase):

    def _render(self, source, request=None):
        return Template("{% load menu_tags %}" + source).render(Context({"request": request}))

    def test_build_menu_tag(self):
        html = self._render(
            '{% build_menu "main" as m %}{% for item in m %}[{{ item.label }}:{{ item|menu_item_class }}]{% endfor %}',
            self.factory.get("/demo/assets/"),
        )
        self.assertEqual(html, "[Dashboard:][:separator][Inventory:header][Assets:active has-children]")

    def test_build_menu_without_request_has_nothing_active(self):
        html = self._render(
            '{% build_menu "footer" as m %}{% for item in m %}{{ item|menu_item_class|default:"none" }}{% endfor %}'
        )
        self.assertEqual(html, "none")

    def test_menu_item_class_for_active_leaf(self):
        item = MenuItem("Users", "demo", "users", "list")
        item.activate_for_request(ActionRequest("demo", "users", "list"))
        self.assertEqual(menu_item_class(item), "active")


# ======================================================================
# href
# ======================================================================


class HrefTests(NavmenuIntegrationTestCase):

    def test_reverses_controller_and_action(self):
        self.assertEqual(MenuItem("Assets", "demo", "assets", "list").href, "/demo/assets/")

    def test_reverses_with_arguments(self):
        self.assertEqual(MenuItem("Asset", "demo", "assets", "edit", {"pk": 5}).href, "/demo/assets/5/edit/")

    def test_index_action_falls_back_to_controller_name(self):
        self.assertEqual(MenuItem("Dashboard", "demo", "dashboard", "index").href, "/demo/")

    def test_unknown_route_gives_none(self):
        with self.assertLogs("navmenu.menu", level="WARNING"):
            self.assertIsNone(MenuItem("Nope", "demo", "nope", "list").href)

    def test_arguments_not_in_pattern_become_query_string(self):
        item = MenuItem("Page 2", "demo", "users", "list", {"page": "2"})
        self.assertEqual(item.href, "/demo/users/?page=2")

    def test_url_kwargs_and_query_string_together(self):
        item = MenuItem("Asset 5 history", "demo", "assets", "show", {"pk": 5, "tab": "history"})
        self.assertEqual(item.href, "/demo/assets/5/?tab=history")

    def test_list_arguments_become_repeated_parameters(self):
        item = MenuItem("Tagged", "demo", "assets", "list", {"tag": ["a", "b"]})
        self.assertEqual(item.href, "/demo/assets/?tag=a&tag=b")

    def test_following_href_activates_the_item(self):
        config = {"menuItems": [{"label": "Page 2", "package": "demo", "controller": "users",
                                 "action": "list", "arguments": {"page": "2", "tag": ["a", "b"]}}]}
        with override_settings(NAVMENU_MENUS={"paged": config}):
            href = Menu(ActionRequest.empty(), config).menu_items[0].href
            resp = Client().get(href)
        self.assertTrue(resp.json()["paged"][0]["active"])

    def test_header_and_separator_have_no_href(self):
        self.assertIsNone(MenuItem("Header").href)
        self.assertIsNone(MenuItem("").href)


# ======================================================================
# Demo pages
# ======================================================================


class DemoPageTests(NavmenuIntegrationTestCase):

    def test_page_reports_active_items(self):
        resp = Client().get("/demo/assets/5/")
        self.assertEqual(resp.status_code, 200)
        main = resp.json()["main"]
        self.assertEqual([item["active"] for item in main], [False, False, False, True])
        self.assertEqual(main[3]["href"], "/demo/assets/")
        self.assertEqual([item["active"] for item in main[3]["menuItems"]], [False, True])

    def test_query_parameters_prevent_leaf_match(self):
        resp = Client().get("/demo/users/", {"page": "2"})
        self.assertFalse(resp.json()["footer"][0]["active"])
        resp = Client().get("/demo/users/")
        self.assertTrue(resp.json()["footer"][0]["active"])


# ======================================================================
# show_menu command
# ======================================================================


class ShowMenuCommandTests(NavmenuIntegrationTestCase):

    def _call(self, *args, **kwargs):
        out = StringIO()
        call_command("show_menu", *args, stdout=out, no_color=True, **kwargs)
        return out.getvalue()

    def test_prints_tree_with_active_markers(self):
        output = self._call("main", "/demo/assets/5/")
        self.assertIn("Request: demo:assets/show {'pk': 5}", output)
        self.assertIn("  [Inventory]", output)
        self.assertIn("  ----", output)
        self.assertIn("* Assets (demo:assets_list)", output)
        self.assertIn("    All assets (demo:assets_list)", output)
        self.assertIn("  * Asset 5 (demo:assets_show)", output)

    def test_query_option(self):
        output = self._call("footer", "/demo/users/", query="page=2")
        self.assertIn("'page': '2'", output)
        self.assertIn("  Users (demo:users_list)", output)
        self.assertNotIn("* Users", output)

    def test_unknown_menu(self):
        with self.assertRaises(CommandError):
            self._call("sidebar", "/demo/")

    def test_unresolvable_path(self):
        with self.assertRaises(CommandError):
            self._call("main", "/nowhere/")
