"""Demo views for trying menus out in the development server."""

from django.http import JsonResponse

from navmenu.context_processors import menus


def _describe(items):
    return [
        {
            "label": item.label,
            "active": item.is_active(),
            "href": item.href,
            "menuItems": _describe(item.sub_menu_items),
        }
        for item in items
    ]


def page(request, **kwargs):
    """Return every configured menu, as activated for this request, as JSON."""
    context = menus(request)
    return JsonResponse({name: _describe(menu) for name, menu in context["menus"].items()})
