from django import template

from navmenu.conf import get_menu_configuration
from navmenu.menu import Menu
from navmenu.request import ActionRequest

register = template.Library()


@register.simple_tag(takes_context=True)
def build_menu(context, name):
    """
    Build the menu called *name* for the current request.

    Usage::

        {% build_menu "main" as main_menu %}
        {% for item in main_menu %}...{% endfor %}

    Without a request in the context the menu is built but nothing is active.
    """
    request = context.get("request")
    if request is None:
        action_request = ActionRequest.empty()
    else:
        action_request = ActionRequest.from_http_request(request)
    return Menu(action_request, get_menu_configuration(name))


@register.filter
def menu_item_class(item):
    """
    Return CSS class hints for a menu item.

    Possible values (space separated): "active", "separator", "header",
    "has-children".
    """
    classes = []
    if item.is_active():
        classes.append("active")
    if item.is_separator():
        classes.append("separator")
    elif item.is_header():
        classes.append("header")
    if item.has_sub_menu_items():
        classes.append("has-children")
    return " ".join(classes)
