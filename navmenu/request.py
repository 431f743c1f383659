"""
Routing-resolved description of the current request.

Menu items target a *package* / *controller* / *action* triple. In Django
terms the package is the URL namespace and controller and action are taken
from the URL name: ``inventory:assets_list`` targets package ``inventory``,
controller ``assets``, action ``list``.
"""

import logging
from dataclasses import dataclass, field

from django.urls import NoReverseMatch, Resolver404, get_resolver, get_urlconf, resolve, reverse
from django.utils.http import urlencode

from .conf import get_action_separator

logger = logging.getLogger(__name__)

DEFAULT_ACTION_NAME = "index"


def _query_arguments(query):
    """Flatten a QueryDict (or plain mapping) into an arguments dict."""
    if query is None:
        return {}
    if hasattr(query, "lists"):
        arguments = {}
        for key, values in query.lists():
            arguments[key] = values[0] if len(values) == 1 else list(values)
        return arguments
    return dict(query)


def split_url_name(url_name, separator=None):
    """Split ``"assets_list"`` into ``("assets", "list")``.

    A name without separator is a controller with the default action.
    """
    if not url_name:
        return None, None
    separator = separator or get_action_separator()
    controller, sep, action = url_name.rpartition(separator)
    if not sep or not controller:
        return url_name, DEFAULT_ACTION_NAME
    return controller, action


def url_parameters(view_name):
    """Return the names of the URL kwargs the patterns of *view_name* accept.

    Raises ``NoReverseMatch`` for an unknown namespace.
    """
    *namespaces, url_name = view_name.split(":")
    resolver = get_resolver(get_urlconf())
    for namespace in namespaces:
        try:
            resolver = resolver.namespace_dict[namespace][1]
        except KeyError:
            raise NoReverseMatch(f"'{namespace}' is not a registered namespace") from None
    parameters = set()
    for possibilities, *_ in resolver.reverse_dict.getlist(url_name):
        for _format, params in possibilities:
            parameters.update(params)
    return parameters


def reverse_with_query(view_name, arguments):
    """Reverse *view_name*, passing the arguments its pattern does not take
    as a query string.

    ``reverse_with_query("demo:users_list", {"page": "2"})`` gives
    ``"/demo/users/?page=2"``. List values become repeated parameters, which
    is how ``ActionRequest`` reads them back.
    """
    parameters = url_parameters(view_name)
    kwargs = {key: value for key, value in arguments.items() if key in parameters}
    query = {key: value for key, value in arguments.items() if key not in parameters}
    url = reverse(view_name, kwargs=kwargs)
    if query:
        url = f"{url}?{urlencode(query, doseq=True)}"
    return url


@dataclass(frozen=True)
class ActionRequest:
    """The package/controller/action/arguments a request was routed to."""
    controller_package_key: str | None = None
    controller_name: str | None = None
    controller_action_name: str | None = None
    arguments: dict = field(default_factory=dict)

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_resolver_match(cls, match, query=None):
        """Build the context from a ``ResolverMatch`` and optional query params.

        Arguments are the query parameters overlaid with the URL kwargs.
        """
        controller, action = split_url_name(match.url_name)
        arguments = _query_arguments(query)
        arguments.update(match.kwargs)
        return cls(
            controller_package_key=match.namespace or None,
            controller_name=controller,
            controller_action_name=action,
            arguments=arguments,
        )

    @classmethod
    def from_http_request(cls, request):
        """Build the context for a Django ``HttpRequest``.

        Requests that never went through URL resolution (e.g. built with
        ``RequestFactory``) are resolved here. An unresolvable path gives an
        empty context, which no menu item matches.
        """
        match = getattr(request, "resolver_match", None)
        if match is None:
            try:
                match = resolve(request.path_info)
            except Resolver404:
                logger.debug("No route for %s, using an empty action request", request.path_info)
                return cls.empty()
        return cls.from_resolver_match(match, request.GET)
