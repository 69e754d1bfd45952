"""Map search params onto keyword properties of a render function."""

import functools
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Union

import panel as pn

if TYPE_CHECKING:
    from core.context import ParamContext

ParamOptions = Union[Mapping[str, Any], Callable[[Dict[str, Any]], Mapping[str, Any]]]


def setter_prop_name(getter_prop: str) -> str:
    return f"set_{getter_prop}"


def with_params(params: Mapping[str, ParamOptions]) -> Callable:
    """
    Decorate a render function with search-param values and setters.

    ``params`` maps property names to options:

    - ``name``: search param name, defaults to the property name
    - ``default``: default value of the param
    - ``kind``: explicit parameter kind
    - ``key``: stable setter identity
    - ``getter_prop``: name of the value property, defaults to the property name
    - ``setter_prop``: name of the setter property, defaults to ``set_<getter_prop>``

    Options may also be a function of the call's keyword properties.

    Usage:
        @with_params({"page": {"default": 1}})
        def pager(page, set_page, label="Page"):
            ...

        pager(context, label="Results page")
    """

    def decorator(render: Callable) -> Callable:
        @functools.wraps(render)
        def wrapper(context: "ParamContext", **props):
            search_params = context.search_params()
            params_props: Dict[str, Any] = {}
            for prop, options in params.items():
                if callable(options):
                    options = options(props)
                getter_prop = options.get("getter_prop") or prop
                setter_prop = options.get("setter_prop") or setter_prop_name(getter_prop)
                value, setter = search_params.param(
                    options.get("name", prop),
                    options.get("default"),
                    kind=options.get("kind"),
                    key=options.get("key"),
                )
                params_props[getter_prop] = value
                params_props[setter_prop] = setter
            # Explicit properties win over search params
            return render(**{**params_props, **props})

        return wrapper

    return decorator


def bind_to_location(context: "ParamContext", render: Callable, **props) -> Any:
    """Re-run a ``with_params`` render function on every navigation."""

    def _render(location):
        return render(context, **props)

    return pn.bind(_render, location=context.param.location)
