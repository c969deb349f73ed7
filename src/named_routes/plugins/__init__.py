"""Plugin package for Named Routes.

This package contains built-in registration plugins for the Router.

Note: Do not import concrete plugins here to keep imports side-effect free.
Concrete plugin modules (configuration, logging) self-register when imported
via the main named_routes package.
"""

__all__: list[str] = []
