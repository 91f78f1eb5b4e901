"""
core.domain - Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler translating those exceptions.
transactions       Helpers for ``transaction.atomic`` + ``select_for_update``
                   + optimistic version checks.
access             Role × action authorization and role-scoped querysets.

Usage from any app::

    from core.domain.exceptions import DomainError, InvalidTransition
    from core.domain.transactions import locked_for_mutation
    from core.domain.access import apply_role_filter, can, require
"""
