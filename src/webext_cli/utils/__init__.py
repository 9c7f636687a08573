"""Shared utilities — constants, naming helpers, and cross-cutting concerns.

Rules
-----
* No business logic.
* No I/O.
* Importable by any layer.
"""

from webext_cli.utils.naming import ENV_PREFIX, dest_name, env_var_name, flag_names

__all__: list[str] = [
    "ENV_PREFIX",
    "dest_name",
    "env_var_name",
    "flag_names",
]
