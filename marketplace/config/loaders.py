"""
Startup loaders for static configuration files.

Both files are plain JSON:

  currencies file      → [{"code": "USD", "symbol": "$", ...}, ...]
  role permissions file → {"ADMIN": ["users:read", ...], "VENDOR": [...]}
"""

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from marketplace.currency.schemas import Currency
from marketplace.rbac.permissions import parse_permission
from marketplace.rbac.roles import ROLE_PERMISSIONS, Role, parse_role
from marketplace.utils import Logger
from marketplace.utils.exceptions import ConfigurationError

logger = Logger("config")


def _read_json(path: Union[str, Path]):
    file_path = Path(path)
    try:
        with file_path.open(encoding="utf-8") as fp:
            return json.load(fp)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Configuration file is not valid JSON: {file_path}",
            details={"line": e.lineno, "column": e.colno},
        )


def load_currency_registry(path: Union[str, Path]) -> list[Currency]:
    """Read and validate a currency seed file."""
    data = _read_json(path)
    if not isinstance(data, list):
        raise ConfigurationError("Currencies file must contain a JSON list")
    try:
        currencies = [Currency.model_validate(item) for item in data]
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid currency definition", details={"errors": e.errors()}
        )
    logger.info(f"Read {len(currencies)} currencies from {path}")
    return currencies


def load_role_permissions(path: Union[str, Path]) -> dict[Role, tuple[str, ...]]:
    """
    Read a role → permission table.

    Roles missing from the file keep their built-in defaults. Every role
    name and permission token is validated.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ConfigurationError("Role permissions file must contain a JSON object")

    table = dict(ROLE_PERMISSIONS)
    for role_name, tokens in data.items():
        role = parse_role(role_name)
        if not isinstance(tokens, list):
            raise ConfigurationError(
                f"Permissions for role '{role_name}' must be a list"
            )
        for token in tokens:
            parse_permission(token)
        table[role] = tuple(tokens)

    logger.info(f"Read role permissions for {len(data)} roles from {path}")
    return table
