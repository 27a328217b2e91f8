"""Bundled catalogs and their JSON Schema validation.

Each catalog ``<name>.json`` in this package is checked against
``schemas/<name>.schema.json`` (Draft 7) before being turned into models.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator

from ..errors import CatalogValidationError
from ..models.enemies import EnemyCatalog, EnemyTemplate
from ..models.items import Item, ItemCatalog
from ..models.recipes import Recipe, RecipeBook

logger = logging.getLogger(__name__)

_DATA_PKG = "craftmaster.data"
_SCHEMA_PKG = "craftmaster.data.schemas"


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft7Validator:
    text = resources.files(_SCHEMA_PKG).joinpath(f"{name}.schema.json").read_text(encoding="utf-8")
    schema = json.loads(text)
    Draft7Validator.check_schema(schema)
    logger.debug("Loaded schema '%s'", name)
    return Draft7Validator(schema)


def validate(name: str, data: Any) -> None:
    """Validate catalog data against the bundled schema `name`.

    Raises CatalogValidationError carrying every jsonschema error found.
    """
    errors = sorted(_validator(name).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Catalog '%s' invalid at %s: %s", name, list(err.path), err.message)
        raise CatalogValidationError(f"Catalog '{name}' failed validation", errors)


def load_raw(name: str, path: Optional[str] = None) -> List[Dict[str, Any]]:
    if path is None:
        text = resources.files(_DATA_PKG).joinpath(f"{name}.json").read_text(encoding="utf-8")
    else:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
        logger.info("Loading %s catalog from %s", name, path)
    data = json.loads(text)
    validate(name, data)
    return data


def load_items(path: Optional[str] = None) -> ItemCatalog:
    return ItemCatalog(Item.from_dict(d) for d in load_raw("items", path))


def load_recipes(path: Optional[str] = None) -> RecipeBook:
    return RecipeBook(Recipe.from_dict(d) for d in load_raw("recipes", path))


def load_enemies(path: Optional[str] = None) -> EnemyCatalog:
    return EnemyCatalog(EnemyTemplate.from_dict(d) for d in load_raw("enemies", path))


__all__ = ["validate", "load_raw", "load_items", "load_recipes", "load_enemies"]
