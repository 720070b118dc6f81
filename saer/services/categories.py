from __future__ import annotations

import logging
import re
import unicodedata
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..models.categories import CategoryDescriptor, CategoryType
from ..models.financial_table import FinancialCategoryRow

logger = logging.getLogger(__name__)

# Legacy categories always present in the period table, in display order.
FIXED_CATEGORIES = ("remuneraciones", "factoring", "previsionales", "costosFijos")

FIXED_CATEGORY_LABELS: Dict[str, str] = {
    "remuneraciones": "Remuneraciones",
    "factoring": "Factoring",
    "previsionales": "Previsionales",
    "costosFijos": "Costos Fijos",
}

NAME_KEY_LENGTH = 20

CATEGORY_PATHS: Dict[CategoryType, str] = {
    CategoryType.MANO_OBRA: "/costos/mano-obra",
    CategoryType.MAQUINARIA: "/costos/maquinaria",
    CategoryType.MATERIALES: "/costos/materiales",
    CategoryType.COMBUSTIBLES: "/costos/combustibles",
    CategoryType.GASTOS_GENERALES: "/costos/gastos-generales",
}
OTHER_COSTS_PATH = "/costos/otros"
UNMATCHED_CATEGORY_PATH = "/costos/categorias"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def _fold(value: str) -> str:
    normalized = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def _sanitize(value: str) -> str:
    return _NON_ALNUM.sub("", _fold(value).lower())


def generate_category_key(category: CategoryDescriptor) -> str:
    """Stable ``<type>_<name>`` key for a dynamic category.

    The name part is capped at 20 characters, so two categories sharing the
    same sanitized prefix end up on the same key.
    """
    type_key = _sanitize(category.type)
    name_key = _sanitize(category.name)[:NAME_KEY_LENGTH]
    return f"{type_key}_{name_key}"


def is_fixed_category(key: str) -> bool:
    return key in FIXED_CATEGORIES


def _find_category(category_key: str, categories: Iterable[CategoryDescriptor]) -> Optional[CategoryDescriptor]:
    for category in categories:
        if generate_category_key(category) == category_key:
            return category
    return None


def get_category_display_name(category_key: str, categories: Iterable[CategoryDescriptor]) -> str:
    category = _find_category(category_key, categories)
    if category is not None:
        return category.name

    # Lossy: the key dropped spaces, accents and anything past 20 characters.
    parts = category_key.split("_")
    if len(parts) >= 2:
        return _CAMEL_BOUNDARY.sub(r"\1 \2", " ".join(parts[1:]))
    return category_key


def get_category_path(category_key: str, categories: Iterable[CategoryDescriptor]) -> str:
    category = _find_category(category_key, categories)
    if category is None:
        return UNMATCHED_CATEGORY_PATH
    category_type = category.category_type
    if category_type is None:
        return OTHER_COSTS_PATH
    return CATEGORY_PATHS.get(category_type, OTHER_COSTS_PATH)


def group_categories_by_type(categories: Iterable[CategoryDescriptor]) -> Dict[str, List[CategoryDescriptor]]:
    grouped: Dict[str, List[CategoryDescriptor]] = OrderedDict()
    for category in categories:
        grouped.setdefault(category.type, []).append(category)
    return grouped


def convert_to_financial_categories(
    financial_data: Mapping[str, Mapping[str, float]],
    categories: Optional[Sequence[CategoryDescriptor]] = None,
) -> List[FinancialCategoryRow]:
    known = list(categories or [])
    rows: List[FinancialCategoryRow] = []
    for category_key, amounts in financial_data.items():
        if is_fixed_category(category_key):
            continue
        if not isinstance(amounts, Mapping):
            logger.warning("Skipping category %s with malformed amounts", category_key)
            continue
        rows.append(
            FinancialCategoryRow(
                category=get_category_display_name(category_key, known),
                amounts=dict(amounts),
                path=get_category_path(category_key, known),
            )
        )
    return rows
