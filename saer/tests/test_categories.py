from __future__ import annotations

import pytest

from saer.models.categories import CategoryDescriptor, CategoryType
from saer.services.categories import (
    FIXED_CATEGORIES,
    OTHER_COSTS_PATH,
    UNMATCHED_CATEGORY_PATH,
    convert_to_financial_categories,
    generate_category_key,
    get_category_display_name,
    get_category_path,
    group_categories_by_type,
    is_fixed_category,
)

CEMENT = CategoryDescriptor(id=7, code="MAT-01", name="Cemento y Áridos", type=CategoryType.MATERIALES)
CREW = CategoryDescriptor(id=8, code="MO-01", name="Cuadrilla Obra Gruesa", type="mano_obra")
DIESEL = CategoryDescriptor(id=9, name="Petróleo Diésel", type="combustibles")
MYSTERY = CategoryDescriptor(id=10, name="Seguros", type="seguros")


def test_generate_category_key_folds_accents_and_spaces():
    assert generate_category_key(CEMENT) == "materiales_cementoyaridos"
    assert generate_category_key(DIESEL) == "combustibles_petroleodiesel"


def test_generate_category_key_sanitises_type_and_caps_name():
    category = CategoryDescriptor(name="Arriendo de Maquinaria Pesada Norte", type="gastos_generales")
    key = generate_category_key(category)
    assert key == "gastosgenerales_arriendodemaquinaria"
    assert len(key.split("_", 1)[1]) == 20


def test_truncated_names_share_a_key():
    first = CategoryDescriptor(name="Subcontrato Eléctrico Etapa 1", type="maquinaria")
    second = CategoryDescriptor(name="Subcontrato Electrico Etapa 2", type="maquinaria")
    assert generate_category_key(first) == generate_category_key(second)


def test_dynamic_keys_never_collide_with_fixed_categories():
    candidates = [
        CategoryDescriptor(name=name, type=type_)
        for name in ("remuneraciones", "Factoring", "costosFijos", "")
        for type_ in ("", "materiales", "remuneraciones")
    ]
    for category in candidates:
        key = generate_category_key(category)
        assert not is_fixed_category(key)
        assert "_" in key


def test_is_fixed_category():
    for key in FIXED_CATEGORIES:
        assert is_fixed_category(key)
    assert not is_fixed_category("materiales_cementoyaridos")
    assert not is_fixed_category("Remuneraciones")


def test_display_name_round_trips_known_category():
    categories = [CREW, CEMENT, DIESEL]
    for category in categories:
        assert get_category_display_name(generate_category_key(category), categories) == category.name


def test_display_name_fallback_is_lossy():
    assert get_category_display_name("materiales_cementoyaridos", []) == "cementoyaridos"
    assert get_category_display_name("gastos_generales_oficina", []) == "generales oficina"
    assert get_category_display_name("otros_cajaChica", []) == "caja Chica"
    assert get_category_display_name("nokey", []) == "nokey"


@pytest.mark.parametrize(
    "category, expected",
    [
        (CEMENT, "/costos/materiales"),
        (CREW, "/costos/mano-obra"),
        (DIESEL, "/costos/combustibles"),
        (CategoryDescriptor(name="Grúa", type="maquinaria"), "/costos/maquinaria"),
        (CategoryDescriptor(name="Oficina", type="gastos_generales"), "/costos/gastos-generales"),
        (MYSTERY, OTHER_COSTS_PATH),
    ],
)
def test_category_path_by_type(category, expected):
    assert get_category_path(generate_category_key(category), [category]) == expected


def test_category_path_without_match():
    assert get_category_path("materiales_inexistente", [CEMENT]) == UNMATCHED_CATEGORY_PATH


def test_group_categories_by_type_preserves_order():
    grouped = group_categories_by_type([CEMENT, CREW, DIESEL, CategoryDescriptor(name="Fierro", type="materiales")])
    assert list(grouped) == ["materiales", "mano_obra", "combustibles"]
    assert [category.name for category in grouped["materiales"]] == ["Cemento y Áridos", "Fierro"]


def test_descriptor_exposes_known_type():
    assert CEMENT.type == "materiales"
    assert CEMENT.category_type is CategoryType.MATERIALES
    assert MYSTERY.category_type is None


def test_convert_to_financial_categories_skips_fixed_keys():
    data = {
        "remuneraciones": {"month-1": 10},
        "factoring": {"month-1": 0},
        "materiales_cementoyaridos": {"month-1": 25, "month-2": 5},
        "seguros_unknown": {"month-1": 1},
    }
    rows = convert_to_financial_categories(data, [CEMENT])
    assert [row.category for row in rows] == ["Cemento y Áridos", "unknown"]
    assert rows[0].path == "/costos/materiales"
    assert rows[0].amounts == {"month-1": 25, "month-2": 5}
    assert rows[1].path == UNMATCHED_CATEGORY_PATH
