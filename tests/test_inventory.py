import json
import logging

import pytest

from core.inventory import (
    DEFAULT_RULES,
    INVENTORY_PATH,
    JsonVehicleStore,
    SearchTerm,
    StoreError,
    build_match_rules,
    match_reasons,
    matches,
    search_vehicles,
)


def _vrms(vehicles):
    return [v.vrm for v in vehicles]


def test_load_all_preserves_file_order(store, sample_records):
    vehicles = store.load_all()
    assert _vrms(vehicles) == [r["VRM"] for r in sample_records]
    assert vehicles[0].price == 12995
    assert vehicles[0].to_wire() == sample_records[0]


def test_load_all_rereads_file_each_call(store, data_file, sample_records):
    assert len(store.load_all()) == 4
    data_file.write_text(json.dumps(sample_records[:1]))
    assert _vrms(store.load_all()) == ["AB12CDE"]


def test_empty_list_is_a_valid_store(tmp_path):
    path = tmp_path / "vehicles.json"
    path.write_text("[]")
    assert JsonVehicleStore(path).load_all() == []


def test_missing_file_raises_store_error(tmp_path, caplog):
    store = JsonVehicleStore(tmp_path / "nope.json")
    with caplog.at_level(logging.ERROR, logger="core.inventory"):
        with pytest.raises(StoreError):
            store.load_all()
    assert "not found" in caplog.text


@pytest.mark.parametrize("content", ["{not json", '{"VRM": "AB12CDE"}', '[{"VRM": "AB12CDE"}]'])
def test_corrupt_file_raises_store_error(tmp_path, content):
    path = tmp_path / "vehicles.json"
    path.write_text(content)
    with pytest.raises(StoreError):
        JsonVehicleStore(path).load_all()


def test_find_by_vrm_is_case_insensitive(store):
    assert store.find_by_vrm("ab12cde").vrm == "AB12CDE"
    assert store.find_by_vrm(" AB12CDE ").vrm == "AB12CDE"
    assert store.find_by_vrm("ZZ99ZZZ") is None


def test_shipped_data_file_loads():
    vehicles = JsonVehicleStore(INVENTORY_PATH).load_all()
    assert vehicles
    vrms = [v.vrm.upper() for v in vehicles]
    assert len(vrms) == len(set(vrms))


def test_search_is_case_insensitive(store):
    vehicles = store.load_all()
    assert _vrms(search_vehicles("bmw", vehicles)) == ["BD19XYZ"]
    assert search_vehicles("BMW", vehicles) == search_vehicles("bmw", vehicles)


def test_search_matches_text_fields(store):
    vehicles = store.load_all()
    assert _vrms(search_vehicles("hatch", vehicles)) == ["AB12CDE", "DF67JKL"]
    assert _vrms(search_vehicles("grey", vehicles)) == ["EG21MNO"]
    assert _vrms(search_vehicles("m sport", vehicles)) == ["BD19XYZ"]
    assert _vrms(search_vehicles("ab12", vehicles)) == ["AB12CDE"]


def test_fuzzy_price_window(store):
    vehicles = store.load_all()
    assert "AB12CDE" in _vrms(search_vehicles("12000", vehicles))
    assert "AB12CDE" not in _vrms(search_vehicles("10000", vehicles))


def test_numeric_query_matches_price_and_mileage_once_each(store):
    vehicles = store.load_all()
    assert _vrms(search_vehicles("12995", vehicles)) == ["AB12CDE", "EG21MNO"]


def test_match_reasons_lists_every_firing_rule(store):
    focus, _, qashqai, _ = store.load_all()
    assert match_reasons(focus, "12995") == ["exact_price", "price_window"]
    assert match_reasons(qashqai, "12995") == ["exact_mileage"]
    assert match_reasons(focus, "2018") == ["registration_date"]


def test_registration_date_is_raw_substring(store):
    vehicles = store.load_all()
    assert _vrms(search_vehicles("-03-", vehicles)) == ["AB12CDE"]
    assert search_vehicles("14 mar", vehicles) == []


def test_registration_date_rule_can_be_disabled(store):
    rules = build_match_rules(match_registration_date=False)
    assert "registration_date" not in [r.name for r in rules]
    assert search_vehicles("2018-03", store.load_all(), rules) == []


def test_price_window_is_configurable(store):
    vehicles = store.load_all()
    wide = build_match_rules(price_window=3000)
    assert "AB12CDE" in _vrms(search_vehicles("10000", vehicles, wide))
    exact = build_match_rules(price_window=0)
    assert "AB12CDE" not in _vrms(search_vehicles("12000", vehicles, exact))


def test_negative_price_window_rejected():
    with pytest.raises(ValueError):
        build_match_rules(price_window=-1)


REFERENCE_QUERIES = ["a", "1", "12000", "12995", "32100", "blue", "2019", "SUV", "-03-", "x", "ford", "-500"]


def _reference_match(record, query):
    q = query.strip().lower()
    digits = q[1:] if q[0] in "+-" else q
    number = int(q) if digits.isascii() and digits.isdigit() else None
    return (
        q in record["VRM"].lower()
        or q in record["Make"].lower()
        or q in record["Model"].lower()
        or q in record["Variant"].lower()
        or q in record["Colour"].lower()
        or q in record["BodyType"].lower()
        or (number is not None and record["Price"] == number)
        or (number is not None and record["Mileage"] == number)
        or (number is not None and abs(record["Price"] - number) <= 1000)
        or q in record["DateOfRegistration"].lower()
    )


@pytest.mark.parametrize("query", REFERENCE_QUERIES)
def test_results_are_exactly_the_matching_vehicles(store, sample_records, query):
    found = set(_vrms(search_vehicles(query, store.load_all())))
    for record in sample_records:
        assert (record["VRM"] in found) == _reference_match(record, query), record["VRM"]


def test_search_matches_model_alone(store):
    qashqai = store.load_all()[2]
    assert _vrms(search_vehicles("qashqai", store.load_all())) == ["EG21MNO"]
    assert match_reasons(qashqai, "QASHQAI") == ["model"]


def test_search_term_parsing():
    assert SearchTerm.parse(" 12000 ").number == 12000
    assert SearchTerm.parse("12.5").number is None
    assert SearchTerm.parse("1e3").number is None
    assert SearchTerm.parse("12_995").number is None
    assert SearchTerm.parse("\u0661\u0662").number is None
    assert SearchTerm.parse("-500").number == -500
    assert SearchTerm.parse("Ford").text == "ford"
    with pytest.raises(ValueError):
        SearchTerm.parse("   ")


def test_default_rule_order():
    assert [r.name for r in DEFAULT_RULES] == [
        "vrm", "make", "model", "variant", "colour", "body_type",
        "exact_price", "exact_mileage", "price_window", "registration_date",
    ]


def test_python_only_integer_forms_are_plain_text(store):
    assert search_vehicles("12_995", store.load_all()) == []
