import pytest

from antibody_inventory.core.services.search_service import haystack, search


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_query_returns_nothing(stocked_store, query):
    assert search(stocked_store.database, query) == []


def test_case_insensitive_substring(stocked_store):
    matches = search(stocked_store.database, "GFP")
    assert [(m.container_id, m.position, m.name) for m in matches] == [
        ("box_1", "1-1", "Anti-GFP"),
        ("box_2", "1-3", "anti-gfp"),
        ("box_2", "1-4", "anti-gfp"),
    ]


def test_match_carries_locator_fields(stocked_store):
    (match,) = search(stocked_store.database, "3h9")
    assert match.container_name == "Box A"
    assert match.clone_id == "3H9"
    assert match.vendor == "Abcam"
    assert match.catalog_number == "ab290"
    assert match.host_species == "Rabbit"


@pytest.mark.parametrize(
    "query,expected_names",
    [
        ("sigma", {"Anti-Actin"}),
        ("ab290", {"Anti-GFP"}),
        ("rabbit", {"Anti-GFP"}),
        ("backup lot", {"anti-gfp"}),
        ("proteintech", {"anti-gfp"}),
        ("nothing like this", set()),
    ],
)
def test_searches_descriptive_fields(stocked_store, query, expected_names):
    assert {m.name for m in search(stocked_store.database, query)} == expected_names


def test_quantity_fields_are_not_searched(stocked_store):
    # "100" only appears in Anti-GFP's totalAmount
    assert search(stocked_store.database, "100") == []


def test_sort_by_name_is_deterministic(stocked_store):
    stocked_store.assign_batch("box_2", ["2-1"], {"name": "Anti-Beta-GFP"})
    names = [m.name for m in search(stocked_store.database, "gfp", sort_by_name=True)]
    assert names == ["Anti-Beta-GFP", "Anti-GFP", "anti-gfp", "anti-gfp"]


def test_deleted_container_disappears_from_results(stocked_store):
    stocked_store.delete_container("box_2")
    assert {m.container_id for m in search(stocked_store.database, "gfp")} == {"box_1"}


def test_haystack_skips_blank_fields(stocked_store):
    sample = stocked_store.get_sample("box_1", "2-2")
    assert haystack(sample) == "anti-actin sigma-aldrich"
