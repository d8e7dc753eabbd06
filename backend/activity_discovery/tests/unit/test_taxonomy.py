from activity_discovery.domain.taxonomy import TAXONOMY, category_of, iter_pairs, match_subcategories


def test_taxonomy_shape():
    assert len(TAXONOMY) == 6
    assert len(list(iter_pairs())) == 27


def test_category_of():
    assert category_of("Dégustations") == "Gastronomie"
    assert category_of("Inconnue") is None


def test_match_is_accent_insensitive():
    assert match_subcategories("degust") == ["Dégustations"]


def test_match_by_category_label():
    assert match_subcategories("sport") == [
        "Sports collectifs",
        "Sports individuels",
        "Sports de combats",
        "Sports de pleine nature",
        "Sports mécaniques",
        "Sports adaptés",
    ]


def test_empty_keyword_matches_nothing():
    assert match_subcategories("  ") == []
