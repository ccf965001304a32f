import pytest

from chat import (
    CityMatcher,
    FallbackMatcher,
    KNOWN_CITIES,
    REPLIES,
    SimilarityMatcher,
    SubstringMatcher,
    build_matcher,
    detect_intent,
    pick_reply,
    reply,
)


@pytest.mark.parametrize("text,intent", [
    ("what are the best places in goa", "best_places"),
    ("where to eat tonight", "food"),
    ("make me an itinerary", "itinerary"),
    ("when to visit jaipur", "best_time"),
    ("3 day getaway", "itinerary"),
    ("hello there", None),
])
def test_detect_intent(text, intent):
    assert detect_intent(text) == intent


def test_substring_matcher():
    m = SubstringMatcher()
    assert m.match("Going to GOA soon", KNOWN_CITIES) == "goa"
    assert m.match("Jaipr", KNOWN_CITIES) is None


def test_similarity_matcher_catches_typos():
    m = SimilarityMatcher()
    assert m.match("Jaipr", KNOWN_CITIES) == "jaipur"
    assert m.match("xxxxxxxxxxxxxxxxxxxxxxxx", KNOWN_CITIES) is None


def test_build_matcher_is_a_configuration_choice():
    assert isinstance(build_matcher(False), SubstringMatcher)
    fuzzy = build_matcher(True)
    assert isinstance(fuzzy, FallbackMatcher)
    assert fuzzy.match("jaipr", KNOWN_CITIES) == "jaipur"


def test_itinerary_lookup_uses_days_key_only():
    assert pick_reply("goa", "itinerary", "3 days in goa") == REPLIES["goa"]["itinerary_3days"]
    assert pick_reply("goa", "itinerary", "3 day goa") == REPLIES["goa"]["itinerary_3days"]
    # no canned 5-day plan -> city highlights
    assert pick_reply("goa", "itinerary", "5 days goa") == REPLIES["goa"]["best_places"]


def test_city_intent_missing_falls_back_to_city_best_places():
    assert pick_reply("jaipur", "best_time", "best time jaipur") == REPLIES["jaipur"]["best_places"]


def test_no_city_uses_default_entries():
    assert pick_reply(None, "best_time", "best time?") == REPLIES["default"]["best_time"]
    assert pick_reply(None, None, "hi") == REPLIES["default"]["best_places"]


def test_reply_prefix_only_with_city():
    assert reply("food in goa", SubstringMatcher()).startswith("Here you go — Goa:\n\n")
    assert reply("food?", SubstringMatcher()) == REPLIES["default"]["food"]


def test_city_matcher_is_abstract():
    with pytest.raises(TypeError):
        CityMatcher()


def test_default_reply_keeps_dataset_text():
    assert "and I’ll suggest top places" in REPLIES["default"]["best_places"]
