from datetime import datetime

from watchstats.badges import (
    ALL_BADGES,
    DEDICATION_BADGES,
    badge_by_id,
    canonical_badge_id,
    genre_badges,
    genre_id_part,
    genre_slug,
    series_genre_badges,
)
from watchstats.config import MAIN_GENRES
from watchstats.domain import BadgeCategory, BadgeRarity, Condition


def test_catalog_size_and_unique_ids():
    ids = [b.id for b in ALL_BADGES]
    assert len(ids) == 110
    assert len(set(ids)) == len(ids)


def test_every_catalog_badge_has_a_rule():
    keys = [b.key for b in ALL_BADGES]
    assert None not in keys
    assert len(set(keys)) == len(keys)
    assert all(not b.is_unlocked for b in ALL_BADGES)


def test_genre_badges_cover_main_genres():
    genre_ids = {b.id for b in ALL_BADGES if b.condition == Condition.GENRE_COUNT}
    assert len(genre_ids) == len(MAIN_GENRES) * 4
    assert "genre_horror_5" in genre_ids
    assert "genre_science_fiction_50" in genre_ids


def test_genre_slug():
    assert genre_slug("Science Fiction") == "science_fiction"
    assert genre_slug("Action & Adventure") == "action_adventure"
    assert genre_slug("Sci-Fi") == "sci_fi"
    assert genre_slug("Комедия") == "комедия"
    assert genre_slug("Comédie") == "comédie"
    assert genre_slug("???") == "unknown"


def test_genre_id_part_keeps_distinct_genres_apart():
    assert genre_id_part("Science Fiction") == "science_fiction"
    assert genre_id_part("Комедия") == "комедия"
    assert genre_id_part("Боевик") == "боевик"

    hyphenated = genre_id_part("Science-Fiction")
    assert hyphenated.startswith("science_fiction_")
    assert hyphenated != genre_id_part("Science Fiction")
    assert genre_id_part("???") != genre_id_part("!!!")


def test_generated_genre_badges():
    badges = genre_badges("Western")
    assert [b.requirement for b in badges] == [5, 15, 30, 50]
    assert badges[0].id == "genre_western_5"
    assert badges[0].genre == "Western"
    assert badges[0].category == BadgeCategory.GENRE

    series = series_genre_badges("Crime")
    assert [b.id for b in series] == ["series_genre_crime_3", "series_genre_crime_10", "series_genre_crime_25"]
    assert series[0].condition == Condition.SERIES_GENRE_COUNT


def test_dedication_thresholds():
    assert [b.requirement for b in DEDICATION_BADGES] == [3, 7, 14, 30, 100]


def test_badge_lookup():
    assert badge_by_id("movies_5").requirement == 5
    assert badge_by_id("nope") is None


def test_canonical_badge_id():
    assert canonical_badge_id("streak_7") == "dedication_streak_7"
    assert canonical_badge_id("genre_science fiction_5") == "genre_science_fiction_5"
    assert canonical_badge_id("series_genre_sci-fi & fantasy_3") == f"series_genre_{genre_id_part('Sci-Fi & Fantasy')}_3"
    assert canonical_badge_id(genre_badges("Science-Fiction")[0].id) == genre_badges("Science-Fiction")[0].id
    assert canonical_badge_id("movies_5") == "movies_5"


def test_unlocking_returns_a_new_badge():
    badge = badge_by_id("first_movie")
    stamped = badge.unlocked(datetime(2026, 10, 14, 20, 0))
    assert stamped.is_unlocked
    assert not badge.is_unlocked
    assert stamped.key == badge.key


def test_rarity_glow_intensity():
    assert [r.glow_intensity for r in BadgeRarity] == [0.0, 0.2, 0.4, 0.6, 0.8]
    assert BadgeCategory.DEDICATION.label == "Dedication"
