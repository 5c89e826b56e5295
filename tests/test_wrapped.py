from datetime import datetime

from watchstats.wrapped import all_monthly_stats, available_months, monthly_stats


def test_records_are_bucketed_by_calendar_month(make_movie, make_episode):
    september = make_movie(watched_date=datetime(2026, 9, 30, 23, 0), runtime=100)
    october = make_movie(watched_date=datetime(2026, 10, 1, 0, 30), runtime=90)
    episode = make_episode(watched_date=datetime(2026, 10, 2, 21, 0), runtime=40)

    sep = monthly_stats(datetime(2026, 9, 15), [october, september], [], [episode])
    oct_ = monthly_stats(datetime(2026, 10, 31), [october, september], [], [episode])

    assert sep.month_start == datetime(2026, 9, 1)
    assert sep.movies_count == 1
    assert sep.episodes_count == 0
    assert sep.total_runtime_minutes == 100

    assert oct_.month_start == datetime(2026, 10, 1)
    assert oct_.movies_count == 1
    assert oct_.episodes_count == 1
    assert oct_.total_runtime_minutes == 130
    assert oct_.total_watched == 2


def test_series_count_but_add_no_runtime(make_series):
    series = make_series(watched_date=datetime(2026, 10, 3), genres=["Drama"])
    stats = monthly_stats(datetime(2026, 10, 1), [], [series], [])
    assert stats.series_count == 1
    assert stats.total_runtime_minutes == 0
    assert stats.top_genres == ["Drama"]


def test_top_genres_rank_by_frequency_then_first_seen(make_movie, make_series):
    when = datetime(2026, 10, 5)
    movies = [
        make_movie(watched_date=when, genres=["Comedy", "Drama"]),
        make_movie(watched_date=when, genres=["Horror", "Drama"]),
    ]
    series = [make_series(watched_date=when, genres=["Horror", "Crime"])]

    stats = monthly_stats(when, movies, series, [])

    assert stats.top_genres == ["Drama", "Horror", "Comedy", "Crime"]


def test_top_genres_are_truncated(make_movie):
    when = datetime(2026, 10, 5)
    movies = [make_movie(watched_date=when, genres=["A", "B", "C", "D", "E", "F", "G"])]
    assert len(monthly_stats(when, movies, [], []).top_genres) == 5
    assert monthly_stats(when, movies, [], [], top_genres_limit=3).top_genres == ["A", "B", "C"]


def test_empty_month(make_movie):
    stats = monthly_stats(datetime(2025, 1, 1), [make_movie(watched_date=datetime(2026, 10, 1))], [], [])
    assert stats.total_watched == 0
    assert stats.top_genres == []
    assert stats.formatted_runtime == "0h 0min"


def test_available_months(make_movie, make_series, make_episode):
    movies = [make_movie(watched_date=datetime(2026, 10, 1)), make_movie(watched_date=datetime(2026, 10, 20))]
    series = [make_series(watched_date=datetime(2026, 3, 5))]
    episodes = [make_episode(watched_date=datetime(2025, 12, 31, 23, 59))]

    months = available_months(movies, series, episodes)

    assert months == [datetime(2026, 10, 1), datetime(2026, 3, 1), datetime(2025, 12, 1)]
    assert [m.month_start for m in all_monthly_stats(movies, series, episodes)] == months
    assert available_months([], [], []) == []
