"""Tests for gallery filtering, grouping and facets."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from family_photos.domain.gallery import GalleryCriteria
from family_photos.domain.photos import DEFAULT_ALBUM, effective_album
from family_photos.services.gallery import (
    album_facets,
    build_gallery_view,
    date_bucket,
    filter_photos,
    group_by_album,
    group_by_date,
    photo_details,
    tag_facets,
)
from tests.conftest import make_photo

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def test_date_bucket_labels() -> None:
    assert date_bucket(datetime(2024, 3, 15, 9, 0, tzinfo=UTC), NOW) == "Today"
    assert date_bucket(datetime(2024, 3, 14, 23, 0, tzinfo=UTC), NOW) == "Yesterday"
    assert date_bucket(datetime(2024, 3, 10, 8, 0, tzinfo=UTC), NOW) == "Sunday"
    assert date_bucket(datetime(2024, 3, 9, 8, 0, tzinfo=UTC), NOW) == "March 9"
    assert date_bucket(datetime(2024, 2, 1, 8, 0, tzinfo=UTC), NOW) == "February 1"
    assert date_bucket(datetime(2023, 3, 10, 8, 0, tzinfo=UTC), NOW) == (
        "March 10, 2023"
    )


def test_date_bucket_uses_viewer_timezone() -> None:
    now = datetime(2024, 3, 15, 1, 0, tzinfo=ZoneInfo("America/New_York"))
    uploaded = datetime(2024, 3, 15, 3, 0, tzinfo=UTC)

    assert date_bucket(uploaded, now) == "Yesterday"


def test_group_by_date_keeps_every_photo_once() -> None:
    photos = [
        make_photo(NOW - timedelta(hours=1)),
        make_photo(NOW - timedelta(hours=2)),
        make_photo(NOW - timedelta(days=1)),
        make_photo(NOW - timedelta(days=5)),
        make_photo(NOW - timedelta(days=40)),
        make_photo(NOW - timedelta(days=400)),
    ]

    groups = group_by_date(photos, NOW)

    grouped_ids = [photo.id for group in groups for photo in group.photos]
    assert sorted(grouped_ids) == sorted(photo.id for photo in photos)
    assert len(grouped_ids) == len(set(grouped_ids))
    assert [group.label for group in groups] == [
        "Today",
        "Yesterday",
        "Sunday",
        "February 4",
        "February 9, 2023",
    ]
    assert len(groups[0].photos) == 2


def test_group_title_adds_year_across_year_boundary() -> None:
    now = datetime(2024, 1, 2, 12, 0, tzinfo=UTC)
    photos = [make_photo(datetime(2023, 12, 31, 10, 0, tzinfo=UTC))]

    groups = group_by_date(photos, now)

    assert groups[0].label == "Sunday"
    assert groups[0].title == "Sunday, 2023"


def test_effective_album_defaults_blank_values() -> None:
    assert effective_album(make_photo(NOW)) == DEFAULT_ALBUM
    assert effective_album(make_photo(NOW, album="   ")) == DEFAULT_ALBUM
    assert effective_album(make_photo(NOW, album=" Trips ")) == "Trips"


def test_filter_favorites_ignores_search_and_tag() -> None:
    liked = make_photo(NOW, description="beach", tags=("sea",))
    other = make_photo(NOW, description="mountain", tags=("hike",))
    favorites = {liked.id}

    result = filter_photos(
        [liked, other],
        favorites,
        GalleryCriteria(search="mountain", tag="hike", album="Favorites"),
    )

    assert result == [liked]


def test_filter_search_matches_description_tags_and_album() -> None:
    by_description = make_photo(NOW, description="Grandma's Birthday")
    by_tag = make_photo(NOW, tags=("birthday-cake",))
    by_album = make_photo(NOW, album="Birthdays")
    unrelated = make_photo(NOW, description="Picnic", album="Summer")

    result = filter_photos(
        [by_description, by_tag, by_album, unrelated],
        set(),
        GalleryCriteria(search="BIRTHDAY"),
    )

    assert result == [by_description, by_tag, by_album]


def test_filter_combines_tag_and_album() -> None:
    match = make_photo(NOW, tags=("kids",), album="Summer")
    wrong_album = make_photo(NOW, tags=("kids",), album="Winter")
    no_tag = make_photo(NOW, album="Summer")
    default_album = make_photo(NOW, tags=("kids",))

    assert filter_photos(
        [match, wrong_album, no_tag, default_album],
        set(),
        GalleryCriteria(tag="kids", album="Summer"),
    ) == [match]
    assert filter_photos(
        [match, default_album], set(), GalleryCriteria(album=DEFAULT_ALBUM)
    ) == [default_album]


def test_group_by_album_leads_with_favorites() -> None:
    first = make_photo(NOW, album="Trips")
    second = make_photo(NOW - timedelta(hours=1))
    third = make_photo(NOW - timedelta(hours=2), album="Trips")

    groups = group_by_album([first, second, third], {third.id})

    assert [group.label for group in groups] == ["Favorites", "Trips", DEFAULT_ALBUM]
    assert groups[0].synthetic is True
    assert groups[0].photos == [third]
    assert groups[1].photos == [first, third]


def test_group_by_album_keeps_literal_favorites_album_separate() -> None:
    liked = make_photo(NOW, album="Trips")
    literal = make_photo(NOW, album="Favorites")

    groups = group_by_album([liked, literal], {liked.id})

    assert [(group.label, group.synthetic) for group in groups] == [
        ("Favorites", True),
        ("Trips", False),
        ("Favorites", False),
    ]
    assert groups[0].photos == [liked]


def test_tag_facets_are_distinct() -> None:
    photos = [
        make_photo(NOW, tags=("a", "b")),
        make_photo(NOW, tags=("b", "c")),
        make_photo(NOW),
    ]

    assert tag_facets(photos) == ["a", "b", "c"]


def test_album_facets_reserve_favorites() -> None:
    photos = [
        make_photo(NOW, album="Trips"),
        make_photo(NOW, album="Favorites"),
        make_photo(NOW),
        make_photo(NOW, album="Trips"),
    ]

    assert album_facets(photos) == ["Favorites", DEFAULT_ALBUM, "Trips"]


def test_build_gallery_view_counts_and_facets() -> None:
    photos = [
        make_photo(NOW, tags=("sea",), album="Trips"),
        make_photo(NOW - timedelta(days=1), tags=("hike",)),
    ]

    view = build_gallery_view(
        photos, set(), GalleryCriteria(tag="sea", group_by="album"), NOW
    )

    assert view.total_count == 2
    assert view.filtered_count == 1
    assert view.tags == ["hike", "sea"]
    assert [group.label for group in view.groups] == ["Favorites", "Trips"]


def test_build_gallery_view_is_idempotent() -> None:
    photos = [make_photo(NOW), make_photo(NOW - timedelta(days=3))]
    criteria = GalleryCriteria()

    first = build_gallery_view(photos, set(), criteria, NOW)
    second = build_gallery_view(photos, set(), criteria, NOW)

    assert first == second


def test_photo_details_formats_date_and_time() -> None:
    photo = make_photo(
        datetime(2024, 3, 15, 21, 5, tzinfo=UTC), description="Fireworks"
    )

    details = photo_details(photo, "UTC")

    assert details["uploaded"] == "March 15, 2024"
    assert details["time"] == "9:05 PM"
    assert details["album"] == DEFAULT_ALBUM
