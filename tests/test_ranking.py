from placefinder.formatting import FormattedPlace
from placefinder.ranking import compare_places, rank_places


def make_place(name, distance=None, rating=None):
    return FormattedPlace(
        name=name,
        address=f"{name} street",
        rating=rating,
        place_id=name,
        maps_embed_url="",
        maps_direction_url="",
        distance_km=distance,
    )


def test_rating_wins_inside_distance_band():
    near = make_place("near", distance=10.0, rating=3.5)
    better = make_place("better", distance=10.3, rating=4.8)
    ranked = rank_places([near, better])
    assert [p.name for p in ranked] == ["better", "near"]


def test_distance_wins_outside_band():
    near = make_place("near", distance=2.0, rating=3.0)
    far = make_place("far", distance=2.6, rating=5.0)
    assert [p.name for p in rank_places([far, near])] == ["near", "far"]


def test_places_with_distance_precede_places_without():
    no_distance = make_place("nodist", rating=5.0)
    with_distance = make_place("dist", distance=40.0, rating=1.0)
    assert [p.name for p in rank_places([no_distance, with_distance])] == ["dist", "nodist"]


def test_missing_rating_counts_as_zero():
    unrated = make_place("unrated")
    rated = make_place("rated", rating=0.5)
    assert [p.name for p in rank_places([unrated, rated])] == ["rated", "unrated"]
    assert compare_places(make_place("a", 1.0), make_place("b", 1.2, 0.0)) == 0


def test_sort_is_stable_for_equal_keys():
    places = [make_place(f"p{i}", rating=4.0) for i in range(5)]
    assert [p.name for p in rank_places(places)] == ["p0", "p1", "p2", "p3", "p4"]
