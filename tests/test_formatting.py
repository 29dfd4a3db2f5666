from placefinder.formatting import encode_uri_component, format_place
from placefinder.geo import Coordinate


RAW = {
    "place_id": "ChIJ123",
    "name": "Joe's Pizza",
    "formatted_address": "7 Carmine St, New York, NY 10014",
    "rating": 4.5,
    "geometry": {"location": {"lat": 40.7306, "lng": -74.0021}},
}


def test_format_place_builds_links():
    place = format_place(RAW, api_key="k123")
    assert place.name == "Joe's Pizza"
    assert place.address == RAW["formatted_address"]
    assert place.rating == 4.5
    assert place.place_id == "ChIJ123"
    assert place.maps_embed_url == (
        "https://www.google.com/maps/embed/v1/place?key=k123&q=place_id:ChIJ123"
    )
    assert place.maps_direction_url == (
        "https://www.google.com/maps/dir/?api=1&destination_place_id=ChIJ123"
        "&destination=7%20Carmine%20St%2C%20New%20York%2C%20NY%2010014"
    )
    assert place.distance_km is None


def test_encode_uri_component_matches_javascript():
    assert encode_uri_component("a b/c?d&e=f") == "a%20b%2Fc%3Fd%26e%3Df"
    assert encode_uri_component("it's (fine)!*~") == "it's%20(fine)!*~"
    assert encode_uri_component("Zürich") == "Z%C3%BCrich"


def test_distance_requires_anchor_and_coordinate():
    anchor = Coordinate(40.7306, -74.0021)
    with_anchor = format_place(RAW, anchor)
    assert with_anchor.distance_km == 0.0

    no_geometry = dict(RAW)
    no_geometry.pop("geometry")
    assert format_place(no_geometry, anchor).distance_km is None


def test_missing_fields_are_tolerated():
    place = format_place({"place_id": "p1"})
    assert place.name is None
    assert place.rating is None
    assert place.maps_direction_url.endswith("destination_place_id=p1&destination=")


def test_to_dict_rounds_distance():
    anchor = Coordinate(40.0, -74.0021)
    data = format_place(RAW, anchor).to_dict()
    assert data["distance_km"] == round(data["distance_km"], 2)
    assert set(data) == {
        "name",
        "address",
        "rating",
        "place_id",
        "maps_embed_url",
        "maps_direction_url",
        "distance_km",
    }
