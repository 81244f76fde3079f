import pytest

from starsearch.services.models import Track, TrackMinimal, lighten_tracks, unique_tracks


class TestTrackMinimal:
    def test_to_minimal_copies_six_fields(self):
        track = Track(
            id="2", name="B", album="X", artwork="u", genre="Pop", price=0.99,
            artist="Artist", description="Long text", currency="USD",
        )
        assert track.to_minimal() == TrackMinimal(
            id="2", name="B", album="X", artwork="u", genre="Pop", price=0.99
        )

    def test_lighten_keeps_order(self):
        tracks = [Track(id=str(i), name=f"T{i}") for i in range(3)]
        assert [t.id for t in lighten_tracks(tracks)] == ["0", "1", "2"]

    def test_lighten_empty(self):
        assert lighten_tracks([]) == []

    def test_lighten_drops_repeated_ids(self):
        tracks = [Track(id="1", name="first"), Track(id="2", name="B"), Track(id="1", name="again")]
        assert [(t.id, t.name) for t in lighten_tracks(tracks)] == [("1", "first"), ("2", "B")]

    def test_unique_tracks_keeps_order(self):
        tracks = [Track(id="3", name="C"), Track(id="1", name="A"), Track(id="3", name="C2")]
        assert [t.id for t in unique_tracks(tracks)] == ["3", "1"]

    def test_minimal_is_frozen(self):
        minimal = TrackMinimal(id="1", name="A")
        with pytest.raises(AttributeError):
            minimal.name = "B"  # type: ignore[misc]


@pytest.mark.parametrize("price,currency,expected", [
    (None, "USD", "N/A"),
    (0.0, "USD", "Free"),
    (9.99, "AUD", "9.99 AUD"),
    (4.5, None, "4.50"),
])
def test_display_price(price, currency, expected):
    track = Track(id="1", name="A", price=price, currency=currency)
    assert track.display_price == expected
