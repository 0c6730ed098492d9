import pytest

from groupie.models import Artist, InvalidPayload, Outcome, Result


def test_from_payload_maps_json_keys():
    artist = Artist.from_payload({
        "id": 5,
        "name": "Muse",
        "image": "muse.jpg",
        "members": ["Matt", "Dom"],
        "creationDate": 1994,
        "firstAlbum": "Showbiz",
        "locations": "Teignmouth",
        "concertDates": "1999",
        "relations": "alt rock",
        "unknown": "ignored",
    })
    assert artist.id == 5
    assert artist.creation_date == 1994
    assert artist.first_album == "Showbiz"
    assert artist.concert_dates == "1999"


def test_from_payload_defaults_missing_and_null_fields():
    artist = Artist.from_payload({"name": "Muse", "members": None})
    assert artist == Artist(name="Muse")
    assert artist.members == []


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "Muse",
        {"name": 5},
        {"creationDate": "1994"},
        {"creationDate": 1994.5},
        {"id": True},
        {"members": "Matt"},
        {"members": ["Matt", 3]},
    ],
)
def test_from_payload_rejects_wrong_types(payload):
    with pytest.raises(InvalidPayload):
        Artist.from_payload(payload)


def test_to_dict_uses_fixed_json_keys_in_order():
    data = Artist(id=1, name="Queen", members=["Brian May"]).to_dict()
    assert list(data) == [
        "id",
        "image",
        "name",
        "members",
        "creationDate",
        "firstAlbum",
        "locations",
        "concertDates",
        "relations",
    ]
    assert data["members"] == ["Brian May"]


def test_overwrite_from_keeps_id():
    target = Artist(id=2, name="Old", members=["A"])
    source = Artist(id=9, name="New", members=["B"])
    target.overwrite_from(source)
    assert target == Artist(id=2, name="New", members=["B"])
    source.members.append("C")
    assert target.members == ["B"]


def test_result_variants():
    assert Result.ok(1).is_ok
    missing = Result.not_found()
    assert missing.outcome is Outcome.NOT_FOUND
    assert missing.error == "not found"
    invalid = Result.invalid("invalid id")
    assert not invalid.is_ok
    assert invalid.error == "invalid id"
