import re

from scholarship_portal.services.tracking_id import generate_tracking_id, is_valid_tracking_id


def test_generated_ids_match_public_format():
    for _ in range(50):
        assert re.match(r"^APP-[0-9A-F]{8}$", generate_tracking_id())


def test_generated_ids_differ():
    ids = {generate_tracking_id() for _ in range(200)}
    assert len(ids) > 190


def test_is_valid_tracking_id():
    assert is_valid_tracking_id("APP-DEADBEEF")
    assert is_valid_tracking_id("app-deadbeef")
    assert not is_valid_tracking_id("APP-XYZ")
    assert not is_valid_tracking_id("DEADBEEF")
    assert not is_valid_tracking_id("")
