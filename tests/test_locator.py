from alive_bridge.config import BASE_URL
from alive_bridge.obs import find_target_source


def test_finds_alive_source_skipping_non_browser_items(connected_session):
    assert find_target_source(connected_session, BASE_URL) == "Alive Studio"


def test_first_match_in_listing_order_wins(connected_session, fake_obs):
    fake_obs.items = [
        {"sourceName": "Webcam"},
        {"sourceName": "Alive B"},
        {"sourceName": "Alive A"},
    ]
    fake_obs.settings = {
        "Webcam": {"device": "cam0"},
        "Alive A": {"url": f"{BASE_URL}width=1"},
        "Alive B": {"url": f"{BASE_URL}width=2"},
    }

    assert find_target_source(connected_session, BASE_URL) == "Alive B"


def test_ignores_browser_sources_with_other_urls(connected_session, fake_obs):
    fake_obs.settings = {
        "Camera": {"url": "https://example.com/chat"},
        "Alive Studio": {"url": 12345},
    }

    assert find_target_source(connected_session, BASE_URL) is None


def test_empty_scene_is_not_found(connected_session, fake_obs):
    fake_obs.items = []
    assert find_target_source(connected_session, BASE_URL) is None


def test_scene_lookup_failure_degrades_to_not_found(connected_session, fake_obs):
    fake_obs.raise_on.add("GetCurrentProgramScene")
    assert find_target_source(connected_session, BASE_URL) is None


def test_item_list_failure_degrades_to_not_found(connected_session, fake_obs):
    fake_obs.raise_on.add("GetSceneItemList")
    assert find_target_source(connected_session, BASE_URL) is None
