import threading

import pytest
import requests

from user_directory.api_client import RandomUserClient
from user_directory.config import Variant
from user_directory.errors import FeatureUnavailable, FetchError
from user_directory.view import MAX_NOTIFICATIONS, DirectoryView

from conftest import FakeSession, make_response


def make_view(session, variant=Variant.EXTENDED):
    return DirectoryView(RandomUserClient(variant=variant, session=session))


def test_mount_loads_ten_users_once(session):
    view = make_view(session)
    assert view.mount() is True
    assert view.mount() is False
    assert session.urls == ["https://randomuser.me/api/?results=10"]
    assert len(view.users) == 10


@pytest.mark.parametrize("count", [1, 17, 50])
def test_load_users_replaces_users_in_api_order(session, count):
    view = make_view(session)
    view.load_users(3)
    assert view.load_users(count) is True
    assert [u.name.first for u in view.users] == [f"First{i}" for i in range(count)]


def test_failed_load_leaves_users_unchanged(session, caplog):
    view = make_view(session)
    view.load_users(4)
    before = view.users

    session.response = make_response({"info": {}})
    assert view.load_users(8) is False
    assert view.users is before
    assert isinstance(view.last_error, FetchError)
    assert "Error fetching users" in caplog.text


def test_malformed_first_load_keeps_users_empty(session):
    session.response = make_response({"oops": True})
    view = make_view(session)
    view.mount()
    assert view.users == ()
    assert view.last_error is not None


def test_failure_toast_only_on_extended_page(failing_session):
    extended = make_view(failing_session)
    extended.load_users(10)
    assert [n.kind for n in extended.drain_notifications()] == ["error"]

    modal = make_view(failing_session, Variant.MODAL)
    modal.load_users(10)
    assert modal.drain_notifications() == []


def test_select_and_clear(session):
    view = make_view(session)
    view.mount()
    record = view.users[3]
    view.select_user(record)
    assert view.selected_user is record
    assert view.selected_index == 3

    view.clear_selection()
    assert view.selected_user is None
    view.clear_selection()  # already clear
    assert view.selected_user is None


def test_select_index(session):
    view = make_view(session, Variant.MODAL)
    view.mount()
    assert view.select_index(2) is view.users[2]
    with pytest.raises(IndexError):
        view.select_index(10)
    with pytest.raises(IndexError):
        view.select_index(-1)


def test_basic_page_has_no_selection(session):
    view = make_view(session, Variant.BASIC)
    view.mount()
    with pytest.raises(FeatureUnavailable):
        view.select_user(view.users[0])
    with pytest.raises(FeatureUnavailable):
        view.clear_selection()
    with pytest.raises(FeatureUnavailable):
        view.submit_request_count("5")


def test_reload_clears_selection(session):
    view = make_view(session)
    view.mount()
    view.select_index(0)
    view.load_users(5)
    assert view.selected_user is None


def test_failed_reload_keeps_selection(session):
    view = make_view(session)
    view.mount()
    selected = view.select_index(1)
    session.response = make_response({})
    view.load_users(5)
    assert view.selected_user is selected


def test_submit_valid_count(session):
    view = make_view(session)
    view.mount()
    view.drain_notifications()

    assert view.submit_request_count("25") is True
    assert session.urls[-1] == "https://randomuser.me/api/?results=25"
    assert len(view.users) == 25
    assert view.request_count == 25
    assert view.form_error is None
    (toast,) = view.drain_notifications()
    assert toast.kind == "success"
    assert "25" in toast.message


@pytest.mark.parametrize("raw", ["0", 0, "51", "abc", "2.5", "", None])
def test_submit_invalid_count_makes_no_request(session, raw, caplog):
    view = make_view(session)
    view.mount()
    before = view.users
    requests_before = len(session.urls)

    assert view.submit_request_count(raw) is False
    assert len(session.urls) == requests_before
    assert view.users is before
    assert view.form_error
    assert view.request_count == 10
    assert "Error fetching users" not in caplog.text


def test_valid_submit_clears_previous_form_error(session):
    view = make_view(session)
    view.submit_request_count("0")
    assert view.form_error
    view.submit_request_count("3")
    assert view.form_error is None


def test_submit_failure_shows_error_toast(failing_session):
    view = make_view(failing_session)
    assert view.submit_request_count(12) is False
    (toast,) = view.drain_notifications()
    assert toast.kind == "error"
    assert view.drain_notifications() == []


def run_overlapping_loads(slow_error=None):
    """Start a load of 5 that blocks, finish a load of 7, then let the 5 finish (or fail)."""
    release_slow = threading.Event()
    slow_started = threading.Event()

    class OrderedSession(FakeSession):
        def get(self, url, timeout=None):
            if url.endswith("results=5"):
                slow_started.set()
                release_slow.wait(timeout=5)
                if slow_error is not None:
                    raise slow_error
            return super().get(url, timeout)

    view = make_view(OrderedSession())
    results = {}
    slow = threading.Thread(target=lambda: results.setdefault("slow", view.load_users(5)))
    slow.start()
    assert slow_started.wait(timeout=5)

    results["fast"] = view.load_users(7)
    release_slow.set()
    slow.join(timeout=5)
    return view, results


def test_stale_response_is_discarded():
    view, results = run_overlapping_loads()
    assert results == {"fast": True, "slow": False}
    assert len(view.users) == 7


def test_stale_failure_leaves_newer_state_alone(caplog):
    view, results = run_overlapping_loads(requests.ConnectionError("late boom"))
    assert results == {"fast": True, "slow": False}
    assert len(view.users) == 7
    assert view.last_error is None
    assert view.drain_notifications() == []
    assert "late boom" in caplog.text  # still logged


def test_notifications_are_capped(session):
    view = make_view(session)
    for _ in range(MAX_NOTIFICATIONS + 5):
        view.submit_request_count("1")
    pending = view.drain_notifications()
    assert len(pending) == MAX_NOTIFICATIONS
    assert all(n.message == "Fetched 1 users" for n in pending)


def test_snapshot(session):
    view = make_view(session)
    view.mount()
    view.select_index(4)
    snap = view.snapshot()
    assert snap["variant"] == "extended"
    assert len(snap["users"]) == 10
    assert snap["users"][0]["full_name"] == "First0 Last0"
    assert snap["selected_index"] == 4
    assert snap["request_count"] == 10
    assert snap["last_error"] is None
