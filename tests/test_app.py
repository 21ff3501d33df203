import json

import pytest

import app
from seed import seed_data
from storage import JsonStore, StorageError


@pytest.fixture
def console(monkeypatch):
    """Feeds scripted answers to input() and getpass()."""
    def feed(*answers):
        answers = iter(answers)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
        monkeypatch.setattr(app, "getpass", lambda prompt="": "s3cret")
    monkeypatch.setenv("TRAIN_BOOKING_BCRYPT_ROUNDS", "4")
    return feed


@pytest.fixture
def argv(trains_path, users_path):
    seed_data(JsonStore(trains_path))
    return ["--trains-file", trains_path, "--users-file", users_path]


def load(path):
    with open(path) as f:
        return json.load(f)


def test_signup_login_search_and_book(console, argv, trains_path, users_path, capsys):
    console(
        "1", "alice",
        "2", "alice",
        "4", "bangalore", "delhi", "1",
        "5", "1", "2", "2026-11-01",
        "3",
        "7",
    )
    assert app.main(argv) == 0

    users = load(users_path)
    assert users[0]["name"] == "alice"
    tickets = users[0]["tickets_booked"]
    assert len(tickets) == 1
    assert tickets[0]["source"] == "bangalore"
    assert tickets[0]["destination"] == "delhi"
    assert (tickets[0]["row"], tickets[0]["col"]) == (1, 2)

    bacs = next(t for t in load(trains_path) if t["train_id"] == "bacs")
    assert bacs["seats"][1][2] == 1

    out = capsys.readouterr().out
    assert "Welcome back, alice!" in out
    assert tickets[0]["ticket_id"] in out


def test_cancel_booking_from_menu(console, argv, trains_path, users_path):
    console(
        "1", "alice",
        "2", "alice",
        "4", "bangalore", "jaipur", "1",
        "5", "0", "0", "2026-11-01",
        "7",
    )
    app.main(argv)
    ticket_id = load(users_path)[0]["tickets_booked"][0]["ticket_id"]

    console("2", "alice", "6", ticket_id.lower(), "7")
    assert app.main(argv) == 0

    assert load(users_path)[0]["tickets_booked"] == []
    bacs = next(t for t in load(trains_path) if t["train_id"] == "bacs")
    assert bacs["seats"][0][0] == 0


def test_actions_need_login(console, argv, capsys):
    console("3", "5", "6", "7")
    app.main(argv)
    assert capsys.readouterr().out.count("Please log in first.") == 3


def test_booking_needs_selected_train(console, argv, capsys):
    console("1", "alice", "2", "alice", "5", "7")
    app.main(argv)
    assert "Search for a route and select a train first." in capsys.readouterr().out


def test_failed_booking_is_reported(console, argv, users_path, capsys):
    console(
        "1", "alice",
        "2", "alice",
        "4", "bangalore", "delhi", "1",
        "5", "4", "0", "2026-11-01",
        "7",
    )
    app.main(argv)
    assert "Booking failed" in capsys.readouterr().out
    assert load(users_path)[0]["tickets_booked"] == []


def test_no_trains_and_bad_option(console, argv, capsys):
    console("4", "delhi", "bangalore", "9", "7")
    app.main(argv)
    out = capsys.readouterr().out
    assert "No trains found for this route." in out
    assert "Invalid option, try again." in out


def test_end_of_input_exits(monkeypatch, argv):
    def no_more_input(prompt=""):
        raise EOFError
    monkeypatch.setattr("builtins.input", no_more_input)
    assert app.main(argv) == 0


def test_unreadable_trains_file(tmp_path, users_path, capsys):
    broken = tmp_path / "broken.json"
    broken.write_text("[{")
    assert app.main(["--trains-file", str(broken), "--users-file", users_path]) == 1
    assert "Could not load data" in capsys.readouterr().err


def test_over_long_signup_password_is_reported(monkeypatch, argv, users_path, capsys):
    answers = iter(["1", "alice", "7"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(app, "getpass", lambda prompt="": "p" * 80)

    assert app.main(argv) == 0
    assert "Password must be at most 72 bytes." in capsys.readouterr().out
    assert JsonStore(users_path).load() == []


def test_write_failure_during_booking_returns_to_menu(console, argv, trains_path, users_path, monkeypatch, capsys):
    working_save = JsonStore.save

    def save(store, records):
        if store.path == trains_path:
            raise StorageError(f"Could not write {store.path}: disk full")
        working_save(store, records)

    monkeypatch.setattr(JsonStore, "save", save)
    console(
        "1", "alice",
        "2", "alice",
        "4", "bangalore", "delhi", "1",
        "5", "0", "0", "2026-11-01",
        "3",
        "7",
    )
    assert app.main(argv) == 0

    captured = capsys.readouterr()
    assert "Could not save or load data" in captured.err
    assert "No bookings found for this user." in captured.out
    assert "Goodbye!" in captured.out
    assert load(users_path)[0]["tickets_booked"] == []
    bacs = next(t for t in load(trains_path) if t["train_id"] == "bacs")
    assert bacs["seats"][0][0] == 0
