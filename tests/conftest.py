import pytest

from booking import BookingService
from models import Train
from storage import JsonStore, StorageError
from trains import TrainDirectory
from users import UserDirectory


def make_bacs():
    return Train(
        train_id="bacs",
        train_no=12345,
        stations=["bangalore", "jaipur", "delhi"],
        station_times={"bangalore": "13:50:00", "jaipur": "00:15:00", "delhi": "07:30:00"},
    )


@pytest.fixture
def trains_path(tmp_path):
    return str(tmp_path / "trains.json")


@pytest.fixture
def users_path(tmp_path):
    return str(tmp_path / "users.json")


@pytest.fixture
def train_directory(trains_path):
    directory = TrainDirectory(JsonStore(trains_path))
    directory.add_train(make_bacs())
    directory.add_train(Train(
        train_id="mdx",
        train_no=12952,
        stations=["mumbai", "surat", "delhi"],
        station_times={"mumbai": "17:00:00", "surat": "19:50:00", "delhi": "08:35:00"},
    ))
    return directory


@pytest.fixture
def user_directory(users_path):
    # Lowest bcrypt cost keeps the tests fast
    return UserDirectory(JsonStore(users_path), bcrypt_rounds=4)


@pytest.fixture
def booking_service(train_directory, user_directory):
    return BookingService(train_directory, user_directory)


@pytest.fixture
def fail_writes(monkeypatch):
    """Makes every save() on the given store raise StorageError."""
    def broken(store):
        def save(records):
            raise StorageError(f"Could not write {store.path}: disk full")
        monkeypatch.setattr(store, "save", save)
    return broken
