import logging

import pandas as pd

from models import SEAT_COLS, SEAT_ROWS, SeatState, train_from_dict, train_to_dict
from storage import StorageError

logger = logging.getLogger(__name__)

SEAT_SYMBOLS = {SeatState.FREE: "O", SeatState.OCCUPIED: "X"}


def is_valid_route(train, source, destination):
    """
    True when both stations are on the train's route and source comes first.
    Names are compared exactly as stored.
    """
    source_index = -1
    destination_index = -1
    for index, station in enumerate(train.stations):
        if source_index == -1 and station == source:
            source_index = index
        if destination_index == -1 and station == destination:
            destination_index = index

    return source_index != -1 and destination_index != -1 and source_index < destination_index


def seat_in_bounds(row, col):
    return 0 <= row < SEAT_ROWS and 0 <= col < SEAT_COLS


class TrainDirectory:
    """In-memory train list backed by a JSON store, flushed on every mutation."""

    def __init__(self, store):
        self.store = store
        self.trains = []
        self.reload()

    def reload(self):
        self.trains = [train_from_dict(record) for record in self.store.load()]
        logger.info("Loaded %d train(s)", len(self.trains))

    def save(self):
        self.store.save([train_to_dict(t) for t in self.trains])

    def get(self, train_id):
        for train in self.trains:
            if train.train_id == train_id:
                return train
        return None

    def search(self, source, destination):
        return [t for t in self.trains if is_valid_route(t, source, destination)]

    def add_train(self, train):
        self.trains.append(train)
        self.save()

    def update_train(self, train):
        """Replaces the train with the same id, or appends it when unknown."""
        for index, existing in enumerate(self.trains):
            if existing.train_id == train.train_id:
                self.trains[index] = train
                break
        else:
            self.trains.append(train)
        self.save()

    # --- Seat operations ---

    def book_seat(self, train, row, col):
        if not seat_in_bounds(row, col):
            logger.warning("Seat %s-%s is outside the %dx%d grid", row, col, SEAT_ROWS, SEAT_COLS)
            return False
        if train.seats[row][col] == SeatState.OCCUPIED:
            logger.warning("Seat %s-%s on train %s is already booked", row, col, train.train_id)
            return False

        train.seats[row][col] = SeatState.OCCUPIED
        try:
            self.save()
        except StorageError:
            train.seats[row][col] = SeatState.FREE
            raise
        logger.info("Booked seat %s-%s on train %s", row, col, train.train_id)
        return True

    def cancel_seat(self, train, row, col):
        if not seat_in_bounds(row, col):
            logger.warning("Seat %s-%s is outside the %dx%d grid", row, col, SEAT_ROWS, SEAT_COLS)
            return False

        previous = train.seats[row][col]
        train.seats[row][col] = SeatState.FREE
        try:
            self.save()
        except StorageError:
            train.seats[row][col] = previous
            raise
        logger.info("Freed seat %s-%s on train %s", row, col, train.train_id)
        return True

    # --- Presentation ---

    def display(self, train):
        """Renders the seat grid, O for a free seat and X for a booked one."""
        df = pd.DataFrame(
            [[SEAT_SYMBOLS[SeatState(cell)] for cell in row] for row in train.seats],
            index=pd.Index(range(SEAT_ROWS), name="row"),
            columns=range(SEAT_COLS),
        )
        return df.to_string()

    def results_table(self, trains, source, destination):
        df = pd.DataFrame({
            "Train ID": [t.train_id for t in trains],
            "Train No": [t.train_no for t in trains],
            "Departs": [t.station_times.get(source, "-") for t in trains],
            "Arrives": [t.station_times.get(destination, "-") for t in trains],
            "Free Seats": [t.free_seat_count() for t in trains],
        })
        df.index = range(1, len(df) + 1)
        return df.to_string()
