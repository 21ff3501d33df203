import copy
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List

SEAT_ROWS = 4
SEAT_COLS = 6


class SeatState(IntEnum):
    FREE = 0
    OCCUPIED = 1


def empty_seat_grid():
    return [[SeatState.FREE for _ in range(SEAT_COLS)] for _ in range(SEAT_ROWS)]


# --- Train Model ---
@dataclass
class Train:
    train_id: str
    train_no: int
    stations: List[str] = field(default_factory=list)
    station_times: Dict[str, str] = field(default_factory=dict)
    seats: List[List[SeatState]] = field(default_factory=empty_seat_grid)

    def free_seat_count(self):
        return sum(1 for row in self.seats for cell in row if cell == SeatState.FREE)

    def train_info(self):
        return f"Train ID: {self.train_id} Train No: {self.train_no} ({' -> '.join(self.stations)})"


# --- Ticket Model ---
@dataclass
class Ticket:
    ticket_id: str
    user_id: str
    source: str
    destination: str
    date_of_travel: str
    row: int
    col: int
    # Snapshot of the train record at booking time
    train: dict

    @property
    def train_id(self):
        return self.train.get('train_id')

    def ticket_info(self):
        return (
            f"Ticket ID: {self.ticket_id} belongs to User {self.user_id} "
            f"from {self.source} to {self.destination} on {self.date_of_travel} "
            f"(train {self.train_id}, seat {self.row}-{self.col})"
        )


# --- User Model ---
@dataclass
class User:
    name: str
    hashed_password: str
    user_id: str
    tickets_booked: List[Ticket] = field(default_factory=list)


# --- JSON converters ---

def train_to_dict(train):
    """Converts a Train object to the dictionary stored in the trains file."""
    return {
        "train_id": train.train_id,
        "train_no": train.train_no,
        "seats": [[int(cell) for cell in row] for row in train.seats],
        "station_times": dict(train.station_times),
        "stations": list(train.stations),
    }


def train_from_dict(data):
    seats = data.get("seats")
    if seats is None:
        grid = empty_seat_grid()
    else:
        if len(seats) != SEAT_ROWS or any(len(row) != SEAT_COLS for row in seats):
            raise ValueError(
                f"Train {data.get('train_id')!r} seat grid must be {SEAT_ROWS}x{SEAT_COLS}"
            )
        # SeatState() rejects anything other than 0/1
        grid = [[SeatState(cell) for cell in row] for row in seats]

    return Train(
        train_id=data["train_id"],
        train_no=int(data["train_no"]),
        stations=list(data.get("stations", [])),
        station_times=dict(data.get("station_times", {})),
        seats=grid,
    )


def ticket_to_dict(ticket):
    return {
        "ticket_id": ticket.ticket_id,
        "user_id": ticket.user_id,
        "source": ticket.source,
        "destination": ticket.destination,
        "date_of_travel": ticket.date_of_travel,
        "row": ticket.row,
        "col": ticket.col,
        "train": copy.deepcopy(ticket.train),
    }


def ticket_from_dict(data):
    return Ticket(
        ticket_id=data["ticket_id"],
        user_id=data["user_id"],
        source=data["source"],
        destination=data["destination"],
        date_of_travel=data["date_of_travel"],
        row=int(data["row"]),
        col=int(data["col"]),
        train=copy.deepcopy(data.get("train", {})),
    )


def user_to_dict(user):
    """Converts a User object to the dictionary stored in the users file."""
    return {
        "name": user.name,
        "hashed_password": user.hashed_password,
        "tickets_booked": [ticket_to_dict(t) for t in user.tickets_booked],
        "user_id": user.user_id,
    }


def user_from_dict(data):
    return User(
        name=data["name"],
        hashed_password=data["hashed_password"],
        user_id=data["user_id"],
        tickets_booked=[ticket_from_dict(t) for t in data.get("tickets_booked", [])],
    )
