"""
Booking workflow: claims a seat on a train and records the ticket on the
user, or undoes both. The trains file and the users file are written one
after the other, so a crash in between can leave them out of step.
"""
import logging
from datetime import datetime

from models import SEAT_COLS, SEAT_ROWS, SeatState, Ticket, train_to_dict
from storage import StorageError
from trains import is_valid_route, seat_in_bounds

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """A booking or cancellation request was rejected; nothing was changed."""


class BookingService:
    def __init__(self, train_directory, user_directory):
        self.trains = train_directory
        self.users = user_directory

    def book(self, user, train, row, col, source, destination, date_of_travel):
        try:
            datetime.strptime(date_of_travel, '%Y-%m-%d')
        except ValueError:
            raise BookingError("Invalid date format. Use YYYY-MM-DD.")

        if not is_valid_route(train, source, destination):
            raise BookingError(f"Train {train.train_id} does not run from {source} to {destination}.")

        if not seat_in_bounds(row, col):
            raise BookingError(f"Seat {row}-{col} does not exist. Rows are 0-{SEAT_ROWS - 1}, columns 0-{SEAT_COLS - 1}.")

        if train.seats[row][col] == SeatState.OCCUPIED:
            raise BookingError(f"Seat {row}-{col} is already booked.")

        if not self.trains.book_seat(train, row, col):
            raise BookingError("Seat could not be booked.")

        ticket = Ticket(
            ticket_id=self.users.generate_ticket_id(),
            user_id=user.user_id,
            source=source,
            destination=destination,
            date_of_travel=date_of_travel,
            row=row,
            col=col,
            train=train_to_dict(train),
        )
        try:
            self.users.add_ticket(user, ticket)
        except StorageError:
            # Release the seat so no cell stays booked without a ticket
            try:
                self.trains.cancel_seat(train, row, col)
            except StorageError as e:
                train.seats[row][col] = SeatState.FREE
                logger.error("Seat %s-%s on train %s freed in memory only: %s", row, col, train.train_id, e)
            raise
        logger.info("User %s booked ticket %s", user.user_id, ticket.ticket_id)
        return ticket

    def cancel(self, user, ticket_id):
        ticket = self.users.remove_ticket(user, ticket_id)
        if ticket is None:
            raise BookingError(f"No booking with ID {ticket_id} found.")

        train = self.trains.get(ticket.train_id)
        if train is None:
            logger.warning("Train %s for ticket %s no longer exists, seat not freed",
                           ticket.train_id, ticket.ticket_id)
        else:
            try:
                self.trains.cancel_seat(train, ticket.row, ticket.col)
            except StorageError:
                # Give the ticket back; its seat is still booked
                try:
                    self.users.add_ticket(user, ticket)
                except StorageError as e:
                    user.tickets_booked.append(ticket)
                    logger.error("Ticket %s restored in memory only: %s", ticket.ticket_id, e)
                raise

        logger.info("User %s cancelled ticket %s", user.user_id, ticket.ticket_id)
        return ticket
