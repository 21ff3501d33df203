import uuid
import random
import string
import logging

import bcrypt

from models import User, user_from_dict, user_to_dict
from storage import StorageError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def password_too_long(password):
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password, rounds=12):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password, hashed_password):
    """bcrypt comparison; a malformed stored hash counts as a mismatch."""
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning("Stored password hash could not be checked: %s", e)
        return False


class UserDirectory:
    """In-memory user list backed by a JSON store, flushed on every mutation."""

    def __init__(self, store, bcrypt_rounds=12):
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds
        self.users = []
        self.reload()

    def reload(self):
        self.users = [user_from_dict(record) for record in self.store.load()]
        logger.info("Loaded %d user(s)", len(self.users))

    def save(self):
        self.store.save([user_to_dict(u) for u in self.users])

    def get(self, user_id):
        for user in self.users:
            if user.user_id == user_id:
                return user
        return None

    # --- Authentication ---

    def signup(self, name, password):
        """
        Creates and stores a new user. Returns None if the name is taken or the
        password is longer than bcrypt accepts.
        """
        if password_too_long(password):
            logger.warning("Signup rejected, password for %r is over %d bytes", name, MAX_PASSWORD_BYTES)
            return None
        if any(u.name == name for u in self.users):
            logger.warning("Signup rejected, user %r already exists", name)
            return None

        new_user = User(
            name=name,
            hashed_password=hash_password(password, self.bcrypt_rounds),
            user_id=str(uuid.uuid4()),
        )
        self.users.append(new_user)
        try:
            self.save()
        except StorageError:
            self.users.pop()
            raise
        logger.info("Created user %s", new_user.user_id)
        return new_user

    def login(self, name, password):
        for user in self.users:
            if user.name == name and check_password(password, user.hashed_password):
                return user
        return None

    # --- Tickets ---

    def list_bookings(self, user):
        return user.tickets_booked

    def add_ticket(self, user, ticket):
        user.tickets_booked.append(ticket)
        try:
            self.save()
        except StorageError:
            user.tickets_booked.pop()
            raise

    def remove_ticket(self, user, ticket_id):
        for index, ticket in enumerate(user.tickets_booked):
            if ticket.ticket_id == ticket_id:
                del user.tickets_booked[index]
                try:
                    self.save()
                except StorageError:
                    user.tickets_booked.insert(index, ticket)
                    raise
                return ticket
        return None

    def generate_ticket_id(self):
        """Generates a random 6-character PNR not used by any stored ticket."""
        taken = {t.ticket_id for u in self.users for t in u.tickets_booked}
        chars = string.ascii_uppercase + string.digits
        while True:
            pnr = ''.join(random.choice(chars) for _ in range(6))
            if pnr not in taken:
                return pnr
