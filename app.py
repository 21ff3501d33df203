import sys
import logging
import argparse
from getpass import getpass

from config import configure_logging, load_config
from storage import JsonStore, StorageError
from trains import TrainDirectory
from users import MAX_PASSWORD_BYTES, UserDirectory, password_too_long
from booking import BookingError, BookingService

logger = logging.getLogger(__name__)


# ----------------------------------------------------
# --- INITIALIZATION ---
# ----------------------------------------------------
def build_services(config):
    """Loads both directories from disk and wires up the booking workflow."""
    trains = TrainDirectory(JsonStore(config['TRAINS_FILE']))
    users = UserDirectory(JsonStore(config['USERS_FILE']), bcrypt_rounds=config['BCRYPT_LOG_ROUNDS'])
    return {
        "trains": trains,
        "users": users,
        "booking": BookingService(trains, users),
    }


def new_session():
    return {
        "user": None,
        "search_results": [],
        "selected_train": None,
        "last_search": None,
    }


def read_int(prompt):
    try:
        return int(input(prompt).strip())
    except ValueError:
        return None


def require_login(session):
    if session["user"] is None:
        print("Please log in first.")
        return False
    return True


# ----------------------------------------------------
# 1. AUTHENTICATION
# ----------------------------------------------------
def show_signup(session, services):
    name = input("Enter the username to signup: ").strip()
    password = getpass("Enter the password to signup: ")
    if not name or not password:
        print("Username and password are required.")
        return
    if password_too_long(password):
        print(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return

    user = services["users"].signup(name, password)
    if user:
        print("Registration successful! Please log in.")
    else:
        print("User already exists. Please log in.")


def show_login(session, services):
    name = input("Enter the username to login: ").strip()
    password = getpass("Enter the password to login: ")

    user = services["users"].login(name, password)
    if user:
        session["user"] = user
        print(f"Welcome back, {user.name}!")
    else:
        print("Login failed. Check username and password.")


# ----------------------------------------------------
# 2. BOOKINGS
# ----------------------------------------------------
def show_bookings(session, services):
    if not require_login(session):
        return

    tickets = services["users"].list_bookings(session["user"])
    if not tickets:
        print("No bookings found for this user.")
        return
    for ticket in tickets:
        print(ticket.ticket_info())


def show_cancel(session, services):
    if not require_login(session):
        return

    ticket_id = input("Enter the ticket id to cancel: ").strip().upper()
    try:
        ticket = services["booking"].cancel(session["user"], ticket_id)
    except BookingError as e:
        print(f"Cancellation failed: {e}")
        return
    print(f"Booking {ticket.ticket_id} successfully cancelled.")


# ----------------------------------------------------
# 3. TRAIN SEARCH
# ----------------------------------------------------
def show_search(session, services):
    source = input("Type your source station: ").strip()
    destination = input("Type your destination station: ").strip()

    trains = services["trains"].search(source, destination)
    session["search_results"] = trains
    session["last_search"] = (source, destination)
    session["selected_train"] = None

    if not trains:
        print("No trains found for this route.")
        return

    print(services["trains"].results_table(trains, source, destination))
    choice = read_int("Select a train by typing its number (0 to skip): ")
    if choice is not None and 1 <= choice <= len(trains):
        session["selected_train"] = trains[choice - 1]
        print(f"Selected {session['selected_train'].train_info()}")


# ----------------------------------------------------
# 4. SEAT BOOKING
# ----------------------------------------------------
def show_book_seat(session, services):
    if not require_login(session):
        return
    train = session["selected_train"]
    if train is None:
        print("Search for a route and select a train first.")
        return

    print(services["trains"].display(train))
    row = read_int("Enter the row: ")
    col = read_int("Enter the column: ")
    if row is None or col is None:
        print("Row and column must be numbers.")
        return
    date_of_travel = input("Enter the date of travel (YYYY-MM-DD): ").strip()

    source, destination = session["last_search"]
    try:
        ticket = services["booking"].book(session["user"], train, row, col, source, destination, date_of_travel)
    except BookingError as e:
        print(f"Booking failed: {e}")
        return
    print(f"Booked! Enjoy your journey. PNR: {ticket.ticket_id}")


# ----------------------------------------------------
# 5. MENU LOOP
# ----------------------------------------------------
MENU = [
    ("1", "Sign up", show_signup),
    ("2", "Login", show_login),
    ("3", "Fetch Bookings", show_bookings),
    ("4", "Search Trains", show_search),
    ("5", "Book a Seat", show_book_seat),
    ("6", "Cancel my Booking", show_cancel),
]
EXIT_OPTION = "7"


def run_menu(session, services):
    actions = {key: handler for key, _, handler in MENU}

    while True:
        print("Choose option")
        for key, label, _ in MENU:
            print(f"{key}. {label}")
        print(f"{EXIT_OPTION}. Exit the App")

        try:
            choice = input("> ").strip()
        except EOFError:
            break

        if choice == EXIT_OPTION:
            break
        handler = actions.get(choice)
        if handler is None:
            print("Invalid option, try again.")
            continue

        try:
            handler(session, services)
        except StorageError as e:
            logger.error("Storage failure during %r: %s", choice, e)
            print(f"Could not save or load data: {e}", file=sys.stderr)
        except EOFError:
            break

    print("Goodbye!")


# ----------------------------------------------------
# --- RUN THE APPLICATION ---
# ----------------------------------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(description="Train ticket booking from the command line.")
    parser.add_argument("--users-file", help="Path of the users JSON file")
    parser.add_argument("--trains-file", help="Path of the trains JSON file")
    parser.add_argument("--log-level", help="Logging level, e.g. INFO or DEBUG")
    args = parser.parse_args(argv)

    try:
        config = load_config(
            USERS_FILE=args.users_file,
            TRAINS_FILE=args.trains_file,
            LOG_LEVEL=args.log_level,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    configure_logging(config['LOG_LEVEL'])

    try:
        services = build_services(config)
    except (StorageError, KeyError, ValueError) as e:
        print(f"Could not load data: {e}", file=sys.stderr)
        return 1

    print("Running Train Booking System")
    run_menu(new_session(), services)
    return 0


if __name__ == '__main__':
    sys.exit(main())
