import argparse

from config import load_config
from models import Train, train_to_dict
from storage import JsonStore


# This function will create our sample data
def sample_trains():
    return [
        Train(
            train_id="bacs",
            train_no=12345,
            stations=["bangalore", "jaipur", "delhi"],
            station_times={
                "bangalore": "13:50:00",
                "jaipur": "00:15:00",
                "delhi": "07:30:00",
            },
        ),
        Train(
            train_id="mdx",
            train_no=12952,
            stations=["mumbai", "surat", "vadodara", "kota", "delhi"],
            station_times={
                "mumbai": "17:00:00",
                "surat": "19:50:00",
                "vadodara": "21:20:00",
                "kota": "03:15:00",
                "delhi": "08:35:00",
            },
        ),
        Train(
            train_id="chx",
            train_no=12622,
            stations=["delhi", "bhopal", "nagpur", "chennai"],
            station_times={
                "delhi": "22:00:00",
                "bhopal": "07:05:00",
                "nagpur": "13:15:00",
                "chennai": "06:05:00",
            },
        ),
        Train(
            train_id="kcs",
            train_no=12839,
            stations=["chennai", "vijayawada", "kolkata"],
            station_times={
                "chennai": "23:45:00",
                "vijayawada": "06:35:00",
                "kolkata": "04:05:00",
            },
        ),
    ]


def seed_data(store):
    print("Deleting old data...")
    print("Creating new train data...")
    trains = sample_trains()
    store.save([train_to_dict(t) for t in trains])
    print(f"Trains file {store.path} has been seeded with {len(trains)} trains!")
    return trains


# This 'if' block runs the function
if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Write the sample train list.")
    parser.add_argument("--trains-file", help="Path of the trains JSON file")
    args = parser.parse_args()

    config = load_config(TRAINS_FILE=args.trains_file)
    seed_data(JsonStore(config['TRAINS_FILE']))
