import os
import logging

# --- Defaults ---
DEFAULT_CONFIG = {
    'BCRYPT_LOG_ROUNDS': 12,
    'LOG_LEVEL': 'WARNING',
}

# Environment variable -> config key
ENV_OVERRIDES = {
    'TRAIN_BOOKING_USERS_FILE': 'USERS_FILE',
    'TRAIN_BOOKING_TRAINS_FILE': 'TRAINS_FILE',
    'TRAIN_BOOKING_BCRYPT_ROUNDS': 'BCRYPT_LOG_ROUNDS',
    'TRAIN_BOOKING_LOG_LEVEL': 'LOG_LEVEL',
}


def load_config(**overrides):
    """
    Builds the config dict: defaults, then environment variables, then any
    non-None keyword overrides (e.g. values parsed from the command line).
    """
    data_dir = os.path.join(os.getcwd(), "data")
    config = dict(DEFAULT_CONFIG)
    config['USERS_FILE'] = os.path.join(data_dir, "users.json")
    config['TRAINS_FILE'] = os.path.join(data_dir, "trains.json")

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    for key, value in overrides.items():
        if value is not None:
            config[key] = value

    try:
        config['BCRYPT_LOG_ROUNDS'] = int(config['BCRYPT_LOG_ROUNDS'])
    except ValueError:
        raise ValueError(f"BCRYPT_LOG_ROUNDS must be an integer, got {config['BCRYPT_LOG_ROUNDS']!r}")

    config['LOG_LEVEL'] = str(config['LOG_LEVEL']).upper()
    return config


def configure_logging(level="WARNING"):
    """Sets up root logging once for the command-line entry points."""
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
