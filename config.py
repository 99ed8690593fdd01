"""
Configuration Module
Simple configuration for the office hours normalizer.
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

LOG_FORMAT = '%(asctime)s %(levelname)s: %(message)s'
VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class Config:
    """Application configuration class."""

    # Logging settings
    LOG_LEVEL = os.getenv('NORMALIZER_LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.getenv('NORMALIZER_LOG_FILE') or None

    # Defaults the ground truth runner hands to TimeSlotBuilder and
    # build_contact_hour_record. Library callers pass their own or get the
    # module defaults in normalizers/time_slots.py and contact_hours.py.
    DEFAULT_LOCATION = os.getenv('NORMALIZER_DEFAULT_LOCATION', 'Not specified')
    DEFAULT_COMMENTS = os.getenv('NORMALIZER_DEFAULT_COMMENTS', 'Weekly office hours')
    DEFAULT_SOURCE = os.getenv('NORMALIZER_DEFAULT_SOURCE', 'web_search')

    # Ground truth runner
    GROUND_TRUTH_PATH = os.getenv('NORMALIZER_GROUND_TRUTH', 'ground_truth.json')

    @classmethod
    def validate(cls):
        """Validate configuration, falling back to INFO on an unknown log level."""
        if cls.LOG_LEVEL not in VALID_LOG_LEVELS:
            logging.warning(f"Unknown log level {cls.LOG_LEVEL!r}, using INFO")
            cls.LOG_LEVEL = 'INFO'
        logging.getLogger().setLevel(cls.LOG_LEVEL)
        logging.info("Configuration validated")


def _handlers():
    handlers = [logging.StreamHandler()]
    if Config.LOG_FILE:
        handlers.append(logging.FileHandler(Config.LOG_FILE))
    return handlers


# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL if Config.LOG_LEVEL in VALID_LOG_LEVELS else 'INFO',
    format=LOG_FORMAT,
    handlers=_handlers()
)
