"""
Database package for the flight bidding system.

This package provides SQLAlchemy models and database configuration.
"""

from .models import (
    Base,
    Airport,
    Rank,
    User,
    Fare,
    Subfleet,
    Aircraft,
    SubfleetFare,
    FlightFare,
    Flight,
    Bid,
    SimBrief,
    Pirep,
    create_all_tables,
    drop_all_tables
)

from .config import (
    DatabaseConfig,
    get_database_config,
    initialize_database,
    get_db_session_context
)

__all__ = [
    # Models
    'Base',
    'Airport',
    'Rank',
    'User',
    'Fare',
    'Subfleet',
    'Aircraft',
    'SubfleetFare',
    'FlightFare',
    'Flight',
    'Bid',
    'SimBrief',
    'Pirep',
    'create_all_tables',
    'drop_all_tables',

    # Configuration
    'DatabaseConfig',
    'get_database_config',
    'initialize_database',
    'get_db_session_context',
]
