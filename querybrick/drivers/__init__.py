"""Connection adapters implementing the querybrick Connection capability."""
from querybrick.drivers.sqlite import SQLiteConnection

__all__ = ["SQLiteConnection"]
