from bodymetrics.db.connection import Database

__all__ = ["Database"]
