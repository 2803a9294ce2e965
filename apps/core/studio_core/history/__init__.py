from studio_core.history.store import HistoryStore

__all__ = ["HistoryStore"]
