"""Persistence of editing sessions."""

from char_grid.io.store import AutoSaver, SessionStore, session_from_dict, session_to_dict

__all__ = ["AutoSaver", "SessionStore", "session_from_dict", "session_to_dict"]
