from .profile import Profile
from .streak import Streak
from .urge import Urge, UrgeOutcome
from .journal_entry import JournalEntry, JournalEntryType

__all__ = [
    "Profile",
    "Streak",
    "Urge",
    "UrgeOutcome",
    "JournalEntry",
    "JournalEntryType",
]
