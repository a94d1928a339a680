"""Current parcel status, its change history, and the reports derived from both.

Current state and history are separate tables joined at read time; history
rows are never updated or deleted.
"""

from .change_log import ChangeLog, clamp_limit
from .sections import SectionResolver
from .stats import Aggregator
from .store import ParcelStore

__all__ = ["Aggregator", "ChangeLog", "ParcelStore", "SectionResolver", "clamp_limit"]
