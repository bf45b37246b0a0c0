from memory_lane.domain.cluster import MemoryCluster
from memory_lane.domain.couple import Couple, PartnerInfo, UserProfile
from memory_lane.domain.memory import Location, Memory, MemoryDraft, MemoryUpdate
from memory_lane.domain.recall import RecallWindow, TemporalBuckets, TimeMachineResult

__all__ = [
    "Couple",
    "Location",
    "Memory",
    "MemoryCluster",
    "MemoryDraft",
    "MemoryUpdate",
    "PartnerInfo",
    "RecallWindow",
    "TemporalBuckets",
    "TimeMachineResult",
    "UserProfile",
]
