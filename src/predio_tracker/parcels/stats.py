from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List

from predio_tracker.models import ResolvedParcel, SectionSummary, Status
from predio_tracker.parcels.sections import SectionResolver


def summarize_resolved(parcels: Iterable[ResolvedParcel]) -> List[SectionSummary]:
    """Group parcels by effective section and count each status.

    Unresolved parcels land in the sentinel bucket, which sorts by its
    literal text like any other label.
    """

    groups: Dict[str, Counter] = {}
    for parcel in parcels:
        groups.setdefault(parcel.label, Counter())[parcel.status] += 1

    out: List[SectionSummary] = []
    for label in sorted(groups):
        counts = groups[label]
        out.append(
            SectionSummary(
                section=label,
                red=counts[Status.RED.value],
                blue=counts[Status.BLUE.value],
                neutral=counts[Status.NEUTRAL.value],
                total=sum(counts.values()),
            )
        )
    return out


class Aggregator:
    def __init__(self, resolver: SectionResolver) -> None:
        self.resolver = resolver

    def summarize(self) -> List[SectionSummary]:
        return summarize_resolved(self.resolver.resolved_parcels())
