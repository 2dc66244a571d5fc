"""
D4 Enrichment Models

Row-level business records and the values produced by enriching them.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class EnrichmentStatus(Enum):
    """Terminal state of one record's enrichment"""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"  # no candidate found; valid terminal state
    FAILED = "failed"


class SessionToken(str):
    """Opaque autocomplete session token shared by every lookup in one run"""

    @classmethod
    def new(cls) -> "SessionToken":
        return cls(str(uuid.uuid4()))


@dataclass(frozen=True)
class EnrichedFields:
    """Values resolved for a single record"""

    place_id: str = ""
    address: str = ""
    phone: str = ""
    website: str = ""

    @classmethod
    def empty(cls) -> "EnrichedFields":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.place_id


@dataclass
class BusinessRecord:
    """
    One business row

    name, city and region come from the input file and never change. The
    enrichment fields start empty and are written at most once, by apply().
    """

    name: str
    city: str
    region: str
    place_id: str = ""
    address: str = ""
    phone: str = ""
    website: str = ""
    _enriched: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, key, value):
        if key in ("name", "city", "region") and key in self.__dict__:
            raise AttributeError(f"{key} is immutable once parsed")
        super().__setattr__(key, value)

    @property
    def is_enriched(self) -> bool:
        return self._enriched

    @property
    def status(self) -> EnrichmentStatus:
        return EnrichmentStatus.RESOLVED if self.place_id else EnrichmentStatus.UNRESOLVED

    def apply(self, fields: EnrichedFields) -> None:
        """Write enrichment fields; a record can only be enriched once"""
        if self._enriched:
            raise RuntimeError(f"record '{self.name}' has already been enriched")
        self.place_id = fields.place_id
        self.address = fields.address
        self.phone = fields.phone
        self.website = fields.website
        self._enriched = True

    def to_row(self) -> list[str]:
        return [self.name, self.city, self.region, self.address, self.phone, self.website]


@dataclass
class EnrichmentOutcome:
    """Result of enriching the record at one dataset index"""

    index: int
    record: BusinessRecord
    error: Optional[BaseException] = None

    @property
    def status(self) -> EnrichmentStatus:
        if self.error is not None:
            return EnrichmentStatus.FAILED
        return self.record.status
