"""Data models for the schedule and ticket pipelines."""
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, StringConstraints

SlotId = Annotated[str, StringConstraints(pattern=r"^slot\d+(a|b)?$")]


class Copresenter(BaseModel):
    """Additional presenter listed on a talk."""
    model_config = ConfigDict(frozen=True)

    name: str


class SpeakerEntry(BaseModel):
    """Validated speaker record from speakers.yaml."""
    model_config = ConfigDict(frozen=True)

    slot: Optional[SlotId] = None
    name: str
    title: str
    day: Optional[Literal["apr14", "apr15"]] = None
    copresenters: Optional[List[Copresenter]] = None
    abstract: List[str]

    @property
    def is_scheduled(self) -> bool:
        return bool(self.slot) and bool(self.day)


@dataclass
class CalendarEvent:
    """Event ready to be written to the calendar file."""
    summary: str
    start: datetime
    end: datetime
    location: Optional[str] = None
    description: Optional[str] = None


@dataclass
class TicketPage:
    """Fields extracted from the ticket view HTML."""
    holder_name: Optional[str]
    qr_png: bytes


@dataclass
class TicketPayload:
    """Flat card description understood by the wallet app."""
    store: str
    note: str
    balance: str
    validfrom: str
    expiry: str
    cardid: str
    barcodeid: str
    barcodetype: str
    headercolor: str
