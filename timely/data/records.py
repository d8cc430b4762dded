"""
Read-only snapshots of store rows handed to the service layer.
"""
import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Client:
    id: int
    name: str
    hourly_rate: Decimal
    created_at: Optional[datetime.datetime] = None

    @classmethod
    def from_model(cls, row) -> "Client":
        return cls(
            id=row.id,
            name=row.name,
            hourly_rate=Decimal(str(row.hourly_rate)),
            created_at=row.created_at,
        )


@dataclass(frozen=True)
class TimeEntry:
    id: int
    client_id: int
    clock_in: datetime.datetime
    clock_out: Optional[datetime.datetime] = None
    hours_worked: Optional[Decimal] = None
    earnings: Optional[Decimal] = None
    created_at: Optional[datetime.datetime] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    @property
    def is_completed(self) -> bool:
        """Clocked out with hours and earnings recorded"""
        return (
            self.clock_out is not None
            and self.hours_worked is not None
            and self.earnings is not None
        )

    @classmethod
    def from_model(cls, row) -> "TimeEntry":
        return cls(
            id=row.id,
            client_id=row.client_id,
            clock_in=row.clock_in,
            clock_out=row.clock_out,
            hours_worked=None if row.hours_worked is None else Decimal(str(row.hours_worked)),
            earnings=None if row.earnings is None else Decimal(str(row.earnings)),
            created_at=row.created_at,
        )
