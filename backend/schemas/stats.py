from pydantic import BaseModel
from typing import List
from datetime import date, datetime


class StatsRead(BaseModel):
    total_entries: int
    total_quantity: int
    today_entries: int
    today_quantity: int


class DailyStatRead(BaseModel):
    date: date
    entry_count: int
    total_quantity: int
    avg_quantity: float


class DailyStatsList(BaseModel):
    days: List[DailyStatRead]
    count: int


class LocationStatRead(BaseModel):
    location: str
    entry_count: int
    total_quantity: int


class LocationStatsList(BaseModel):
    locations: List[LocationStatRead]
    count: int


class HealthRead(BaseModel):
    status: str
    timestamp: datetime
