from __future__ import annotations
from caribalmanac.core.provider import StaticEventProvider
from caribalmanac.data.loader import load_dataset

def build_provider() -> StaticEventProvider:
    return load_dataset()
