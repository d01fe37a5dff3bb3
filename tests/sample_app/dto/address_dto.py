from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AddressDto:
    street: str
    city: str
