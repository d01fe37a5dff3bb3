from __future__ import annotations

from dataclasses import dataclass

from sample_app.dto.address_dto import AddressDto
from sample_app.entity.address import Address
from sample_app.legacy.address import Address as LegacyAddress


class Order:
    home: Address
    previous: LegacyAddress

    def __init__(self, home: Address, previous: LegacyAddress) -> None:
        self.home = home
        self.previous = previous


@dataclass
class OrderDto:
    home: AddressDto
    previous: object = None
