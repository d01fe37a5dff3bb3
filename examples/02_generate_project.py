"""
Example 02: Generating Mappers for a Project

This example demonstrates a full run: entity and DTO modules are discovered
from directories, mappers are written to an output package, and the generated
mappers are imported and used.
"""

import importlib
import sys
import tempfile
from pathlib import Path

from mapper_gen import GenerationManager, GeneratorConfig

ADDRESS = '''
class Address:
    _city: str

    def __init__(self, city: str) -> None:
        self._city = city

    def get_city(self) -> str:
        return self._city
'''

CUSTOMER = '''
from typing import Annotated

from mapper_gen import MapTo
from shop.entity.address import Address


class Customer:
    _name: Annotated[str, MapTo("display_name")]
    _addresses: list[Address]

    def __init__(self, name: str, addresses: list[Address]) -> None:
        self._name = name
        self._addresses = addresses

    def get_name(self) -> str:
        return self._name

    def get_addresses(self) -> list[Address]:
        return self._addresses
'''

ADDRESS_DTO = '''
from dataclasses import dataclass


@dataclass
class AddressDto:
    city: str
'''

CUSTOMER_DTO = '''
from dataclasses import dataclass

from shop.dto.address_dto import AddressDto


@dataclass
class CustomerDto:
    display_name: str
    addresses: list[AddressDto]
'''


def write_project(root: Path) -> None:
    files = {
        "shop/__init__.py": "",
        "shop/entity/__init__.py": "",
        "shop/entity/address.py": ADDRESS,
        "shop/entity/customer.py": CUSTOMER,
        "shop/dto/__init__.py": "",
        "shop/dto/address_dto.py": ADDRESS_DTO,
        "shop/dto/customer_dto.py": CUSTOMER_DTO,
    }
    for relative_path, content in files.items():
        file_path = root / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")


def main():
    root = Path(tempfile.mkdtemp())
    write_project(root)
    sys.path.insert(0, str(root))

    config = GeneratorConfig(
        entity_path=root / "shop" / "entity",
        entity_namespace="shop.entity",
        dto_path=root / "shop" / "dto",
        dto_namespace="shop.dto",
        output_path=root / "shop_mappers",
        namespace="shop_mappers",
    )

    print("=== Generation Run ===\n")
    report = GenerationManager(config).run(
        on_progress=lambda pair, name, outcome: print(f"{outcome.value:<9} {name}")
    )
    print(f"\nGenerated {len(report.generated)} mapper(s) in {report.output_path}\n")

    print("=== customer_mapper.py ===\n")
    print((config.output_path / "customer_mapper.py").read_text(encoding="utf-8"))

    # Use the generated mappers
    importlib.invalidate_caches()
    Address = importlib.import_module("shop.entity.address").Address
    Customer = importlib.import_module("shop.entity.customer").Customer
    AddressMapper = importlib.import_module("shop_mappers.address_mapper").AddressMapper
    CustomerMapper = importlib.import_module("shop_mappers.customer_mapper").CustomerMapper

    mapper = CustomerMapper(AddressMapper())
    dto = mapper.to_dto(Customer("Alice", [Address("Paris"), Address("Oslo")]))
    print(f"to_dto: {dto}")

    customer = mapper.to_entity(dto)
    print(f"to_entity: name={customer.get_name()}, cities={[a.get_city() for a in customer.get_addresses()]}")


if __name__ == "__main__":
    main()
