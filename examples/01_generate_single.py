"""
Example 01: Generating a Single Mapper

This example demonstrates generating the source of one mapper with MapperGenerator
and printing it, without writing anything to disk.
"""

from dataclasses import dataclass
from typing import Annotated

from mapper_gen import MapperGenerator, MapTo


class Product:
    """Entity with protected fields and getters"""
    _sku: Annotated[str, MapTo("code")]
    _price: float

    def __init__(self, sku: str, price: float) -> None:
        self._sku = sku
        self._price = price

    def get_sku(self) -> str:
        return self._sku

    def get_price(self) -> float:
        return self._price


@dataclass
class ProductDto:
    """Transfer object with a constructor"""
    code: str
    price: float


def main():
    generator = MapperGenerator("generated.mapper")
    result = generator.generate(Product, ProductDto, "ProductMapper")

    print("=== Generated ProductMapper ===\n")
    print(result.source_text)

    print(f"Module: {result.descriptor.ref.module}")
    print(f"Dependencies: {list(result.descriptor.dependencies) or 'none'}")


if __name__ == "__main__":
    main()
