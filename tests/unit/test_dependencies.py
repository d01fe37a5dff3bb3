"""Unit tests for DependencyCollector."""

from __future__ import annotations

import pytest

from mapper_gen.core.config import NamingConfig, OverrideTable
from mapper_gen.core.enums import Direction
from mapper_gen.core.types import TypeRef
from mapper_gen.mapping.dependencies import DependencyCollector
from mapper_gen.mapping.resolver import MappingResolver, invert
from mapper_gen.schema.extractor import TypeSchemaExtractor
from sample_app.dto.address_dto import AddressDto
from sample_app.dto.tag_dto import TagDto
from sample_app.dto.user_read_dto import UserReadDto
from sample_app.entity.address import Address
from sample_app.entity.tag import Tag
from sample_app.entity.user import User
from sample_app.legacy.address import Address as LegacyAddress
from sample_app.shipping.order import Order, OrderDto


@pytest.fixture
def collector() -> DependencyCollector:
    return DependencyCollector("generated.mapper")


class TestDependencyCollector:
    def test_forward_nested_and_collection(
        self, collector: DependencyCollector, extractor: TypeSchemaExtractor
    ) -> None:
        schema = extractor.extract(User)
        deps = collector.collect(schema, MappingResolver().resolve(schema), Direction.FORWARD)

        assert deps.names == ("AddressMapper",)
        assert deps.bindings["address"].collection is False
        assert deps.bindings["addresses"].collection is True
        assert deps.bindings["address"].mapper is deps.bindings["addresses"].mapper

        mapper = deps.mappers[0]
        assert mapper.ref == TypeRef("generated.mapper.address_mapper", "AddressMapper")
        assert mapper.source_type == TypeRef.of(Address)
        assert mapper.target_type == TypeRef.of(AddressDto)

    def test_backward_pairs_dto_with_entity(
        self, collector: DependencyCollector, extractor: TypeSchemaExtractor
    ) -> None:
        resolver = MappingResolver()
        forward = resolver.resolve(extractor.extract(User))
        schema = extractor.extract(UserReadDto)
        deps = collector.collect(schema, resolver.resolve(schema, invert(forward)), Direction.BACKWARD)

        assert deps.names == ("AddressMapper",)
        assert set(deps.bindings) == {"address", "emails"}
        assert deps.bindings["emails"].collection is True
        assert deps.mappers[0].source_type == TypeRef.of(Address)
        assert deps.mappers[0].target_type == TypeRef.of(AddressDto)

    def test_value_types_need_no_mapper(
        self, collector: DependencyCollector, extractor: TypeSchemaExtractor
    ) -> None:
        for cls, direction in ((Tag, Direction.FORWARD), (TagDto, Direction.BACKWARD)):
            schema = extractor.extract(cls)
            deps = collector.collect(schema, MappingResolver().resolve(schema), direction)
            assert deps.mappers == []
            assert deps.bindings == {}

    def test_override_names_nested_mapper(self, extractor: TypeSchemaExtractor) -> None:
        overrides = OverrideTable()
        overrides.add(Address, AddressDto, "PostalAddressMapper")
        collector = DependencyCollector("out", overrides=overrides)
        schema = extractor.extract(User)

        deps = collector.collect(schema, MappingResolver().resolve(schema))
        assert deps.names == ("PostalAddressMapper",)
        assert deps.mappers[0].ref.module == "out.postal_address_mapper"

    def test_seeded_entity_item_type_in_backward_direction(self, collector: DependencyCollector) -> None:
        descriptor = collector.descriptor_for(TypeRef.of(Address), Direction.BACKWARD)
        assert descriptor.source_type == TypeRef.of(Address)
        assert descriptor.target_type == TypeRef.of(AddressDto)

    def test_custom_mapper_suffix(self) -> None:
        collector = DependencyCollector("out", NamingConfig(mapper_suffix="Converter"))
        descriptor = collector.descriptor_for(TypeRef("app.entity.address", "Address"))
        assert descriptor.name == "AddressConverter"
        assert descriptor.target_type == TypeRef("app.dto.address_dto", "AddressDto")

    def test_same_short_name_gets_distinct_mapper(
        self, collector: DependencyCollector, extractor: TypeSchemaExtractor
    ) -> None:
        schema = extractor.extract(Order)
        deps = collector.collect(schema, MappingResolver().resolve(schema))

        assert deps.names == ("AddressMapper", "LegacyAddressMapper")
        assert deps.bindings["home"].mapper.source_type == TypeRef.of(Address)
        previous = deps.bindings["previous"].mapper
        assert previous.source_type == TypeRef.of(LegacyAddress)
        assert previous.ref == TypeRef("generated.mapper.legacy_address_mapper", "LegacyAddressMapper")

    def test_named_mappers_reused_by_other_direction(
        self, collector: DependencyCollector, extractor: TypeSchemaExtractor
    ) -> None:
        resolver = MappingResolver()
        entity_schema = extractor.extract(Order)
        forward_table = resolver.resolve(entity_schema)
        forward = collector.collect(entity_schema, forward_table, Direction.FORWARD)

        dto_schema = extractor.extract(OrderDto)
        backward = collector.collect(
            dto_schema, resolver.resolve(dto_schema, invert(forward_table)), Direction.BACKWARD, named=forward.mappers
        )
        assert backward.names == ("AddressMapper",)
        assert backward.bindings["home"].mapper is forward.bindings["home"].mapper
