"""Integration test for the full generation workflow.

Covers: discovery, override loading, generation, writing, and round trips
through the generated modules imported from a temporary package.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mapper_gen.core.config import GeneratorConfig, OverrideTable
from mapper_gen.core.enums import PairOutcome
from mapper_gen.core.exceptions import MissingPathError
from mapper_gen.core.manager import GenerationManager
from sample_app.dto.address_dto import AddressDto
from sample_app.dto.tag_dto import TagDto
from sample_app.dto.user_profile_dto import UserProfileDto
from sample_app.dto.user_read_dto import UserReadDto
from sample_app.entity.address import Address
from sample_app.entity.tag import Tag, TagKind
from sample_app.entity.user import User

ALL_MAPPERS = ["AddressMapper", "TagMapper", "UserReadMapper", "UserToProfileMapper"]


@pytest.fixture
def generated(sample_config: GeneratorConfig, import_generated):
    """Run a full generation and return the import helper."""
    report = GenerationManager(sample_config).run()
    assert sorted(report.generated) == ALL_MAPPERS
    return import_generated


@pytest.fixture
def user_read_mapper(generated):
    address_mapper = generated("address_mapper").AddressMapper()
    return generated("user_read_mapper").UserReadMapper(address_mapper)


def _user(address_count: int) -> User:
    addresses = [Address(f"{i} Side St", f"City {i}") for i in range(address_count)]
    return User(7, "ada lovelace", Address("1 Main St", "London"), addresses)


class TestGenerationRun:
    def test_writes_one_module_per_mapper(self, sample_config: GeneratorConfig) -> None:
        GenerationManager(sample_config).run()
        files = sorted(p.name for p in sample_config.output_path.iterdir())
        assert files == [
            "__init__.py",
            "address_mapper.py",
            "tag_mapper.py",
            "user_read_mapper.py",
            "user_to_profile_mapper.py",
        ]

    def test_override_entries_processed_first(self, sample_config: GeneratorConfig) -> None:
        order: list[str] = []
        GenerationManager(sample_config).run(on_progress=lambda pair, name, outcome: order.append(name))
        assert order == ["UserReadMapper", "AddressMapper", "TagMapper", "UserToProfileMapper"]

    def test_second_run_is_idempotent(self, sample_config: GeneratorConfig) -> None:
        GenerationManager(sample_config).run()
        before = {p.name: p.read_text(encoding="utf-8") for p in sample_config.output_path.iterdir()}

        report = GenerationManager(sample_config).run()
        after = {p.name: p.read_text(encoding="utf-8") for p in sample_config.output_path.iterdir()}

        assert report.generated == []
        assert sorted(report.skipped) == ALL_MAPPERS
        assert after == before

    def test_existing_file_never_overwritten(self, sample_config: GeneratorConfig) -> None:
        sample_config.output_path.mkdir(parents=True)
        handwritten = sample_config.output_path / "tag_mapper.py"
        handwritten.write_text("# handwritten\n", encoding="utf-8")

        outcomes: dict[str, PairOutcome] = {}
        GenerationManager(sample_config).run(on_progress=lambda pair, name, outcome: outcomes.update({name: outcome}))

        assert outcomes["TagMapper"] is PairOutcome.SKIPPED
        assert handwritten.read_text(encoding="utf-8") == "# handwritten\n"

    def test_clear_regenerates(self, sample_config: GeneratorConfig) -> None:
        GenerationManager(sample_config).run()
        stale = sample_config.output_path / "stale_mapper.py"
        stale.write_text("", encoding="utf-8")

        config = sample_config.model_copy(update={"clear": True})
        report = GenerationManager(config).run()

        assert sorted(report.generated) == ALL_MAPPERS
        assert not stale.exists()
        assert (config.output_path / "__init__.py").exists()

    def test_missing_entity_path(self, sample_config: GeneratorConfig, tmp_path: Path) -> None:
        config = sample_config.model_copy(update={"entity_path": tmp_path / "missing"})
        with pytest.raises(MissingPathError, match="Entity directory not found"):
            GenerationManager(config).run()
        assert not config.output_path.exists()

    def test_missing_dto_path(self, sample_config: GeneratorConfig, tmp_path: Path) -> None:
        config = sample_config.model_copy(update={"dto_path": tmp_path / "missing"})
        with pytest.raises(MissingPathError, match="DTO directory not found"):
            GenerationManager(config).validate()

    def test_schema_error_fails_only_its_pair(self, sample_config: GeneratorConfig) -> None:
        overrides = OverrideTable()
        overrides.add("sample_app.entity.user.Ghost", "sample_app.dto.address_dto.AddressDto")
        report = GenerationManager(sample_config, overrides).run()

        assert list(report.failed) == ["GhostToAddressMapper"]
        assert "Ghost" in report.failed["GhostToAddressMapper"]
        assert sorted(report.generated) == ALL_MAPPERS

    def test_module_raising_on_import_fails_only_its_pair(self, sample_config: GeneratorConfig) -> None:
        overrides = OverrideTable()
        overrides.add("sample_app.unconfigured.Settings", "sample_app.dto.tag_dto.TagDto", "SettingsMapper")
        report = GenerationManager(sample_config, overrides).run()

        assert list(report.failed) == ["SettingsMapper"]
        assert "settings not configured" in report.failed["SettingsMapper"]
        assert sorted(report.generated) == ALL_MAPPERS

    def test_override_file_names_mapper(self, sample_config: GeneratorConfig, tmp_path: Path) -> None:
        config_file = tmp_path / "mappers.yaml"
        config_file.write_text(
            "mappers:\n"
            "  - entity: sample_app.entity.tag.Tag\n"
            "    dto: sample_app.dto.tag_dto.TagDto\n"
            "    mapper_name: LabelMapper\n",
            encoding="utf-8",
        )
        report = GenerationManager(sample_config, OverrideTable.from_yaml_file(config_file)).run()
        assert "LabelMapper" in report.generated
        assert "TagMapper" not in report.generated
        assert (sample_config.output_path / "label_mapper.py").exists()

    def test_dependencies_not_followed(self, sample_config: GeneratorConfig, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        config = sample_config.model_copy(update={"dto_path": empty, "follow_dependencies": False})
        overrides = OverrideTable()
        overrides.add(User, UserReadDto, "UserReadMapper")

        report = GenerationManager(config, overrides).run()
        assert report.generated == ["UserReadMapper"]

    def test_dependencies_followed(self, sample_config: GeneratorConfig, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        config = sample_config.model_copy(update={"dto_path": empty})
        overrides = OverrideTable()
        overrides.add(User, UserReadDto, "UserReadMapper")

        report = GenerationManager(config, overrides).run()
        assert report.generated == ["UserReadMapper", "AddressMapper"]


class TestGeneratedRoundTrip:
    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_collection_lengths(self, generated, user_read_mapper, count: int) -> None:
        address_mapper = generated("address_mapper").AddressMapper()
        user = _user(count)
        dto = user_read_mapper.to_dto(user)

        assert isinstance(dto, UserReadDto)
        assert len(dto.emails) == count
        assert dto.emails == [address_mapper.to_dto(a) for a in user.get_addresses()]

        back = user_read_mapper.to_entity(dto)
        assert [a.get_city() for a in back.get_addresses()] == [a.get_city() for a in user.get_addresses()]

    def test_forward_values(self, user_read_mapper) -> None:
        dto = user_read_mapper.to_dto(_user(1))
        assert dto.user_id == 7
        assert dto.full_name == "Ada Lovelace"
        assert dto.address == AddressDto("1 Main St", "London")
        assert dto.emails == [AddressDto("0 Side St", "City 0")]

    def test_backward_values(self, user_read_mapper) -> None:
        dto = UserReadDto(9, "Grace Hopper", AddressDto("2 Navy Rd", "Arlington"), [AddressDto("x", "y")])
        user = user_read_mapper.to_entity(dto)
        assert isinstance(user, User)
        assert user.get_id() == 9
        assert user.get_name() == "Grace Hopper"
        assert user.get_address().get_street() == "2 Navy Rd"
        assert user.get_addresses()[0].get_city() == "y"

    def test_mutator_mode_round_trip(self, generated) -> None:
        mapper = generated("tag_mapper").TagMapper()
        tag = Tag()
        tag.set_label("python")
        tag.set_kind(TagKind.TOPIC)

        dto = mapper.to_dto(tag)
        assert isinstance(dto, TagDto)
        assert dto.name == "PYTHON"
        assert dto.kind is TagKind.TOPIC
        assert dto.created is None

        back = mapper.to_entity(dto)
        assert back.get_label() == "PYTHON"
        assert back.get_kind() is TagKind.TOPIC

    def test_unmatched_fields_degrade_to_none(self, generated) -> None:
        address_mapper = generated("address_mapper").AddressMapper()
        mapper = generated("user_to_profile_mapper").UserToProfileMapper(address_mapper)

        profile = UserProfileDto()
        profile.id = 3
        profile.display_name = "Grace"
        user = mapper.to_entity(profile)

        assert user.get_id() == 3
        assert user.get_name() == "Grace"
        assert user.get_address() is None
        assert user.get_addresses() == []

        assert isinstance(mapper.to_dto(user), UserProfileDto)
