"""
tests/core/resource/test_resource_registry.py - core/resource/registry.py 테스트
"""

from dataclasses import replace

import pytest

from awsnav.core.exceptions import (
    ActionNotFoundError,
    DuplicateKindError,
    KindNotFoundError,
    RegistryFrozenError,
)
from awsnav.core.resource.registry import Registry
from awsnav.core.resource.types import Column, OperationSpec, ResourceKind


def _kind(kind_id: str, **kwargs) -> ResourceKind:
    defaults = dict(
        id=kind_id,
        name=kind_id.title(),
        service="svc",
        list_spec=OperationSpec("svc", "list_things"),
        items_path="Things[*]",
        key_path="Id",
        columns=(Column("ID", "Id"),),
    )
    defaults.update(kwargs)
    return ResourceKind(**defaults)


class TestRegistry:
    """Registry 테스트"""

    def test_register_and_lookup(self):
        registry = Registry()
        kind = registry.register(_kind("things"))

        assert registry.lookup("things") is kind
        assert "things" in registry
        assert len(registry) == 1

    def test_duplicate_kind(self):
        registry = Registry()
        registry.register(_kind("things"))

        with pytest.raises(DuplicateKindError) as exc_info:
            registry.register(_kind("things"))
        assert exc_info.value.kind_id == "things"

    def test_lookup_unknown(self):
        with pytest.raises(KindNotFoundError):
            Registry().lookup("nope")

    def test_list_kinds_declaration_order(self):
        registry = Registry()
        for kind_id in ("zeta", "alpha", "mid"):
            registry.register(_kind(kind_id))

        assert [k.id for k in registry.list_kinds()] == ["zeta", "alpha", "mid"]

    def test_frozen_rejects_register(self):
        registry = Registry()
        registry.register(_kind("things"))
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(_kind("other"))
        assert registry.lookup("things").id == "things"

    def test_categories_group_in_order(self):
        registry = Registry()
        registry.register(_kind("a", category="compute"))
        registry.register(_kind("b", category="storage"))
        registry.register(_kind("c", category="compute"))

        groups = registry.categories()
        assert list(groups) == ["compute", "storage"]
        assert [k.id for k in groups["compute"]] == ["a", "c"]

    def test_find_action(self, registry):
        kind, action = registry.find_action("widgets", "poke")

        assert kind.id == "widgets"
        assert action.id == "poke"

    def test_find_action_unknown(self, registry):
        with pytest.raises(ActionNotFoundError):
            registry.find_action("widgets", "explode")


class TestRegistryValidation:
    """등록 시 정의 검증 테스트"""

    def test_duplicate_column_labels(self):
        kind = _kind("things", columns=(Column("ID", "Id"), Column("ID", "Other")))
        with pytest.raises(ValueError):
            Registry().register(kind)

    def test_invalid_column_path(self):
        kind = _kind("things", columns=(Column("ID", "Id..x"),))
        with pytest.raises(ValueError):
            Registry().register(kind)

    def test_unknown_formatter(self):
        kind = _kind("things", columns=(Column("ID", "Id", ("sparkle",)),))
        with pytest.raises(ValueError):
            Registry().register(kind)

    def test_describe_requires_key_param(self):
        kind = _kind("things", describe_spec=OperationSpec("svc", "describe_thing"))
        with pytest.raises(ValueError):
            Registry().register(kind)

    def test_duplicate_action_ids(self, widget_kind):
        poke = widget_kind.actions[0]
        kind = replace(widget_kind, id="dup", actions=(poke, poke))
        with pytest.raises(ValueError):
            Registry().register(kind)

    def test_failed_validation_does_not_register(self):
        registry = Registry()
        with pytest.raises(ValueError):
            registry.register(_kind("things", columns=()))
        assert "things" not in registry
