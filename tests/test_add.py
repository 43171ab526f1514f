"""添加操作测试"""

from __future__ import annotations

import json
from pathlib import Path

from conftest import (
    FABRIC_API_ID,
    LITHIUM_ID,
    MODMENU_ID,
    SODIUM_ID,
    FakeRegistry,
    make_stub,
    snapshot,
    write_stub,
)
from minepack.exceptions import APIServerError
from minepack.models import ResultKind
from minepack.operations import AddOperation, DependencyPolicy
from minepack.services import ModResolver
from minepack.storage import Pack


async def stub_slugs(root: Path) -> list:
    pack = await Pack.load(root)
    return sorted(stub.slug for stub in await pack.stubs())


class TestAdd:
    async def test_add_writes_stub(self, pack: Pack, resolver: ModResolver) -> None:
        result = await AddOperation(pack, resolver).run("sodium")

        assert result.kind is ResultKind.OK
        assert result.missing == []
        path = pack.root / "stubs" / "sodium.mp.json"
        assert json.loads(path.read_text(encoding="utf-8")) == result.stub.to_dict()

    async def test_missing_dependencies_reported(self, pack: Pack, resolver: ModResolver) -> None:
        result = await AddOperation(pack, resolver).run("iris")
        assert result.kind is ResultKind.OK
        assert result.missing == [SODIUM_ID]
        # 依赖由调用方决定是否添加
        assert await stub_slugs(pack.root) == ["iris"]

    async def test_present_dependencies_not_reported(self, pack: Pack, resolver: ModResolver) -> None:
        await AddOperation(pack, resolver).run("sodium")
        result = await AddOperation(pack, resolver).run("iris")
        assert result.missing == []

    async def test_duplicate_leaves_files_untouched(self, pack: Pack, resolver: ModResolver) -> None:
        await AddOperation(pack, resolver).run("sodium")
        before = snapshot(pack.root)

        result = await AddOperation(pack, resolver).run("sodium")

        assert result.kind is ResultKind.DUPLICATE
        assert result.existing.slug == "sodium"
        assert snapshot(pack.root) == before

    async def test_duplicate_by_project_id(self, pack: Pack, resolver: ModResolver) -> None:
        write_stub(pack.root, make_stub("sodium-renamed", project_id=SODIUM_ID))
        before = snapshot(pack.root)

        result = await AddOperation(pack, resolver).run("sodium")

        assert result.kind is ResultKind.DUPLICATE
        assert snapshot(pack.root) == before

    async def test_same_operation_sees_its_own_writes(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        assert (await operation.run("sodium")).ok
        assert (await operation.run("sodium")).kind is ResultKind.DUPLICATE

    async def test_failures_write_nothing(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        assert (await operation.run("doesnotexist123")).kind is ResultKind.NOT_FOUND
        assert (await operation.run("create")).kind is ResultKind.NO_COMPATIBLE_VERSION
        assert (await operation.run("empty-mod")).kind is ResultKind.NO_DOWNLOADABLE_FILE
        assert snapshot(pack.root) == {}

    async def test_ambiguous_then_selection(
        self, pack: Pack, resolver: ModResolver, registry: FakeRegistry
    ) -> None:
        registry.search_results["fast"] = [registry.hit(SODIUM_ID), registry.hit(LITHIUM_ID)]
        operation = AddOperation(pack, resolver)

        result = await operation.run("fast")
        assert result.kind is ResultKind.AMBIGUOUS
        assert len(result.candidates) == 2
        assert snapshot(pack.root) == {}

        result = await operation.run("fast", selection=1)
        assert result.kind is ResultKind.OK
        assert result.stub.slug == "lithium"
        assert result.missing == [FABRIC_API_ID]

    async def test_registry_error(
        self, pack: Pack, resolver: ModResolver, registry: FakeRegistry, monkeypatch
    ) -> None:
        async def broken(id_or_slug):
            raise APIServerError("服务器错误 (HTTP 502)")

        monkeypatch.setattr(registry, "get_project", broken)
        result = await AddOperation(pack, resolver).run("sodium")
        assert result.kind is ResultKind.ERROR
        assert "502" in result.message
        assert snapshot(pack.root) == {}


class TestDependencies:
    async def test_dependencies_expand_one_level(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        result = await operation.run("modmenu")
        assert result.missing == [FABRIC_API_ID, LITHIUM_ID]

        # lithium 自己依赖 fabric-api，但不会被继续展开
        outcomes = await operation.add_dependencies([LITHIUM_ID])

        assert [(o.identifier, o.kind) for o in outcomes] == [(LITHIUM_ID, ResultKind.OK)]
        assert await stub_slugs(pack.root) == ["lithium", "modmenu"]

    async def test_add_all_dependencies(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        result = await operation.run("modmenu")
        outcomes = await operation.add_dependencies(result.missing)

        assert all(outcome.ok for outcome in outcomes)
        assert await stub_slugs(pack.root) == ["fabric-api", "lithium", "modmenu"]
        stubs = {stub.slug: stub for stub in await (await Pack.load(pack.root)).stubs()}
        assert stubs["modmenu"].project_id == MODMENU_ID
        assert stubs["lithium"].dependencies == [FABRIC_API_ID]

    async def test_each_dependency_independent(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        await operation.run("iris")

        outcomes = await operation.add_dependencies(["nothing-here", "create", FABRIC_API_ID])

        assert [o.kind for o in outcomes] == [
            ResultKind.NOT_FOUND,
            ResultKind.NO_COMPATIBLE_VERSION,
            ResultKind.OK,
        ]
        assert await stub_slugs(pack.root) == ["fabric-api", "iris"]

    async def test_existing_dependency_is_duplicate(self, pack: Pack, resolver: ModResolver) -> None:
        operation = AddOperation(pack, resolver)
        await operation.run("sodium")
        outcomes = await operation.add_dependencies([SODIUM_ID, "sodium"])
        assert [o.kind for o in outcomes] == [ResultKind.DUPLICATE, ResultKind.DUPLICATE]

    async def test_dependency_error_keeps_parent(
        self, pack: Pack, resolver: ModResolver, registry: FakeRegistry, monkeypatch
    ) -> None:
        operation = AddOperation(pack, resolver)
        await operation.run("iris")

        async def broken(project_id):
            raise APIServerError("服务器错误 (HTTP 500)")

        monkeypatch.setattr(registry, "get_versions", broken)
        outcomes = await operation.add_dependencies([SODIUM_ID])

        assert outcomes[0].kind is ResultKind.ERROR
        assert await stub_slugs(pack.root) == ["iris"]


class TestSelectDependencies:
    def test_all(self) -> None:
        assert AddOperation.select_dependencies(["a", "b"], DependencyPolicy.ALL) == ["a", "b"]

    def test_none(self) -> None:
        assert AddOperation.select_dependencies(["a", "b"], DependencyPolicy.NONE) == []

    def test_select_ignores_bad_indices(self) -> None:
        selected = AddOperation.select_dependencies(
            ["a", "b", "c"], DependencyPolicy.SELECT, [2, 7, -1, 2, 0]
        )
        assert selected == ["c", "a"]
