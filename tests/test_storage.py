"""存根存储与整合包项目测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import make_stub, write_stub
from minepack.exceptions import NotAProjectError, PackDescriptorError, ProjectError, StubWriteError
from minepack.models import ModLoader, Modloader, PackDescriptor
from minepack.storage import Pack, StubStore


class TestStubStore:
    async def test_write_uses_slug_file_name(self, tmp_path: Path) -> None:
        store = StubStore(tmp_path)
        path = await store.write(make_stub("sodium"))
        assert path == tmp_path / "stubs" / "sodium.mp.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["slug"] == "sodium"
        assert not list((tmp_path / "stubs").glob("*.tmp"))

    async def test_unsafe_slug_is_sanitized(self, tmp_path: Path) -> None:
        path = await StubStore(tmp_path).write(make_stub("../evil slug"))
        assert path.parent == tmp_path / "stubs"
        assert path.name == "evil_slug.mp.json"

    async def test_load_all_round_trip(self, tmp_path: Path) -> None:
        store = StubStore(tmp_path)
        stubs = [make_stub("a"), make_stub("b", dependencies=["id-a"])]
        for stub in stubs:
            await store.write(stub)
        assert await StubStore(tmp_path).load_all() == stubs

    async def test_load_all_skips_corrupt_files(self, tmp_path: Path) -> None:
        store = StubStore(tmp_path)
        await store.write(make_stub("good"))
        (tmp_path / "stubs" / "bad.mp.json").write_text("{not json", encoding="utf-8")
        (tmp_path / "stubs" / "partial.mp.json").write_text('{"name": "x"}', encoding="utf-8")
        loaded = await StubStore(tmp_path).load_all()
        assert [stub.slug for stub in loaded] == ["good"]

    async def test_load_all_skips_undecodable_and_malformed_files(self, tmp_path: Path) -> None:
        store = StubStore(tmp_path)
        await store.write(make_stub("good"))
        (tmp_path / "stubs" / "binary.mp.json").write_bytes(b'{"name": "\xff\xfe"}')
        broken = make_stub("broken").to_dict()
        broken["hashes"] = ["x"]
        (tmp_path / "stubs" / "broken.mp.json").write_text(json.dumps(broken), encoding="utf-8")

        loaded = await StubStore(tmp_path).load_all()
        assert [stub.slug for stub in loaded] == ["good"]

    async def test_colliding_file_names_keep_both_projects(self, tmp_path: Path) -> None:
        first = make_stub("foo.bar", project_id="AAAA1111")
        second = make_stub("foo_bar", project_id="BBBB2222")
        await StubStore(tmp_path).write(first)

        path = await StubStore(tmp_path).write(second)
        assert path.name == "foo_bar-BBBB2222.mp.json"
        assert sorted(p.name for p in (tmp_path / "stubs").iterdir()) == [
            "foo_bar-BBBB2222.mp.json",
            "foo_bar.mp.json",
        ]
        loaded = await StubStore(tmp_path).load_all()
        assert sorted(stub.project_id for stub in loaded) == ["AAAA1111", "BBBB2222"]

    async def test_colliding_project_rewrites_its_own_file(self, tmp_path: Path) -> None:
        store = StubStore(tmp_path)
        await store.write(make_stub("foo.bar", project_id="AAAA1111"))
        await store.write(make_stub("foo_bar", project_id="BBBB2222"))

        reloaded = StubStore(tmp_path)
        await reloaded.load_all()
        updated = make_stub("foo_bar", project_id="BBBB2222", version_id="v2")
        assert (await reloaded.write(updated)).name == "foo_bar-BBBB2222.mp.json"
        assert (await reloaded.delete(updated)).name == "foo_bar-BBBB2222.mp.json"
        assert [stub.project_id for stub in await StubStore(tmp_path).load_all()] == ["AAAA1111"]

    async def test_missing_directory_is_empty(self, tmp_path: Path) -> None:
        assert await StubStore(tmp_path).load_all() == []

    async def test_slug_change_replaces_old_file(self, tmp_path: Path) -> None:
        old = make_stub("old-slug", project_id="P1")
        write_stub(tmp_path, old)
        store = StubStore(tmp_path)
        await store.load_all()

        await store.write(make_stub("new-slug", project_id="P1"))
        assert sorted(p.name for p in (tmp_path / "stubs").iterdir()) == ["new-slug.mp.json"]

    async def test_delete_uses_file_it_was_read_from(self, tmp_path: Path) -> None:
        stub = make_stub("sodium")
        path = tmp_path / "stubs" / "renamed-by-hand.mp.json"
        path.parent.mkdir()
        path.write_text(json.dumps(stub.to_dict()), encoding="utf-8")

        store = StubStore(tmp_path)
        await store.load_all()
        assert await store.delete(stub) == path
        assert not path.exists()

    async def test_delete_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(StubWriteError):
            await StubStore(tmp_path).delete(make_stub("ghost"))


class TestPack:
    def _descriptor(self) -> PackDescriptor:
        return PackDescriptor(
            name="Pack",
            author="me",
            game_version="1.20.1",
            modloader=Modloader(ModLoader.QUILT, "0.23.1"),
        )

    async def test_load_requires_descriptor(self, tmp_path: Path) -> None:
        assert not Pack.is_project(tmp_path)
        with pytest.raises(NotAProjectError):
            await Pack.load(tmp_path)

    async def test_load_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "pack.mp.json").write_text("{", encoding="utf-8")
        with pytest.raises(PackDescriptorError):
            await Pack.load(tmp_path)

    async def test_load_undecodable_descriptor(self, tmp_path: Path) -> None:
        (tmp_path / "pack.mp.json").write_bytes(b'{"name": "\xff\xfe"}')
        with pytest.raises(PackDescriptorError):
            await Pack.load(tmp_path)

    async def test_create_scaffolds_project(self, tmp_path: Path) -> None:
        pack = await Pack.create(tmp_path / "new", self._descriptor())
        assert Pack.is_project(pack.root)
        assert (pack.root / "stubs").is_dir()
        assert (pack.root / "overrides").is_dir()

        loaded = await Pack.load(pack.root)
        assert loaded.descriptor == self._descriptor()
        assert loaded.loader == "quilt"
        assert loaded.game_version == "1.20.1"

    async def test_create_refuses_existing_project(self, tmp_path: Path) -> None:
        await Pack.create(tmp_path, self._descriptor())
        with pytest.raises(ProjectError):
            await Pack.create(tmp_path, self._descriptor())

    async def test_create_force_overwrites(self, tmp_path: Path) -> None:
        await Pack.create(tmp_path, self._descriptor())
        descriptor = self._descriptor()
        descriptor.name = "Renamed"
        pack = await Pack.create(tmp_path, descriptor, force=True)
        assert (await Pack.load(pack.root)).descriptor.name == "Renamed"

    async def test_create_replaces_invalid_descriptor(self, tmp_path: Path) -> None:
        (tmp_path / "pack.mp.json").write_text("garbage", encoding="utf-8")
        pack = await Pack.create(tmp_path, self._descriptor())
        assert (await Pack.load(pack.root)).descriptor.name == "Pack"
