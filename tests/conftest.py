"""测试公共夹具：内存中的注册中心和临时整合包"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from minepack.models import (
    ContentType,
    DependencyInfo,
    Download,
    Environments,
    FileInfo,
    Hashes,
    ModLoader,
    Modloader,
    PackDescriptor,
    ProjectInfo,
    SearchHit,
    SideSupport,
    Stub,
    VersionInfo,
)
from minepack.services import ModResolver
from minepack.storage import Pack

GAME_VERSION = "1.20.1"
LOADER = "fabric"

SODIUM_ID = "AANobbMI"
IRIS_ID = "YL57xq9U"
FABRIC_API_ID = "P7dR8mSH"
LITHIUM_ID = "gvQqBUqZ"
MODMENU_ID = "mOgUt4GM"
CREATE_ID = "LNytGWDc"
SHADER_ID = "HVnmMxH1"
FO_ID = "1KVo5zza"
EMPTY_ID = "eMpTy000"


def make_project(
    project_id: str,
    slug: str,
    title: str,
    project_type: str = "mod",
    game_versions: Optional[List[str]] = None,
    loaders: Optional[List[str]] = None,
    client_side: Optional[str] = "required",
    server_side: Optional[str] = "optional",
) -> ProjectInfo:
    return ProjectInfo(
        id=project_id,
        slug=slug,
        title=title,
        description=f"{title} description",
        project_type=project_type,
        game_versions=game_versions if game_versions is not None else [GAME_VERSION],
        loaders=loaders if loaders is not None else [LOADER],
        client_side=client_side,
        server_side=server_side,
    )


def make_file(filename: str, primary: bool = True) -> FileInfo:
    return FileInfo(
        url=f"https://cdn.modrinth.com/data/{filename}",
        filename=filename,
        size=1024,
        hashes={"sha1": f"sha1-{filename}", "sha512": f"sha512-{filename}"},
        primary=primary,
    )


def make_version(
    version_id: str,
    filename: Optional[str] = None,
    game_versions: Optional[List[str]] = None,
    loaders: Optional[List[str]] = None,
    dependencies: Optional[List[DependencyInfo]] = None,
    files: Optional[List[FileInfo]] = None,
    client_side: Optional[str] = None,
    server_side: Optional[str] = None,
) -> VersionInfo:
    if files is None:
        files = [make_file(filename or f"{version_id}.jar")]
    return VersionInfo(
        id=version_id,
        name=version_id,
        version=version_id,
        loaders=loaders if loaders is not None else [LOADER],
        game_versions=game_versions if game_versions is not None else [GAME_VERSION],
        files=files,
        dependencies=dependencies or [],
        client_side=client_side,
        server_side=server_side,
    )


def required(project_id: str) -> DependencyInfo:
    return DependencyInfo(project_id=project_id, dependency_type="required")


def make_stub(
    slug: str,
    project_id: Optional[str] = None,
    name: Optional[str] = None,
    dependencies: Optional[List[str]] = None,
    content_type: ContentType = ContentType.MOD,
    client: SideSupport = SideSupport.REQUIRED,
    server: SideSupport = SideSupport.REQUIRED,
    version_id: str = "v1",
) -> Stub:
    filename = f"{slug}-{version_id}.jar"
    return Stub(
        name=name or slug.replace("-", " ").title(),
        project_id=project_id or f"id-{slug}",
        slug=slug,
        type=content_type,
        loader=LOADER,
        game_version=GAME_VERSION,
        hashes=Hashes(sha1=f"sha1-{filename}", sha512=f"sha512-{filename}"),
        download=Download(
            version_id=version_id,
            url=f"https://cdn.modrinth.com/data/{filename}",
            path=filename,
            size=2048,
        ),
        environments=Environments(client=client, server=server),
        dependencies=dependencies or [],
    )


class FakeRegistry:
    """实现 ModrinthClient 接口的内存注册中心"""

    def __init__(self):
        self.projects: Dict[str, ProjectInfo] = {}
        self.versions: Dict[str, List[VersionInfo]] = {}
        self.search_results: Dict[str, List[SearchHit]] = {}
        self.json: Dict[str, object] = {}
        self.calls: List[tuple] = []
        self.closed = False

    def add(self, project: ProjectInfo, versions: List[VersionInfo]) -> None:
        self.projects[project.id] = project
        self.versions[project.id] = versions

    def remove(self, project_id: str) -> None:
        self.projects.pop(project_id, None)
        self.versions.pop(project_id, None)

    def hit(self, project_id: str) -> SearchHit:
        project = self.projects[project_id]
        return SearchHit(
            project_id=project.id,
            slug=project.slug,
            title=project.title,
            description=project.description,
            project_type=project.project_type,
            versions=list(project.game_versions),
        )

    def _find(self, id_or_slug: str) -> Optional[ProjectInfo]:
        for project in self.projects.values():
            if id_or_slug in (project.id, project.slug):
                return project
        return None

    async def get_project(self, id_or_slug: str) -> Optional[ProjectInfo]:
        self.calls.append(("get_project", id_or_slug))
        return self._find(id_or_slug)

    async def get_versions(self, project_id: str) -> List[VersionInfo]:
        self.calls.append(("get_versions", project_id))
        return list(self.versions.get(project_id, []))

    async def search(
        self, query: str, game_version: str, loader: str, limit: Optional[int] = None
    ) -> List[SearchHit]:
        self.calls.append(("search", query))
        if query in self.search_results:
            hits = self.search_results[query]
        else:
            needle = query.lower()
            hits = [
                self.hit(project.id)
                for project in self.projects.values()
                if (needle in project.title.lower() or needle in project.slug)
                and project.project_type in ("mod", "resourcepack", "shader")
                and (not game_version or game_version in project.game_versions)
                and (not loader or loader in project.loaders)
            ]
        return hits[: limit or 5]

    async def get_json(self, url: str, params: Optional[dict] = None):
        self.calls.append(("get_json", url))
        return self.json.get(url)

    async def close(self):
        self.closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def build_registry() -> FakeRegistry:
    registry = FakeRegistry()
    registry.add(
        make_project(
            SODIUM_ID, "sodium", "Sodium",
            game_versions=["1.20.1", "1.20.4"], loaders=["fabric", "quilt"],
            client_side="required", server_side="unsupported",
        ),
        [
            make_version("sodium-120-4", "sodium-0.5.8+mc1.20.4.jar", game_versions=["1.20.4"]),
            make_version("sodium-120-1", "sodium-0.5.3+mc1.20.1.jar"),
        ],
    )
    registry.add(
        make_project(IRIS_ID, "iris", "Iris Shaders", client_side="required", server_side="unsupported"),
        [
            make_version(
                "iris-120-1",
                "iris-1.6.11+1.20.1.jar",
                dependencies=[
                    required(SODIUM_ID),
                    DependencyInfo(project_id=MODMENU_ID, dependency_type="optional"),
                ],
            )
        ],
    )
    registry.add(
        make_project(FABRIC_API_ID, "fabric-api", "Fabric API"),
        [make_version("fapi-120-1", "fabric-api-0.92.0+1.20.1.jar")],
    )
    registry.add(
        make_project(LITHIUM_ID, "lithium", "Lithium"),
        [make_version("lithium-120-1", "lithium-0.11.2.jar", dependencies=[required(FABRIC_API_ID)])],
    )
    registry.add(
        make_project(MODMENU_ID, "modmenu", "Mod Menu", client_side="required", server_side="unsupported"),
        [
            make_version(
                "modmenu-120-1",
                "modmenu-7.2.2.jar",
                dependencies=[required(FABRIC_API_ID), required(LITHIUM_ID)],
            )
        ],
    )
    registry.add(
        make_project(CREATE_ID, "create", "Create", loaders=["forge"]),
        [make_version("create-120-1", "create-0.5.1.jar", loaders=["forge"])],
    )
    registry.add(
        make_project(
            SHADER_ID, "complementary-reimagined", "Complementary Shaders",
            project_type="shader", loaders=["iris", "optifine"],
            client_side="required", server_side="unsupported",
        ),
        [make_version("compl-r5", "ComplementaryReimagined_r5.1.zip", loaders=["iris", "optifine"])],
    )
    registry.add(
        make_project(FO_ID, "fabulously-optimized", "Fabulously Optimized", project_type="modpack"),
        [make_version("fo-5", "Fabulously Optimized 5.mrpack")],
    )
    registry.add(
        make_project(EMPTY_ID, "empty-mod", "Empty Mod"),
        [make_version("empty-1", files=[])],
    )
    return registry


def write_descriptor(root: Path, loader_version: str = "0.15.7") -> None:
    descriptor = PackDescriptor(
        name="Test Pack",
        author="tester",
        description="A pack for tests",
        game_version=GAME_VERSION,
        modloader=Modloader(name=ModLoader.FABRIC, version=loader_version),
    )
    (root / "pack.mp.json").write_text(json.dumps(descriptor.to_dict()), encoding="utf-8")
    (root / "stubs").mkdir(exist_ok=True)
    (root / "overrides").mkdir(exist_ok=True)


def write_stub(root: Path, stub: Stub) -> Path:
    path = root / "stubs" / f"{stub.slug}.mp.json"
    path.parent.mkdir(exist_ok=True)
    path.write_text(json.dumps(stub.to_dict(), indent=2), encoding="utf-8")
    return path


def snapshot(root: Path) -> Dict[str, str]:
    """stubs/ 目录的文件名 -> 内容"""
    stubs_dir = root / "stubs"
    return {p.name: p.read_text(encoding="utf-8") for p in sorted(stubs_dir.iterdir())}


@pytest.fixture()
def registry() -> FakeRegistry:
    return build_registry()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    write_descriptor(tmp_path)
    return tmp_path


@pytest.fixture()
async def pack(project_dir: Path) -> Pack:
    return await Pack.load(project_dir)


@pytest.fixture()
def resolver(registry: FakeRegistry) -> ModResolver:
    return ModResolver(registry, GAME_VERSION, LOADER)
