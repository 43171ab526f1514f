"""
API 客户端

Modrinth v2 API 客户端。所有注册中心元数据都经由此处获取。
"""

import asyncio
import json
from typing import Any, List, Optional

import aiohttp
from loguru import logger

from minepack.config import Settings
from minepack.models import ProjectInfo, SearchHit, VersionInfo
from minepack.exceptions import APIError, APIRateLimitError, APIServerError

SEARCH_PROJECT_TYPES = ("mod", "resourcepack", "shader")


def build_search_facets(game_version: str, loader: str) -> str:
    """构造 /search 的 facets 参数（外层 AND，内层 OR）"""
    facets = []
    if game_version:
        facets.append([f"versions:{game_version}"])
    facets.append([f"project_type:{t}" for t in SEARCH_PROJECT_TYPES])
    if loader:
        facets.append([f"categories:{loader}"])
    return json.dumps(facets)


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.settings = settings or Settings()
        self.base_url = self.settings.api_base_url.rstrip("/")
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.settings.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout),
            )
            self._owned_session = True
        return self._session

    def _retry_after(self, response: aiohttp.ClientResponse) -> float:
        """速率限制时需要等待的秒数"""
        reset = response.headers.get("X-Ratelimit-Reset")
        try:
            return max(float(reset), 0.0) if reset is not None else self.settings.retry_delay
        except ValueError:
            return self.settings.retry_delay

    async def get_json(self, url: str, params: Optional[dict] = None) -> Optional[Any]:
        """
        发送 GET 请求并解析 JSON

        Returns:
            解析后的 JSON；资源不存在 (404) 时返回 None

        Raises:
            APIRateLimitError: 多次重试后仍被限流
            APIServerError: 服务器错误 (5xx)
            APIError: 其他失败（包括网络错误）
        """
        attempt = 0
        while True:
            try:
                async with self.session.get(url, params=params) as response:
                    if response.status == 200:
                        return await response.json(content_type=None)
                    elif response.status == 404:
                        return None
                    elif response.status == 429:
                        if attempt >= self.settings.max_retries:
                            raise APIRateLimitError(
                                "API 请求被限流，已达到最大重试次数",
                                response=response,
                            )
                        delay = self._retry_after(response)
                    elif response.status >= 500:
                        raise APIServerError(
                            f"API 服务器错误 (状态码: {response.status})",
                            response=response,
                        )
                    else:
                        raise APIError(
                            f"API 请求失败 (状态码: {response.status})",
                            response=response,
                        )
            except aiohttp.ClientError as e:
                raise APIError(f"网络请求失败: {e}", context={"url": url}) from e
            except asyncio.TimeoutError as e:
                raise APIError("网络请求超时", context={"url": url}) from e

            attempt += 1
            logger.warning(f"API 请求被限流，{delay:.1f} 秒后重试 ({attempt}/{self.settings.max_retries})")
            await asyncio.sleep(delay)

    async def get_project(self, id_or_slug: str) -> Optional[ProjectInfo]:
        """获取项目信息"""
        response = await self.get_json(f"{self.base_url}/project/{id_or_slug}")
        if response is None:
            return None
        return ProjectInfo.from_modrinth(response)

    async def get_versions(self, project_id: str) -> List[VersionInfo]:
        """获取项目的全部版本（注册中心返回的顺序，最新在前）"""
        response = await self.get_json(f"{self.base_url}/project/{project_id}/version")
        if not response:
            return []
        return [VersionInfo.from_modrinth(version) for version in response]

    async def search(
        self,
        query: str,
        game_version: str,
        loader: str,
        limit: Optional[int] = None,
    ) -> List[SearchHit]:
        """按整合包约束搜索项目"""
        params = {
            "query": query,
            "facets": build_search_facets(game_version, loader),
            "limit": str(limit or self.settings.search_limit),
        }
        response = await self.get_json(f"{self.base_url}/search", params)
        if not response:
            return []
        return [SearchHit.from_modrinth(hit) for hit in response.get("hits", [])]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
