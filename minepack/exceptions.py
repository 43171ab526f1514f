"""
Minepack 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
解析与变更操作的业务结果（未找到、歧义、重复等）不走异常，见 models.results。
"""

from typing import Any, Dict, Optional
import aiohttp


class MinepackError(Exception):
    """Minepack 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(MinepackError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class ProjectError(MinepackError):
    """整合包项目相关错误"""

    def _get_default_code(self) -> str:
        return "E150"


class NotAProjectError(ProjectError):
    """目录中没有 pack.mp.json"""

    def _get_default_code(self) -> str:
        return "E151"


class PackDescriptorError(ProjectError):
    """pack.mp.json 内容无效"""

    def _get_default_code(self) -> str:
        return "E152"


class StubParseError(ProjectError):
    """存根文件解析错误"""

    def _get_default_code(self) -> str:
        return "E153"


class StubWriteError(ProjectError):
    """存根文件写入或删除错误"""

    def _get_default_code(self) -> str:
        return "E154"


class PackImportError(ProjectError):
    """其他格式的整合包无法导入"""

    def _get_default_code(self) -> str:
        return "E155"


class APIError(MinepackError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class DownloadError(MinepackError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadNetworkError(DownloadError):
    """下载网络错误"""

    def _get_default_code(self) -> str:
        return "E301"


class DownloadChecksumError(DownloadError):
    """下载校验错误"""

    def _get_default_code(self) -> str:
        return "E302"


class DownloadFileError(DownloadError):
    """下载文件操作错误"""

    def _get_default_code(self) -> str:
        return "E303"


class PackagerError(MinepackError):
    """打包相关错误"""

    def _get_default_code(self) -> str:
        return "E400"


class MrpackError(PackagerError):
    """Mrpack 生成错误"""

    def _get_default_code(self) -> str:
        return "E401"


__all__ = [
    # 基础异常
    "MinepackError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 项目异常
    "ProjectError",
    "NotAProjectError",
    "PackDescriptorError",
    "StubParseError",
    "StubWriteError",
    "PackImportError",
    # API 异常
    "APIError",
    "APIRateLimitError",
    "APIServerError",
    # 下载异常
    "DownloadError",
    "DownloadNetworkError",
    "DownloadChecksumError",
    "DownloadFileError",
    # 打包异常
    "PackagerError",
    "MrpackError",
]
