"""
Supabase 客户端
提供 Supabase 连接的单例模式访问
"""

import os
import logging
from functools import lru_cache

from dotenv import load_dotenv
from supabase import create_client, ClientOptions

from ..config import default_config

# 加载环境变量
load_dotenv()


def _is_supabase_configured() -> bool:
    """检查 Supabase 是否已配置"""
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    return bool(url and key)


@lru_cache(maxsize=1)
def get_supabase_client():
    """
    获取 Supabase 客户端（单例模式）

    请求超时由 SUPABASE_TIMEOUT 控制（默认 10 秒）

    Returns:
        Supabase Client 实例，如果未配置或连接失败则返回 None
    """
    if not _is_supabase_configured():
        logging.warning("⚠️ Supabase 未配置，数据库功能不可用")
        return None

    url = os.getenv("SUPABASE_URL")
    # 优先使用 service key（后端操作），否则使用 anon key
    key = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY")

    try:
        options = ClientOptions(postgrest_client_timeout=default_config.supabase_timeout)
        client = create_client(url, key, options=options)
        logging.info("✅ Supabase 客户端初始化成功")
        return client
    except Exception as e:
        logging.error(f"❌ Supabase 连接失败: {e}")
        return None


class SupabaseRepository:
    """Supabase 数据仓库基类，客户端可注入（测试时传入 Mock）"""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        """获取 Supabase 客户端"""
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def is_available(self) -> bool:
        """检查数据库是否可用"""
        return self.client is not None
