"""Cache key 命名规范。

缓存用于：
- Art Pool: 候选作品池（按显示方向 + 风格过滤分区）
- Art Rotation: 每个轮换时间槽选中的作品
"""


class RedisKeys:
    """Cache key 命名空间管理。"""

    # 所有 art 相关 key 的公共前缀
    ART_PREFIX = "art:"

    # 作品池
    # art:pool:{orientation}[:{filter_signature}]
    ART_POOL_PREFIX = "art:pool"

    # 轮换选择
    # art:rotation:{orientation}[:{filter_signature}]:{slot}
    ART_ROTATION_PREFIX = "art:rotation"

    @staticmethod
    def _scope(orientation: str, filter_signature: str) -> str:
        if filter_signature:
            return f"{orientation}:{filter_signature}"
        return orientation

    @classmethod
    def art_pool(cls, orientation: str, filter_signature: str = "") -> str:
        """生成作品池 key。

        Args:
            orientation: 显示方向（portrait / landscape / tv）
            filter_signature: 风格过滤签名，无过滤时为空串

        Returns:
            格式化的 cache key
        """
        return f"{cls.ART_POOL_PREFIX}:{cls._scope(orientation, filter_signature)}"

    @classmethod
    def art_rotation(
        cls,
        orientation: str,
        filter_signature: str,
        slot: int,
    ) -> str:
        """生成轮换选择 key。

        Args:
            orientation: 显示方向
            filter_signature: 风格过滤签名
            slot: 轮换时间槽编号

        Returns:
            格式化的 cache key
        """
        scope = cls._scope(orientation, filter_signature)
        return f"{cls.ART_ROTATION_PREFIX}:{scope}:{slot}"
