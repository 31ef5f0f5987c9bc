"""
页面缓存失效信号

档案更新提交成功后通知展示层对应路径的缓存已过期。
"""

from typing import Callable, List


class PathRevalidator:
    """
    路径缓存失效器

    记录被标记过期的路径，并依次通知已注册的回调
    （例如清理模板缓存或推送前端刷新）
    """

    def __init__(self):
        self.revalidated_paths: List[str] = []
        self._callbacks: List[Callable[[str], None]] = []

    def register(self, callback: Callable[[str], None]) -> None:
        """注册失效回调"""
        self._callbacks.append(callback)

    def revalidate_path(self, path: str) -> None:
        """
        标记路径缓存过期

        Args:
            path: 展示路径，例如 "/"
        """
        print(f"[PathRevalidator] 路径缓存已失效: {path}")
        self.revalidated_paths.append(path)
        for callback in list(self._callbacks):
            try:
                callback(path)
            except Exception as e:
                # 提交已完成，回调失败不影响调用方
                print(f"[PathRevalidator] 缓存失效回调失败 (path: {path}): {e}")
