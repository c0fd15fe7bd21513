import logging
from typing import Any, Awaitable, Callable, Optional
from .cache import ApiCache

logger = logging.getLogger(__name__)


class OptimisticMutation:
    """
    Cập nhật lạc quan một entry của cache:
    chụp snapshot → áp dụng 'apply' → gọi 'request'.
    Thành công: 'reconcile(current, response)' (nếu có) đồng bộ lại với dữ liệu server.
    Thất bại: khôi phục snapshot rồi ném lại lỗi.
    URL chưa có dữ liệu trong cache thì chỉ gọi 'request'.
    """

    def __init__(self, cache: ApiCache, url: str,
                 apply: Callable[[Any], Any],
                 request: Callable[[], Awaitable[Any]],
                 reconcile: Optional[Callable[[Any, Any], Any]] = None):
        self.cache = cache
        self.url = url
        self.apply = apply
        self.request = request
        self.reconcile = reconcile

    def _has_data(self) -> bool:
        entry = self.cache.peek(self.url)
        return entry is not None and entry.data is not None

    async def run(self):
        # URL chưa được tải: không ghi dữ liệu tạm để lần đọc sau vẫn lấy từ server
        if not self._has_data():
            return await self.request()

        snapshot = self.cache.snapshot(self.url)
        self.cache.set_data(self.url, self.apply)
        try:
            response = await self.request()
        except Exception as e:
            logger.warning("Optimistic update of %s rolled back: %s", self.url, e)
            self.cache.restore(self.url, snapshot)
            raise

        if self.reconcile is not None and self._has_data():
            self.cache.set_data(self.url, lambda current: self.reconcile(current, response))
        return response
