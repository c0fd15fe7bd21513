import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_STALE_TIME = 30.0

# Đánh dấu "không truyền fallback" (None là một fallback hợp lệ)
MISSING = object()

Fetcher = Callable[[str], Awaitable[Any]]
Listener = Callable[["CacheEntry"], None]


def _consume_error(task: asyncio.Task):
    if not task.cancelled():
        task.exception()


@dataclass
class CacheEntry:
    data: Any = None
    timestamp: float = 0.0
    task: Optional[asyncio.Task] = None
    error: Optional[Exception] = None


@dataclass
class CacheResult:
    data: Any
    error: Optional[Exception] = None
    stale: bool = False


class ApiCache:
    """
    Cache stale-while-revalidate theo URL, gộp các request trùng nhau.

    - Dữ liệu còn "tươi" (mới hơn stale_time giây) được trả ngay, không gọi mạng.
    - Dữ liệu cũ: trả ngay (stale=True) và tải lại nền; listener nhận bản mới.
    - Chưa có dữ liệu: chờ task đang chạy nếu có, ngược lại tạo task mới.
    - Lỗi được lưu vào entry; dữ liệu tốt gần nhất (hoặc fallback) vẫn được trả về.
    Mỗi instance có trạng thái riêng, không có singleton cấp module.
    """

    def __init__(self, fetcher: Fetcher, stale_time: float = DEFAULT_STALE_TIME,
                 clock: Callable[[], float] = time.monotonic):
        self._fetcher = fetcher
        self.stale_time = stale_time
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._listeners: Dict[str, List[Listener]] = {}

    def peek(self, url: str) -> Optional[CacheEntry]:
        return self._entries.get(url)

    def _ensure_entry(self, url: str) -> CacheEntry:
        entry = self._entries.get(url)
        if entry is None:
            entry = CacheEntry()
            self._entries[url] = entry
        return entry

    def _is_fresh(self, entry: CacheEntry, stale_time: float) -> bool:
        # Entry đang lỗi luôn bị coi là cũ
        return (
            entry.data is not None
            and entry.error is None
            and self._clock() - entry.timestamp < stale_time
        )

    def _notify(self, url: str, entry: CacheEntry):
        for listener in list(self._listeners.get(url, [])):
            try:
                listener(entry)
            except Exception:
                logger.exception("Cache listener for %s failed", url)

    def subscribe(self, url: str, listener: Listener) -> Callable[[], None]:
        """Đăng ký nhận entry mỗi khi dữ liệu hoặc lỗi của URL thay đổi. Trả về hàm hủy đăng ký."""
        self._listeners.setdefault(url, []).append(listener)

        def unsubscribe():
            listeners = self._listeners.get(url, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(url, None)

        return unsubscribe

    async def _fetch(self, url: str, entry: CacheEntry, transform):
        try:
            payload = await self._fetcher(url)
            data = transform(payload) if transform else payload
        except Exception as e:
            entry.error = e
            self._notify(url, entry)
            raise
        finally:
            entry.task = None

        entry.data = data
        entry.timestamp = self._clock()
        entry.error = None
        self._notify(url, entry)
        return data

    def _in_flight(self, url: str, transform) -> asyncio.Task:
        entry = self._ensure_entry(url)
        if entry.task is None:
            entry.task = asyncio.ensure_future(self._fetch(url, entry, transform))
            # Lỗi của lần tải nền đã được lưu vào entry
            entry.task.add_done_callback(_consume_error)
        return entry.task

    async def _load(self, url: str, stale_time: Optional[float], fallback, transform,
                    force: bool = False, background: bool = False):
        """
        Trả về (data, error, stale). Không ném lỗi fetch.
        background=True: entry cũ nhưng còn dữ liệu thì trả ngay, việc tải lại chạy nền.
        """
        entry = self._ensure_entry(url)
        if stale_time is None:
            stale_time = self.stale_time
        if not force and self._is_fresh(entry, stale_time):
            return entry.data, None, False

        task = self._in_flight(url, transform)
        if background and entry.data is not None:
            # Listener nhận dữ liệu mới qua _notify khi task xong
            return entry.data, entry.error, True

        try:
            # shield: một caller bị hủy không làm hủy task dùng chung
            return await asyncio.shield(task), None, False
        except Exception as e:
            if entry.data is None and fallback is not MISSING:
                logger.warning("Fetching %s failed; using fallback value: %s", url, e)
                entry.data = fallback
                entry.timestamp = self._clock()
                self._notify(url, entry)
            return entry.data, e, True

    async def get(self, url: str, stale_time: Optional[float] = None, fallback=MISSING,
                  transform=None) -> CacheResult:
        """Stale-while-revalidate: chỉ chờ mạng khi chưa có dữ liệu."""
        data, error, stale = await self._load(url, stale_time, fallback, transform, background=True)
        if data is None and fallback is not MISSING:
            data = fallback
        return CacheResult(data=data, error=error, stale=stale)

    async def prefetch(self, url: str, stale_time: Optional[float] = None, fallback=MISSING, transform=None):
        """Làm nóng cache. Ném lỗi fetch nếu không có fallback."""
        data, error, _ = await self._load(url, stale_time, fallback, transform)
        if error is not None and fallback is MISSING:
            raise error
        return data

    async def refresh(self, url: str, fallback=MISSING, transform=None):
        """Buộc tải lại (dùng chung request đang chạy nếu có). Không ném lỗi."""
        data, _, _ = await self._load(url, None, fallback, transform, force=True)
        if data is None and fallback is not MISSING:
            return fallback
        return data

    def set_data(self, url: str, value):
        """
        Ghi đè dữ liệu của URL (dùng cho cập nhật lạc quan).
        'value' có thể là giá trị mới hoặc hàm nhận dữ liệu hiện tại và trả về giá trị mới.
        """
        entry = self._ensure_entry(url)
        entry.data = value(entry.data) if callable(value) else value
        entry.timestamp = self._clock()
        entry.error = None
        self._notify(url, entry)
        return entry.data

    def snapshot(self, url: str) -> Optional[CacheEntry]:
        entry = self._entries.get(url)
        return replace(entry, task=None) if entry else None

    def restore(self, url: str, snapshot: Optional[CacheEntry]):
        """Khôi phục entry về snapshot (None nghĩa là URL chưa từng được cache)."""
        if snapshot is None:
            self.invalidate(url)
            return
        entry = self._ensure_entry(url)
        entry.data = snapshot.data
        entry.timestamp = snapshot.timestamp
        entry.error = snapshot.error
        self._notify(url, entry)

    def invalidate(self, url: str):
        entry = self._entries.pop(url, None)
        if entry is not None:
            self._notify(url, CacheEntry())

    def clear(self):
        for url in list(self._entries):
            self.invalidate(url)
