from .cache import ApiCache, CacheEntry, CacheResult, DEFAULT_STALE_TIME, MISSING
from .api_client import ApiClient
from .optimistic import OptimisticMutation
from .blogchat_client import BlogChatClient
