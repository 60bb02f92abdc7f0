from .file_cache import CacheEntry, FileCache

__all__ = ['CacheEntry', 'FileCache']
