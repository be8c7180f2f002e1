"""Concurrency — per-fingerprint locking for cache regeneration."""

from imgcache.concurrency.locks import KeyedLock

__all__ = ["KeyedLock"]
