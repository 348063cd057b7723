"""Random key generation utility

This module provides a generator of unique, fixed-length, Base62 keys used as
the trailing segment of short URLs. Keys are pre-generated into a small pool;
every call hands out one pooled key and replenishes the pool in the same step.

Classes:
    RandomKeyGenerator(pool_size=10, length=8, alphabet=KeyPool.ALPHABET):
        Thread-safe pool of unique random keys.

Example:
    >>> from tinyurl.utils import RandomKeyGenerator
    >>> generator = RandomKeyGenerator()
    >>> key = generator.get_key()
    >>> len(key)
    8
    >>> len(generator)
    10
"""

import secrets
import threading

from tinyurl.constants import KeyPool
from tinyurl.exceptions import KeyPoolExhaustedError


class RandomKeyGenerator:
    """Maintain a pool of unique random keys

    With the default 8-character Base62 keys the key space holds 62^8
    (218,340,105,584,896) keys, which makes collisions practically impossible.

    NOTE:
        Uniqueness is only guaranteed against the keys currently in the pool,
        not against every key ever handed out. Callers that need global
        uniqueness (e.g. InMemoryUrlRegistry) must check issued keys themselves.

    Args:
        pool_size (int, optional):
            Number of keys kept ready in the pool. Defaults to 10.
        length (int, optional):
            Number of characters per key. Defaults to 8.
        alphabet (str, optional):
            Characters keys are sampled from. Defaults to [a-zA-Z0-9].

    Raises:
        TypeError: If an argument has the wrong type.
        ValueError: If pool_size or length is not positive, or the alphabet
            has fewer than two distinct characters.
    """

    def __init__(self, pool_size: int = KeyPool.POOL_SIZE, length: int = KeyPool.KEY_LENGTH, alphabet: str = KeyPool.ALPHABET):
        if not isinstance(pool_size, int) or isinstance(pool_size, bool):
            raise TypeError(f'Pool size must be of type integer (given type: {type(pool_size)}).')
        if not isinstance(length, int) or isinstance(length, bool):
            raise TypeError(f'Key length must be of type integer (given type: {type(length)}).')
        if not isinstance(alphabet, str):
            raise TypeError(f'Alphabet must be of type string (given type: {type(alphabet)}).')
        if pool_size < 1:
            raise ValueError(f'Pool size must be a positive integer (given value: {pool_size}).')
        if length < 1:
            raise ValueError(f'Key length must be a positive integer (given value: {length}).')
        if len(set(alphabet)) < 2:
            raise ValueError(f'Alphabet must contain at least 2 distinct characters (given value: {alphabet!r}).')

        self.alphabet = ''.join(dict.fromkeys(alphabet))
        # Replenishing needs one spare key outside the full pool
        if pool_size >= len(self.alphabet) ** length:
            raise ValueError(f'Pool size must be smaller than the key space ({len(self.alphabet) ** length}) (given value: {pool_size}).')

        self.pool_size = pool_size
        self.length = length
        self._lock = threading.Lock()

        # dict as an insertion-ordered set
        self._pool: dict[str, None] = {}
        while len(self._pool) < pool_size:
            self._pool[self._generate_key()] = None

    def __len__(self) -> int:
        return len(self._pool)

    def __contains__(self, key: object) -> bool:
        return key in self._pool

    def get_key(self) -> str:
        """Hand out a unique key from the pool and replenish it

        Returns:
            str: A key that was in the pool and is no longer in it.

        Raises:
            KeyPoolExhaustedError: If the pool holds no keys.

        Example:
            >>> generator = RandomKeyGenerator(pool_size=3)
            >>> generator.get_key()
            'q7fEmOjA'
        """
        with self._lock:
            if not self._pool:
                raise KeyPoolExhaustedError('Key pool is empty; no unique key can be supplied.')

            key = next(iter(self._pool))
            del self._pool[key]

            # Resample until the new key does not collide with a pooled one
            new_key = self._generate_key()
            while new_key in self._pool:
                new_key = self._generate_key()
            self._pool[new_key] = None

        return key

    def _generate_key(self) -> str:
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))
