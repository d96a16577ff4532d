#!/usr/bin/env python3
"""
Session management module for the bakery admin dashboard.

This module stores signed-in admin sessions in Redis, with an in-memory
fallback when Redis is disabled or unreachable.
"""

import json
import secrets
import time
import redis
from typing import Dict, Any, Optional
from datetime import datetime
from .config import Config
from ..utils.logger import get_logger

logger = get_logger()


class SessionManager:
    """Manages admin sessions keyed by an opaque token."""

    def __init__(self, use_redis: Optional[bool] = None, ttl_seconds: Optional[int] = None):
        """Initialize the session manager with Redis connection or fallback to in-memory."""
        self.ttl_seconds = ttl_seconds or Config.SESSION_TTL_SECONDS
        self.use_redis = Config.USE_REDIS if use_redis is None else use_redis
        self.memory_sessions: Dict[str, Dict[str, Any]] = {}  # Fallback in-memory storage
        self.redis_client = None

        if self.use_redis:
            try:
                self.redis_client = redis.Redis(
                    host=Config.REDIS_HOST,
                    port=Config.REDIS_PORT,
                    db=Config.REDIS_DB,
                    decode_responses=True
                )
                # Test Redis connection
                self.redis_client.ping()
                logger.info("Using Redis for admin session storage")
            except redis.RedisError as e:
                logger.warning("Redis not available (%s), using in-memory session storage", e)
                self.use_redis = False
                self.redis_client = None

    def _get_session_key(self, token: str) -> str:
        """
        Generate Redis key for a session.

        Args:
            token: Session token

        Returns:
            Redis key for the session
        """
        return f"admin_session:{token}"

    def create_session(self, user_id: int, email: str) -> str:
        """
        Create a new session for a signed-in admin.

        Args:
            user_id: Id of the admin user
            email: Email of the admin user

        Returns:
            The new session token
        """
        token = secrets.token_urlsafe(32)
        session_data = {
            "user_id": user_id,
            "email": email,
            "created_at": datetime.now().isoformat(),
            "expires_at": time.time() + self.ttl_seconds,
        }

        if self.use_redis:
            self.redis_client.set(self._get_session_key(token), json.dumps(session_data), ex=self.ttl_seconds)
        else:
            self._prune_expired()
            self.memory_sessions[token] = session_data
        return token

    def _prune_expired(self) -> None:
        now = time.time()
        for stale in [t for t, data in self.memory_sessions.items() if data["expires_at"] <= now]:
            del self.memory_sessions[stale]

    def get_session(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve session data.

        Args:
            token: Session token

        Returns:
            Session data or None if not found or expired
        """
        if not token:
            return None

        if self.use_redis:
            session_data = self.redis_client.get(self._get_session_key(token))
            if session_data:
                return json.loads(session_data)
            return None

        session_data = self.memory_sessions.get(token)
        if session_data is None:
            return None
        if session_data["expires_at"] <= time.time():
            # Redis expires keys itself; the dict has to be pruned on read
            self.memory_sessions.pop(token, None)
            return None
        return session_data

    def delete_session(self, token: str) -> bool:
        """
        Remove a session.

        Returns:
            True if a session was removed, False if there was nothing to remove
        """
        if not token:
            return False
        if self.use_redis:
            return bool(self.redis_client.delete(self._get_session_key(token)))
        return self.memory_sessions.pop(token, None) is not None


# Provide a module-level singleton for convenience
_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    global _manager
    if _manager is None:
        _manager = SessionManager()
    return _manager
