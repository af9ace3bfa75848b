"""
数据库连接和管理模块
DuckDB 存储的表结构定义、连接生命周期和事务管理

数据库表说明：
- users: 用户信息、角色和会员等级
- meals: 已上架餐品，likes / reviews_count 为冗余计数
- upcoming_meals / upcoming_likes: 待上架餐品及其点赞用户集合
- likes: 点赞记录，(meal_id, user_email) 唯一
- reviews: 评价记录
- meal_requests: 餐品申请，(meal_id, user_email) 唯一
- payments: 支付记录
- logs: 操作日志

同一 DatabaseManager 内的访问由 RLock 串行化；唯一索引拦截绕过服务层预检查的
重复写入（其他连接、手工脚本），此时 transaction() 抛出 DuplicateRecordError。
"""

import json
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import duckdb

from .exceptions import DatabaseError, DuplicateRecordError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

SCHEMA_SQL = r"""
CREATE SEQUENCE IF NOT EXISTS users_id_seq;
CREATE TABLE IF NOT EXISTS users (
  id BIGINT DEFAULT nextval('users_id_seq') PRIMARY KEY,
  email TEXT UNIQUE NOT NULL,
  name TEXT,
  photo TEXT,
  role TEXT CHECK(role IN ('user','admin')) NOT NULL DEFAULT 'user',
  badge TEXT NOT NULL DEFAULT 'bronze',
  created_at TIMESTAMP
);

CREATE SEQUENCE IF NOT EXISTS meals_id_seq;
CREATE TABLE IF NOT EXISTS meals (
  id BIGINT DEFAULT nextval('meals_id_seq') PRIMARY KEY,
  title TEXT NOT NULL,
  category TEXT,
  price DOUBLE NOT NULL DEFAULT 0,
  description TEXT,
  image TEXT,
  ingredients_json TEXT,
  email TEXT,
  distributor_name TEXT,
  rating DOUBLE NOT NULL DEFAULT 0,
  likes INTEGER NOT NULL DEFAULT 0,
  reviews_count INTEGER NOT NULL DEFAULT 0,
  post_time TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_meals_email ON meals(email);

CREATE SEQUENCE IF NOT EXISTS upcoming_meals_id_seq;
CREATE TABLE IF NOT EXISTS upcoming_meals (
  id BIGINT DEFAULT nextval('upcoming_meals_id_seq') PRIMARY KEY,
  title TEXT NOT NULL,
  category TEXT,
  price DOUBLE NOT NULL DEFAULT 0,
  description TEXT,
  image TEXT,
  ingredients_json TEXT,
  email TEXT,
  distributor_name TEXT,
  rating DOUBLE NOT NULL DEFAULT 0,
  likes INTEGER NOT NULL DEFAULT 0,
  reviews_count INTEGER NOT NULL DEFAULT 0,
  post_time TIMESTAMP
);

CREATE TABLE IF NOT EXISTS upcoming_likes (
  upcoming_meal_id BIGINT NOT NULL,
  user_email TEXT NOT NULL,
  time TIMESTAMP,
  UNIQUE(upcoming_meal_id, user_email)
);

CREATE SEQUENCE IF NOT EXISTS likes_id_seq;
CREATE TABLE IF NOT EXISTS likes (
  id BIGINT DEFAULT nextval('likes_id_seq') PRIMARY KEY,
  meal_id BIGINT NOT NULL,
  user_email TEXT NOT NULL,
  time TIMESTAMP,
  UNIQUE(meal_id, user_email)
);

CREATE SEQUENCE IF NOT EXISTS reviews_id_seq;
CREATE TABLE IF NOT EXISTS reviews (
  id BIGINT DEFAULT nextval('reviews_id_seq') PRIMARY KEY,
  meal_id BIGINT NOT NULL,
  email TEXT NOT NULL,
  user_name TEXT,
  review TEXT,
  rating DOUBLE,
  time TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_reviews_meal ON reviews(meal_id);
CREATE INDEX IF NOT EXISTS idx_reviews_email ON reviews(email);

CREATE SEQUENCE IF NOT EXISTS meal_requests_id_seq;
CREATE TABLE IF NOT EXISTS meal_requests (
  id BIGINT DEFAULT nextval('meal_requests_id_seq') PRIMARY KEY,
  meal_id BIGINT NOT NULL,
  user_email TEXT NOT NULL,
  user_name TEXT,
  meal_title TEXT,
  status TEXT CHECK(status IN ('pending','delivered')) NOT NULL,
  requested_at TIMESTAMP,
  UNIQUE(meal_id, user_email)
);

CREATE SEQUENCE IF NOT EXISTS payments_id_seq;
CREATE TABLE IF NOT EXISTS payments (
  id BIGINT DEFAULT nextval('payments_id_seq') PRIMARY KEY,
  email TEXT NOT NULL,
  amount DOUBLE NOT NULL,
  transaction_id TEXT,
  badge TEXT,
  date TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_payments_email ON payments(email);

CREATE SEQUENCE IF NOT EXISTS logs_id_seq;
CREATE TABLE IF NOT EXISTS logs (
  id BIGINT DEFAULT nextval('logs_id_seq') PRIMARY KEY,
  user_email TEXT,
  actor_email TEXT,
  action TEXT,
  detail_json TEXT,
  created_at TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_logs_action ON logs(action);
"""


def utcnow() -> datetime:
    """当前UTC时间（不带时区，与 TIMESTAMP 列一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_database_url(database_url: str) -> str:
    """duckdb://path 形式的URL转为 duckdb.connect 可用的路径"""
    if database_url.startswith("duckdb://"):
        database_url = database_url[len("duckdb://"):]
    return database_url or MEMORY_DB


def fetch_dicts(conn: duckdb.DuckDBPyConnection, query: str,
                params: Optional[list] = None) -> List[Dict[str, Any]]:
    """执行查询，按列名返回字典列表"""
    result = conn.execute(query, params or [])
    columns = [col[0] for col in result.description]
    return [dict(zip(columns, row)) for row in result.fetchall()]


class DatabaseManager:
    """数据库管理器，封装连接生命周期、事务和查询"""

    def __init__(self, database_url: str = MEMORY_DB):
        self._connection: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.RLock()
        self.db_path = parse_database_url(database_url)

    def open(self) -> duckdb.DuckDBPyConnection:
        """打开连接并初始化表结构"""
        with self._lock:
            if self._connection is None:
                if self.db_path != MEMORY_DB:
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                try:
                    self._connection = duckdb.connect(self.db_path)
                    self._connection.execute(SCHEMA_SQL)
                except duckdb.Error as e:
                    self._connection = None
                    raise DatabaseError(f"Failed to open database: {e}")
                logger.info("Database opened at %s", self.db_path)
            return self._connection

    def close(self):
        """关闭连接"""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.info("Database closed")

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        """获取数据库连接，未打开时按需打开"""
        return self.open()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @contextmanager
    def transaction(self) -> Generator[duckdb.DuckDBPyConnection, None, None]:
        """
        数据库事务上下文管理器

        业务异常回滚后原样抛出；唯一约束冲突转换为 DuplicateRecordError，
        其余驱动异常转换为 DatabaseError。
        """
        with self._lock:
            conn = self.connection
            conn.execute("BEGIN TRANSACTION")
            try:
                yield conn
            except BaseException as e:
                try:
                    conn.execute("ROLLBACK")
                except duckdb.Error:
                    logger.warning("Rollback failed", exc_info=True)
                if isinstance(e, duckdb.ConstraintException):
                    raise DuplicateRecordError(str(e)) from e
                if isinstance(e, duckdb.Error):
                    raise DatabaseError(f"数据库操作失败: {e}") from e
                raise
            else:
                try:
                    conn.execute("COMMIT")
                except duckdb.Error as e:
                    raise DatabaseError(f"提交事务失败: {e}") from e

    def fetch_all(self, query: str, params: Optional[list] = None) -> List[Dict[str, Any]]:
        """执行查询并返回全部结果"""
        with self._lock:
            try:
                return fetch_dicts(self.connection, query, params)
            except duckdb.Error as e:
                raise DatabaseError(f"Query execution failed: {e}") from e

    def fetch_one(self, query: str, params: Optional[list] = None) -> Optional[Dict[str, Any]]:
        """执行查询并返回单条结果"""
        rows = self.fetch_all(query, params)
        return rows[0] if rows else None

    def fetch_value(self, query: str, params: Optional[list] = None) -> Any:
        """执行查询并返回第一行第一列"""
        with self._lock:
            try:
                row = self.connection.execute(query, params or []).fetchone()
            except duckdb.Error as e:
                raise DatabaseError(f"Query execution failed: {e}") from e
        return row[0] if row else None

    def write_log(self, conn: duckdb.DuckDBPyConnection, action: str,
                  user_email: Optional[str] = None, actor_email: Optional[str] = None,
                  detail: Optional[Dict[str, Any]] = None):
        """写入操作日志，需在调用方事务内执行"""
        conn.execute(
            "INSERT INTO logs(user_email, actor_email, action, detail_json, created_at) VALUES (?,?,?,?,?)",
            [user_email, actor_email, action, json.dumps(detail or {}, default=str), utcnow()],
        )
