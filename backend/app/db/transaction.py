"""
事务辅助模块
提供带超时上限的原子事务上下文
"""

import time
from contextlib import contextmanager
from typing import Callable, Generator

from sqlmodel import Session

# 原子事务的默认超时（秒）
TRANSACTION_TIMEOUT_SECONDS = 10.0


class TransactionTimeoutError(Exception):
    """事务执行超过超时上限"""

    def __init__(self, elapsed: float, timeout: float, step: str = "commit"):
        self.elapsed = elapsed
        self.timeout = timeout
        self.step = step
        self.message = (
            f"Transaction exceeded {timeout:g}s timeout at '{step}' "
            f"(elapsed {elapsed:.2f}s)"
        )
        super().__init__(self.message)


class TransactionDeadline:
    """
    事务截止时间

    事务内的每个步骤结束后调用 check()，超时即抛出 TransactionTimeoutError，
    由 atomic() 负责回滚
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self._clock = clock
        self._started_at = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started_at

    @property
    def remaining(self) -> float:
        return max(0.0, self.timeout - self.elapsed)

    def check(self, step: str) -> None:
        elapsed = self.elapsed
        if elapsed > self.timeout:
            raise TransactionTimeoutError(elapsed, self.timeout, step)


@contextmanager
def atomic(
    session: Session,
    timeout: float = TRANSACTION_TIMEOUT_SECONDS,
    clock: Callable[[], float] = time.monotonic
) -> Generator[TransactionDeadline, None, None]:
    """
    原子事务上下文

    块内的写操作只 flush 不 commit；正常退出时检查截止时间后统一提交，
    任何异常（包括超时）都会整体回滚并原样抛出

    使用示例：
        with atomic(session, timeout=10) as deadline:
            repo.create(..., commit=False)
            deadline.check("create")

    Args:
        session: SQLModel 数据库会话
        timeout: 超时上限（秒）
        clock: 单调时钟，测试时可替换

    Yields:
        TransactionDeadline 对象
    """
    deadline = TransactionDeadline(timeout, clock)
    try:
        yield deadline
        deadline.check("commit")
        session.commit()
    except Exception:
        session.rollback()
        raise
