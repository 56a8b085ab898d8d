"""Concurrent read fan-out over independent sessions."""
import asyncio
from collections.abc import Callable
from typing import Any

from sqlalchemy.engine import Engine
from sqlmodel import Session

Read = Callable[[Session], Any]


async def gather_reads(engine: Engine, *reads: Read) -> list[Any]:
    """Run independent read callables concurrently and return results in order.

    Each read gets its own session on a worker thread; a Session is not safe
    to share across threads. There is no cancellation: once started, every
    read runs to completion.
    """

    def run(read: Read) -> Any:
        with Session(engine) as session:
            return read(session)

    return list(await asyncio.gather(*(asyncio.to_thread(run, read) for read in reads)))
