"""Progress and identity interfaces."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressSink(Protocol):
    def start(self, total: int) -> None: ...

    def advance(self, count: int = 1) -> None: ...

    def finish(self) -> None: ...


@runtime_checkable
class IdGenerator(Protocol):
    def __call__(self) -> str: ...
