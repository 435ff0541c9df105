"""Shared fixtures for portkill tests."""

import pytest

from portkill.adapters import QueryAdapter
from portkill.errors import ProcessNotFoundError, QueryIOError
from portkill.parsing import LsofParser, PsDetailParser
from portkill.platforms import Platform


class FakeAdapter(QueryAdapter):
    """QueryAdapter returning canned text and recording every call."""

    def __init__(self, sockets: str = "", attributes: str = "", error: str | None = None) -> None:
        super().__init__()
        self.sockets = sockets
        self.attributes = attributes
        self.error = error
        self.socket_calls: list[int] = []
        self.attribute_calls: list[int] = []

    def list_socket_owners(self, port: int) -> str:
        self.socket_calls.append(port)
        if self.error is not None:
            raise QueryIOError(self.error)
        return self.sockets

    def list_process_attributes(self, pid: int) -> str:
        self.attribute_calls.append(pid)
        if self.error is not None:
            raise QueryIOError(self.error)
        if not self.attributes:
            raise ProcessNotFoundError(pid)
        return self.attributes


def make_platform(adapter: FakeAdapter) -> Platform:
    return Platform(
        name="fake",
        adapter=adapter,
        socket_parser=LsofParser(),
        detail_parser=PsDetailParser(),
        supports_graceful=True,
    )


@pytest.fixture
def fake_adapter() -> FakeAdapter:
    return FakeAdapter()


@pytest.fixture
def fake_platform(fake_adapter: FakeAdapter) -> Platform:
    return make_platform(fake_adapter)
