from __future__ import annotations

from typing import Any, Callable, Dict

import pytest

from .stubs import RemoteStub


@pytest.fixture
def remote() -> Callable[[Dict[str, Any]], RemoteStub]:
    return RemoteStub
