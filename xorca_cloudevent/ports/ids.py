from __future__ import annotations
import uuid
from typing import Callable

IdFactory = Callable[[], str]

def uuid4_factory() -> str:
    return str(uuid.uuid4())
