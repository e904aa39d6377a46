from .waiting import wait_until
from .fakes import FakeUpstream, FakeClientSocket, make_settings, make_runtime_deps

__all__ = ["FakeClientSocket", "FakeUpstream", "make_runtime_deps", "make_settings", "wait_until"]
