import os

import pytest

import taichi as ti


@pytest.fixture(autouse=True)
def wanted_arch(request, req_arch, req_options):
    if req_arch is not None:
        ti.init(arch=req_arch, enable_fallback=False, **req_options)
    yield
    if req_arch is not None:
        ti.reset()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keeps CONWAY_* variables of the calling shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("CONWAY_") and name != "CONWAY_WANTED_ARCHS":
            monkeypatch.delenv(name)
    yield


def pytest_generate_tests(metafunc):
    if not getattr(metafunc.function, "__ti_test__", False):
        # For test functions not wrapped with @test_utils.test(),
        # fill with empty values to avoid undefined fixtures
        metafunc.parametrize("req_arch,req_options", [(None, None)], ids=["none"])
