import asyncio
import logging

import pytest

from modelviewport.controller.session import ModelLoadSession
from modelviewport.logging_config import NO_MODEL, current_model, model_context, setup_logging

from conftest import FakeParser


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "viewer.log"
    setup_logging(level=logging.DEBUG, log_file=str(path))
    yield path
    package_logger = logging.getLogger("modelviewport")
    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


def test_model_context_is_restored():
    assert current_model() == NO_MODEL
    with model_context("site.glb"):
        assert current_model() == "site.glb"
        with model_context("hall.ifc"):
            assert current_model() == "hall.ifc"
        assert current_model() == "site.glb"
    assert current_model() == NO_MODEL


def test_records_carry_model_ref(log_file):
    log = logging.getLogger("modelviewport.viewer")
    log.info("outside")
    with model_context("site.glb"):
        log.info("inside")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert any("[-] outside" in line for line in lines)
    assert any("[site.glb] inside" in line for line in lines)


def test_load_records_are_tagged_with_their_ref(log_file, scene):
    session = ModelLoadSession(FakeParser(scene, [None]), scene)

    async def scenario():
        await asyncio.gather(session.load("a.glb"), session.load("b.glb"))

    asyncio.run(scenario())

    text = log_file.read_text(encoding="utf-8")
    assert "[a.glb] Loading model a.glb" in text
    assert "[b.glb] Loading model b.glb" in text
    assert "[a.glb] Model b.glb" not in text
