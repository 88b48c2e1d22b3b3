import asyncio

from modelviewport.controller.diagnostics import run_diagnostics

from conftest import FakeParser, make_handle


def test_healthy_model(scene):
    parser = FakeParser(scene, [make_handle("room", (-1, 0, -1), (1, 3, 1))])
    report = asyncio.run(run_diagnostics("room.glb", parser, scene))

    assert report.format == "glb"
    assert report.parser_ready
    assert report.model_loaded
    assert report.mesh_exists
    assert report.healthy
    assert report.warnings == []
    assert "Mesh exists: Yes" in report.lines()


def test_survey_model_warnings(scene, utm_handle):
    parser = FakeParser(scene, [utm_handle])
    report = asyncio.run(run_diagnostics("site.ifc", parser, scene))

    assert report.anomalies.far_from_origin
    assert any("far from the origin" in w for w in report.warnings)
    assert any("corners" in w for w in report.warnings)
    assert not report.healthy
    # Diagnostics never corrects the model
    assert scene.set_transform_calls == []


def test_millimeter_model_warning(scene, mm_handle):
    report = asyncio.run(run_diagnostics("hall.ifc", FakeParser(scene, [mm_handle]), scene))
    assert any("millimeters" in w for w in report.warnings)


def test_missing_mesh(scene):
    report = asyncio.run(run_diagnostics("tower.glb", FakeParser(scene, [None]), scene))

    assert report.model_loaded
    assert not report.mesh_exists
    assert report.error_message == "Model loaded but mesh is missing"
    assert report.metadata["elements"] == 42


def test_parser_failure_is_captured(scene):
    report = asyncio.run(run_diagnostics("tower.glb", FakeParser(scene, [RuntimeError("timeout")]), scene))

    assert not report.model_loaded
    assert "timeout" in report.error_message
    assert "Error: Error loading model: timeout" in report.lines()


def test_configuration_failure_is_captured(scene):
    parser = FakeParser(scene)
    parser.configure_error = PermissionError("cache not writable")
    report = asyncio.run(run_diagnostics("tower.glb", parser, scene))

    assert not report.parser_ready
    assert parser.calls == 0
    assert "cache not writable" in report.error_message


def test_unknown_format_is_a_warning(scene):
    parser = FakeParser(scene, [make_handle("x", (0, 0, 0), (1, 1, 1))])
    report = asyncio.run(run_diagnostics("model.dwg", parser, scene))

    assert report.format is None
    assert any(".dwg" in w for w in report.warnings)
