"""End-to-end tests for the chakra-overlay CLI."""

import json

import pytest

pytest.importorskip("cv2")
pytest.importorskip("reportlab")

from chakra.cli import load_plot, main
from chakra.exceptions import PlotInputError


@pytest.fixture
def plot_file(tmp_path):
    path = tmp_path / "plot.json"
    path.write_text(json.dumps({"points": [[200, 150], [600, 150], [600, 450], [200, 450]]}), encoding="utf-8")
    return path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("logging:\n  level: WARNING\n", encoding="utf-8")
    return path


def test_writes_all_artifacts(tmp_path, plot_file, config_file):
    out = tmp_path / "out"
    code = main([str(plot_file), "--output-dir", str(out), "--config", str(config_file), "--rotation", "10", "--layers", "all"])
    assert code == 0
    assert (out / "plot.overlay.geojson").exists()
    assert (out / "plot.preview.png").exists()
    assert len(list(out.glob("vastu-analysis-*.pdf"))) == 1


def test_skip_flags(tmp_path, plot_file, config_file):
    out = tmp_path / "out"
    code = main([str(plot_file), "--output-dir", str(out), "--config", str(config_file), "--skip-pdf", "--skip-preview"])
    assert code == 0
    assert [p.name for p in out.iterdir()] == ["plot.overlay.geojson"]


def test_invalid_transform_exits_with_error(tmp_path, plot_file, config_file):
    code = main([str(plot_file), "--output-dir", str(tmp_path), "--config", str(config_file), "--scale", "0"])
    assert code == 1


def test_unknown_layer_exits_with_error(tmp_path, plot_file, config_file):
    code = main([str(plot_file), "--config", str(config_file), "--layers", "zones,moon"])
    assert code == 1


def test_missing_config_exits_with_error(tmp_path, plot_file):
    assert main([str(plot_file), "--config", str(tmp_path / "missing.yaml")]) == 1


class TestLoadPlot:
    def test_relative_image_resolved(self, tmp_path):
        path = tmp_path / "plot.json"
        path.write_text(json.dumps({"points": [[0, 0], [1, 0], [1, 1]], "image": "plan.png"}), encoding="utf-8")
        assert load_plot(path).image == tmp_path / "plan.png"

    @pytest.mark.parametrize(
        "content",
        ["{not json", json.dumps({"points": [[0, 0], [1, 1]]}), json.dumps({"outline": []})],
    )
    def test_invalid_plot(self, tmp_path, content):
        path = tmp_path / "plot.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(PlotInputError):
            load_plot(path)

    def test_missing_plot(self, tmp_path):
        with pytest.raises(PlotInputError):
            load_plot(tmp_path / "missing.json")


def test_negative_coordinates_rejected(tmp_path, config_file):
    plot = tmp_path / "offset.json"
    plot.write_text(json.dumps({"points": [[-500, -500], [-100, -500], [-100, -100], [-500, -100]]}), encoding="utf-8")
    out = tmp_path / "out"
    code = main([str(plot), "--output-dir", str(out), "--config", str(config_file), "--skip-pdf"])
    assert code == 1
    assert not (out / "offset.preview.png").exists()


def test_large_plot_preview_is_capped(tmp_path):
    """A plot far from the origin gets a downsampled blank canvas, not a full-size one."""
    import cv2

    config = tmp_path / "capped.yaml"
    config.write_text("export:\n  preview_max_dimension: 512\nlogging:\n  level: WARNING\n", encoding="utf-8")
    plot = tmp_path / "far.json"
    plot.write_text(
        json.dumps({"points": [[99000, 99000], [100000, 99000], [100000, 100000], [99000, 100000]]}),
        encoding="utf-8",
    )
    out = tmp_path / "out"
    code = main([str(plot), "--output-dir", str(out), "--config", str(config), "--layers", "all"])
    assert code == 0
    assert cv2.imread(str(out / "far.preview.png")).shape == (512, 512, 3)
    assert len(list(out.glob("vastu-analysis-*.pdf"))) == 1
