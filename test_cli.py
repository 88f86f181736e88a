"""
Test Configuration, Resources and CLI
=====================================

YAML loading for the cache config and resource table, the render and
fingerprint commands, and structured log output.

Usage:
    pytest test_cli.py
"""

import json
import logging
from pathlib import Path

import cv2
import pytest

from tinyshape_cache import DEFAULT_CAPACITY, OverlayPolicy, ShapeCacheConfig
from tinyshape_cli.cli import main, shape_from_dict
from tinyshape_logging import LogEvent, create_logger
from tinyshape_logging.events import CACHE_EVENTS, ERROR_EVENTS, OVERLAY_EVENTS
from tinyshape_render import ConstructionMode, ResourceTable, StaticPlatform

CONFIG_DIR = Path(__file__).parent / "config"
SHAPE_YAML = CONFIG_DIR / "shapes" / "button.yaml"
VALUES_YAML = CONFIG_DIR / "values.yaml"


# Config ---------------------------------------------------------------------------
def test_config_from_yaml(tmp_path):
    print("\n" + "=" * 60)
    print("TEST: Config from YAML")
    print("=" * 60)

    path = tmp_path / "cache.yaml"
    path.write_text(
        "capacity: 12\n"
        "overlay_policy: keyed_by_effect\n"
        "construction_mode: strict\n"
        "log_level: warning\n"
        "platform:\n"
        "  density: 2.0\n"
        "  dark_mode: true\n"
    )

    config = ShapeCacheConfig.from_yaml(path)

    assert config.capacity == 12
    assert config.overlay_policy is OverlayPolicy.KEYED_BY_EFFECT
    assert config.construction_mode is ConstructionMode.STRICT
    assert config.log_level == "WARNING"
    assert config.logging_level == logging.WARNING
    assert config.platform == StaticPlatform(overlay_supported=True, dark_mode=True, density=2.0)
    print(f"✓ Loaded {config}")


def test_shipped_config_loads():
    config = ShapeCacheConfig.from_yaml(CONFIG_DIR / "cache.yaml")
    assert config.capacity == 64
    assert config.overlay_policy is OverlayPolicy.UNKEYED_FORCED_BYPASS


@pytest.mark.parametrize("capacity", [None, 0, -5])
def test_config_capacity_fallback(capacity):
    assert ShapeCacheConfig(capacity=capacity).capacity == DEFAULT_CAPACITY


def test_config_rejects_invalid_values(tmp_path):
    with pytest.raises(ValueError):
        ShapeCacheConfig(overlay_policy="sometimes")
    with pytest.raises(ValueError):
        ShapeCacheConfig(construction_mode="pedantic")
    with pytest.raises(ValueError):
        ShapeCacheConfig(log_level="TRACE")
    with pytest.raises(FileNotFoundError):
        ShapeCacheConfig.from_yaml(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("capacity: [1, 2\n")
    with pytest.raises(ValueError):
        ShapeCacheConfig.from_yaml(broken)


# Resources ------------------------------------------------------------------------
def test_resource_table_resolution():
    table = ResourceTable.from_yaml(VALUES_YAML, platform=StaticPlatform(density=2.0))

    assert table.resolve_color("primary") == 0xFF2196F3
    assert table.resolve_color("@color/outline") == 0xFFBDBDBD
    assert table.resolve_dimension("@dimen/corner") == 16.0
    assert table.resolve_dimension("hairline") == 1.0
    assert table.dimension("3dp") == 6.0
    assert table.color("#80000000") == 0x80000000


def test_resource_table_unknown_names():
    table = ResourceTable.from_yaml(VALUES_YAML)

    with pytest.raises(KeyError, match="primary_dark"):
        table.resolve_color("@color/accent")
    with pytest.raises(KeyError):
        table.dimension("@dimen/gutter")
    with pytest.raises(ValueError):
        table.dimension("8em")


def test_shape_from_dict():
    resources = ResourceTable.from_yaml(VALUES_YAML)
    params = shape_from_dict(
        {
            "shape": "oval",
            "solid": "@color/primary",
            "corner_radii": [4, 0, 4, 0],
            "state_colors": {"default": "@color/primary", "pressed": "@color/primary_dark"},
        },
        resources,
    )

    assert params.kind.name == "OVAL"
    assert params.corner_radii == (4.0, 4.0, 0.0, 0.0, 4.0, 4.0, 0.0, 0.0)
    assert params.state_colors.default == 0xFF2196F3
    assert params.overlay_requested is False


def test_shape_from_dict_rejects_unknown_kind():
    with pytest.raises(ValueError):
        shape_from_dict({"shape": "hexagon"}, ResourceTable())


# CLI ------------------------------------------------------------------------------
def test_render_command_writes_png(tmp_path, capsys):
    print("\n" + "=" * 60)
    print("TEST: render command")
    print("=" * 60)

    output = tmp_path / "button.png"
    main(["render", str(SHAPE_YAML), "--output", str(output), "--resources", str(VALUES_YAML)])

    image = cv2.imread(str(output), cv2.IMREAD_UNCHANGED)
    assert image.shape == (96, 240, 4)
    assert image[48, 120, 3] == 255

    out = capsys.readouterr().out
    assert "OverlayShape 240x96" in out
    print("✓ PNG written")


def test_render_pressed_state_differs(tmp_path):
    default = tmp_path / "default.png"
    pressed = tmp_path / "pressed.png"
    base = [str(SHAPE_YAML), "--resources", str(VALUES_YAML)]

    main(["render", *base, "-o", str(default)])
    main(["render", *base, "-o", str(pressed), "--state", "pressed", "--no-cache"])

    assert (cv2.imread(str(default), cv2.IMREAD_UNCHANGED) != cv2.imread(str(pressed), cv2.IMREAD_UNCHANGED)).any()


def test_fingerprint_command(capsys):
    main(["fingerprint", str(SHAPE_YAML), "--resources", str(VALUES_YAML)])
    plain = capsys.readouterr().out.strip()

    main(["fingerprint", str(SHAPE_YAML), "--resources", str(VALUES_YAML), "--keyed"])
    keyed = capsys.readouterr().out.strip()

    assert plain.startswith("0|")
    assert "8.0" in plain
    assert keyed.startswith(plain)
    assert keyed != plain


def test_fingerprint_matches_render_key(tmp_path, capsys):
    """Both commands resolve dp values and the overlay policy from the same config."""
    common = ["--config", str(CONFIG_DIR / "cache.yaml"), "--resources", str(VALUES_YAML)]

    main(["render", str(SHAPE_YAML), "-o", str(tmp_path / "button.png"), *common])
    render_key = capsys.readouterr().out.strip().rsplit("[", 1)[1].rstrip("]")

    main(["fingerprint", str(SHAPE_YAML), *common])
    printed = capsys.readouterr().out.strip()

    assert printed == render_key
    assert printed.endswith("|16.0")


def test_fingerprint_follows_configured_overlay_policy(tmp_path, capsys):
    keyed_config = tmp_path / "cache.yaml"
    keyed_config.write_text("overlay_policy: keyed_by_effect\n")

    main(["fingerprint", str(SHAPE_YAML), "--resources", str(VALUES_YAML), "--config", str(keyed_config)])
    from_config = capsys.readouterr().out.strip()

    main(["fingerprint", str(SHAPE_YAML), "--resources", str(VALUES_YAML), "--keyed"])
    from_flag = capsys.readouterr().out.strip()

    assert "overlay=1:" in from_config
    assert from_config == from_flag


def test_cli_errors_exit_with_status_one(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["fingerprint", str(tmp_path / "nope.yaml")])
    assert exc.value.code == 1
    assert "❌ Error" in capsys.readouterr().err

    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1


# Logging --------------------------------------------------------------------------
def test_structured_logger_emits_json(caplog):
    logger = create_logger("cli_test", level=logging.INFO)

    with caplog.at_level(logging.DEBUG, logger="tinyshape.cli_test"):
        logger.set_level(logging.INFO)
        logger.debug(LogEvent.CACHE_HIT, "suppressed")
        logger.warning(LogEvent.OVERLAY_DEGRADED, "Overlay dropped", metadata={'fingerprint': '0|1'})

    records = [r for r in caplog.records if r.name == "tinyshape.cli_test"]
    assert len(records) == 1

    entry = json.loads(records[0].getMessage())
    assert entry['event'] == LogEvent.OVERLAY_DEGRADED.value
    assert entry['component'] == "cli_test"
    assert entry['level'] == "WARNING"
    assert entry['metadata'] == {'fingerprint': '0|1'}


def test_logger_levels_are_independent_per_instance(caplog):
    chatty = create_logger("shared_test", level=logging.INFO)
    quiet = create_logger("shared_test", level=logging.ERROR)

    with caplog.at_level(logging.DEBUG, logger="tinyshape.shared_test"):
        chatty.info(LogEvent.CACHE_CLEARED, "kept")
        quiet.info(LogEvent.CACHE_CLEARED, "dropped")

    messages = [json.loads(r.getMessage())["message"] for r in caplog.records if r.name == "tinyshape.shared_test"]
    assert messages == ["kept"]


def test_config_error_is_logged(tmp_path, caplog):
    broken = tmp_path / "cache.yaml"
    broken.write_text("overlay_policy: sometimes\n")

    with caplog.at_level(logging.ERROR, logger="tinyshape.cli"):
        with pytest.raises(SystemExit):
            main(["render", str(SHAPE_YAML), "-o", str(tmp_path / "x.png"), "--config", str(broken)])

    events = [json.loads(r.getMessage())["event"] for r in caplog.records if r.name == "tinyshape.cli"]
    assert events == [LogEvent.CONFIG_ERROR.value]


def test_every_event_has_one_category():
    categories = [CACHE_EVENTS, OVERLAY_EVENTS, ERROR_EVENTS]
    for event in LogEvent:
        assert sum(event in c for c in categories) == 1, event


def main_tests():
    """Run the fixture-free tests."""
    print("\n🎸 tinyshape_cli - Config and CLI Tests")
    print("=" * 60)

    test_shipped_config_loads()
    test_resource_table_resolution()
    test_resource_table_unknown_names()
    test_shape_from_dict()

    print("\n" + "=" * 60)
    print("✅ ALL TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main_tests()
