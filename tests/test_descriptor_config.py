from pathlib import Path

import pytest

from panozoom.config import (
    CONFIG_ENV_VAR,
    TilerConfig,
    config_from_env,
    load_config,
)
from panozoom.descriptor import dzi_xml, write_descriptor


def test_dzi_xml_exact():
    assert dzi_xml(512, 600, 200) == (
        '<?xml version="1.0" encoding="UTF-8"?><Image '
        'xmlns="http://schemas.microsoft.com/deepzoom/2008" TileSize="512" '
        'Overlap="0" Format="jpg"><Size Width="600" Height="200"/></Image>'
    )


def test_write_descriptor_has_no_trailing_newline(tmp_path):
    p = tmp_path / "tiles.dzi"
    write_descriptor(p, 512, 512, 100)
    data = p.read_bytes()
    assert data.endswith(b"</Image>")
    assert b'Width="512" Height="100"' in data


def test_defaults():
    cfg = TilerConfig()
    assert cfg.tile_size == 512
    assert cfg.output_root == Path("tiles")


def test_load_config(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text(
        "output_root: out/pyramid\n"
        "tile_size: 256\n"
        "jpeg_quality: 80\n"
        "show_progress: false\n"
    )
    cfg = load_config(p)
    assert cfg.output_root == Path("out/pyramid")
    assert cfg.tile_size == 256
    assert cfg.jpeg_quality == 80
    assert cfg.show_progress is False
    assert cfg.log_file is None


def test_empty_config_file_gives_defaults(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("")
    assert load_config(p) == TilerConfig()


@pytest.mark.parametrize(
    "kwargs",
    [{"tile_size": 0}, {"jpeg_quality": 100}, {"jpeg_quality": 0}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        TilerConfig(**kwargs)


def test_config_from_env(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("tile_size: 64\n")
    assert config_from_env({}) == TilerConfig()
    assert config_from_env({CONFIG_ENV_VAR: str(p)}).tile_size == 64


@pytest.mark.parametrize("body", ["- a\n- b\n", "just a string\n", "42\n"])
def test_config_must_be_a_mapping(tmp_path, body):
    p = tmp_path / "cfg.yaml"
    p.write_text(body)
    with pytest.raises(ValueError):
        load_config(p)
