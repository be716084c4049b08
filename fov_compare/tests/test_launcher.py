from __future__ import annotations

import io
import json

from fov_compare import launcher


def test_print_query_outputs_canonical_query_and_rectangles(tmp_path):
    out = io.StringIO()
    code = launcher.main(
        [
            "--settings",
            str(tmp_path / "missing.json"),
            "--url",
            "https://example.org/?f=50&f=35&o=l&o=p&sw=23.5&sw=36&sh=15.6&sh=24",
            "--print-query",
        ],
        out=out,
    )

    lines = out.getvalue().splitlines()
    assert code == 0
    assert lines[0] == "f=50&o=l&sw=23.5&sh=15.6&f=35&o=p&sw=36&sh=24"
    assert lines[1].startswith("yellow: 35mm portrait")
    assert lines[2] == "red: 50mm landscape -> 141.3 x 93.6"


def test_print_query_uses_presets_file(tmp_path):
    presets = tmp_path / "presets.json"
    presets.write_text(json.dumps([{"name": "Tiny", "width": 4, "height": 3}]), encoding="utf-8")
    out = io.StringIO()

    launcher.main(["--settings", str(tmp_path / "none.json"), "--presets", str(presets), "--print-query"], out=out)

    assert out.getvalue().splitlines()[0] == "f=35&o=l&sw=4&sh=3"


def test_resolve_settings_path_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert launcher.resolve_settings_path(None) == (tmp_path / "fov_settings.json").resolve()
