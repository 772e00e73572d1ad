from typetrainer.paths import ensure_directories, get_data_root


def test_ensure_directories(tmp_path):
    dirs = ensure_directories(tmp_path)
    assert (tmp_path / "logs").exists()
    assert dirs["logs"] == tmp_path / "logs"


def test_get_data_root_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert get_data_root({"data_root": "~/typing"}) == (tmp_path / "typing").resolve()
