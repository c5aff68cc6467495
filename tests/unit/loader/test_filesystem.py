"""FilesystemFragmentLoader のテスト。"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from layerconf.loader import FilesystemFragmentLoader, FragmentCache, FragmentLoadError
from layerconf.loader._reader import read_fragment, read_fragment_async
from layerconf.models.fragment import Fragment
from layerconf.models.options import ConfigOptions

# =============================================================================
# ヘルパー
# =============================================================================


def _write_json(path: Path, data: dict[str, object]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    """system / home / project / sub の4階層の rc ファイルを作成する。"""
    home = tmp_path / "home"
    project = tmp_path / "work" / "project"
    sub = project / "sub"
    sub.mkdir(parents=True)
    home.mkdir()
    return {
        "system": _write_json(tmp_path / "etc" / ".layerconfrc", {"from": "system"}),
        "home": _write_json(home / ".layerconfrc.json", {"from": "home"}),
        "project": _write_json(project / ".layerconfrc", {"from": "project", "root": True}),
        "sub": _write_json(sub / ".layerconfrc.json", {"from": "sub"}),
        "root": tmp_path,
        "home_dir": home,
        "cwd": sub,
    }


def _options(layout: dict[str, Path], **extra: object) -> ConfigOptions:
    return ConfigOptions(
        cwd=layout["cwd"],
        fs_root=layout["root"],
        fs_home=layout["home_dir"],
        **extra,  # type: ignore[arg-type]
    )


# =============================================================================
# 探索順序
# =============================================================================


class TestDiscoveryOrder:
    def test_general_to_specific(self, layout: dict[str, Path]) -> None:
        chain = FilesystemFragmentLoader().load(_options(layout))
        assert [f.source for f in chain] == [
            str(layout["system"]),
            str(layout["home"]),
            str(layout["project"]),
            str(layout["sub"]),
        ]

    def test_fragments_carry_data(self, layout: dict[str, Path]) -> None:
        chain = FilesystemFragmentLoader().load(_options(layout))
        assert chain[2].data == {"from": "project", "root": True}
        assert chain[2].is_root is True

    def test_toml_after_json_in_same_directory(self, tmp_path: Path) -> None:
        _write_json(tmp_path / ".layerconfrc.json", {"a": 1})
        (tmp_path / ".layerconfrc.toml").write_text("a = 2\n", encoding="utf-8")
        options = ConfigOptions(cwd=tmp_path, fs_root=tmp_path, fs_home=tmp_path)
        chain = FilesystemFragmentLoader().load(options)
        assert [f.data for f in chain] == [{"a": 1}, {"a": 2}]

    def test_custom_name(self, tmp_path: Path) -> None:
        _write_json(tmp_path / ".bemrc", {"a": 1})
        _write_json(tmp_path / ".layerconfrc", {"b": 2})
        options = ConfigOptions(
            cwd=tmp_path, fs_root=tmp_path, fs_home=tmp_path, name="bem"
        )
        chain = FilesystemFragmentLoader().load(options)
        assert [f.data for f in chain] == [{"a": 1}]

    def test_no_files_yields_empty_chain(self, tmp_path: Path) -> None:
        options = ConfigOptions(cwd=tmp_path, fs_root=tmp_path, fs_home=tmp_path)
        assert FilesystemFragmentLoader().load(options) == ()


# =============================================================================
# 構築オプション
# =============================================================================


class TestOptionLayering:
    def test_defaults_first_extend_by_then_explicit_last(
        self, layout: dict[str, Path], tmp_path: Path
    ) -> None:
        explicit = _write_json(tmp_path / "argv.json", {"argv": True})
        options = _options(
            layout,
            defaults={"d": 1},
            extend_by={"e": 1},
            path_to_config=explicit,
        )
        chain = FilesystemFragmentLoader().load(options)
        assert chain[0].data == {"d": 1}
        assert chain[0].source is None
        assert chain[-2].data == {"e": 1}
        assert chain[-1].source == str(explicit)
        assert len(chain) == 7

    def test_explicit_not_loaded_twice(self, layout: dict[str, Path]) -> None:
        options = _options(layout, path_to_config=layout["sub"])
        chain = FilesystemFragmentLoader().load(options)
        sources = [f.source for f in chain]
        assert sources.count(str(layout["sub"])) == 1
        assert sources[-1] == str(layout["sub"])

    def test_missing_explicit_raises(self, layout: dict[str, Path]) -> None:
        options = _options(layout, path_to_config=Path("missing.json"))
        with pytest.raises(FragmentLoadError, match="not found"):
            FilesystemFragmentLoader().load(options)

    def test_invalid_file_raises(self, layout: dict[str, Path]) -> None:
        layout["sub"].write_text("{broken", encoding="utf-8")
        with pytest.raises(FragmentLoadError, match="Invalid configuration file"):
            FilesystemFragmentLoader().load(_options(layout))


# =============================================================================
# 探索中に消えたファイル
# =============================================================================


class TestVanishedCandidate:
    """is_file() の確認後、読み込み前に削除された探索候補はスキップされる。"""

    def test_sync_skips_vanished_file(
        self, layout: dict[str, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        vanished = layout["home"]

        def read_or_vanish(path: Path) -> Fragment:
            if path == vanished:
                vanished.unlink()
            return read_fragment(path)

        monkeypatch.setattr(
            "layerconf.loader._filesystem.read_fragment", read_or_vanish
        )
        chain = FilesystemFragmentLoader().load(_options(layout))
        assert [f.source for f in chain] == [
            str(layout["system"]),
            str(layout["project"]),
            str(layout["sub"]),
        ]

    async def test_async_skips_vanished_file(
        self, layout: dict[str, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        vanished = layout["home"]

        async def read_or_vanish(path: Path) -> Fragment:
            if path == vanished:
                vanished.unlink()
            return await read_fragment_async(path)

        monkeypatch.setattr(
            "layerconf.loader._filesystem.read_fragment_async", read_or_vanish
        )
        chain = await FilesystemFragmentLoader().load_async(_options(layout))
        assert str(vanished) not in [f.source for f in chain]
        assert len(chain) == 3


# =============================================================================
# 非同期版
# =============================================================================


class TestLoadAsync:
    async def test_matches_sync(self, layout: dict[str, Path], tmp_path: Path) -> None:
        explicit = _write_json(tmp_path / "argv.json", {"argv": True})
        options = _options(layout, defaults={"d": 1}, path_to_config=explicit)
        loader = FilesystemFragmentLoader()
        assert await loader.load_async(options) == loader.load(options)

    async def test_missing_explicit_raises(self, layout: dict[str, Path]) -> None:
        options = _options(layout, path_to_config=Path("missing.json"))
        with pytest.raises(FragmentLoadError, match="not found"):
            await FilesystemFragmentLoader().load_async(options)

    async def test_invalid_file_raises(self, layout: dict[str, Path]) -> None:
        layout["home"].write_text("[1]", encoding="utf-8")
        with pytest.raises(FragmentLoadError, match="must contain an object"):
            await FilesystemFragmentLoader().load_async(_options(layout))


# =============================================================================
# キャッシュ
# =============================================================================


class TestInjectedCache:
    def test_without_cache_reads_every_time(self, layout: dict[str, Path]) -> None:
        loader = FilesystemFragmentLoader()
        loader.load(_options(layout))
        _write_json(layout["sub"], {"from": "changed"})
        assert loader.load(_options(layout))[-1].data == {"from": "changed"}

    def test_cached_chain_reused(self, layout: dict[str, Path]) -> None:
        cache = FragmentCache()
        loader = FilesystemFragmentLoader(cache=cache)
        first = loader.load(_options(layout))
        _write_json(layout["sub"], {"from": "changed"})
        assert loader.load(_options(layout)) is first
        assert len(cache) == 1

    def test_cache_shared_between_sync_and_async(self, layout: dict[str, Path]) -> None:
        cache = FragmentCache()
        FilesystemFragmentLoader(cache=cache).load(_options(layout))
        assert cache.get(_options(layout)) is not None

    async def test_async_uses_cache(self, layout: dict[str, Path]) -> None:
        cache = FragmentCache()
        loader = FilesystemFragmentLoader(cache=cache)
        first = await loader.load_async(_options(layout))
        assert await loader.load_async(_options(layout)) is first

    def test_clear_invalidates(self, layout: dict[str, Path]) -> None:
        cache = FragmentCache()
        loader = FilesystemFragmentLoader(cache=cache)
        loader.load(_options(layout))
        _write_json(layout["sub"], {"from": "changed"})
        cache.clear()
        assert loader.load(_options(layout))[-1].data == {"from": "changed"}

    def test_failure_not_cached(self, layout: dict[str, Path]) -> None:
        cache = FragmentCache()
        layout["sub"].write_text("{broken", encoding="utf-8")
        with pytest.raises(FragmentLoadError):
            FilesystemFragmentLoader(cache=cache).load(_options(layout))
        assert len(cache) == 0
