"""Tests for the generation run (extract + ordered insertion)."""

import pytest

from confgen.errors import ConfigurationError, MarkerNotFound, SourceError
from confgen.generate import apply_tag, generate, list_extension_files, run
from confgen.insert import TargetFile
from confgen.tags import Tag, Target, lookup

KEYBIND_MARKER = "-- % Extension-provided key bindings"


def _targets(tmp_path, config_text, manifest_text="build-depends: base\n"):
    (tmp_path / "Config.hs").write_text(config_text)
    (tmp_path / "xmonad.cabal").write_text(manifest_text)
    return {
        Target.CONFIG: TargetFile.load(tmp_path / "Config.hs"),
        Target.MANIFEST: TargetFile.load(tmp_path / "xmonad.cabal"),
    }


class TestListExtensionFiles:
    def test_reverse_order_without_aggregate(self, workspace):
        files = list_extension_files(workspace / "contrib")
        assert [f.name for f in files] == ["WorkspaceDir.hs", "Dmenu.hs", "Accordion.hs"]

    def test_ignores_other_suffixes(self, workspace):
        names = [f.name for f in list_extension_files(workspace / "contrib")]
        assert "README" not in names

    def test_empty_dir(self, tmp_path):
        assert list_extension_files(tmp_path) == []

    def test_excludes_generated_targets(self, prepared):
        files = list_extension_files(prepared / "contrib", exclude={"Config.hs", "xmonad.cabal"})
        assert [f.name for f in files] == ["WorkspaceDir.hs", "Dmenu.hs", "Accordion.hs"]


class TestOrdering:
    def test_files_read_in_forward_order_below_marker(self, tmp_path):
        contrib = tmp_path / "contrib"
        contrib.mkdir()
        (contrib / "A.hs").write_text("-- %keybind , ((modMask, xK_a), actionA)\n")
        (contrib / "B.hs").write_text("-- %keybind , ((modMask, xK_b), actionB)\n")
        (contrib / "Z.hs").write_text("module Z where\n")
        targets = _targets(tmp_path, f"keys =\n    [ x\n    {KEYBIND_MARKER}\n    ]\n")

        generate(list_extension_files(contrib), targets, active=True)

        assert targets[Target.CONFIG].lines == [
            "keys =",
            "    [ x",
            f"    {KEYBIND_MARKER}",
            "    --   For extension A:",
            "    , ((modMask, xK_a), actionA)",
            "    --   For extension B:",
            "    , ((modMask, xK_b), actionB)",
            "    ]",
        ]

    def test_payloads_keep_extraction_order(self, tmp_path):
        src = tmp_path / "Multi.hs"
        src.write_text("-- %layout , one\n-- %layout , two\n-- %layout , three\n")
        targets = _targets(tmp_path, "-- % Extension-provided layouts\n")

        generate([src], targets, active=True)

        assert targets[Target.CONFIG].lines[1:] == [
            "    --   For extension Multi:",
            "    , one",
            "    , two",
            "    , three",
        ]


class TestModes:
    def test_passive_definition(self, tmp_path):
        src = tmp_path / "Def.hs"
        src.write_text("-- %def foo = bar\n")
        targets = _targets(tmp_path, "-- % Extension-provided definitions\n")
        generate([src], targets, active=False)
        assert targets[Target.CONFIG].lines[2] == "-- foo = bar"

    def test_active_definition(self, tmp_path):
        src = tmp_path / "Def.hs"
        src.write_text("-- %def foo = bar\n")
        targets = _targets(tmp_path, "-- % Extension-provided definitions\n")
        generate([src], targets, active=True)
        assert targets[Target.CONFIG].lines[2] == "foo = bar"

    @pytest.mark.parametrize("active", [True, False])
    def test_dependency_appended_to_field(self, tmp_path, active):
        src = tmp_path / "Dep.hs"
        src.write_text("-- %cabalbuild process\n-- %cabalbuild mtl\n")
        targets = _targets(tmp_path, "", manifest_text="name: x\nbuild-depends: base\n")
        result = generate([src], targets, active=active)
        assert targets[Target.MANIFEST].lines == ["name: x", "build-depends: base, process, mtl"]
        assert result.group_comments == 0


class TestApplyTag:
    def test_no_payloads_no_comment(self, tmp_path):
        targets = _targets(tmp_path, f"{KEYBIND_MARKER}\n")
        assert apply_tag(targets[Target.CONFIG], lookup(Tag.KEYBIND), [], "X", True) == (0, 0)
        assert targets[Target.CONFIG].lines == [KEYBIND_MARKER]

    def test_missing_marker_no_partial_insert(self, tmp_path):
        targets = _targets(tmp_path, "no markers\n")
        config = targets[Target.CONFIG]
        with pytest.raises(MarkerNotFound) as exc_info:
            apply_tag(config, lookup(Tag.KEYBIND), [", a", ", b"], "Ext", True)
        assert config.lines == ["no markers"]
        err = exc_info.value
        assert err.tag == "%keybind"
        assert err.marker == KEYBIND_MARKER
        assert err.extension == "Ext"
        assert "Config.hs" in str(err)


class TestRun:
    def test_full_run_passive(self, prepared):
        contrib = prepared / "contrib"
        result = run(contrib)
        assert result.extensions == ["WorkspaceDir", "Dmenu", "Accordion"]
        config = (contrib / "Config.hs").read_text().splitlines()
        manifest = (contrib / "xmonad.cabal").read_text()

        assert "    build-depends:  base>=2.0, X11>=1.2.1, xmonad, process>=1.0" in manifest
        start = config.index("-- % Extension-provided imports")
        assert config[start + 1:start + 7] == [
            "--   For extension Accordion:",
            "-- import XMonadContrib.Accordion",
            "--   For extension Dmenu:",
            "-- import XMonadContrib.Dmenu",
            "--   For extension WorkspaceDir:",
            "-- import XMonadContrib.WorkspaceDir",
        ]
        assert "XMonadContrib.Everything" not in "\n".join(config)
        assert "Should.Not.Appear" not in "\n".join(config)

    def test_full_run_active(self, prepared):
        contrib = prepared / "contrib"
        run(contrib, active=True)
        config = (contrib / "Config.hs").read_text().splitlines()
        start = config.index("    -- % Extension-provided key bindings lists")
        assert config[start + 1:start + 5] == [
            "    --   For extension WorkspaceDir:",
            "    ++",
            "    [ ((modMask .|. controlMask, k), changeDir i)",
            "    | (i, k) <- zip dirs [xK_F1 ..] ]",
        ]
        assert '    , ((modMask, xK_slash), spawn "find \\/usr\\/bin")  -- search binaries' in config

    def test_block_grows_only_below_marker(self, prepared):
        contrib = prepared / "contrib"
        before = (contrib / "Config.hs").read_text().splitlines()
        run(contrib)
        after = (contrib / "Config.hs").read_text().splitlines()
        i = after.index("-- % Extension-provided definitions")
        assert after[i - 1] == ""
        j = before.index("-- % Extension-provided definitions")
        assert after[i + 1:i + 3] == [
            "--   For extension WorkspaceDir:",
            '-- workspaceDirPrompt = changeDir "~"',
        ]
        assert after[i + 3] == before[j + 1]

    def test_dry_run_does_not_write(self, prepared):
        contrib = prepared / "contrib"
        before = (contrib / "Config.hs").read_text()
        result = run(contrib, dry_run=True)
        assert result.dry_run is True
        assert result.payloads > 0
        assert (contrib / "Config.hs").read_text() == before

    def test_output_dir(self, workspace):
        out = workspace / "out"
        out.mkdir()
        run(workspace / "contrib", output_dir=out, template_dir=workspace / "main")
        assert "For extension Dmenu" in (out / "Config.hs").read_text()
        assert "For extension" not in (workspace / "main" / "Config.hs").read_text()

    def test_missing_marker_aborts_without_writing(self, prepared):
        contrib = prepared / "contrib"
        config = contrib / "Config.hs"
        stripped = "\n".join(
            line for line in config.read_text().splitlines()
            if "Extension-provided layouts" not in line
        ) + "\n"
        config.write_text(stripped)
        with pytest.raises(MarkerNotFound, match="%layout"):
            run(contrib)
        assert config.read_text() == stripped
        assert "process>=1.0" not in (contrib / "xmonad.cabal").read_text()

    def test_missing_target_file(self, workspace):
        with pytest.raises(ConfigurationError, match="copy the templates"):
            run(workspace / "contrib")


class TestUntouchedBytes:
    def test_form_feed_survives_run(self, prepared):
        contrib = prepared / "contrib"
        config = contrib / "Config.hs"
        config.write_text(config.read_text().replace(
            "module Config where\n", "module Config where\n-- section\x0cbreak\n",
        ))
        run(contrib)
        text = config.read_bytes()
        assert b"-- section\x0cbreak\n" in text
        assert b"-- section\nbreak" not in text

    def test_crlf_template_stays_crlf(self, prepared):
        contrib = prepared / "contrib"
        for name in ("Config.hs", "xmonad.cabal"):
            path = contrib / name
            path.write_bytes(path.read_bytes().replace(b"\n", b"\r\n"))
        run(contrib, active=True)

        config = (contrib / "Config.hs").read_bytes()
        assert config.startswith(b"module Config where\r\n\r\nimport XMonad\r\n")
        assert b"\n" not in config.replace(b"\r\n", b"")
        assert b"--   For extension Dmenu:\r\nimport XMonadContrib.Dmenu\r\n" in config
        manifest = (contrib / "xmonad.cabal").read_bytes()
        assert b"xmonad, process>=1.0\r\n" in manifest

    def test_undecodable_extension_names_file(self, prepared):
        contrib = prepared / "contrib"
        (contrib / "Latin.hs").write_bytes(b"-- Author: J\xf6rg\n")
        before = (contrib / "Config.hs").read_text()
        with pytest.raises(SourceError, match="Latin.hs"):
            run(contrib)
        assert (contrib / "Config.hs").read_text() == before
