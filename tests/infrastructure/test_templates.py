"""Tests for hook rendering."""

from __future__ import annotations

import copy
import json
import re
import shutil
import subprocess
from pathlib import Path
from typing import Any

import pytest

from subspacectl.domain.errors import HookTemplateError
from subspacectl.domain.hooks import HookSpec, rewrite_dependencies
from subspacectl.infrastructure.templates import (
    HOOK_TEMPLATE,
    OVERRIDE_DIR,
    load_hook_template,
    render_hook,
)

# Loads a rendered hook, feeds it one package.json twice and prints the
# result together with every context.log message.
READ_PACKAGE_DRIVER = """\
const hook = require(process.argv[2]);
const packageJson = JSON.parse(process.argv[3]);
const logs = [];
const context = { log: (message) => logs.push(message) };
hook.hooks.readPackage(packageJson, context);
hook.hooks.readPackage(packageJson, context);
process.stdout.write(JSON.stringify({ packageJson, logs }));
"""


def _members_literal(source: str) -> list[str]:
    match = re.search(r"new Set\((.*)\);", source)
    assert match is not None
    return json.loads(match.group(1))


class TestRenderHook:
    def test_embeds_member_names(self) -> None:
        source = render_hook(HookSpec(members=("pkg-a", "@scope/pkg-b")))
        assert _members_literal(source) == ["pkg-a", "@scope/pkg-b"]

    def test_exports_read_package(self) -> None:
        source = render_hook(HookSpec(members=("pkg-a",)))
        assert "function readPackage(packageJson, context)" in source
        assert "readPackage," in source
        assert "module.exports" in source

    def test_prefix_and_link_format(self) -> None:
        source = render_hook(HookSpec(members=()))
        assert 'const WORKSPACE_PREFIX = "workspace:";' in source
        assert 'const LINK_PREFIX = "link:../";' in source
        assert 'const LINK_SUFFIX = "/";' in source

    def test_empty_member_list(self) -> None:
        assert _members_literal(render_hook(HookSpec(members=()))) == []

    def test_names_cannot_break_out_of_literal(self) -> None:
        hostile = 'x"]); process.exit(1); //'
        source = render_hook(HookSpec(members=(hostile,)))
        assert _members_literal(source) == [hostile]
        assert r'x\"]);' in source

    def test_monorepo_override(self, tmp_path: Path) -> None:
        override = tmp_path / OVERRIDE_DIR / "hooks"
        override.mkdir(parents=True)
        (override / "pnpmfile.cjs.j2").write_text("// custom {{ members | tojson }}\n")
        source = render_hook(HookSpec(members=("a",)), monorepo_root=tmp_path)
        assert source == '// custom ["a"]\n'


def _write_override(root: Path, source: str) -> None:
    folder = root / OVERRIDE_DIR / "hooks"
    folder.mkdir(parents=True)
    (folder / HOOK_TEMPLATE).write_text(source, encoding="utf-8")


class TestTemplateErrors:
    def test_packaged_template_compiles(self, tmp_path: Path) -> None:
        assert load_hook_template(monorepo_root=tmp_path).name == HOOK_TEMPLATE

    def test_syntax_error(self, tmp_path: Path) -> None:
        _write_override(tmp_path, "{% if %}\n")
        with pytest.raises(HookTemplateError) as excinfo:
            load_hook_template(monorepo_root=tmp_path)
        assert excinfo.value.code == "HOOK_TEMPLATE_INVALID"
        assert excinfo.value.template == HOOK_TEMPLATE

    def test_render_error(self, tmp_path: Path) -> None:
        _write_override(tmp_path, "{{ spec.missing.deeper }}\n")
        template = load_hook_template(monorepo_root=tmp_path)
        with pytest.raises(HookTemplateError, match="Invalid hook template"):
            render_hook(HookSpec(members=("a",)), template=template)


@pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")
class TestHookUnderNode:
    @staticmethod
    def _run(tmp_path: Path, members: tuple[str, ...], package_json: dict[str, Any]) -> Any:
        hook = tmp_path / ".pnpmfile.cjs"
        hook.write_text(render_hook(HookSpec(members=members)), encoding="utf-8")
        driver = tmp_path / "driver.js"
        driver.write_text(READ_PACKAGE_DRIVER, encoding="utf-8")
        proc = subprocess.run(
            ["node", str(driver), str(hook), json.dumps(package_json)],
            capture_output=True,
            text=True,
            check=True,
        )
        return json.loads(proc.stdout)

    def test_matches_python_rule(self, tmp_path: Path) -> None:
        package_json = {
            "name": "A",
            "dependencies": {"A": "workspace:*", "C": "workspace:*", "D": "^1.0.0"},
            "devDependencies": {"E": "workspace:*"},
        }
        out = self._run(tmp_path, ("A", "B"), package_json)

        expected = rewrite_dependencies(copy.deepcopy(package_json), {"A", "B"})
        assert out["packageJson"] == expected
        assert out["packageJson"]["dependencies"] == {
            "A": "workspace:*",
            "C": "link:../C/",
            "D": "^1.0.0",
        }
        # The second pass finds nothing left to rewrite.
        assert out["logs"] == ['Rewriting "A" dependencies[C]']

    def test_scoped_names_and_no_dependencies(self, tmp_path: Path) -> None:
        out = self._run(tmp_path, ("@scope/a",), {"name": "@scope/a"})
        assert out["packageJson"] == {"name": "@scope/a"}

        package_json = {"name": "x", "dependencies": {"@scope/b": "workspace:^"}}
        out = self._run(tmp_path, ("@scope/a",), package_json)
        assert out["packageJson"]["dependencies"] == {"@scope/b": "link:../@scope/b/"}
