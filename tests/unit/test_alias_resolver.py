"""Tests for tsconfig path aliases."""

import json
from pathlib import Path

from no_barrel_file.services.alias_resolver import AliasResolver, PathAlias, strip_json_comments


class TestPathAlias:
    def test_exact_match(self):
        alias = PathAlias("@app", ("/p/src",))

        assert alias.match("@app") == ""
        assert alias.match("@app/x") is None

    def test_wildcard_match(self):
        alias = PathAlias("@app/*", ("/p/src/*",))

        assert alias.match("@app/utils/date") == "utils/date"
        assert alias.match("@other/x") is None


class TestAliasResolver:
    def test_from_config(self, barrel_project: Path):
        resolver = AliasResolver.from_config(barrel_project, "tsconfig.json")

        root = barrel_project.as_posix()
        assert resolver.expand("@barrel-basic") == [f"{root}/barrel-basic"]
        assert resolver.expand("@barrel-basic/constants") == [f"{root}/barrel-basic/constants"]
        assert resolver.expand("react") == []

    def test_exact_pattern_beats_wildcard(self):
        resolver = AliasResolver([
            PathAlias("@lib/*", ("/p/lib/*",)),
            PathAlias("@lib/special", ("/p/special",)),
        ])

        assert resolver.expand("@lib/special") == ["/p/special", "/p/lib/special"]

    def test_longest_prefix_wins(self):
        resolver = AliasResolver([
            PathAlias("@/*", ("/p/src/*",)),
            PathAlias("@/components/*", ("/p/ui/*",)),
        ])

        assert resolver.expand("@/components/button")[0] == "/p/ui/button"

    def test_alias_for(self, barrel_project: Path):
        resolver = AliasResolver.from_config(barrel_project, "tsconfig.json")
        root = barrel_project.as_posix()

        assert resolver.alias_for(f"{root}/barrel-basic") == "@barrel-basic"
        assert resolver.alias_for(f"{root}/barrel-nested/button") == "@barrel-nested/button"
        assert resolver.alias_for(f"{root}/elsewhere/thing") is None

    def test_missing_config_is_ignored(self, tmp_path: Path):
        resolver = AliasResolver.from_config(tmp_path, "tsconfig.json")

        assert not resolver

    def test_invalid_config_is_ignored(self, tmp_path: Path):
        (tmp_path / "tsconfig.json").write_text("{ not json", encoding="utf-8")

        assert not AliasResolver.from_config(tmp_path, "tsconfig.json")

    def test_no_config_path(self, tmp_path: Path):
        assert not AliasResolver.from_config(tmp_path, None)

    def test_extends(self, tmp_path: Path):
        (tmp_path / "configs").mkdir()
        (tmp_path / "configs" / "base.json").write_text(
            json.dumps({"compilerOptions": {"baseUrl": "..", "paths": {"@shared/*": ["shared/*"]}}}),
            encoding="utf-8",
        )
        (tmp_path / "tsconfig.json").write_text(
            json.dumps({"extends": "./configs/base"}), encoding="utf-8"
        )

        resolver = AliasResolver.from_config(tmp_path, "tsconfig.json")

        assert resolver.expand("@shared/x") == [f"{tmp_path.resolve().as_posix()}/shared/x"]


class TestStripJsonComments:
    def test_comments_and_trailing_commas(self):
        text = '{\n  // line\n  "a": [1, 2,], /* block */\n  "b": "http://x/*y*/",\n}'

        assert json.loads(strip_json_comments(text)) == {"a": [1, 2], "b": "http://x/*y*/"}

    def test_comment_between_comma_and_brace(self):
        text = '{"a": 1, // last\n}'

        assert json.loads(strip_json_comments(text)) == {"a": 1}
