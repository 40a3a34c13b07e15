"""Tests for GitHub link derivation"""
import pytest

from claude_trees.formatters import format_compare_link
from claude_trees.services.git.github import compare_url_for_branch, derive_compare_url


class TestDeriveCompareUrl:
    """Test turning remote URLs into web URLs."""

    @pytest.mark.parametrize("remote", [
        "git@github.com:org/repo.git",
        "git@github.com:org/repo",
        "https://github.com/org/repo.git",
        "https://github.com/org/repo",
        "https://github.com/org/repo/",
    ])
    def test_github_remotes(self, remote):
        """SSH and HTTPS forms, with or without .git, map to the same URL."""
        assert derive_compare_url(remote) == "https://github.com/org/repo"

    def test_idempotent(self):
        url = derive_compare_url("git@github.com:acme/widget.git")
        assert url == "https://github.com/acme/widget"
        assert derive_compare_url(url) == url

    def test_surrounding_whitespace(self):
        assert derive_compare_url("  git@github.com:org/repo.git\n") == "https://github.com/org/repo"

    def test_dotted_repository_name(self):
        assert derive_compare_url("git@github.com:org/my.repo.git") == "https://github.com/org/my.repo"

    @pytest.mark.parametrize("remote", [
        "",
        "git@gitlab.com:org/repo.git",
        "https://gitlab.com/org/repo.git",
        "http://github.com/org/repo.git",
        "ssh://git@github.com/org/repo.git",
        "/local/path/to/repo.git",
        "file:///local/repo",
        "https://github.com/org",
        "https://github.com/org/repo/tree/main",
        "https://github.com/org/repo?tab=readme",
        "not a url",
    ])
    def test_unsupported_remotes(self, remote):
        """Anything that isn't a known-host SSH or HTTPS remote gives no link."""
        assert derive_compare_url(remote) is None


class TestCompareUrlForBranch:
    """Test compare page links."""

    def test_without_base(self):
        assert compare_url_for_branch("https://github.com/org/repo", "feature") == \
            "https://github.com/org/repo/compare/feature"

    def test_with_base(self):
        assert compare_url_for_branch("https://github.com/org/repo", "feature", "main") == \
            "https://github.com/org/repo/compare/main...feature"

    def test_branch_with_slash(self):
        assert compare_url_for_branch("https://github.com/org/repo", "feat/x") == \
            "https://github.com/org/repo/compare/feat/x"

    def test_special_characters_are_quoted(self):
        assert compare_url_for_branch("https://github.com/org/repo", "fix#1") == \
            "https://github.com/org/repo/compare/fix%231"


class TestFormatCompareLink:
    """Test the compare link column."""

    def test_feature_branch(self, feature_worktree):
        link = format_compare_link(feature_worktree, "https://github.com/org/repo", "main")
        assert link == "[link=https://github.com/org/repo/compare/main...feature]compare[/link]"

    def test_no_link_for_main(self, main_worktree):
        assert format_compare_link(main_worktree, "https://github.com/org/repo") == ""

    def test_no_link_without_url(self, feature_worktree):
        assert format_compare_link(feature_worktree, None) == ""
