"""
Tests for glob matching and pattern normalization.
"""

import pytest

from pathfence.filesystem.patterns import (
    NOISE_NAMES,
    NOISE_PATTERNS,
    MatchScope,
    Pattern,
    gitignore_line_to_pattern,
    matches,
    matches_any,
    normalize_exclude_pattern,
    normalize_ignore_folder,
)


class TestMatches:
    """Test glob semantics."""

    def test_double_star_crosses_separators(self):
        """Test that `**` spans any number of segments."""
        pattern = Pattern("src/**/*.py")
        assert matches(pattern, "src/a/b/c.py", "c.py")
        assert matches(pattern, "src/c.py", "c.py")

    def test_single_star_stays_in_segment(self):
        """Test that `*` does not cross `/`."""
        pattern = Pattern("src/*.py")
        assert matches(pattern, "src/a.py", "a.py")
        assert not matches(pattern, "src/sub/a.py", "a.py")

    def test_question_mark(self):
        """Test that `?` matches exactly one character."""
        pattern = Pattern("file?.txt")
        assert matches(pattern, "file1.txt", "file1.txt")
        assert not matches(pattern, "file10.txt", "file10.txt")

    def test_case_sensitive(self):
        """Test that matching is case-sensitive."""
        assert not matches(Pattern("*.MD"), "README.md", "README.md")
        assert matches(Pattern("*.md"), "README.md", "README.md")

    def test_dot_files_not_hidden(self):
        """Test that wildcards match dot-prefixed names."""
        assert matches(Pattern("**/*.log"), ".hidden.log", ".hidden.log")
        assert matches(Pattern("*"), ".env", ".env")

    def test_directory_matches_its_own_wildcard_pattern(self):
        """Test that `**/name/**` covers the directory itself and its contents."""
        pattern = Pattern("**/node_modules/**")
        assert matches(pattern, "node_modules", "node_modules", is_dir=True)
        assert matches(pattern, "a/node_modules", "node_modules", is_dir=True)
        assert matches(pattern, "a/node_modules/x.js", "x.js")
        assert not matches(pattern, "node_modules", "node_modules", is_dir=False)

    def test_name_fallback_is_exact(self):
        """Test that the basename fallback never matches substrings."""
        pattern = Pattern("build")
        assert matches(pattern, "build", "build", is_dir=True)
        assert matches(pattern, "src/build", "build", is_dir=True)
        assert not matches(pattern, "src/build.rs", "build.rs")
        assert not matches(pattern, "rebuild", "rebuild", is_dir=True)

    def test_path_scope_falls_back_to_name(self):
        """Test that an anchored glob may still match the bare name."""
        pattern = Pattern("*.tmp")
        assert matches(pattern, "deep/dir/x.tmp", "x.tmp")

    def test_name_scope_ignores_path(self):
        """Test that NAME patterns only see the entry name."""
        pattern = Pattern("a/.git", MatchScope.NAME)
        assert not matches(pattern, "a/.git", ".git", is_dir=True)
        assert matches(Pattern(".git", MatchScope.NAME), "a/.git", ".git", is_dir=True)

    def test_matches_any(self):
        """Test matching against a list of patterns."""
        patterns = [Pattern("*.pyc"), Pattern("dist")]
        assert matches_any(patterns, "pkg/mod.pyc", "mod.pyc")
        assert matches_any(patterns, "dist", "dist", is_dir=True)
        assert not matches_any(patterns, "pkg/mod.py", "mod.py")
        assert not matches_any([], "anything", "anything")


class TestNoise:
    """Test the always-excluded names."""

    @pytest.mark.parametrize("name", [".git", ".DS_Store", ".idea"])
    def test_noise_names_excluded(self, name):
        """Test that each noise name is excluded at any depth."""
        assert name in NOISE_NAMES
        assert matches_any(NOISE_PATTERNS, f"pkg/{name}", name, is_dir=True)

    def test_similar_names_kept(self):
        """Test that names merely containing a noise name are kept."""
        assert not matches_any(NOISE_PATTERNS, ".gitignore", ".gitignore")
        assert not matches_any(NOISE_PATTERNS, ".github", ".github", is_dir=True)


class TestNormalizeIgnoreFolder:
    """Test caller-supplied folder filters."""

    def test_plain_name(self):
        """Test that a plain name is used as-is."""
        assert normalize_ignore_folder("build") == Pattern("build")

    def test_strips_dot_slash_and_trailing_slash(self):
        """Test that `./` and trailing `/` are stripped."""
        assert normalize_ignore_folder("./dist/") == Pattern("dist")

    def test_backslashes(self):
        """Test that backslashes are converted to forward slashes."""
        assert normalize_ignore_folder("src\\generated\\") == Pattern("src/generated")

    def test_wildcard_verbatim(self):
        """Test that wildcard entries are kept verbatim."""
        assert normalize_ignore_folder("*.egg-info") == Pattern("*.egg-info")
        assert normalize_ignore_folder("dist/*") == Pattern("dist/*")


class TestNormalizeExcludePattern:
    """Test search exclusion patterns."""

    def test_plain_name_wrapped(self):
        """Test that a plain name becomes `**/name/**`."""
        assert normalize_exclude_pattern("node_modules") == Pattern("**/node_modules/**")

    def test_wildcard_verbatim(self):
        """Test that wildcard entries are kept verbatim."""
        assert normalize_exclude_pattern("*.bak") == Pattern("*.bak")


class TestGitignoreLine:
    """Test ignore-file line conversion."""

    @pytest.mark.parametrize("line", ["", "   ", "# comment", "!keep.log", "/"])
    def test_skipped_lines(self, line):
        """Test that blanks, comments and negations produce no pattern."""
        assert gitignore_line_to_pattern(line) is None

    def test_directory_entry(self):
        """Test that `dir/` becomes `**/dir/**`."""
        assert gitignore_line_to_pattern("logs/") == Pattern("**/logs/**")

    def test_plain_entry(self):
        """Test that a plain entry becomes `**/entry`."""
        assert gitignore_line_to_pattern("*.pyc") == Pattern("**/*.pyc")

    def test_leading_slash_stripped(self):
        """Test that a leading `/` is dropped."""
        assert gitignore_line_to_pattern("/root.txt") == Pattern("**/root.txt")

    def test_whitespace_trimmed(self):
        """Test that surrounding whitespace is trimmed."""
        assert gitignore_line_to_pattern("  build/  \n") == Pattern("**/build/**")
