"""Unit tests for mirrored-directory-naming."""

from rspec_conventions.domain.rules.mirrored_directory import MirroredDirectoryNamingRule

RULE = MirroredDirectoryNamingRule()
SOURCES = frozenset({"models/article.rb", "services/publisher.rb"})


def test_mirrored_spec_passes(make_context, run_rule) -> None:
    ctx = make_context("", relative_path="models/article_spec.rb", source_index=SOURCES, source_root="app")
    assert run_rule(RULE, ctx) == []


def test_missing_source_is_flagged_at_line_one(make_context, run_rule) -> None:
    ctx = make_context(
        "describe Comment do\nend\n",
        relative_path="models/comment_spec.rb",
        source_index=SOURCES,
        source_root="app",
    )
    violations = run_rule(RULE, ctx)

    assert [(v.line, v.rule) for v in violations] == [(1, "mirrored-directory-naming")]
    assert violations[0].message == "no source file 'app/models/comment.rb' mirrors this spec"


def test_wrong_directory_is_flagged(make_context, run_rule) -> None:
    ctx = make_context("", relative_path="article_spec.rb", source_index=SOURCES, source_root="app")
    assert len(run_rule(RULE, ctx)) == 1


def test_missing_suffix_is_flagged(make_context, run_rule) -> None:
    ctx = make_context("", relative_path="models/article_test.rb", source_index=SOURCES)
    violations = run_rule(RULE, ctx)
    assert [v.message for v in violations] == ["spec file name 'article_test.rb' does not end with '_spec.rb'"]


def test_skipped_without_source_index(make_context, run_rule) -> None:
    assert run_rule(RULE, make_context("", relative_path="models/nothing_spec.rb")) == []


def test_exempt_directories_are_skipped(make_context, run_rule) -> None:
    ctx = make_context("", relative_path="requests/articles_spec.rb", source_index=SOURCES)
    assert run_rule(RULE, ctx) == []


def test_configured_exempt_directories(make_context, run_rule) -> None:
    ctx = make_context(
        "",
        relative_path="lib/tasks_spec.rb",
        source_index=SOURCES,
        config={"mirror_exempt_dirs": ["lib"]},
    )
    assert run_rule(RULE, ctx) == []
