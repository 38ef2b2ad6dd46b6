"""Tests for comment and string masking."""

from __future__ import annotations

from entitylint.extraction.lexer import mask_source


def test_views_keep_length_and_line_breaks() -> None:
    text = "<?php\n// a { comment\n$a = 'x { y';\n/* block\n } */\n"
    masked = mask_source(text)

    assert len(masked.code) == len(text)
    assert len(masked.structure) == len(text)
    assert masked.code.count("\n") == text.count("\n")
    assert masked.structure.count("\n") == text.count("\n")


def test_comments_are_blanked_in_both_views() -> None:
    masked = mask_source("$a = 1; // trailing {\n# hash {\n/* c { */ $b = 2;")

    assert "{" not in masked.code
    assert "{" not in masked.structure
    assert "$a = 1;" in masked.code
    assert "$b = 2;" in masked.structure


def test_strings_survive_in_code_but_not_in_structure() -> None:
    masked = mask_source("$s = 'a { // not a comment';")

    assert "'a { // not a comment'" in masked.code
    assert "{" not in masked.structure
    assert masked.structure.startswith("$s = '")
    assert masked.structure.endswith("';")


def test_escaped_quotes_do_not_end_a_string() -> None:
    masked = mask_source("$s = 'it\\'s { here'; $t = 1;")

    assert "{" not in masked.structure
    assert "$t = 1;" in masked.structure


def test_attribute_groups_are_not_hash_comments() -> None:
    masked = mask_source("#[ORM\\Id]\n# plain comment\n")

    assert masked.code.startswith("#[ORM\\Id]")
    assert "plain comment" not in masked.code


def test_docblocks_are_recorded_with_offsets() -> None:
    text = "<?php\n/** @ORM\\Entity */\n/**/ class A {}\n"
    masked = mask_source(text)

    assert len(masked.docblocks) == 1
    block = masked.docblocks[0]
    assert block.text == "/** @ORM\\Entity */"
    assert text[block.start : block.end] == block.text
    assert masked.docblocks_between(0, len(text)) == [block]
    assert masked.docblocks_between(block.end, len(text)) == []


def test_unterminated_comment_runs_to_end_of_file() -> None:
    masked = mask_source("$a = 1; /* never closed {")

    assert "{" not in masked.code
    assert masked.code.startswith("$a = 1;")


def test_heredoc_body_is_blanked_in_structure_only() -> None:
    text = "$sql = <<<SQL\nSELECT 'don't' { FROM t\nSQL;\n$b = 1;\n"
    masked = mask_source(text)

    assert "don't" in masked.code
    assert "{" not in masked.structure
    assert "'" not in masked.structure
    assert "SQL;\n$b = 1;" in masked.structure
    assert masked.structure.count("\n") == text.count("\n")


def test_nowdoc_and_quoted_heredoc_openers() -> None:
    for opener in ("<<<'EOT'", '<<<"EOT"'):
        masked = mask_source(f"$t = {opener}\n  it's {{ raw\n  EOT;\n$b = 1;\n")

        assert "{" not in masked.structure
        assert "$b = 1;" in masked.structure


def test_heredoc_terminator_must_stand_alone() -> None:
    masked = mask_source("$t = <<<END\nENDING isn't it\nEND;\n$b = 1;\n")

    assert "isn't" not in masked.structure
    assert "$b = 1;" in masked.structure


def test_shift_operator_is_not_a_heredoc() -> None:
    masked = mask_source("$a = 1 << 2; $s = 'x { y';\n")

    assert "{" not in masked.structure
    assert "$a = 1 << 2;" in masked.structure
