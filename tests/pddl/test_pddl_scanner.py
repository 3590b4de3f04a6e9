"""Unit tests for the PDDLScanner class."""

import pytest

from pddl_semantics.exceptions import PDDLSyntaxError
from pddl_semantics.pddl import PDDLScanner, PDDLTokenType


def test_scan_briefcase_world_domain(briefcase_world_domain: str) -> None:
    """Verify that the PDDLScanner class can scan the `briefcase-world` PDDL domain."""
    # Arrange - PDDL text is provided by the test fixture
    scanner = PDDLScanner()

    # Act/Assert - Scan the PDDL domain and expect that no token is a mismatch
    for token in scanner.tokenize(briefcase_world_domain):
        assert token.type_ != PDDLTokenType.MISMATCH, f"Mismatched token: {token}."


def test_scan_mov_b_action(mov_b_action: str) -> None:
    """Verify that the PDDLScanner class can scan the `mov-b` PDDL action."""
    # Arrange - PDDL text is provided by the test fixture
    scanner = PDDLScanner()

    # Act - Scan the PDDL action into a list of tokens
    tokens = list(scanner.tokenize(mov_b_action))

    # Assert - Expect the equality predicate and the lower-cased constant to be scanned
    assert any(t.type_ == PDDLTokenType.EQUALS for t in tokens)
    assert all(t.value != "B" for t in tokens)
    assert tokens[1].type_ == PDDLTokenType.KEYWORD
    assert tokens[1].value == ":action"


def test_scan_tracks_lines_and_skips_comments() -> None:
    """Verify that comments and whitespace are skipped while line numbers are tracked."""
    # Arrange - Create PDDL text with a comment on its first line
    text = "; A comment (with parens)\n(on ?x a)"
    scanner = PDDLScanner()

    # Act - Scan the text into tokens
    tokens = list(scanner.tokenize(text))

    # Assert - Expect only the atom's tokens, all located on the second line
    assert [t.type_ for t in tokens] == [
        PDDLTokenType.OPEN_PAREN,
        PDDLTokenType.NAME,
        PDDLTokenType.VARIABLE,
        PDDLTokenType.NAME,
        PDDLTokenType.CLOSE_PAREN,
    ]
    assert {t.line for t in tokens} == {2}
    assert tokens[2].column == 4


def test_scan_unknown_keyword_raises() -> None:
    """Verify that scanning an unknown keyword raises a syntax error."""
    # Arrange - Create PDDL text using a keyword outside the supported subset
    scanner = PDDLScanner()

    # Act/Assert - Expect the scanner to reject the keyword
    with pytest.raises(PDDLSyntaxError, match=":durative-action"):
        list(scanner.tokenize("(:durative-action move)"))


def test_scan_stray_character_raises() -> None:
    """Verify that scanning a character outside the PDDL grammar raises a syntax error."""
    # Arrange - Create PDDL text containing a stray `#`
    scanner = PDDLScanner()

    # Act/Assert - Expect the scanner to report the character's location
    with pytest.raises(PDDLSyntaxError, match="line 1, column 4"):
        list(scanner.tokenize("(on #a)"))
