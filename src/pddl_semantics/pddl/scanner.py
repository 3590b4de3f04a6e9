"""Implement a scanner for the Planning Domain Definition Language (PDDL).

Reference: PDDL - The Planning Domain Definition Language (Version 1.2) (Ghallab et al., 1998)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

from pddl_semantics.exceptions import PDDLSyntaxError

PDDL_NAME_REGEX = r"[a-zA-Z]{1}[a-zA-Z0-9\-_]*"
"""Names in PDDL begin with a letter and contain only letters, digits, hyphens, and underscores."""


class PDDLTokenType(StrEnum):
    """Enumeration of token types when parsing PDDL."""

    NAME = PDDL_NAME_REGEX
    """Name of a PDDL domain, type, predicate, operator, etc."""

    VARIABLE = r"\?" + PDDL_NAME_REGEX
    """Name of a PDDL variable."""

    KEYWORD = r":" + PDDL_NAME_REGEX
    """A PDDL keyword starts with a colon."""

    MINUS = r"-"
    """Separates PDDL entities from their types in typed lists."""

    EQUALS = r"="
    """The built-in equality predicate (`:equality` requirement)."""

    OPEN_PAREN = r"\("
    """An open parenthesis."""

    CLOSE_PAREN = r"\)"
    """A close parenthesis."""

    COMMENT = r";[^\n]*"
    """Comments in PDDL begin with a semicolon and end with the next newline."""

    NEWLINE = r"\n"

    SKIP = r"[ \t\r]+"
    """Whitespace to be ignored."""

    MISMATCH = r"."
    """Any other character is a mismatch."""

    END = r"$^"
    """Marks the end of the token stream (never matched by the scanner)."""

    @property
    def named_group_regex(self) -> str:
        """Retrieve the named group regular expression for the token type."""
        return f"(?P<{self.name}>{self.value})"


@dataclass(frozen=True)
class PDDLToken:
    """A token scanned from a string of PDDL.

    Reference: https://docs.python.org/3/library/re.html#writing-a-tokenizer
    """

    type_: PDDLTokenType
    value: str
    line: int
    column: int

    def __str__(self) -> str:
        """Return a readable description of the token and its location."""
        return f"{self.type_.name} '{self.value}' (line {self.line}, column {self.column})"


PDDL_REQ_FLAGS = {
    ":strips": "Basic STRIPS-style adds and deletes",
    ":typing": "Allow type names in declarations of variables",
    ":negative-preconditions": "Allow `not` in goal descriptions",
    ":disjunctive-preconditions": "Allow `or` in goal descriptions",
    ":equality": "Support `=` as built-in predicate",
    ":existential-preconditions": "Allow `exists` in goal descriptions",
    ":universal-preconditions": "Allow `forall` in goal descriptions",
    ":quantified-preconditions": "Allow existential and universal preconditions",
    ":conditional-effects": "Allow `when` and `forall` in action effects",
    ":derived-predicates": "Allow predicates defined by `:derived` rules",
    ":domain-axioms": "Allow `:axiom` definitions",
    ":adl": (
        "Support :strips + :typing + :disjunctive-preconditions + "
        ":equality + :quantified-preconditions + :conditional-effects"
    ),
}
"""Definitions for supported PDDL requirements flags.

Reference: Section 15 ("Current Requirement Flags") of Ghallab et al. (1998).
"""

PDDL_KEYWORDS = {
    ":domain",
    ":requirements",
    ":types",
    ":constants",
    ":predicates",
    ":action",
    ":parameters",
    ":vars",
    ":precondition",
    ":effect",
    ":derived",
    ":axiom",
    ":context",
    ":implies",
    ":objects",
    ":init",
    ":goal",
}
"""Keywords recognized by the scanner, in addition to the requirement flags."""


class PDDLScanner:
    """A scanner for a subset of the Planning Domain Definition Language (PDDL)."""

    def __init__(self) -> None:
        """Initialize regular expressions for scanning tokens of PDDL.

        Reference: https://docs.python.org/3/library/re.html#writing-a-tokenizer
        """
        scanned_types = (tt for tt in PDDLTokenType if tt is not PDDLTokenType.END)
        self.token_regex = re.compile("|".join(tt.named_group_regex for tt in scanned_types))
        self.keywords = PDDL_KEYWORDS | set(PDDL_REQ_FLAGS)

    def tokenize(self, string: str) -> Iterator[PDDLToken]:
        """Tokenize a string of PDDL into an iterator over tokens.

        PDDL is case-insensitive, so names, variables, and keywords are lower-cased.

        :param string: String containing PDDL to be tokenized
        :yield: Iterator over PDDL tokens in the string
        :raises PDDLSyntaxError: If the string contains an unknown keyword or stray character
        """
        line_num = 1
        line_start = 0
        for mo in self.token_regex.finditer(string):
            if mo.lastgroup is None:
                raise PDDLSyntaxError(f"Failed to tokenize string into PDDL:\n{string}")

            token_type = PDDLTokenType[mo.lastgroup]
            value = mo.group().lower()
            column = mo.start() - line_start

            match token_type:
                case PDDLTokenType.KEYWORD:
                    if value not in self.keywords:
                        raise PDDLSyntaxError(f"Unknown PDDL keyword '{value}' on line {line_num}.")

                case PDDLTokenType.MISMATCH:
                    raise PDDLSyntaxError(
                        f"Cannot tokenize '{value}' on line {line_num}, column {column}.",
                    )

                case PDDLTokenType.COMMENT | PDDLTokenType.SKIP:
                    continue  # Skip comments and whitespace

                case PDDLTokenType.NEWLINE:
                    line_start = mo.end()
                    line_num += 1
                    continue

                case _:
                    pass

            yield PDDLToken(token_type, value, line_num, column)
