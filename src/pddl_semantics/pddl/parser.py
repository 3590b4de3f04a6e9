"""Implement a parser for the Planning Domain Definition Language (PDDL).

Reference: PDDL - The Planning Domain Definition Language (Version 1.2) (Ghallab et al., 1998)
"""

from __future__ import annotations

from pddl_semantics.exceptions import PDDLSyntaxError
from pddl_semantics.pddl.scanner import PDDLScanner, PDDLToken, PDDLTokenType
from pddl_semantics.pddl.syntax import (
    ROOT_TYPE,
    ActionDef,
    AddEffect,
    AndGoal,
    AtomGoal,
    AxiomDef,
    ConditionalEffect,
    DeleteEffect,
    DerivedDef,
    DomainTree,
    Effect,
    ExistsGoal,
    ForAllEffect,
    ForAllGoal,
    Goal,
    ImplyGoal,
    NotGoal,
    OrGoal,
    PredicateDecl,
    ProblemTree,
    TypeDecl,
    TypedName,
)


class PDDLParser:
    """A recursive-descent parser for the STRIPS/ADL subset of PDDL."""

    def __init__(self, string: str) -> None:
        """Initialize the PDDL parser for the given string."""
        self.scanner = PDDLScanner()
        self.remaining_tokens = self.scanner.tokenize(string)
        self.input_token = self._next_token()
        """Once the input token type is `PDDLTokenType.END`, all tokens have been consumed."""

    def _next_token(self) -> PDDLToken:
        """Pull the next token from the scanner (or an END token if none remain)."""
        return next(self.remaining_tokens, PDDLToken(PDDLTokenType.END, "", line=-1, column=-1))

    def _error(self, message: str) -> PDDLSyntaxError:
        """Create a syntax error describing the current input token."""
        return PDDLSyntaxError(f"{message} Found {self.input_token}.")

    def lookahead_is(self, token_type: PDDLTokenType, value: str | None = None) -> bool:
        """Check whether the next input token has the given type (and, optionally, value)."""
        if self.input_token.type_ != token_type:
            return False
        return value is None or self.input_token.value == value

    def match(self, token_type: PDDLTokenType, value: str | None = None) -> PDDLToken:
        """Consume a token of the given type from the scanner.

        :param token_type: Expected type of the next PDDL token
        :param value: Expected string value of the next token (optional; defaults to None)
        :return: PDDL token consumed from the scanner
        :raises PDDLSyntaxError: If the next token doesn't have the expected type or value
        """
        if self.input_token.type_ == PDDLTokenType.END:
            raise PDDLSyntaxError("Unexpected end of input; the PDDL is incomplete.")

        if self.input_token.type_ != token_type:
            raise self._error(f"Expected PDDL token type {token_type.name}.")

        if value is not None and value != self.input_token.value:
            raise self._error(f"Expected '{value}' as next token.")

        matched_token = self.input_token
        self.input_token = self._next_token()
        return matched_token

    def typed_list(self, token_type: PDDLTokenType) -> list[TypedName]:
        """Parse a PDDL-typed list of the given token type.

        This method does not match a following closing parenthesis, if present.

        :param token_type: Type of PDDL token (e.g., `VARIABLE`) being assigned PDDL types
        :return: List of parsed names with their allowed types
        """
        typed_names: list[TypedName] = []
        awaiting_types: list[str] = []

        while not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            if self.lookahead_is(token_type):
                awaiting_types.append(self.match(token_type).value)
                continue

            if self.lookahead_is(PDDLTokenType.MINUS):  # Match "-" and the following type(s)
                if not awaiting_types:
                    raise self._error("Unexpected minus in a typed list.")

                self.match(PDDLTokenType.MINUS)
                types = self.type_specifier()
                typed_names.extend(TypedName(name, types) for name in awaiting_types)
                awaiting_types = []
                continue

            raise self._error("Unexpected token in a typed list.")

        typed_names.extend(TypedName(name) for name in awaiting_types)  # Default type is `object`
        return typed_names

    def type_specifier(self) -> tuple[str, ...]:
        """Parse a single type name or an `(either t1 t2 ...)` union of types."""
        if not self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            return (self.match(PDDLTokenType.NAME).value,)

        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value="either")
        types: list[str] = []
        while self.lookahead_is(PDDLTokenType.NAME):
            types.append(self.match(PDDLTokenType.NAME).value)
        self.match(PDDLTokenType.CLOSE_PAREN)

        if not types:
            raise self._error("Expected at least one type in an `either` type.")
        return tuple(types)

    def parenthesized_typed_list(self, token_type: PDDLTokenType) -> tuple[TypedName, ...]:
        """Parse a typed list enclosed in parentheses (e.g., action parameters)."""
        self.match(PDDLTokenType.OPEN_PAREN)
        typed_names = self.typed_list(token_type)
        self.match(PDDLTokenType.CLOSE_PAREN)
        return tuple(typed_names)

    def atomic_formula(self, ground: bool = False) -> AtomGoal:
        """Parse a PDDL atomic formula from its predicate name through its closing parenthesis.

        :param ground: Whether only object names are permitted as terms (defaults to False)
        :return: Parsed atomic formula
        """
        if self.lookahead_is(PDDLTokenType.EQUALS):
            predicate = self.match(PDDLTokenType.EQUALS).value
        else:
            predicate = self.match(PDDLTokenType.NAME).value

        allowed_terms = {PDDLTokenType.NAME}
        if not ground:
            allowed_terms.add(PDDLTokenType.VARIABLE)

        terms: list[str] = []
        while not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            if self.input_token.type_ not in allowed_terms:
                raise self._error(f"Unexpected term in atomic formula '{predicate}'.")
            terms.append(self.match(self.input_token.type_).value)

        self.match(PDDLTokenType.CLOSE_PAREN)
        return AtomGoal(predicate, tuple(terms))

    def atomic_formula_skeleton(self) -> PredicateDecl:
        """Parse a PDDL atomic formula skeleton (i.e., a predicate declaration)."""
        self.match(PDDLTokenType.OPEN_PAREN)
        predicate_name = self.match(PDDLTokenType.NAME).value
        variables = self.typed_list(PDDLTokenType.VARIABLE)
        self.match(PDDLTokenType.CLOSE_PAREN)
        return PredicateDecl(predicate_name, tuple(variables))

    def goal_description(self) -> Goal:
        """Parse a PDDL goal description from the input stream of tokens.

        Reference: Section 6 (pg. 8-9) of Ghallab et al., 1998.

        :return: Parsed PDDL goal description
        """
        self.match(PDDLTokenType.OPEN_PAREN)

        if self.lookahead_is(PDDLTokenType.CLOSE_PAREN):  # An empty goal `()` is trivially true
            self.match(PDDLTokenType.CLOSE_PAREN)
            return AndGoal(())

        lookahead = self.input_token.value

        if lookahead in {"and", "or"} and self.lookahead_is(PDDLTokenType.NAME):
            self.match(PDDLTokenType.NAME, value=lookahead)
            subgoals: list[Goal] = []
            while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                subgoals.append(self.goal_description())
            self.match(PDDLTokenType.CLOSE_PAREN)
            return AndGoal(tuple(subgoals)) if lookahead == "and" else OrGoal(tuple(subgoals))

        if lookahead == "not":
            self.match(PDDLTokenType.NAME, value="not")
            negated_goal = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return NotGoal(negated_goal)

        if lookahead == "imply":
            self.match(PDDLTokenType.NAME, value="imply")
            premise = self.goal_description()
            conclusion = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return ImplyGoal(premise, conclusion)

        if lookahead in {"exists", "forall"}:
            self.match(PDDLTokenType.NAME, value=lookahead)
            variables = self.parenthesized_typed_list(PDDLTokenType.VARIABLE)
            quantified_goal = self.goal_description()
            self.match(PDDLTokenType.CLOSE_PAREN)
            if lookahead == "exists":
                return ExistsGoal(variables, quantified_goal)
            return ForAllGoal(variables, quantified_goal)

        # Otherwise, just match an atomic formula containing terms (i.e., names or variables)
        return self.atomic_formula()

    def effects(self) -> tuple[Effect, ...]:
        """Parse PDDL action effects from the input stream of tokens.

        Nested conjunctions are flattened into a single tuple of effects.

        :return: Parsed PDDL action effects
        """
        self.match(PDDLTokenType.OPEN_PAREN)

        if self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            self.match(PDDLTokenType.CLOSE_PAREN)
            return ()

        lookahead = self.input_token.value

        if lookahead == "and":
            self.match(PDDLTokenType.NAME, value="and")
            parsed_effects: list[Effect] = []
            while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                parsed_effects.extend(self.effects())
            self.match(PDDLTokenType.CLOSE_PAREN)
            return tuple(parsed_effects)

        if lookahead == "not":
            self.match(PDDLTokenType.NAME, value="not")
            self.match(PDDLTokenType.OPEN_PAREN)
            formula = self.atomic_formula()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return (DeleteEffect(formula),)

        if lookahead == "forall":  # For the :conditional-effects requirement flag
            self.match(PDDLTokenType.NAME, value="forall")
            variables = self.parenthesized_typed_list(PDDLTokenType.VARIABLE)
            quantified_effects = self.effects()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return (ForAllEffect(variables, quantified_effects),)

        if lookahead == "when":  # For the :conditional-effects requirement flag
            self.match(PDDLTokenType.NAME, value="when")
            condition = self.goal_description()
            conditional_effects = self.effects()
            self.match(PDDLTokenType.CLOSE_PAREN)
            return (ConditionalEffect(condition, conditional_effects),)

        return (AddEffect(self.atomic_formula()),)

    def action(self) -> ActionDef:
        """Parse a PDDL action definition, beginning with its `:action` keyword."""
        self.match(PDDLTokenType.KEYWORD, value=":action")
        name = self.match(PDDLTokenType.NAME).value

        parameters: tuple[TypedName, ...] = ()
        precondition: Goal | None = None
        effects: tuple[Effect, ...] = ()

        while self.lookahead_is(PDDLTokenType.KEYWORD):
            keyword = self.match(PDDLTokenType.KEYWORD).value
            match keyword:
                case ":parameters":
                    parameters = self.parenthesized_typed_list(PDDLTokenType.VARIABLE)
                case ":precondition":
                    precondition = self.goal_description()
                case ":effect":
                    effects = self.effects()
                case _:
                    raise PDDLSyntaxError(f"Unexpected keyword '{keyword}' in action '{name}'.")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return ActionDef(name, parameters, precondition, effects)

    def derived(self) -> DerivedDef:
        """Parse a derived predicate rule, beginning with its `:derived` keyword."""
        self.match(PDDLTokenType.KEYWORD, value=":derived")
        head = self.atomic_formula_skeleton()
        body = self.goal_description()
        self.match(PDDLTokenType.CLOSE_PAREN)
        return DerivedDef(head.name, head.parameters, body)

    def axiom(self) -> AxiomDef:
        """Parse a PDDL 1.2 axiom, beginning with its `:axiom` keyword.

        Reference: Section 8 (pg. 11) of Ghallab et al., 1998.
        """
        self.match(PDDLTokenType.KEYWORD, value=":axiom")

        variables: tuple[TypedName, ...] = ()
        context: Goal = AndGoal(())
        implies: AtomGoal | None = None

        while self.lookahead_is(PDDLTokenType.KEYWORD):
            keyword = self.match(PDDLTokenType.KEYWORD).value
            match keyword:
                case ":vars":
                    variables = self.parenthesized_typed_list(PDDLTokenType.VARIABLE)
                case ":context":
                    context = self.goal_description()
                case ":implies":
                    self.match(PDDLTokenType.OPEN_PAREN)
                    implies = self.atomic_formula()
                case _:
                    raise PDDLSyntaxError(f"Unexpected keyword '{keyword}' in an axiom.")

        self.match(PDDLTokenType.CLOSE_PAREN)
        if implies is None:
            raise PDDLSyntaxError("Axiom is missing its `:implies` atom.")
        return AxiomDef(implies.predicate, variables, context, implies)

    def require_def(self) -> frozenset[str]:
        """Parse PDDL requirements, beginning with the `:requirements` keyword.

        :return: Set of parsed PDDL requirement keys
        """
        self.match(PDDLTokenType.KEYWORD, value=":requirements")

        reqs = set()
        while self.lookahead_is(PDDLTokenType.KEYWORD):
            reqs.add(self.match(PDDLTokenType.KEYWORD).value)
        self.match(PDDLTokenType.CLOSE_PAREN)
        return frozenset(reqs)

    def type_decls(self) -> tuple[TypeDecl, ...]:
        """Parse the body of a `:types` section into declarations with merged parent types."""
        parents: dict[str, list[str]] = {}
        for typed_name in self.typed_list(PDDLTokenType.NAME):
            if typed_name.name == ROOT_TYPE:
                continue
            type_parents = parents.setdefault(typed_name.name, [])
            type_parents.extend(t for t in typed_name.types if t not in type_parents)

        self.match(PDDLTokenType.CLOSE_PAREN)
        return tuple(TypeDecl(name, tuple(p)) for name, p in parents.items())

    def _define_header(self, kind: str) -> str:
        """Match `(define (<kind> <name>)` and return the defined name."""
        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value="define")
        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.NAME, value=kind)
        name = self.match(PDDLTokenType.NAME).value
        self.match(PDDLTokenType.CLOSE_PAREN)
        return name

    def domain(self) -> DomainTree:
        """Parse a PDDL domain from the stream of input tokens."""
        domain_name = self._define_header("domain")

        reqs: frozenset[str] = frozenset()
        types: tuple[TypeDecl, ...] = ()
        constants: tuple[TypedName, ...] = ()
        predicates: list[PredicateDecl] = []
        actions: list[ActionDef] = []
        derived: list[DerivedDef] = []
        axioms: list[AxiomDef] = []

        # Permit sections to appear in any order
        while not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
            self.match(PDDLTokenType.OPEN_PAREN)
            if not self.lookahead_is(PDDLTokenType.KEYWORD):
                raise self._error("Expected a keyword token.")

            match self.input_token.value:
                case ":requirements":
                    reqs = self.require_def()

                case ":types":
                    self.match(PDDLTokenType.KEYWORD, value=":types")
                    types = self.type_decls()

                case ":constants":
                    self.match(PDDLTokenType.KEYWORD, value=":constants")
                    constants = tuple(self.typed_list(PDDLTokenType.NAME))
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":predicates":
                    self.match(PDDLTokenType.KEYWORD, value=":predicates")
                    while not self.lookahead_is(PDDLTokenType.CLOSE_PAREN):
                        predicates.append(self.atomic_formula_skeleton())
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":action":
                    actions.append(self.action())

                case ":derived":
                    derived.append(self.derived())

                case ":axiom":
                    axioms.append(self.axiom())

                case _:
                    raise self._error("Unexpected section in PDDL domain.")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return DomainTree(
            domain_name,
            reqs,
            types,
            constants,
            tuple(predicates),
            tuple(actions),
            tuple(derived),
            tuple(axioms),
        )

    def problem(self) -> ProblemTree:
        """Parse a PDDL problem from the stream of input tokens.

        Reference: Section 13 (pg. 18) of Ghallab et al., 1998.
        """
        problem_name = self._define_header("problem")

        self.match(PDDLTokenType.OPEN_PAREN)
        self.match(PDDLTokenType.KEYWORD, value=":domain")
        domain_name = self.match(PDDLTokenType.NAME).value
        self.match(PDDLTokenType.CLOSE_PAREN)

        reqs: frozenset[str] = frozenset()
        objects: tuple[TypedName, ...] = ()
        initial_state: list[AtomGoal] = []
        goal: Goal = AndGoal(())

        while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
            self.match(PDDLTokenType.OPEN_PAREN)
            if not self.lookahead_is(PDDLTokenType.KEYWORD):
                raise self._error("Expected a keyword token.")

            match self.input_token.value:
                case ":requirements":
                    reqs = self.require_def()

                case ":objects":
                    self.match(PDDLTokenType.KEYWORD, value=":objects")
                    objects = tuple(self.typed_list(PDDLTokenType.NAME))
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":init":
                    self.match(PDDLTokenType.KEYWORD, value=":init")
                    while self.lookahead_is(PDDLTokenType.OPEN_PAREN):
                        self.match(PDDLTokenType.OPEN_PAREN)
                        initial_state.append(self.atomic_formula(ground=True))
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case ":goal":
                    self.match(PDDLTokenType.KEYWORD, value=":goal")
                    goal = self.goal_description()
                    self.match(PDDLTokenType.CLOSE_PAREN)

                case _:
                    raise self._error("Unexpected section in PDDL problem.")

        self.match(PDDLTokenType.CLOSE_PAREN)
        return ProblemTree(problem_name, domain_name, reqs, objects, tuple(initial_state), goal)
