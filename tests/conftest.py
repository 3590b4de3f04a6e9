"""Register the shared test fixtures."""

pytest_plugins = ["tests.fixtures.pddl_fixtures"]
