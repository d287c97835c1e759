"""
Tests for the query module.

Tests query parsing, selection-set projection and the response envelope.
"""

import pytest

from schema_synth.errors import InvalidSelectionError, QueryParseError, UnknownFieldError
from schema_synth.generator import compile_schema
from schema_synth.models import SelectionSet
from schema_synth.query import QueryParser, QueryProjector, compile_query, parse_query
from schema_synth.strategies import Sampler

POSITIONS = {"goalkeeper", "defence", "attack"}


@pytest.fixture
def sampler():
    return Sampler(seed=7)


@pytest.fixture
def generators():
    schema = {
        "enums": {"position": {"values": ["goalkeeper", "defence", "attack"]}},
        "objects": {
            "team": {"fields": {
                "name": {"type": "String"},
                "wins": {"type": "Int"},
                "losses": {"type": "Int"},
                "players": {"type": ["player"]},
            }},
            "player": {"fields": {
                "name": {"type": "String"},
                "age": {"type": "Int"},
                "position": {"type": "position"},
                "team": {"type": "team"},
            }},
        },
        "queries": {
            "teams": {"type": ["team"]},
            "player": {"type": "player", "args": {"id": {"type": "ID"}}},
            "positions": {"type": ["position"]},
        },
    }
    return compile_schema(schema, width={"team": 3, "player": 3})


class TestQueryParser:
    """Tests for the GraphQL query parser."""

    def test_nested_selection(self):
        parsed = QueryParser().parse("{ teams { wins players { name } } }")

        assert parsed.operation_name is None
        assert parsed.root_fields == ["teams"]
        teams = parsed.selection_set.selections[0]
        assert teams.selections.output_keys == ["wins", "players"]
        players = teams.selections.selections[1]
        assert players.selections.output_keys == ["name"]

    def test_alias(self):
        selection_set = parse_query("{ teams { victories: wins } }")
        wins = selection_set.selections[0].selections.selections[0]

        assert wins.name == "wins"
        assert wins.alias == "victories"
        assert wins.output_key == "victories"

    def test_named_operation_and_variables(self):
        parsed = QueryParser().parse(
            "query Roster($id: ID!) { player(id: $id) { name } }"
        )
        assert parsed.operation_name == "Roster"
        assert parsed.variables == ["id"]
        assert parsed.root_fields == ["player"]

    def test_fragments_are_flattened(self):
        query = """
        query { teams { ...TeamFields ... on team { losses } } }
        fragment TeamFields on team { name wins }
        """
        teams = parse_query(query).selections[0]
        assert teams.selections.output_keys == ["name", "wins", "losses"]

    def test_repeated_fields_are_merged(self):
        query = "{ teams { players { name } } teams { wins players { age } } }"
        selection_set = parse_query(query)

        assert selection_set.output_keys == ["teams"]
        teams = selection_set.selections[0]
        assert teams.selections.output_keys == ["players", "wins"]
        assert teams.selections.selections[0].selections.output_keys == ["name", "age"]

    def test_conflicting_alias(self):
        with pytest.raises(QueryParseError, match="both"):
            parse_query("{ teams { x: wins x: losses } }")

    def test_operation_selection(self):
        query = "query A { teams { wins } } query B { player { name } }"
        assert parse_query(query, operation_name="B").output_keys == ["player"]
        with pytest.raises(QueryParseError, match="operation name"):
            parse_query(query)
        with pytest.raises(QueryParseError, match="Unknown operation"):
            parse_query(query, operation_name="C")

    def test_mutation_rejected(self):
        with pytest.raises(QueryParseError, match="mutation"):
            parse_query("mutation { addTeam { name } }")

    def test_syntax_error(self):
        with pytest.raises(QueryParseError):
            parse_query("{ teams { wins ")

    def test_unknown_fragment(self):
        with pytest.raises(QueryParseError, match="Unknown fragment"):
            parse_query("{ teams { ...Missing } }")

    def test_self_spreading_fragment(self):
        query = """
        { teams { ...F } }
        fragment F on team { players { team { ...F } } }
        """
        with pytest.raises(QueryParseError, match="spreads itself"):
            parse_query(query)


class TestQueryProjector:
    """Tests for selection-set projection."""

    def test_projection_exactness(self, generators, sampler):
        strategy = compile_query(generators, "{ teams { wins players { name } } }")

        for result in sampler.sample(strategy, 20):
            assert list(result) == ["data"]
            assert list(result["data"]) == ["teams"]
            for team in result["data"]["teams"]:
                assert set(team) == {"wins", "players"}
                assert isinstance(team["wins"], int)
                for player in team["players"]:
                    assert set(player) == {"name"}
                    assert isinstance(player["name"], str)

    def test_project_single_query(self, generators, sampler):
        selection_set = SelectionSet.from_list(["name", "position"])
        strategy = QueryProjector(generators).project("player", selection_set)

        for result in sampler.sample(strategy, 20):
            player = result["data"]["player"]
            assert set(player) == {"name", "position"}
            assert player["position"] in POSITIONS

    def test_aliases_are_output_keys(self, generators, sampler):
        strategy = compile_query(
            generators,
            "{ best: player { years: age club: team { name } } }",
        )
        result = sampler.example(strategy)

        assert list(result["data"]) == ["best"]
        player = result["data"]["best"]
        assert set(player) == {"years", "club"}
        assert set(player["club"]) == {"name"}

    def test_root_alias(self, generators, sampler):
        selection_set = SelectionSet.from_list(["wins"])
        strategy = QueryProjector(generators).project("teams", selection_set, alias="league")
        assert list(sampler.example(strategy)["data"]) == ["league"]

    def test_selection_deeper_than_depth_budget(self, generators, sampler):
        # Explicit selections are followed regardless of recursion budgets
        strategy = compile_query(
            generators,
            "{ player { team { players { team { players { team { name } } } } } } }",
        )
        for result in sampler.sample(strategy, 10):
            for first in result["data"]["player"]["team"]["players"]:
                for second in first["team"]["players"]:
                    assert set(second["team"]) == {"name"}

    def test_width_applies_in_projection(self, generators, sampler):
        strategy = compile_query(generators, "{ teams { players { age } } }")
        for result in sampler.sample(strategy, 30):
            assert len(result["data"]["teams"]) <= 3
            for team in result["data"]["teams"]:
                assert len(team["players"]) <= 3

    def test_list_of_enums(self, generators, sampler):
        strategy = compile_query(generators, "{ positions }")
        for result in sampler.sample(strategy, 10):
            assert set(result["data"]["positions"]) <= POSITIONS

    def test_typename(self, generators, sampler):
        strategy = compile_query(generators, "{ __typename player { __typename name } }")
        result = sampler.example(strategy)

        assert result["data"]["__typename"] == "Query"
        assert result["data"]["player"]["__typename"] == "player"

    def test_object_without_selection_uses_full_generator(self, generators, sampler):
        strategy = QueryProjector(generators).project("player")
        player = sampler.example(strategy)["data"]["player"]
        assert set(player) == {"name", "age", "position", "team"}

    def test_multiple_root_fields(self, generators, sampler):
        strategy = compile_query(generators, "{ teams { name } player { age } }")
        result = sampler.example(strategy)
        assert list(result["data"]) == ["teams", "player"]

    def test_variables_are_ignored(self, generators, sampler):
        query = "query ($id: ID) { player(id: $id) { name } }"
        with_vars = compile_query(generators, query, variables={"id": "abc"})
        without_vars = compile_query(generators, query)

        assert Sampler(seed=3).sample(with_vars, 5) == Sampler(seed=3).sample(without_vars, 5)

    def test_unknown_field(self, generators):
        with pytest.raises(UnknownFieldError) as exc_info:
            compile_query(generators, "{ teams { wins draws } }")
        assert exc_info.value.type_name == "team"
        assert exc_info.value.field_name == "draws"

    def test_unknown_nested_field(self, generators):
        with pytest.raises(UnknownFieldError, match="shirt"):
            compile_query(generators, "{ teams { players { shirt } } }")

    def test_unknown_query(self, generators):
        with pytest.raises(UnknownFieldError) as exc_info:
            compile_query(generators, "{ stadiums { name } }")
        assert exc_info.value.type_name == "Query"

    def test_selection_on_leaf(self, generators):
        with pytest.raises(InvalidSelectionError):
            compile_query(generators, "{ teams { wins { value } } }")
