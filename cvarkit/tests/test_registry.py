"""Tests for the console variable and command registry."""

import logging
from typing import Any, Dict, List, Tuple

import pytest

import cvarkit.registry as registry_module
from cvarkit.cvar_constants import CVAR_EXEC_FAIL, CVAR_EXEC_OK, CVAR_HASH_INVALID
from cvarkit.demo import PerformanceTestArgs, parse_performance_args
from cvarkit.hashing import hash_name
from cvarkit.registry import (
    EntryKind,
    FunctionEntry,
    RegistryBuilder,
    RegistryFrozenError,
    VariableEntry,
    find_first_non_whitespace,
    find_name_boundary,
)
from cvarkit.tokenizer import ArgsTokenizer
from cvarkit.variables import Variable, VariableKind


def _snapshot(registry) -> List[Tuple[str, Any]]:
    return [(item["name"], item["value"]) for item in registry.describe_variables()]


class TestLineHelpers:
    def test_name_boundary(self):
        assert find_name_boundary("g_flag") == 6
        assert find_name_boundary("g_x 1") == 3
        assert find_name_boundary(" g_x 1") == 0

    def test_first_non_whitespace(self):
        assert find_first_non_whitespace("g_x \t 1", 3) == 6
        assert find_first_non_whitespace("g_x   ", 3) == 6


class TestRegistration:
    def test_register_variable_returns_hash(self, builder):
        key = builder.register_variable("g_value", Variable(VariableKind.INTEGER, 0))
        assert key == hash_name("g_value")
        assert len(builder) == 1

    def test_first_registrant_wins(self, builder):
        first = Variable(VariableKind.INTEGER, 1)
        second = Variable(VariableKind.INTEGER, 2)
        key = builder.register_variable("g_dup", first)
        assert builder.register_variable("G_DUP", second) == CVAR_HASH_INVALID
        registry = builder.freeze()
        entry = registry.lookup(key)
        assert isinstance(entry, VariableEntry)
        assert entry.variable is first
        assert registry.get_int(key) == 1
        assert registry.get_stats()["rejected"] == 1

    def test_function_cannot_replace_variable(self, builder):
        var = builder.variable("g_shared", VariableKind.BOOLEAN, False)
        assert builder.register_function("g_shared", lambda args: 1) == CVAR_HASH_INVALID
        registry = builder.freeze()
        assert registry.lookup_name("g_shared").variable is var

    def test_rejects_empty_name_and_missing_targets(self, builder):
        assert builder.register_variable("", Variable(VariableKind.INTEGER, 0)) == CVAR_HASH_INVALID
        assert builder.register_variable(None, Variable(VariableKind.INTEGER, 0)) == CVAR_HASH_INVALID
        assert builder.register_variable("g_none", None) == CVAR_HASH_INVALID
        assert builder.register_function("cmd", None) == CVAR_HASH_INVALID
        assert len(builder) == 0
        assert builder.rejected == 4

    def test_hash_collision_keeps_first_and_warns(self, builder, monkeypatch, caplog):
        monkeypatch.setattr(registry_module, "hash_name", lambda name: 0x1234 if name else 0)
        builder.register_variable("alpha", Variable(VariableKind.INTEGER, 1))
        with caplog.at_level(logging.WARNING, logger="cvarkit.registry"):
            assert builder.register_variable("beta", Variable(VariableKind.INTEGER, 2)) == CVAR_HASH_INVALID
        assert "hash collision" in caplog.text
        assert "alpha" in caplog.text and "beta" in caplog.text
        monkeypatch.undo()
        registry = builder.freeze()
        assert registry.lookup(0x1234).name == "alpha"

    def test_register_after_freeze_raises(self, builder):
        builder.freeze()
        with pytest.raises(RegistryFrozenError):
            builder.register_variable("late", Variable(VariableKind.INTEGER, 0))
        with pytest.raises(RegistryFrozenError):
            builder.register_function("late_cmd", lambda args: 1)

    def test_expected_hash_mismatch_raises(self, builder):
        with pytest.raises(ValueError):
            builder.variable("g_testInteger", VariableKind.INTEGER, 0, expected_hash=0xDEADBEEF)
        with pytest.raises(ValueError):
            builder.command("SetPlayerPosition", expected_hash=0x1)

    def test_command_decorator_uses_docstring(self, builder):
        @builder.command("Ping")
        def ping(args):
            """Answer with pong."""
            return 1

        registry = builder.freeze()
        entry = registry.lookup_name("ping")
        assert isinstance(entry, FunctionEntry)
        assert entry.kind is EntryKind.FUNCTION
        assert entry.function is ping
        assert entry.help_text == "Answer with pong."

    def test_frozen_registry_is_read_only(self, builder):
        builder.variable("g_x", VariableKind.INTEGER, 0)
        registry = builder.freeze()
        assert len(registry) == 1
        assert hash_name("g_x") in registry
        assert [entry.name for entry in registry] == ["g_x"]
        with pytest.raises(TypeError):
            registry._entries[1] = None  # type: ignore[index]


class TestTypedGetters:
    def test_getters_degrade_to_zero_values(self, demo_setup):
        registry = demo_setup.registry
        float_key = hash_name("g_TestFloat")
        command_key = hash_name("SetPlayerPosition")
        assert registry.get_int(float_key) == 0
        assert registry.get_string(float_key) == ""
        assert registry.get_bool(command_key) is False
        assert registry.get_float(0xABCDEF01) == 0.0
        assert registry.get_bool(CVAR_HASH_INVALID) is False
        assert registry.lookup(CVAR_HASH_INVALID) is None

    def test_getters_read_defaults(self, demo_setup):
        registry = demo_setup.registry
        assert registry.get_int(0xF681F79D) == 0
        assert registry.get_bool(0xA40E0EA2) is False
        assert registry.get_string(hash_name("g_UserStringPrefix")) == "user"


class TestExecuteVariables:
    def test_assignment_round_trip(self, demo_setup):
        registry = demo_setup.registry
        assert registry.execute("g_TestFloat 3.5") == CVAR_EXEC_OK
        assert registry.get_float(hash_name("g_TestFloat")) == 3.5
        assert registry.execute("g_testInteger 42") == CVAR_EXEC_OK
        assert registry.get_int(0xF681F79D) == 42
        assert registry.execute("g_EnableExtraLogging true") == CVAR_EXEC_OK
        assert registry.get_bool(0xA40E0EA2) is True
        assert registry.execute("g_UserStringPrefix admin") == CVAR_EXEC_OK
        assert registry.get_string(hash_name("g_UserStringPrefix")) == "admin"

    def test_names_are_case_insensitive(self, demo_setup):
        assert demo_setup.registry.execute("G_TESTINTEGER 5") == CVAR_EXEC_OK
        assert demo_setup.demo.test_integer.get_int() == 5

    def test_malformed_values_degrade_to_zero(self, demo_setup):
        registry = demo_setup.registry
        registry.execute("g_testInteger 12")
        assert registry.execute("g_testInteger banana") == CVAR_EXEC_OK
        assert demo_setup.demo.test_integer.get_int() == 0
        assert registry.execute("g_TestFloat x1") == CVAR_EXEC_OK
        assert demo_setup.demo.test_float.get_float() == 0.0

    def test_bool_assignment_accepts_numbers(self, demo_setup):
        registry = demo_setup.registry
        registry.execute("g_EnableExtraLogging 1")
        assert demo_setup.demo.enable_extra_logging.get_bool() is True
        registry.execute("g_EnableExtraLogging 0")
        assert demo_setup.demo.enable_extra_logging.get_bool() is False

    def test_bare_flag_sets_boolean(self, demo_setup):
        assert demo_setup.registry.execute("g_EnableExtraLogging") == CVAR_EXEC_OK
        assert demo_setup.demo.enable_extra_logging.get_bool() is True

    def test_bare_flag_on_non_boolean_is_a_no_op(self, demo_setup):
        registry = demo_setup.registry
        registry.execute("g_testInteger 3")
        assert registry.execute("g_testInteger") == CVAR_EXEC_FAIL
        assert demo_setup.demo.test_integer.get_int() == 3
        assert registry.execute("g_UserStringPrefix") == CVAR_EXEC_FAIL
        assert demo_setup.demo.user_string_prefix.get_string() == "user"

    def test_trailing_whitespace_is_an_empty_assignment(self, demo_setup):
        registry = demo_setup.registry
        registry.execute("g_EnableExtraLogging")
        assert registry.execute("g_EnableExtraLogging ") == CVAR_EXEC_OK
        assert demo_setup.demo.enable_extra_logging.get_bool() is False

    def test_string_keeps_rest_of_line(self, demo_setup):
        demo_setup.registry.execute("g_UserStringPrefix \t hello  world ")
        assert demo_setup.demo.user_string_prefix.get_string() == "hello  world "

    def test_string_reassignment_transfers_ownership(self, demo_setup):
        var = demo_setup.demo.user_string_prefix
        default = var.payload
        assert not var.owns_string
        demo_setup.registry.execute("g_UserStringPrefix a")
        first = var.payload
        assert var.owns_string
        demo_setup.registry.execute("g_UserStringPrefix bcd")
        second = var.payload
        assert first.released
        assert not second.released
        assert var.get_string() == "bcd"
        assert default.text == "user"
        demo_setup.registry.close()
        assert second.released
        # A second shutdown pass must not release anything again.
        demo_setup.registry.close()
        var.close()

    def test_unknown_command_is_ignored(self, demo_setup):
        registry = demo_setup.registry
        before = _snapshot(registry)
        assert registry.execute("doesNotExist 1 2 3") == CVAR_EXEC_FAIL
        assert registry.execute("doesNotExist") == CVAR_EXEC_FAIL
        assert _snapshot(registry) == before

    @pytest.mark.parametrize("line", ["", "   ", " g_testInteger 5", None])
    def test_empty_or_indented_lines_fail(self, demo_setup, line):
        assert demo_setup.registry.execute(line) == CVAR_EXEC_FAIL
        assert demo_setup.demo.test_integer.get_int() == 0


class TestExecuteFunctions:
    def _registry_with(self, builder, name, handler):
        builder.register_function(name, handler)
        return builder.freeze()

    def test_handler_gets_rest_of_line(self, builder):
        seen: Dict[str, Any] = {}

        def handler(args: ArgsTokenizer) -> int:
            seen["input"] = args.input_string
            seen["tokens"] = list(args)
            return 7

        registry = self._registry_with(builder, "Cmd", handler)
        assert registry.execute("cmd   -a  b") == 7
        assert seen == {"input": "-a  b", "tokens": ["-a", "b"]}

    def test_bare_command_gets_empty_tokenizer(self, builder):
        seen: List[str] = []

        def handler(args: ArgsTokenizer) -> int:
            seen.append(args.input_string)
            return args.next_token() is None

        registry = self._registry_with(builder, "Cmd", handler)
        assert registry.execute("Cmd") == 1
        assert seen == [""]

    def test_handler_result_is_propagated(self, builder):
        registry = self._registry_with(builder, "Fail", lambda args: 0)
        assert registry.execute("Fail now") == CVAR_EXEC_FAIL

    def test_raising_handler_reports_failure(self, builder, caplog):
        def handler(args):
            raise RuntimeError("boom")

        registry = self._registry_with(builder, "Boom", handler)
        with caplog.at_level(logging.ERROR, logger="cvarkit.registry"):
            assert registry.execute("Boom") == CVAR_EXEC_FAIL
        assert "Boom failed" in caplog.text

    def test_non_integer_handler_result_reports_failure(self, builder, caplog):
        registry = self._registry_with(builder, "Cmd", lambda args: "done")
        with caplog.at_level(logging.WARNING, logger="cvarkit.registry"):
            assert registry.execute("Cmd") == CVAR_EXEC_FAIL
        assert "non-integer status 'done'" in caplog.text
        assert registry.get_stats()["failed"] == 1

    def test_modifier_order_does_not_matter(self, builder):
        results: List[PerformanceTestArgs] = []

        def handler(args: ArgsTokenizer) -> int:
            results.append(parse_performance_args(args))
            return 1

        registry = self._registry_with(builder, "Cmd", handler)
        assert registry.execute("Cmd -a -pos 1 2 3 -file out.txt") == 1
        assert registry.execute("Cmd -pos 1 2 3 -a -file out.txt") == 1
        assert results[0] == results[1]
        assert results[0] == PerformanceTestArgs(position=(1.0, 2.0, 3.0), some_flag=True, file_name="out.txt")


class TestArgsFile:
    def test_execute_lines_counts_successes(self, demo_setup):
        applied = demo_setup.registry.execute_lines(
            ["g_testInteger 4\n", "\n", "nope 1\n", "g_EnableExtraLogging\r\n"]
        )
        assert applied == 2
        assert demo_setup.demo.test_integer.get_int() == 4
        assert demo_setup.demo.enable_extra_logging.get_bool() is True
        # Blank lines are skipped rather than counted as failures.
        assert demo_setup.registry.get_stats()["executed"] == 3

    def test_execute_file(self, demo_setup, tmp_path):
        args_file = tmp_path / "args.txt"
        args_file.write_bytes(b"g_TestFloat 2.5\r\ng_UserStringPrefix guest\r\nSetPlayerPosition 1 2 3\r\n")
        assert demo_setup.registry.execute_file(args_file) == 3
        assert demo_setup.demo.test_float.get_float() == 2.5
        assert demo_setup.demo.user_string_prefix.get_string() == "guest"

    def test_missing_file_is_logged(self, demo_setup, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="cvarkit.registry"):
            assert demo_setup.registry.execute_file(tmp_path / "missing.txt") == 0
        assert "cannot read args file" in caplog.text

    def test_execute_file_survives_non_utf8_bytes(self, demo_setup, tmp_path):
        args_file = tmp_path / "args.txt"
        args_file.write_bytes(b"g_testInteger 4\ng_UserStringPrefix caf\xe9\ng_TestFloat 2.5\n")
        assert demo_setup.registry.execute_file(args_file) == 3
        assert demo_setup.demo.test_integer.get_int() == 4
        assert demo_setup.demo.user_string_prefix.get_string() == "caf\ufffd"
        assert demo_setup.demo.test_float.get_float() == 2.5

    def test_undecodable_name_is_an_unknown_command(self, demo_setup):
        assert demo_setup.registry.execute("caf\udce9 1") == CVAR_EXEC_FAIL

    def test_setup_from_argv(self, demo_setup, tmp_path):
        args_file = tmp_path / "args.txt"
        args_file.write_text("g_testInteger 11\n", encoding="utf-8")
        assert demo_setup.registry.setup_from_argv(["prog"]) == 0
        assert demo_setup.registry.setup_from_argv(["prog", str(args_file)]) == 1
        assert demo_setup.demo.test_integer.get_int() == 11


class TestIntrospection:
    def test_event_hook_sees_changes_and_calls(self, demo_setup):
        events: List[Tuple[str, Dict[str, Any]]] = []
        demo_setup.registry.set_event_hook(lambda event, **payload: events.append((event, payload)))
        demo_setup.registry.execute("g_testInteger 8")
        demo_setup.registry.execute("SetPlayerPosition 1 2 3")
        names = [event for event, _ in events]
        assert names == ["variable_changed", "command_invoked", "command_completed"]
        changed = events[0][1]
        assert changed["old_value"] == 0 and changed["new_value"] == 8
        assert events[1][1]["args"] == "1 2 3"
        assert events[2][1]["status"] == 1

    def test_describe_and_stats(self, demo_setup):
        registry = demo_setup.registry
        variables = registry.describe_variables()
        assert [item["name"] for item in variables] == [
            "g_EnableExtraLogging",
            "g_TestFloat",
            "g_testInteger",
            "g_UserStringPrefix",
        ]
        commands = registry.describe_commands()
        assert {item["name"] for item in commands} == {"SetPlayerPosition", "SetPerformanceTestPosition"}
        registry.execute("nope")
        registry.execute("g_testInteger 1")
        stats = registry.get_stats()
        assert stats["entries"] == 6
        assert stats["variables"] == 4
        assert stats["commands"] == 2
        assert stats["executed"] == 2
        assert stats["failed"] == 1
