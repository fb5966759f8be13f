"""Demo declarations used by the console when no application is attached.

Besides being handy for trying the console out, they show the intended
declaration style: variables with precomputed keys, a command that reads a
vector, and a command that accepts modifiers in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cvar_constants import CVAR_EXEC_OK
from .registry import RegistryBuilder
from .tokenizer import ArgsTokenizer, Vector3
from .variables import Variable, VariableKind

TEST_INTEGER_KEY = 0xF681F79D
ENABLE_EXTRA_LOGGING_KEY = 0xA40E0EA2
SET_PLAYER_POSITION_KEY = 0x13748F32

# Run once after the args file, like the start-up sequence of the demo program.
FOLLOW_UP_LINE = "SetPlayerPosition 2.000 5.000 7.000"


@dataclass
class DemoVariables:
    test_integer: Variable
    enable_extra_logging: Variable
    test_float: Variable
    user_string_prefix: Variable


@dataclass
class PerformanceTestArgs:
    position: Vector3 = (0.0, 0.0, 0.0)
    some_flag: bool = False
    file_name: str = ""


def parse_performance_args(args: ArgsTokenizer) -> PerformanceTestArgs:
    """Parse ``[-pos x y z] [-a] [-file name]`` in any order."""
    result = PerformanceTestArgs()
    while True:
        token: Optional[str] = args.next_token()
        if token is None:
            break
        if args.compare_token(token, "-pos"):
            _, result.position = args.next_vector3(result.position)
        elif args.compare_token(token, "-a"):
            result.some_flag = True
        elif args.compare_token(token, "-file"):
            result.file_name = args.next_token() or ""
    return result


def set_player_position(args: ArgsTokenizer) -> int:
    """SetPlayerPosition x y z"""
    _, (x, y, z) = args.next_vector3()
    print(f"SetPlayerPosition invoked args = {args.input_string} x = {x:g} y = {y:g} z = {z:g}")
    return CVAR_EXEC_OK


def set_performance_test_position(args: ArgsTokenizer) -> int:
    """SetPerformanceTestPosition [-pos x y z] [-a] [-file name]"""
    print(f"SetPerformanceTestPosition invoked args = {args.input_string}")
    parsed = parse_performance_args(args)
    x, y, z = parsed.position
    print(
        f"SetPerformanceTestPosition -pos x = {x:g} y = {y:g} z = {z:g}"
        f" -a {int(parsed.some_flag)} -file {parsed.file_name}"
    )
    return CVAR_EXEC_OK


def register_demo(builder: RegistryBuilder) -> DemoVariables:
    demo = DemoVariables(
        test_integer=builder.variable(
            "g_testInteger", VariableKind.INTEGER, 0, expected_hash=TEST_INTEGER_KEY
        ),
        enable_extra_logging=builder.variable(
            "g_EnableExtraLogging", VariableKind.BOOLEAN, False, expected_hash=ENABLE_EXTRA_LOGGING_KEY
        ),
        test_float=builder.variable("g_TestFloat", VariableKind.FLOAT, 0.0),
        user_string_prefix=builder.variable("g_UserStringPrefix", VariableKind.STRING, "user"),
    )
    builder.command("SetPlayerPosition", expected_hash=SET_PLAYER_POSITION_KEY)(set_player_position)
    builder.command("SetPerformanceTestPosition")(set_performance_test_position)
    return demo


def print_variables(demo: DemoVariables) -> None:
    print(f"g_TestInteger = {demo.test_integer.get_int()}")
    print(f"g_EnableExtraLogging = {demo.enable_extra_logging.format_value()}")
    print(f"g_TestFloat = {demo.test_float.get_float():g}")
    print(f"g_UserStringPrefix = {demo.user_string_prefix.get_string()}")


__all__ = [
    "DemoVariables",
    "FOLLOW_UP_LINE",
    "PerformanceTestArgs",
    "parse_performance_args",
    "print_variables",
    "register_demo",
    "set_performance_test_position",
    "set_player_position",
]
