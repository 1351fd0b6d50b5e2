"""Verilog-A function wrapper for a device behaviour."""

from __future__ import annotations

from typing import Any

_FUNCTION_NAME = "MLDeviceBehavior"


def to_verilog(program: Any) -> str:
    """Return the Verilog-A function skeleton computing the drain current.

    The program is accepted for the body to come; the skeleton does not use it.
    """
    lines = [
        f"function real {_FUNCTION_NAME};",
        "  input d, g, s;",
        "  electrical d, g, s;",
        "  real Id, Vgs, Vds;",
        "  begin",
        "      Vgs = V(g, s);",
        "      Vds = V(d, s);",
        f"      {_FUNCTION_NAME} = Id;",
        "  end",
        "endfunction",
    ]
    return "".join(line + "\n" for line in lines)