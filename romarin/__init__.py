"""Neural and physics-based MOSFET modelling with Verilog-A export."""

__version__ = "0.1.0"