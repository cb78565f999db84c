from src.parsing.in2 import load_in2, parse_in2

__all__ = ["load_in2", "parse_in2"]
