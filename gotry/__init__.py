"""gotry: find and rewrite Go error checks that a try builtin could replace."""

__version__ = "0.1.0"
