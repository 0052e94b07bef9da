# verbtree — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for the verbtree command-line tools."""
from rich.console import Console

console = Console(color_system="truecolor")
