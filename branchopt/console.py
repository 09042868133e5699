# Branchopt CLI Option Parser — (c) 2025 rtj.dev LLC — MIT Licensed
"""Default console instances and theme for branchopt output."""
from rich.console import Console
from rich.theme import Theme

branchopt_theme = Theme(
    {
        "help.header": "bold",
        "help.command": "cyan",
        "help.option": "green",
        "warning": "yellow",
        "error": "bold red",
    }
)

console = Console(theme=branchopt_theme)
error_console = Console(theme=branchopt_theme, stderr=True)
