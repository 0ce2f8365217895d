#!/usr/bin/env python3
"""Generate shell completion scripts for the splicefs CLI."""

from pathlib import Path

from click.shell_completion import get_completion_class
from typer.main import get_command

from splicefs.cli.main import app

SHELLS = {
    "bash": "_SPLICEFS_COMPLETE=bash_source",
    "zsh": "_SPLICEFS_COMPLETE=zsh_source",
    "fish": "_SPLICEFS_COMPLETE=fish_source",
}


def generate_completions():
    """Generate completion scripts for all supported shells."""
    command = get_command(app)
    for shell in SHELLS:
        print(f"Generating {shell} completion...")

        completion_class = get_completion_class(shell)
        completion = completion_class(command, {}, "splicefs", "_SPLICEFS_COMPLETE")
        completion_script = completion.source()

        output_file = Path(__file__).parent / f"splicefs.{shell}"
        with open(output_file, "w") as f:
            f.write(completion_script)

        print(f"  Saved to: {output_file}")

    print("\nCompletion scripts generated successfully!")
    print("\nTo install completions:")
    for shell, variable in SHELLS.items():
        print(f"  {shell}: source completions/splicefs.{shell}  (or eval \"$({variable} splicefs)\")")


if __name__ == "__main__":
    generate_completions()
