"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Used for the header of generated files, so that a reader can tell how
    the file was produced.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        # Called outside of a click invocation
        return "xsd_to_code"

    cli_args = ctx.params
    cmd_parts = ["xsd_to_code"]
    if not cli_args:
        return cmd_parts[0]

    for param in click_command.params:
        if not isinstance(param, click.Option) or param.name not in cli_args:
            continue

        value = cli_args[param.name]
        if not value or value == param.default:
            continue

        flag = param.opts[0] if param.opts else f"--{param.name}"
        if param.is_flag:
            cmd_parts.append(flag)
            continue

        # Paths are shown by name only, the absolute form is machine specific
        if isinstance(value, (str, Path)) and Path(str(value)).exists():
            value = Path(str(value)).name
        cmd_parts.extend([flag, str(value)])

    return " ".join(cmd_parts)
