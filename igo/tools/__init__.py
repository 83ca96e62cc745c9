"""Side tools available from the prompt."""

from igo.tools.shell import ShellCommandTool, ShellResult

__all__ = ["ShellCommandTool", "ShellResult"]
