"""Shell invocation model."""

import os

from pydantic import BaseModel, ConfigDict, model_validator

from dotree.constants import PLACEHOLDER

# Invocation templates for the shells dotree knows by name.
BUILTIN_SHELLS: dict[str, tuple[str, ...]] = {
    "bash": ("-c", PLACEHOLDER),
    "zsh": ("-c", PLACEHOLDER),
    "fish": ("-c", PLACEHOLDER),
    "sh": ("-c", PLACEHOLDER),
    "cmd": ("/C", PLACEHOLDER),
    "powershell": ("-NoLogo", "-NoProfile", "-Command", PLACEHOLDER),
    "pwsh": ("-NoLogo", "-NoProfile", "-Command", PLACEHOLDER),
}


def classify_shell(candidate: str) -> str | None:
    """Return the known shell name for an executable name or path."""
    name = os.path.basename(candidate).lower()
    if name.endswith(".exe"):
        name = name[: -len(".exe")]
    if name in BUILTIN_SHELLS:
        return name
    return None


class ShellDef(BaseModel):
    """How to run a command string: ``program`` followed by ``args``.

    Exactly one of ``args`` is the placeholder that receives the command.
    """

    model_config = ConfigDict(frozen=True)

    program: str
    args: tuple[str, ...]

    @model_validator(mode="after")
    def _has_one_placeholder(self) -> "ShellDef":
        count = self.args.count(PLACEHOLDER)
        if count != 1:
            raise ValueError(
                f"shell arguments must contain the placeholder {PLACEHOLDER} exactly once, "
                f"found {count}"
            )
        return self

    @classmethod
    def from_name(cls, program: str) -> "ShellDef":
        """Build the built-in definition for a shell name or path to one."""
        kind = classify_shell(program)
        if kind is None:
            raise ValueError(f"unknown shell {program!r}")
        return cls(program=program, args=BUILTIN_SHELLS[kind])

    @classmethod
    def default(cls) -> "ShellDef":
        if os.name == "nt":
            return cls.from_name("cmd")
        return cls.from_name("sh")

    def argv(self, command: str) -> list[str]:
        """Return the full argument list that runs ``command``."""
        return [self.program, *(command if arg == PLACEHOLDER else arg for arg in self.args)]
