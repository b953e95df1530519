from __future__ import annotations

from pyinicfg.options import OptionSpec
from pyinicfg.section import COMMENTS_SPEC, MAIN_SECTION_SPEC, SectionSpec
from pyinicfg.sections import FileSpec


def sample_options() -> dict[str, OptionSpec]:
    """Options covering the common kinds, in the style of an application set."""
    return {
        "alertable": OptionSpec("a", "boolean", True, "false", description="If true, use alerts."),
        "canned-code": OptionSpec("c", "boolean", True, "true", description="Use canned code."),
        "dead-code": OptionSpec("d", "boolean", True, "false", description="Include dead code."),
        "disabled": OptionSpec("D", "boolean", False, "false", description="Not on the command line."),
        "username": OptionSpec("u", "string", True, "Joe Cool", description="Name of the user."),
        "loop-count": OptionSpec("", "integer", True, "0<=0<=99", description="Number of loops."),
        "flux": OptionSpec("f", "floating", True, "0.0<=0.1<=50.0", description="Flux capacity."),
        "outfile": OptionSpec("", "filename", True, "out.txt", description="Output file."),
        "window": OptionSpec("", "intpair", True, "640x480", description="Window size."),
    }


MISC_SPEC = SectionSpec(
    "[misc]",
    "Miscellaneous settings.\nThese are just examples.",
    {
        "sets-mode": OptionSpec("", "string", True, "normal", description="Handling of sets."),
        "port-naming": OptionSpec("", "string", True, "short", description="Port naming style."),
    },
)

INTERACTION_SPEC = SectionSpec(
    "interaction-method",
    "User interaction.",
    {
        "snap-split": OptionSpec("s", "boolean", True, "false", description="Snap split."),
        "double-click-edit": OptionSpec(
            "", "boolean", False, "true", description="Double-click edits."
        ),
    },
)

SMALL_SPEC = FileSpec(
    extension=".small",
    directory="",
    basename="small",
    description="A small test file.",
    sections=(MAIN_SECTION_SPEC, COMMENTS_SPEC, MISC_SPEC, INTERACTION_SPEC),
)


def audio_spec(ext: str = "rc", code: str = "g") -> FileSpec:
    audio = SectionSpec(
        "[audio]",
        "Audio settings.",
        {
            "gain": OptionSpec(code, "floating", True, "0.0<=1.0<=2.0", description="Output gain."),
            "channels": OptionSpec("", "integer", True, "1<=2<=8", description="Channels."),
        },
    )
    return FileSpec(extension=ext, basename="demo", description="Demo.", sections=(audio,))


def ui_spec(ext: str = "usr", option: str = "gain", code: str = "") -> FileSpec:
    ui = SectionSpec(
        "[ui]",
        "User interface.",
        {
            option: OptionSpec(code, "floating", True, "0.5", description="UI gain."),
            "theme": OptionSpec("t", "string", True, "dark", description="Theme."),
        },
    )
    return FileSpec(extension=ext, basename="demo", description="UI.", sections=(ui,))


DEMO_TOML = """
extension = "rc"
basename = "demo"
description = "Demo file."

[[sections]]
name = "[Cfg66]"

[[sections]]
name = "audio"
description = "Audio settings."

[sections.options.gain]
code = "g"
kind = "float"
default = "0.0<=1.0<=2.0"
description = "Output gain."

[sections.options.mute]
cli = false
"""
