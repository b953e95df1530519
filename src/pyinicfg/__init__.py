from .errors import InicfgError, SpecLoadError
from .manager import SectionRegistry
from .options import (
    Kind,
    Option,
    OptionSet,
    OptionSpec,
    almost_equal,
    approximates,
)
from .section import COMMENTS_SPEC, GLOBAL, MAIN_SECTION_SPEC, Section, SectionSpec
from .sections import FileSections, FileSpec


__version__ = "0.1.0"


__all__ = [
    "COMMENTS_SPEC",
    "FileSections",
    "FileSpec",
    "GLOBAL",
    "InicfgError",
    "Kind",
    "MAIN_SECTION_SPEC",
    "Option",
    "OptionSet",
    "OptionSpec",
    "Section",
    "SectionRegistry",
    "SectionSpec",
    "SpecLoadError",
    "almost_equal",
    "approximates",
]
