from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import errors, inifile
from .errors import SpecLoadError
from .manager import SectionRegistry
from .paths import user_config_dir
from .sections import FileSections, FileSpec
from .specfile import load_file_spec


def _load_specs(paths: list[str]) -> list[FileSpec] | None:
    specs = []
    for p in paths:
        try:
            specs.append(load_file_spec(p))
        except SpecLoadError as exc:
            print(f"{p}: {exc}", file=sys.stderr)
            return None
    return specs


def _registry(paths: list[str]) -> SectionRegistry | None:
    specs = _load_specs(paths)
    if specs is None:
        return None
    registry = SectionRegistry()
    for path, spec in zip(paths, specs):
        if not registry.add_sections(spec):
            print(f"{path}: cannot register config type '{spec.config_type}'", file=sys.stderr)
            return None
    return registry


def _use_color(args: argparse.Namespace) -> bool:
    if args.color is not None:
        return args.color
    return sys.stdout.isatty()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def show_paths(args: argparse.Namespace) -> int:
    data = {"user_config": user_config_dir(args.app)}
    if args.as_json:
        print(json.dumps({k: str(v) for k, v in data.items()}))
    else:
        for k, v in data.items():
            print(f"{k}: {v}")
    return 0


def help_cmd(args: argparse.Namespace) -> int:
    registry = _registry(args.specs)
    if registry is None:
        return 1
    sys.stdout.write(registry.cli_help_text(color=_use_color(args)))
    return 0


def show_cmd(args: argparse.Namespace) -> int:
    registry = _registry(args.specs)
    if registry is None:
        return 1
    sys.stdout.write(registry.debug_text(show_builtins=args.builtins))
    return 0


def parse_cmd(args: argparse.Namespace) -> int:
    registry = _registry(args.specs)
    if registry is None:
        return 1
    ok = registry.parse_cli(["pyinicfg", *args.args])
    if not ok:
        print(registry.error_msg, file=sys.stderr)
    for config_type in registry:
        fs = registry.find_sections(config_type)
        for sec in fs:
            for name, opt in sec.option_set.items():
                if opt.read_from_cli:
                    where = f"{config_type or '(global)'} {sec.name or '(global)'}"
                    print(f"{where} {name} = {opt.value}")
    return 0 if ok else 1


def template_cmd(args: argparse.Namespace) -> int:
    specs = _load_specs([args.spec])
    if specs is None:
        return 1
    fs = FileSections(specs[0])
    target = Path(args.output) if args.output else fs.file_path()
    errors.clear_error_message()
    if not inifile.write_file(fs, target):
        print(errors.error_message(), file=sys.stderr)
        return 1
    print(str(target))
    return 0


def check_cmd(args: argparse.Namespace) -> int:
    specs = _load_specs([args.spec])
    if specs is None:
        return 1
    fs = FileSections(specs[0])
    result = 0
    for sec in fs:
        if not sec.option_set.verify():
            print(f"{sec.name}: {sec.option_set.error_message}", file=sys.stderr)
            result = 1
    if args.config:
        errors.clear_error_message()
        if not inifile.read_file(fs, args.config):
            print(errors.error_message(), file=sys.stderr)
            result = 1
    if result == 0:
        print("ok")
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyinicfg", description="Inspect option specifications and configuration files."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_paths = subparsers.add_parser("paths", help="Show the configuration directory.")
    p_paths.add_argument("--app", default="pyinicfg")
    p_paths.add_argument("--json", dest="as_json", action="store_true")
    p_paths.set_defaults(func=show_paths)

    p_help = subparsers.add_parser("help", help="Show command-line help for SPEC files.")
    p_help.add_argument("specs", nargs="+")
    p_help.add_argument("--color", dest="color", action="store_true", default=None)
    p_help.add_argument("--no-color", dest="color", action="store_false")
    p_help.set_defaults(func=help_cmd)

    p_show = subparsers.add_parser("show", help="Dump the options of SPEC files.")
    p_show.add_argument("specs", nargs="+")
    p_show.add_argument("--builtins", action="store_true", help="Include built-in options")
    p_show.set_defaults(func=show_cmd)

    p_parse = subparsers.add_parser("parse", help="Parse ARGS against SPEC files.")
    p_parse.add_argument("specs", nargs="+")
    p_parse.add_argument("--args", nargs=argparse.REMAINDER, default=[])
    p_parse.set_defaults(func=parse_cmd)

    p_template = subparsers.add_parser("template", help="Write a default configuration file.")
    p_template.add_argument("spec")
    p_template.add_argument("--output", default=None)
    p_template.set_defaults(func=template_cmd)

    p_check = subparsers.add_parser("check", help="Verify SPEC and optionally read CONFIG.")
    p_check.add_argument("spec")
    p_check.add_argument("config", nargs="?", default=None)
    p_check.set_defaults(func=check_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return int(exc.code or 0)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 1
    return int(func(args))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
