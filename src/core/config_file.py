"""Typed parsing and writing of ``prevet.yml``.

This module loads and validates the persisted check configuration. It
provides one strict schema so the CLI, the SDK, and the mode runner all
consume the same validated ``Config`` and never see raw YAML.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Callable, Mapping, cast

from core.config_fields import (
    expect_mapping,
    expect_sequence,
    float_with_default,
    int_with_default,
    optional_bool,
    optional_mapping,
    optional_string,
    reject_unknown_keys,
    required_string,
    string_tuple,
)
from core.constants import (
    DEFAULT_IGNORE_PATTERNS,
    ROOT_DIRECTORY,
    SUPPORTED_CHECK_KINDS,
    SUPPORTED_MODES,
    TOOL_VERSION,
)
from core.errors import PrevetConfigError, PrevetDependencyError
from core.types import (
    Build,
    CheckConfig,
    CheckKind,
    CheckPrerequisite,
    Config,
    Coverage,
    CoverageSettings,
    Custom,
    Errcheck,
    Gofmt,
    Goimports,
    Golint,
    Govet,
    Mode,
    ModeName,
    Test,
)

CheckParser = Callable[[Mapping[str, object], str], CheckConfig]


def load_config(config_path: str | Path) -> Config:
    """Load and validate a YAML configuration from disk.

    Args:
        config_path: File path to ``prevet.yml``.

    Returns:
        Fully validated configuration.

    Raises:
        PrevetDependencyError: If PyYAML is unavailable.
        PrevetConfigError: If the file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(Path(config_path))
    return parse_config(payload)


def parse_config(payload: object) -> Config:
    """Validate an already decoded configuration payload."""
    root_mapping = expect_mapping(payload, "config root")
    reject_unknown_keys(root_mapping, {"min_version", "modes", "ignore_patterns"}, "Config root")
    min_version = _parse_min_version(root_mapping)
    modes = _parse_modes(root_mapping)
    ignore_patterns = string_tuple(root_mapping, "ignore_patterns", "Config root")
    return Config(min_version=min_version, modes=modes, ignore_patterns=ignore_patterns)


def parse_semver(raw_version: str) -> tuple[int, int, int]:
    """Parse a ``MAJOR.MINOR.PATCH`` version string."""
    parts = raw_version.strip().split(".")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise PrevetConfigError(
            f"Invalid version '{raw_version}'. Use semantic versioning such as 0.4.6."
        )
    major, minor, patch = (int(part) for part in parts)
    return major, minor, patch


def _load_yaml_payload(config_file: Path) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise PrevetDependencyError(
            "YAML configuration support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    config_file = config_file.expanduser().resolve()
    if not config_file.exists():
        raise PrevetConfigError(
            f"Config file does not exist at {config_file}. "
            "Run 'prevet writeconfig' to create the default one."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise PrevetConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise PrevetConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise PrevetConfigError(f"Config at {config_file} is empty. Define 'min_version' and 'modes'.")
    return payload


def _parse_min_version(root_mapping: Mapping[str, object]) -> str:
    raw_version = root_mapping.get("min_version")
    if raw_version is None:
        return "0.0.0"
    if not isinstance(raw_version, str):
        raise PrevetConfigError("Config field 'min_version' must be a string such as '0.4.6'.")
    required = parse_semver(raw_version)
    if required > parse_semver(TOOL_VERSION):
        raise PrevetConfigError(
            f"Config requires prevet {raw_version} but this is {TOOL_VERSION}. Upgrade prevet."
        )
    return raw_version.strip()


def _parse_modes(root_mapping: Mapping[str, object]) -> dict[ModeName, Mode]:
    raw_modes = root_mapping.get("modes")
    if raw_modes is None:
        raise PrevetConfigError("Config missing required field 'modes'.")
    modes_mapping = expect_mapping(raw_modes, "config modes")
    parsed: dict[ModeName, Mode] = {}
    for mode_name, mode_payload in modes_mapping.items():
        if mode_name not in SUPPORTED_MODES:
            supported_rows = ", ".join(SUPPORTED_MODES)
            raise PrevetConfigError(
                f"Unsupported mode '{mode_name}'. Use one of: {supported_rows}."
            )
        parsed[cast(ModeName, mode_name)] = _parse_mode(mode_name, mode_payload)
    return parsed


def _parse_mode(mode_name: str, mode_payload: object) -> Mode:
    context = f"Mode '{mode_name}'"
    mode_mapping = optional_mapping(mode_payload, context)
    reject_unknown_keys(mode_mapping, {"checks", "max_duration"}, context)
    max_duration = float_with_default(mode_mapping, "max_duration", 0.0, context)
    if max_duration < 0:
        raise PrevetConfigError(f"{context} field 'max_duration' must not be negative.")
    checks_mapping = optional_mapping(mode_mapping.get("checks"), f"{context} checks")
    checks: dict[CheckKind, tuple[CheckConfig, ...]] = {}
    for kind, raw_rows in checks_mapping.items():
        if kind not in SUPPORTED_CHECK_KINDS:
            supported_rows = ", ".join(SUPPORTED_CHECK_KINDS)
            raise PrevetConfigError(
                f"Unsupported check '{kind}' in {context}. Use one of: {supported_rows}."
            )
        rows = () if raw_rows is None else expect_sequence(raw_rows, f"{context} check '{kind}'")
        parser = _CHECK_PARSERS[cast(CheckKind, kind)]
        checks[cast(CheckKind, kind)] = tuple(
            parser(
                optional_mapping(row, f"{context} {kind} #{index + 1}"),
                f"{context} {kind} #{index + 1}",
            )
            for index, row in enumerate(rows)
        )
    return Mode(checks=checks, max_duration=max_duration)


def _parse_build(args: Mapping[str, object], context: str) -> Build:
    reject_unknown_keys(args, {"extra_args"}, context)
    return Build(extra_args=string_tuple(args, "extra_args", context))


def _parse_gofmt(args: Mapping[str, object], context: str) -> Gofmt:
    reject_unknown_keys(args, set(), context)
    return Gofmt()


def _parse_test(args: Mapping[str, object], context: str) -> Test:
    reject_unknown_keys(args, {"extra_args"}, context)
    return Test(extra_args=string_tuple(args, "extra_args", context))


def _parse_errcheck(args: Mapping[str, object], context: str) -> Errcheck:
    reject_unknown_keys(args, {"ignores"}, context)
    return Errcheck(ignores=optional_string(args, "ignores", context) or "")


def _parse_goimports(args: Mapping[str, object], context: str) -> Goimports:
    reject_unknown_keys(args, set(), context)
    return Goimports()


def _parse_golint(args: Mapping[str, object], context: str) -> Golint:
    reject_unknown_keys(args, {"blacklist"}, context)
    return Golint(blacklist=string_tuple(args, "blacklist", context))


def _parse_govet(args: Mapping[str, object], context: str) -> Govet:
    reject_unknown_keys(args, {"blacklist"}, context)
    return Govet(blacklist=string_tuple(args, "blacklist", context))


def _parse_coverage(args: Mapping[str, object], context: str) -> Coverage:
    reject_unknown_keys(
        args,
        {"use_global_inference", "use_coveralls", "global", "per_dir_default", "per_dir"},
        context,
    )
    per_dir_mapping = optional_mapping(args.get("per_dir"), f"{context} per_dir")
    per_dir: dict[str, CoverageSettings | None] = {}
    for directory, raw_settings in per_dir_mapping.items():
        _validate_directory_key(directory, context)
        per_dir[directory] = (
            None
            if raw_settings is None
            else _parse_coverage_settings(raw_settings, f"{context} per_dir '{directory}'")
        )
    return Coverage(
        use_global_inference=optional_bool(args, "use_global_inference", context),
        use_coveralls=optional_bool(args, "use_coveralls", context),
        global_band=_parse_coverage_settings(args.get("global"), f"{context} global"),
        per_dir_default=_parse_coverage_settings(
            args.get("per_dir_default"), f"{context} per_dir_default"
        ),
        per_dir=per_dir,
    )


def _parse_coverage_settings(payload: object, context: str) -> CoverageSettings:
    settings_mapping = optional_mapping(payload, context)
    reject_unknown_keys(settings_mapping, {"min_coverage", "max_coverage"}, context)
    return CoverageSettings(
        min_coverage=float_with_default(settings_mapping, "min_coverage", 0.0, context),
        max_coverage=float_with_default(settings_mapping, "max_coverage", 0.0, context),
    )


def _validate_directory_key(directory: str, context: str) -> None:
    if directory == ROOT_DIRECTORY:
        return
    invalid = (
        not directory
        or "\\" in directory
        or directory.startswith("/")
        or posixpath.normpath(directory) != directory
        or directory.split("/")[0] == ".."
    )
    if invalid:
        raise PrevetConfigError(
            f"{context} per_dir key '{directory}' is not a normalized POSIX path "
            "relative to the repository root. Use '.' for the root."
        )


def _parse_custom(args: Mapping[str, object], context: str) -> Custom:
    reject_unknown_keys(
        args,
        {"display_name", "description", "command", "check_exit_code", "prerequisites"},
        context,
    )
    command = string_tuple(args, "command", context)
    if not command:
        raise PrevetConfigError(f"{context} field 'command' must be a non-empty list.")
    raw_prerequisites = args.get("prerequisites")
    prerequisite_rows = (
        () if raw_prerequisites is None else expect_sequence(raw_prerequisites, f"{context} prerequisites")
    )
    return Custom(
        display_name=required_string(args, "display_name", context),
        description=optional_string(args, "description", context) or "",
        command=command,
        check_exit_code=optional_bool(args, "check_exit_code", context),
        prerequisites=tuple(
            _parse_prerequisite(row, f"{context} prerequisite #{index + 1}")
            for index, row in enumerate(prerequisite_rows)
        ),
    )


def _parse_prerequisite(payload: object, context: str) -> CheckPrerequisite:
    mapping = expect_mapping(payload, context)
    reject_unknown_keys(mapping, {"help_command", "expected_exit_code", "url"}, context)
    help_command = string_tuple(mapping, "help_command", context)
    if not help_command:
        raise PrevetConfigError(f"{context} field 'help_command' must be a non-empty list.")
    return CheckPrerequisite(
        help_command=help_command,
        expected_exit_code=int_with_default(mapping, "expected_exit_code", 0, context),
        url=optional_string(mapping, "url", context) or "",
    )


_CHECK_PARSERS: dict[CheckKind, CheckParser] = {
    "build": _parse_build,
    "gofmt": _parse_gofmt,
    "test": _parse_test,
    "errcheck": _parse_errcheck,
    "goimports": _parse_goimports,
    "golint": _parse_golint,
    "govet": _parse_govet,
    "coverage": _parse_coverage,
    "custom": _parse_custom,
}


def default_config() -> Config:
    """Build the configuration written by ``prevet writeconfig``."""
    coverage = Coverage(
        global_band=CoverageSettings(min_coverage=50, max_coverage=100),
        per_dir_default=CoverageSettings(),
    )
    sample_custom = Custom(
        display_name="sample-prevet-custom-check",
        description="runs the check sample-prevet-custom-check on this repository",
        command=("sample-prevet-custom-check", "check"),
        check_exit_code=True,
        prerequisites=(
            CheckPrerequisite(
                help_command=("sample-prevet-custom-check", "-help"),
                expected_exit_code=2,
                url="github.com/maruel/pre-commit-go/samples/sample-pre-commit-go-custom-check",
            ),
        ),
    )
    race_test = Test(extra_args=("-v", "-race"))
    modes: dict[ModeName, Mode] = {
        "continuous-integration": Mode(
            checks={
                "build": (Build(),),
                "coverage": (coverage,),
                "custom": (sample_custom,),
                "gofmt": (Gofmt(),),
                "goimports": (Goimports(),),
                "test": (race_test,),
            },
            max_duration=120,
        ),
        "lint": Mode(
            checks={
                "errcheck": (Errcheck(ignores="Close"),),
                "golint": (Golint(),),
                "govet": (Govet(blacklist=(" composite literal uses unkeyed fields",)),),
            },
            max_duration=15,
        ),
        "pre-commit": Mode(
            checks={
                "build": (Build(),),
                "gofmt": (Gofmt(),),
                "test": (Test(extra_args=("-short",)),),
            },
            max_duration=5,
        ),
        "pre-push": Mode(
            checks={
                "coverage": (coverage,),
                "goimports": (Goimports(),),
                "test": (race_test,),
            },
            max_duration=15,
        ),
    }
    return Config(
        min_version=TOOL_VERSION,
        modes=modes,
        ignore_patterns=DEFAULT_IGNORE_PATTERNS,
    )


def config_to_payload(config: Config) -> dict[str, object]:
    """Convert a config back into its persisted mapping form."""
    return {
        "min_version": config.min_version,
        "modes": {
            name: {
                "checks": {
                    kind: [_check_to_payload(check) for check in rows]
                    for kind, rows in mode.checks.items()
                },
                "max_duration": _plain_number(mode.max_duration),
            }
            for name, mode in config.modes.items()
        },
        "ignore_patterns": list(config.ignore_patterns),
    }


def render_config_yaml(config: Config) -> str:
    """Render a config as YAML text."""
    import yaml  # type: ignore[import-untyped]

    return cast(str, yaml.safe_dump(config_to_payload(config), sort_keys=True))


def write_config(config_path: str | Path, config: Config) -> Path:
    """Persist a config to disk and return the written path."""
    target = Path(config_path).expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_config_yaml(config), encoding="utf-8")
    return target


def _check_to_payload(check: CheckConfig) -> dict[str, object]:
    if isinstance(check, (Build, Test)):
        return {"extra_args": list(check.extra_args)}
    if isinstance(check, (Gofmt, Goimports)):
        return {}
    if isinstance(check, Errcheck):
        return {"ignores": check.ignores}
    if isinstance(check, (Golint, Govet)):
        return {"blacklist": list(check.blacklist)}
    if isinstance(check, Coverage):
        return {
            "use_global_inference": check.use_global_inference,
            "use_coveralls": check.use_coveralls,
            "global": _settings_to_payload(check.global_band),
            "per_dir_default": _settings_to_payload(check.per_dir_default),
            "per_dir": {
                directory: None if settings is None else _settings_to_payload(settings)
                for directory, settings in check.per_dir.items()
            },
        }
    return {
        "display_name": check.display_name,
        "description": check.description,
        "command": list(check.command),
        "check_exit_code": check.check_exit_code,
        "prerequisites": [
            {
                "help_command": list(prerequisite.help_command),
                "expected_exit_code": prerequisite.expected_exit_code,
                "url": prerequisite.url,
            }
            for prerequisite in check.prerequisites
        ],
    }


def _settings_to_payload(settings: CoverageSettings) -> dict[str, object]:
    return {
        "min_coverage": _plain_number(settings.min_coverage),
        "max_coverage": _plain_number(settings.max_coverage),
    }


def _plain_number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value
