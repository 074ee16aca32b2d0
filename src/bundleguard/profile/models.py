"""Profile data model — the tunable parameters every rule reads."""

from __future__ import annotations

from dataclasses import dataclass, fields

DEFAULT_GUARD_PATTERNS: tuple[str, ...] = (
    # Error message text, loose enough to survive minification
    r"Insecure WebSocket protocol.*ws://",
    r"not allowed in UMD builds",
    r"Salesforce Lightning Locker.*blocks.*ws://",
    r"UMD builds require.*tokenProvider",
    # Method names, unless mangled
    r"validateWebSocketScheme",
    r"enforceWebSocketScheme",
    # Guard markers
    r"__OPTAVE_SECURITY_GUARDS_ACTIVE__",
    r"(?i:SECURITY.*guard)",
    r"Side effect anchor",
    r"ws://.*not allowed",
    r"Lightning Locker Service",
    r"secure WebSocket protocol.*wss://",
    r"tokenProvider.*constrained environments",
    r"authRequired.*false.*disable authentication",
    r"ws://.*UMD",
    r"Salesforce.*Lightning.*ws",
    r"wss://.*instead",
)

DEFAULT_FALLBACK_GUARD_PATTERNS: tuple[str, ...] = (
    r"startsWith.*ws://",
    r"websocketUrl.*startsWith",
    r"buildTarget.*UMD",
    r"BuildTargetUtils.*isUMD",
)


@dataclass(frozen=True)
class Profile:
    """A complete profile definition."""

    name: str = "default"
    description: str = ""

    # Discovery
    bundle_marker: str = ".umd."
    bundle_extension: str = ".js"

    # Global export presence
    export_name: str = "OptaveJavaScriptSDK"
    export_roots: tuple[str, ...] = ("globalThis", "window", "root")
    export_applies_to: tuple[str, ...] = ("*.umd.js",)

    # Dynamic evaluation
    eval_applies_to: tuple[str, ...] = ("*",)
    eval_safe_identifiers: tuple[str, ...] = (
        "availableValidators",
        "isPayloadSizeValid",
        "validatePayload",
    )

    # Disallowed dependencies
    excluded_dependencies: tuple[str, ...] = ("ajv",)
    dependency_applies_to: tuple[str, ...] = ("*browser*",)

    # Build identity
    build_token: str = "__WEBPACK_BUILD_TARGET__"
    build_targets: tuple[str, ...] = (
        "browser-umd",
        "server-umd",
        "browser-esm",
        "server-esm",
    )
    build_applies_to: tuple[str, ...] = ("*",)

    # Security guards
    guard_patterns: tuple[str, ...] = DEFAULT_GUARD_PATTERNS
    fallback_guard_patterns: tuple[str, ...] = DEFAULT_FALLBACK_GUARD_PATTERNS
    guard_applies_to: tuple[str, ...] = ("*.umd.js",)

    inherit: tuple[str, ...] = ()


def profile_keys() -> frozenset[str]:
    """Names accepted as top-level keys in a profile document."""
    return frozenset(f.name for f in fields(Profile))


def tuple_keys() -> frozenset[str]:
    """Profile keys holding sequences."""
    defaults = Profile()
    return frozenset(
        f.name for f in fields(Profile) if isinstance(getattr(defaults, f.name), tuple)
    )
